"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator


class Teacher(BaseModel):
    """Repräsentiert eine einzelne Lehrkraft."""

    id: str                       # Stabile ID, wird überall referenziert
    name: str                     # "Rahman, Anika"
    email: EmailStr               # Eindeutig über die ganze Schule
    udise: Optional[str] = None   # Schul-Kennung (optional)

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Lehrer-ID darf nicht leer sein.")
        return v
