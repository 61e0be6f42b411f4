from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Weekday(str, Enum):
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @classmethod
    def from_date(cls, d: date) -> "Weekday":
        """Wochentag eines Kalenderdatums (date.weekday(): 0=Montag)."""
        return _WEEKDAY_BY_INDEX[d.weekday()]


_WEEKDAY_BY_INDEX = [
    Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY,
    Weekday.FRIDAY, Weekday.SATURDAY, Weekday.SUNDAY,
]


class SubjectPriority(str, Enum):
    BEFORE = "before"   # bevorzugt vor der Mittagspause
    AFTER = "after"     # bevorzugt nach der Mittagspause
    NONE = "none"


class SubjectCategory(str, Enum):
    MAIN = "main"              # höchstens einmal pro Klasse und Tag
    ADDITIONAL = "additional"  # darf sich am selben Tag wiederholen


# ─── REGELN ───

class UnavailabilityRule(BaseModel):
    """Harte Sperre: Lehrkraft darf in diesem Slot nie eingeplant werden."""
    teacher_id: str
    day: Weekday
    time_slot: str


class CombinedClassRule(BaseModel):
    """Mehrere Klassen werden gemeinsam von einer Lehrkraft unterrichtet."""
    # Alle beteiligten Klassen (mindestens zwei)
    classes: list[str] = Field(min_length=2)
    subject: str
    teacher_id: str


class SplitPart(BaseModel):
    """Eine Teilgruppe einer geteilten Klasse."""
    subject: str
    teacher_id: str


class SplitClassRule(BaseModel):
    """Eine Klasse wird im selben Slot in parallele Gruppen geteilt.

    Jede Gruppe hat ihr eigenes Fach und ihre eigene Lehrkraft.
    """
    class_name: str
    # Teilgruppen (mindestens zwei)
    parts: list[SplitPart] = Field(min_length=2)


class Holiday(BaseModel):
    """Unterrichtsfreier Tag aus dem Schulkalender."""
    date: date
    name: str = ""


# ─── GESAMT-CONFIG ───

class SchoolConfig(BaseModel):
    """Alle Constraint-Eingaben für die Routine-Erzeugung.

    Die Konsistenz mit den Lehrer-/Klassen-/Fach-Katalogen wird hier NICHT
    erzwungen, siehe SchoolData.validate_consistency().
    """
    # Unterrichtstage in Anzeigereihenfolge
    working_days: list[Weekday] = Field(
        default=[Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
                 Weekday.THURSDAY, Weekday.FRIDAY, Weekday.SATURDAY],
        description="Unterrichtstage")
    # Klasse → Pflichtfächer
    class_requirements: dict[str, list[str]] = Field(default_factory=dict)
    # Fach → Tageszeit-Präferenz relativ zur Mittagspause
    subject_priorities: dict[str, SubjectPriority] = Field(default_factory=dict)
    # Fach → Kategorie (main/additional); fehlend = additional
    subject_categories: dict[str, SubjectCategory] = Field(default_factory=dict)
    # Lehrer-ID → unterrichtbare Fächer
    teacher_subjects: dict[str, list[str]] = Field(default_factory=dict)
    # Lehrer-ID → Klassen, in denen die Lehrkraft unterrichten darf
    teacher_classes: dict[str, list[str]] = Field(default_factory=dict)
    # Klasse → Klassenlehrer-ID
    class_teachers: dict[str, str] = Field(default_factory=dict)
    # Slot-Bezeichner für Gebet und Mittagspause ("" = keiner)
    prayer_time_slot: str = ""
    lunch_time_slot: str = ""
    # Gleiches Fach nicht in direkt aufeinanderfolgenden Stunden (weich)
    prevent_consecutive_classes: bool = True
    # Max. Unterrichtsstunden pro Lehrkraft und Tag
    daily_period_quota: int = Field(5, ge=0,
        description="Max. Stunden pro Lehrkraft und Tag")
    unavailability: list[UnavailabilityRule] = Field(default_factory=list)
    combined_classes: list[CombinedClassRule] = Field(default_factory=list)
    split_classes: list[SplitClassRule] = Field(default_factory=list)
    # Schulkalender: Ferien-/Feiertage (nur für die Vertretungsplanung relevant)
    holidays: list[Holiday] = Field(default_factory=list)
    # Aufsichten pro Prüfungsslot
    invigilators_per_slot: int = Field(2, ge=0, le=10,
        description="Aufsichten pro Prüfungsslot")

    @model_validator(mode='after')
    def check_break_slots(self):
        """Gebet und Mittagspause dürfen nicht auf denselben Slot fallen."""
        if self.prayer_time_slot and self.prayer_time_slot == self.lunch_time_slot:
            raise ValueError(
                f"Gebet und Mittagspause liegen beide auf '{self.prayer_time_slot}'")
        return self

    @property
    def break_slots(self) -> set[str]:
        """Konfigurierte Pausen-Slots (Gebet, Mittag)."""
        return {s for s in (self.prayer_time_slot, self.lunch_time_slot) if s}

    def category_of(self, subject: str) -> Optional[SubjectCategory]:
        return self.subject_categories.get(subject)

    def is_main(self, subject: str) -> bool:
        return self.subject_categories.get(subject) == SubjectCategory.MAIN

    def holiday_on(self, d: date) -> Optional[Holiday]:
        for h in self.holidays:
            if h.date == d:
                return h
        return None

    def is_school_day(self, d: date) -> bool:
        """True wenn am Datum unterrichtet wird (Arbeitstag und kein Feiertag)."""
        return Weekday.from_date(d) in self.working_days and self.holiday_on(d) is None
