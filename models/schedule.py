"""Datenmodell für Routine-Einträge und die fertige Wochen-Routine (Pydantic v2).

Kombinierte und geteilte Stunden sind eigene Varianten (EntryKind) mit
Listen von Klassen/Fächern/Lehrern. Die Textform mit " & " bzw. " / " gibt es
nur an der Außengrenze (to_flat / from_flat) für gespeicherte Routinen.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from config.schema import Weekday

# ─── Sentinels der Textform ───────────────────────────────────────────────────

EMPTY_SUBJECT = "---"
PRAYER = "Prayer"
LUNCH = "Lunch"
NO_TEACHER = "N/A"
NO_SUBSTITUTE = "No Substitute Available"

CLASS_JOINER = " & "
TEACHER_JOINER = " & "
SUBJECT_JOINER = " / "

BREAK_SUBJECTS = (PRAYER, LUNCH)


class EntryKind(str, Enum):
    SINGLE = "single"        # eine Klasse, ein Fach, eine Lehrkraft
    COMBINED = "combined"    # mehrere Klassen gemeinsam, ein Fach, eine Lehrkraft
    SPLIT = "split"          # eine Klasse, parallele Gruppen mit je Fach + Lehrkraft
    BREAK = "break"          # Gebet / Mittagspause
    EMPTY = "empty"          # bewusst leer ("---")


class ScheduleEntry(BaseModel):
    """Eine Stunde der Wochen-Routine. Unveränderlich."""

    model_config = ConfigDict(frozen=True)

    day: Weekday
    time_slot: str
    kind: EntryKind = EntryKind.SINGLE
    class_names: tuple[str, ...]
    subjects: tuple[str, ...]
    teacher_ids: tuple[str, ...] = ()

    @model_validator(mode='after')
    def _check_shape(self):
        n_cls, n_sub, n_tea = len(self.class_names), len(self.subjects), len(self.teacher_ids)
        if self.kind == EntryKind.SINGLE:
            ok = n_cls == 1 and n_sub == 1 and n_tea == 1
        elif self.kind == EntryKind.COMBINED:
            ok = n_cls >= 2 and n_sub == 1 and n_tea == 1
        elif self.kind == EntryKind.SPLIT:
            ok = n_cls == 1 and n_sub >= 2 and n_tea == n_sub
        else:
            ok = n_cls == 1 and n_sub == 1 and n_tea == 0
        if not ok:
            raise ValueError(
                f"Ungültiger {self.kind.value}-Eintrag: {n_cls} Klassen, "
                f"{n_sub} Fächer, {n_tea} Lehrkräfte"
            )
        return self

    # ─── Konstruktoren ───

    @classmethod
    def single(cls, day: Weekday, time_slot: str, class_name: str,
               subject: str, teacher_id: str) -> "ScheduleEntry":
        return cls(day=day, time_slot=time_slot, kind=EntryKind.SINGLE,
                   class_names=(class_name,), subjects=(subject,),
                   teacher_ids=(teacher_id,))

    @classmethod
    def combined(cls, day: Weekday, time_slot: str, class_names: list[str],
                 subject: str, teacher_id: str) -> "ScheduleEntry":
        return cls(day=day, time_slot=time_slot, kind=EntryKind.COMBINED,
                   class_names=tuple(class_names), subjects=(subject,),
                   teacher_ids=(teacher_id,))

    @classmethod
    def split(cls, day: Weekday, time_slot: str, class_name: str,
              parts: list[tuple[str, str]]) -> "ScheduleEntry":
        """parts: Liste von (Fach, Lehrer-ID)."""
        return cls(day=day, time_slot=time_slot, kind=EntryKind.SPLIT,
                   class_names=(class_name,),
                   subjects=tuple(s for s, _ in parts),
                   teacher_ids=tuple(t for _, t in parts))

    @classmethod
    def fixed_break(cls, day: Weekday, time_slot: str, class_name: str,
                    label: str) -> "ScheduleEntry":
        return cls(day=day, time_slot=time_slot, kind=EntryKind.BREAK,
                   class_names=(class_name,), subjects=(label,))

    @classmethod
    def empty(cls, day: Weekday, time_slot: str, class_name: str) -> "ScheduleEntry":
        return cls(day=day, time_slot=time_slot, kind=EntryKind.EMPTY,
                   class_names=(class_name,), subjects=(EMPTY_SUBJECT,))

    # ─── Abgeleitete Eigenschaften ───

    @property
    def is_instructional(self) -> bool:
        """True für echte Unterrichtsstunden (keine Pause, nicht leer)."""
        return self.kind not in (EntryKind.BREAK, EntryKind.EMPTY)

    @property
    def class_name(self) -> str:
        return CLASS_JOINER.join(self.class_names)

    @property
    def subject(self) -> str:
        return SUBJECT_JOINER.join(self.subjects)

    @property
    def teacher(self) -> str:
        return TEACHER_JOINER.join(self.teacher_ids) if self.teacher_ids else NO_TEACHER

    def involves_teacher(self, teacher_id: str) -> bool:
        return teacher_id in self.teacher_ids

    def involves_class(self, class_name: str) -> bool:
        return class_name in self.class_names

    def subject_for_teacher(self, teacher_id: str) -> Optional[str]:
        """Fach, das diese Lehrkraft in dieser Stunde unterrichtet."""
        if teacher_id not in self.teacher_ids:
            return None
        if self.kind == EntryKind.SPLIT:
            return self.subjects[self.teacher_ids.index(teacher_id)]
        return self.subjects[0]

    # ─── Textform (Außengrenze) ───

    def to_flat(self) -> dict[str, str]:
        return {
            "day": self.day.value,
            "timeSlot": self.time_slot,
            "className": self.class_name,
            "subject": self.subject,
            "teacher": self.teacher,
        }

    @classmethod
    def from_flat(cls, day: str, time_slot: str, class_name: str,
                  subject: str, teacher: str) -> "ScheduleEntry":
        """Liest einen Eintrag in der Textform (" & " / " / ") ein."""
        wd = Weekday(day)
        classes = [c.strip() for c in class_name.split(CLASS_JOINER) if c.strip()]
        teachers = [t.strip() for t in teacher.split(TEACHER_JOINER)
                    if t.strip() and t.strip() != NO_TEACHER]
        subjects = [s.strip() for s in subject.split(SUBJECT_JOINER) if s.strip()]

        if subject in BREAK_SUBJECTS:
            return cls.fixed_break(wd, time_slot, classes[0], subject)
        if subject == EMPTY_SUBJECT or not teachers:
            return cls.empty(wd, time_slot, classes[0])
        if len(classes) > 1:
            return cls.combined(wd, time_slot, classes, subject, teachers[0])
        if len(subjects) > 1:
            return cls.split(wd, time_slot, classes[0], list(zip(subjects, teachers)))
        return cls.single(wd, time_slot, classes[0], subject, teachers[0])

    def __str__(self) -> str:
        return f"{self.day.value} {self.time_slot} {self.class_name}: {self.subject} ({self.teacher})"


class Schedule(BaseModel):
    """Vollständige Wochen-Routine: flache, sortierte Liste von Einträgen.

    Raster (Slot × Tag) sind abgeleitete Sichten, siehe class_grid / teacher_grid.
    """

    entries: list[ScheduleEntry]
    working_days: list[Weekday]
    time_slots: list[str]
    seed: Optional[int] = None       # Zufalls-Seed des Laufs (reproduzierbar)
    generated_at: Optional[datetime] = None

    def get_class_schedule(self, class_name: str) -> list[ScheduleEntry]:
        """Alle Einträge, an denen die Klasse beteiligt ist."""
        return [e for e in self.entries if e.involves_class(class_name)]

    def get_teacher_schedule(self, teacher_id: str) -> list[ScheduleEntry]:
        """Alle Einträge einer Lehrkraft."""
        return [e for e in self.entries if e.involves_teacher(teacher_id)]

    def entries_on(self, day: Weekday) -> list[ScheduleEntry]:
        return [e for e in self.entries if e.day == day]

    def class_grid(self, class_name: str) -> dict[str, dict[Weekday, ScheduleEntry]]:
        """Raster einer Klasse: Slot → Tag → Eintrag."""
        grid: dict[str, dict[Weekday, ScheduleEntry]] = {s: {} for s in self.time_slots}
        for e in self.get_class_schedule(class_name):
            grid.setdefault(e.time_slot, {})[e.day] = e
        return grid

    def teacher_grid(self, teacher_id: str) -> dict[str, dict[Weekday, ScheduleEntry]]:
        """Raster einer Lehrkraft: Slot → Tag → Eintrag."""
        grid: dict[str, dict[Weekday, ScheduleEntry]] = {s: {} for s in self.time_slots}
        for e in self.get_teacher_schedule(teacher_id):
            grid.setdefault(e.time_slot, {})[e.day] = e
        return grid

    def to_flat(self) -> list[dict[str, str]]:
        return [e.to_flat() for e in self.entries]

    def save_json(self, path: Path) -> None:
        """Speichert die Routine als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "Schedule":
        """Lädt eine gespeicherte Routine aus JSON."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Routine nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
