"""Testdaten-Generator für den Routine-Generator.

Erzeugt einen vollständigen Demo-Datensatz (Kollegium, Klassen, Zuordnungen,
Sperrzeiten, Sonderregeln) mit absichtlichen Engpässen.

Absichtliche Engpässe:
  1. Computer-Engpass: nur 1 Computer-Lehrkraft für alle Klassen 8-10
  2. Eingeschränkte Lehrkraft: montags und samstags komplett gesperrt
  3. Kombinierte Sportstunde (9A & 9B) und geteilte Naturwissenschaft (10A)
     belegen Slots, bevor die Hauptfächer verteilt werden

Lösbarkeits-Garantien:
  - Jedes Hauptfach hat pro Klassenstufe mindestens zwei qualifizierte Lehrkräfte
  - Jede Klasse hat einen Klassenlehrer mit mindestens einem Hauptfach der Klasse
"""

import random
import string
from typing import Optional

from config.defaults import CURRICULUM, SUBJECT_METADATA, default_school_config, default_time_slots
from config.schema import (
    CombinedClassRule,
    SchoolConfig,
    SplitClassRule,
    SplitPart,
    UnavailabilityRule,
    Weekday,
)
from models.school_data import SchoolData
from models.teacher import Teacher

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Anika", "Arif", "Bina", "Debashis", "Farhana", "Gautam", "Ishita", "Jamal",
    "Kaberi", "Manas", "Nasrin", "Pritam", "Rupa", "Sanjay", "Tania", "Uttam",
]

_LAST_NAMES = [
    "Ahmed", "Banerjee", "Chowdhury", "Das", "Ghosh", "Haque", "Islam", "Mondal",
    "Mukherjee", "Paul", "Rahman", "Roy", "Saha", "Sarkar", "Sen", "Biswas",
]

# ─── Fächerkombinationen (gewichtet) ─────────────────────────────────────────

_SUBJECT_COMBOS: list[tuple[list[str], int]] = [
    (["Mathematics", "Physical Science"], 6),
    (["Bengali", "History"], 6),
    (["English", "Geography"], 5),
    (["Life Science", "Physical Science"], 4),
    (["Mathematics", "Computer"], 2),
    (["History", "Geography"], 4),
    (["English", "Bengali"], 3),
    (["Art", "Work Education"], 3),
    (["Physical Education", "Work Education"], 2),
]

_COMBO_WEIGHTS = [w for _, w in _SUBJECT_COMBOS]
_COMBO_SUBJECTS = [s for s, _ in _SUBJECT_COMBOS]


class FakeDataGenerator:
    """Generiert einen vollständigen Demo-Datensatz."""

    def __init__(
        self,
        config: Optional[SchoolConfig] = None,
        seed: Optional[int] = None,
        grades: tuple[int, ...] = (5, 6, 7, 8, 9, 10),
        sections: str = "AB",
        num_teachers: int = 24,
    ) -> None:
        self.config = config or default_school_config()
        self.rng = random.Random(seed)
        self.grades = grades
        self.sections = sections
        self.num_teachers = num_teachers
        self._used_ids: set[str] = set()

    # ─── Klassen ──────────────────────────────────────────────────────────────

    def _generate_classes(self) -> list[str]:
        return [f"{g}{s}" for g in self.grades for s in self.sections]

    # ─── Lehrkräfte ───────────────────────────────────────────────────────────

    def _make_teacher(self) -> Teacher:
        """Erstellt eine Lehrkraft mit zufälligem Namen und eindeutiger ID."""
        first = self.rng.choice(_FIRST_NAMES)
        last = self.rng.choice(_LAST_NAMES)
        n = len(self._used_ids) + 1
        tid = f"T{n:02d}"
        while tid in self._used_ids:
            n += 1
            tid = f"T{n:02d}"
        self._used_ids.add(tid)
        return Teacher(
            id=tid,
            name=f"{last}, {first}",
            email=f"{first.lower()}.{last.lower()}.{tid.lower()}@dhanpur-school.org",
        )

    def _generate_teachers(self, classes: list[str]) -> tuple[list[Teacher], dict, dict]:
        """Erzeugt Kollegium + Lehrer-Fächer + Lehrer-Klassen.

        Feste Lehrkräfte (je Hauptfach zwei, 1× Computer, 1× Sport):
        garantieren, dass jedes Pflichtfach mindestens eine Lehrkraft hat.
        Restliche Lehrkräfte: gewichtete Fächerkombinationen.
        """
        teachers: list[Teacher] = []
        teacher_subjects: dict[str, list[str]] = {}
        teacher_classes: dict[str, list[str]] = {}

        def _add(subjects: list[str], for_classes: list[str]) -> None:
            t = self._make_teacher()
            teachers.append(t)
            teacher_subjects[t.id] = list(subjects)
            teacher_classes[t.id] = list(for_classes)

        lower = [c for c in classes if int(c.rstrip(string.ascii_letters)) <= 7]
        upper = [c for c in classes if c not in lower]

        main_subjects = [
            name for name, meta in SUBJECT_METADATA.items()
            if meta["category"].value == "main"
        ]
        for subject in main_subjects:
            _add([subject], lower)
            _add([subject], upper)

        # ── Engpass #1: eine einzige Computer-Lehrkraft ──────────────────
        _add(["Computer"], upper)
        _add(["Physical Education"], classes)

        while len(teachers) < self.num_teachers:
            subjects = self.rng.choices(_COMBO_SUBJECTS, weights=_COMBO_WEIGHTS)[0]
            span = self.rng.choice([lower, upper, classes])
            _add(subjects, span)

        return teachers, teacher_subjects, teacher_classes

    # ─── Gesamtdatensatz ──────────────────────────────────────────────────────

    def generate(self) -> SchoolData:
        """Erzeugt den kompletten Datensatz."""
        classes = self._generate_classes()
        time_slots = default_time_slots()
        teachers, teacher_subjects, teacher_classes = self._generate_teachers(classes)

        class_requirements = {
            c: list(CURRICULUM.get(int(c.rstrip(string.ascii_letters)), []))
            for c in classes
        }

        # Klassenlehrer: eine Lehrkraft mit einem Hauptfach der Klasse
        class_teachers: dict[str, str] = {}
        used: set[str] = set()
        for c in classes:
            candidates = [
                t.id for t in teachers
                if t.id not in used
                and c in teacher_classes[t.id]
                and any(self.config.is_main(s) and s in class_requirements[c]
                        for s in teacher_subjects[t.id])
            ]
            if candidates:
                chosen = self.rng.choice(candidates)
                class_teachers[c] = chosen
                used.add(chosen)

        # ── Engpass #2: eingeschränkte Lehrkraft ─────────────────────────
        restricted = self.rng.choice(teachers[len(teachers) // 2:])
        unavailability = [
            UnavailabilityRule(teacher_id=restricted.id, day=day, time_slot=slot)
            for day in (Weekday.MONDAY, Weekday.SATURDAY)
            for slot in time_slots
        ]

        # ── Engpass #3: Sonderregeln ─────────────────────────────────────
        combined: list[CombinedClassRule] = []
        split: list[SplitClassRule] = []
        pe_teacher = next(
            (tid for tid, subs in teacher_subjects.items() if subs == ["Physical Education"]),
            None,
        )
        if pe_teacher and {"9A", "9B"} <= set(classes):
            combined.append(CombinedClassRule(
                classes=["9A", "9B"], subject="Physical Education", teacher_id=pe_teacher,
            ))
        if "10A" in classes:
            ps = [tid for tid, subs in teacher_subjects.items()
                  if "Physical Science" in subs and "10A" in teacher_classes[tid]]
            ls = [tid for tid, subs in teacher_subjects.items()
                  if "Life Science" in subs and "10A" in teacher_classes[tid]]
            ls = [tid for tid in ls if tid not in ps[:1]]
            if ps and ls:
                split.append(SplitClassRule(class_name="10A", parts=[
                    SplitPart(subject="Physical Science", teacher_id=ps[0]),
                    SplitPart(subject="Life Science", teacher_id=ls[0]),
                ]))

        config = self.config.model_copy(update={
            "class_requirements": class_requirements,
            "teacher_subjects": teacher_subjects,
            "teacher_classes": teacher_classes,
            "class_teachers": class_teachers,
            "unavailability": unavailability,
            "combined_classes": combined,
            "split_classes": split,
        })

        return SchoolData(
            teachers=teachers,
            classes=classes,
            subjects=list(SUBJECT_METADATA.keys()),
            time_slots=time_slots,
            config=config,
        )

    # ─── Ausgabe ──────────────────────────────────────────────────────────────

    def print_summary(self, data: SchoolData) -> None:
        """Gibt eine kurze Übersicht über Rich aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Kollegium (Demo)", box=box.ROUNDED)
        table.add_column("ID", style="bold")
        table.add_column("Name")
        table.add_column("Fächer")
        table.add_column("Klassen")
        for t in data.teachers:
            table.add_row(
                t.id,
                t.name,
                ", ".join(data.config.teacher_subjects.get(t.id, [])),
                str(len(data.config.teacher_classes.get(t.id, []))),
            )
        console.print(table)
