"""Vertretungsplaner: verteilt die Stunden abwesender Lehrkräfte an einem Tag.

Jede freie, anwesende Lehrkraft kommt in Frage (keine Fachprüfung). Gewählt
wird die Lehrkraft mit den wenigsten Vertretungen in diesem Lauf; bei
Gleichstand entscheidet die Reihenfolge im Kollegium.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Mapping, Optional, Union

from pydantic import BaseModel

from config.schema import Weekday
from models.schedule import NO_SUBSTITUTE, Schedule, ScheduleEntry
from models.teacher import Teacher

logger = logging.getLogger(__name__)


class InvalidDateError(ValueError):
    """Das Datum lässt sich keinem Wochentag zuordnen."""


# ─── Ergebnis-Modelle ─────────────────────────────────────────────────────────

class Substitution(BaseModel):
    """Eine zu vertretende Stunde."""

    time_slot: str
    class_name: str
    subject: str
    absent_teacher_id: str
    substitute_teacher_id: str                    # Lehrer-ID oder NO_SUBSTITUTE
    substitute_weekly_load: Optional[int] = None  # Nur zur Info (reguläre Wochenstunden)

    @property
    def is_covered(self) -> bool:
        return self.substitute_teacher_id != NO_SUBSTITUTE


class SubstitutionPlan(BaseModel):
    """Vertretungsplan für genau ein Datum. Wird pro Aufruf komplett neu erzeugt."""

    date: date
    day: Weekday
    substitutions: list[Substitution]
    duty_counts: dict[str, int]       # Vertretungen je Lehrkraft in diesem Lauf

    @property
    def uncovered(self) -> list[Substitution]:
        return [s for s in self.substitutions if not s.is_covered]

    def for_substitute(self, teacher_id: str) -> list[Substitution]:
        return [s for s in self.substitutions if s.substitute_teacher_id == teacher_id]


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def resolve_date(value: Union[date, str]) -> date:
    """Wandelt ein ISO-Datum (YYYY-MM-DD) in ein date-Objekt um."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise InvalidDateError(f"Ungültiges Datum für den Vertretungsplan: {value!r}") from e


# ─── Planer ───────────────────────────────────────────────────────────────────

class SubstitutionPlanner:
    """Erstellt Vertretungspläne auf Basis der Wochen-Routine."""

    def __init__(self, schedule: Schedule, teachers: list[Teacher]) -> None:
        self.schedule = schedule
        self.teachers = teachers
        self._slot_index = {s: i for i, s in enumerate(schedule.time_slots)}

    def plan(
        self,
        absent_teacher_ids: list[str],
        on_date: Union[date, str],
        teacher_load: Optional[Mapping[str, int]] = None,
    ) -> SubstitutionPlan:
        """Vertretungsplan für ein Datum.

        Raises:
            InvalidDateError: wenn das Datum keinem Wochentag zugeordnet werden kann.
        """
        the_date = resolve_date(on_date)
        day = Weekday.from_date(the_date)
        absent = set(absent_teacher_ids)

        day_entries = self.schedule.entries_on(day)
        periods = [
            e for e in day_entries
            if e.is_instructional and any(t in absent for t in e.teacher_ids)
        ]
        periods.sort(key=self._slot_sort_key)

        present = [t for t in self.teachers if t.id not in absent]
        duty_counts: dict[str, int] = {t.id: 0 for t in present}
        busy: dict[str, set[str]] = defaultdict(set)
        for e in day_entries:
            for tid in e.teacher_ids:
                busy[tid].add(e.time_slot)

        substitutions: list[Substitution] = []
        for period in periods:
            absent_id = next(t for t in period.teacher_ids if t in absent)
            subject = period.subject_for_teacher(absent_id) or period.subject

            candidates = [t for t in present if period.time_slot not in busy[t.id]]
            if not candidates:
                substitutions.append(Substitution(
                    time_slot=period.time_slot,
                    class_name=period.class_name,
                    subject=subject,
                    absent_teacher_id=absent_id,
                    substitute_teacher_id=NO_SUBSTITUTE,
                ))
                logger.info(
                    f"  {period.time_slot} {period.class_name}: keine Vertretung verfügbar"
                )
                continue

            # min() ist bei Gleichstand stabil → Reihenfolge im Kollegium
            chosen = min(candidates, key=lambda t: duty_counts[t.id])
            substitutions.append(Substitution(
                time_slot=period.time_slot,
                class_name=period.class_name,
                subject=subject,
                absent_teacher_id=absent_id,
                substitute_teacher_id=chosen.id,
                substitute_weekly_load=(teacher_load or {}).get(chosen.id),
            ))
            busy[chosen.id].add(period.time_slot)
            duty_counts[chosen.id] += 1

        logger.info(
            f"Vertretungsplan {the_date.isoformat()} ({day.value}): "
            f"{len(substitutions)} Stunden, "
            f"{sum(1 for s in substitutions if not s.is_covered)} unbesetzt"
        )
        return SubstitutionPlan(
            date=the_date,
            day=day,
            substitutions=substitutions,
            duty_counts=duty_counts,
        )

    def _slot_sort_key(self, entry: ScheduleEntry) -> tuple[int, str]:
        return (self._slot_index.get(entry.time_slot, len(self._slot_index)), entry.time_slot)


def generate_substitution_plan(
    schedule: Schedule,
    teachers: list[Teacher],
    absent_teacher_ids: list[str],
    on_date: Union[date, str],
    teacher_load: Optional[Mapping[str, int]] = None,
) -> SubstitutionPlan:
    """Erstellt einen neuen Vertretungsplan (ersetzt jeden früheren für das Datum)."""
    return SubstitutionPlanner(schedule, teachers).plan(absent_teacher_ids, on_date, teacher_load)
