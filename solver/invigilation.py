"""Prüfungsaufsichten: verteilt Aufsichten auf Lehrkräfte ohne Unterricht im Slot.

Deterministisch bei fester Kollegiums-Reihenfolge; keine Zufallsauswahl.
"""

import logging
from collections import defaultdict
from typing import Optional

from pydantic import BaseModel

from config.schema import SchoolConfig, Weekday
from models.schedule import EntryKind, Schedule
from models.teacher import Teacher

logger = logging.getLogger(__name__)

DEFAULT_INVIGILATORS_PER_SLOT = 2


class DutyChart(BaseModel):
    """Aufsichtsplan: Tag → Slot → Lehrer-IDs."""

    duties: dict[Weekday, dict[str, list[str]]]
    time_slots: list[str]            # nur Unterrichtsslots
    duty_counts: dict[str, int]      # Aufsichten je Lehrkraft

    def get(self, day: Weekday, time_slot: str) -> list[str]:
        return self.duties.get(day, {}).get(time_slot, [])

    def understaffed(self, target: int = DEFAULT_INVIGILATORS_PER_SLOT) -> list[tuple[Weekday, str]]:
        """Slots mit weniger als `target` Aufsichten."""
        return [
            (day, slot)
            for day, by_slot in self.duties.items()
            for slot, ids in by_slot.items()
            if len(ids) < target
        ]


def _break_slots_of(schedule: Schedule) -> set[str]:
    """Slots, die in der Routine ausschließlich Pausen enthalten."""
    kinds: dict[str, set[EntryKind]] = defaultdict(set)
    for e in schedule.entries:
        kinds[e.time_slot].add(e.kind)
    return {slot for slot, k in kinds.items() if k == {EntryKind.BREAK}}


class InvigilationDutyAssigner:
    """Verteilt Aufsichten gleichmäßig auf freie Lehrkräfte."""

    def __init__(
        self,
        schedule: Schedule,
        teachers: list[Teacher],
        time_slots: list[str],
        config: Optional[SchoolConfig] = None,
    ) -> None:
        self.schedule = schedule
        self.teachers = teachers
        self.time_slots = time_slots
        self.breaks = config.break_slots if config else _break_slots_of(schedule)
        self.per_slot = config.invigilators_per_slot if config else DEFAULT_INVIGILATORS_PER_SLOT

    def assign(self) -> DutyChart:
        occupied: dict[str, set[tuple[Weekday, str]]] = defaultdict(set)
        for e in self.schedule.entries:
            for tid in e.teacher_ids:
                occupied[tid].add((e.day, e.time_slot))

        slots = [s for s in self.time_slots if s not in self.breaks]
        counts: dict[str, int] = {t.id: 0 for t in self.teachers}
        duties: dict[Weekday, dict[str, list[str]]] = {}

        for day in self.schedule.working_days:
            duties[day] = {}
            for slot in slots:
                free = [t.id for t in self.teachers if (day, slot) not in occupied[t.id]]
                # sorted() ist stabil → Gleichstand nach Kollegiums-Reihenfolge
                chosen = sorted(free, key=lambda tid: counts[tid])[:self.per_slot]
                for tid in chosen:
                    counts[tid] += 1
                duties[day][slot] = chosen
                if len(chosen) < self.per_slot:
                    logger.debug(
                        f"  {day.value} {slot}: nur {len(chosen)} von {self.per_slot} Aufsichten"
                    )

        logger.info(
            f"Aufsichtsplan: {len(duties)} Tage × {len(slots)} Slots, "
            f"{sum(counts.values())} Aufsichten vergeben"
        )
        return DutyChart(duties=duties, time_slots=slots, duty_counts=counts)


def generate_invigilation_duty(
    schedule: Schedule,
    teachers: list[Teacher],
    time_slots: list[str],
    config: Optional[SchoolConfig] = None,
) -> DutyChart:
    """Erstellt einen Aufsichtsplan für alle Unterrichtstage und -slots."""
    return InvigilationDutyAssigner(schedule, teachers, time_slots, config).assign()
