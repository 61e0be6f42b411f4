"""Lehrer-Auslastung: Unterrichtsstunden je Lehrkraft und Tag.

Gezählt werden nur echte Unterrichtsstunden (keine Pausen, keine Lücken),
aufgeteilt nach Haupt- und Zusatzfächern. Bei geteilten Stunden zählt für
jede Lehrkraft das Fach ihrer eigenen Gruppe.
"""

from pydantic import BaseModel

from config.schema import SchoolConfig
from models.schedule import Schedule
from models.teacher import Teacher

TOTAL = "Total"


class LoadDetail(BaseModel):
    """Stundenzahl eines Tages (oder der Woche)."""

    total: int = 0
    main: int = 0
    additional: int = 0


# Lehrer-ID → Tag ("Monday", ..., "Total") → LoadDetail
TeacherLoad = dict[str, dict[str, LoadDetail]]


def calculate_teacher_load(
    schedule: Schedule,
    teachers: list[Teacher],
    config: SchoolConfig,
) -> TeacherLoad:
    """Berechnet die Auslastung aller Lehrkräfte aus der Routine.

    Lehrer-IDs, die nicht (mehr) im Kollegium sind, werden ignoriert.
    """
    columns = [d.value for d in config.working_days] + [TOTAL]
    load: TeacherLoad = {
        t.id: {col: LoadDetail() for col in columns} for t in teachers
    }

    for e in schedule.entries:
        if not e.is_instructional:
            continue
        for tid in e.teacher_ids:
            if tid not in load:
                continue
            subject = e.subject_for_teacher(tid)
            is_main = config.is_main(subject)
            for col in (e.day.value, TOTAL):
                detail = load[tid].get(col)
                if detail is None:
                    continue
                detail.total += 1
                if is_main:
                    detail.main += 1
                else:
                    detail.additional += 1
    return load


def weekly_totals(load: TeacherLoad) -> dict[str, int]:
    """Lehrer-ID → Wochenstunden (für den Vertretungsplan)."""
    return {tid: days[TOTAL].total for tid, days in load.items()}
