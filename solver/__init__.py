"""Solver-Modul: Greedy-Routine, Vertretungsplan und Prüfungsaufsichten."""

from .ledger import BookingLedger
from .scheduler import ScheduleGenerator, generate_schedule
from .substitution import (
    InvalidDateError,
    Substitution,
    SubstitutionPlan,
    SubstitutionPlanner,
    generate_substitution_plan,
)
from .invigilation import DutyChart, InvigilationDutyAssigner, generate_invigilation_duty

__all__ = [
    "BookingLedger",
    "ScheduleGenerator",
    "generate_schedule",
    "InvalidDateError",
    "Substitution",
    "SubstitutionPlan",
    "SubstitutionPlanner",
    "generate_substitution_plan",
    "DutyChart",
    "InvigilationDutyAssigner",
    "generate_invigilation_duty",
]
