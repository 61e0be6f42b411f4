"""Tests für den Vertretungsplaner."""

from datetime import date

import pytest

from analysis.solution_validator import ScheduleValidator
from analysis.teacher_load import calculate_teacher_load, weekly_totals
from config.schema import Weekday
from data.fake_data import FakeDataGenerator
from models.schedule import LUNCH, NO_SUBSTITUTE, Schedule, ScheduleEntry
from models.teacher import Teacher
from solver.scheduler import generate_schedule
from solver.substitution import (
    InvalidDateError,
    SubstitutionPlanner,
    generate_substitution_plan,
    resolve_date,
)

MON = Weekday.MONDAY
MONDAY_DATE = date(2025, 3, 10)
SLOTS = ["09:00", "10:00", "11:00", "12:00"]


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _teachers(*ids: str) -> list[Teacher]:
    return [
        Teacher(id=tid, name=f"Lehrkraft {tid}", email=f"{tid.lower()}@dhanpur-school.org")
        for tid in ids
    ]


def _schedule(*entries: ScheduleEntry) -> Schedule:
    return Schedule(entries=list(entries), working_days=[MON, Weekday.TUESDAY], time_slots=SLOTS)


def _single(slot: str, class_name: str, subject: str, tid: str) -> ScheduleEntry:
    return ScheduleEntry.single(MON, slot, class_name, subject, tid)


# ─── Grundfälle ───────────────────────────────────────────────────────────────

class TestSubstitutionPlanner:
    def test_single_free_teacher_is_chosen(self):
        """X fehlt um 10:00, nur Y ist frei → Y vertritt, Zähler +1."""
        schedule = _schedule(
            _single("10:00", "9A", "Math", "X"),
            _single("10:00", "9B", "Art", "Z"),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y", "Z"), ["X"], MONDAY_DATE)

        assert plan.day == MON
        assert len(plan.substitutions) == 1
        sub = plan.substitutions[0]
        assert (sub.time_slot, sub.class_name, sub.subject) == ("10:00", "9A", "Math")
        assert sub.absent_teacher_id == "X"
        assert sub.substitute_teacher_id == "Y"
        assert plan.duty_counts["Y"] == 1
        assert plan.duty_counts["Z"] == 0

    def test_no_substitute_available(self):
        schedule = _schedule(
            _single("10:00", "9A", "Math", "X"),
            _single("10:00", "9B", "Art", "Y"),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], MONDAY_DATE)
        assert plan.substitutions[0].substitute_teacher_id == NO_SUBSTITUTE
        assert not plan.substitutions[0].is_covered
        assert len(plan.uncovered) == 1
        assert plan.duty_counts == {"Y": 0}

    def test_absent_teacher_never_substitutes(self):
        schedule = _schedule(
            _single("09:00", "9A", "Math", "X"),
            _single("10:00", "9B", "Art", "Y"),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X", "Y"], MONDAY_DATE)
        assert all(s.substitute_teacher_id == NO_SUBSTITUTE for s in plan.substitutions)
        assert "X" not in plan.duty_counts

    def test_teacher_without_periods_today(self):
        schedule = _schedule(_single("09:00", "9A", "Math", "Y"))
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], MONDAY_DATE)
        assert plan.substitutions == []

    def test_other_weekday_ignored(self):
        schedule = _schedule(_single("09:00", "9A", "Math", "X"))
        tuesday = date(2025, 3, 11)
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], tuesday)
        assert plan.day == Weekday.TUESDAY
        assert plan.substitutions == []

    def test_sunday_gives_empty_plan(self):
        schedule = _schedule(_single("09:00", "9A", "Math", "X"))
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], date(2025, 3, 16))
        assert plan.day == Weekday.SUNDAY
        assert plan.substitutions == []

    def test_breaks_are_not_substituted(self):
        schedule = _schedule(ScheduleEntry.fixed_break(MON, "12:00", "9A", LUNCH))
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], MONDAY_DATE)
        assert plan.substitutions == []


# ─── Verteilung ───────────────────────────────────────────────────────────────

class TestLoadBalancing:
    def test_sorted_by_slot(self):
        schedule = _schedule(
            _single("11:00", "9A", "Math", "X"),
            _single("09:00", "9B", "Art", "X"),
            _single("10:00", "9C", "Eng", "X"),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], MONDAY_DATE)
        assert [s.time_slot for s in plan.substitutions] == ["09:00", "10:00", "11:00"]

    def test_fewest_duties_wins(self):
        schedule = _schedule(
            _single("09:00", "9A", "Math", "X"),
            _single("10:00", "9A", "Eng", "X"),
            _single("11:00", "9A", "Art", "X"),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y", "W"), ["X"], MONDAY_DATE)
        # Gleichstand → Kollegiums-Reihenfolge, danach die Lehrkraft mit weniger Vertretungen
        assert [s.substitute_teacher_id for s in plan.substitutions] == ["Y", "W", "Y"]
        assert plan.duty_counts == {"Y": 2, "W": 1}

    def test_tie_broken_by_roster_order(self):
        schedule = _schedule(_single("09:00", "9A", "Math", "X"))
        plan = generate_substitution_plan(schedule, _teachers("X", "W", "V"), ["X"], MONDAY_DATE)
        assert plan.substitutions[0].substitute_teacher_id == "W"

    def test_no_double_assignment_in_same_slot(self):
        """Zwei Abwesende im selben Slot → zwei verschiedene Vertretungen."""
        schedule = _schedule(
            _single("09:00", "9A", "Math", "X1"),
            _single("09:00", "9B", "Eng", "X2"),
        )
        plan = generate_substitution_plan(
            schedule, _teachers("X1", "X2", "Y", "W"), ["X1", "X2"], MONDAY_DATE,
        )
        subs = [s.substitute_teacher_id for s in plan.substitutions]
        assert sorted(subs) == ["W", "Y"]
        assert ScheduleValidator().validate_substitutions(plan).is_valid

    def test_only_one_free_teacher_for_two_absences(self):
        schedule = _schedule(
            _single("09:00", "9A", "Math", "X1"),
            _single("09:00", "9B", "Eng", "X2"),
        )
        plan = generate_substitution_plan(
            schedule, _teachers("X1", "X2", "Y"), ["X1", "X2"], MONDAY_DATE,
        )
        subs = [s.substitute_teacher_id for s in plan.substitutions]
        assert subs.count("Y") == 1
        assert subs.count(NO_SUBSTITUTE) == 1

    def test_weekly_load_is_informational(self):
        schedule = _schedule(_single("09:00", "9A", "Math", "X"))
        plan = generate_substitution_plan(
            schedule, _teachers("X", "Y"), ["X"], MONDAY_DATE, teacher_load={"Y": 17},
        )
        assert plan.substitutions[0].substitute_weekly_load == 17
        assert plan.for_substitute("Y") == plan.substitutions


# ─── Sonderfälle ──────────────────────────────────────────────────────────────

class TestSpecialEntries:
    def test_split_period_uses_absent_part(self):
        schedule = _schedule(
            ScheduleEntry.split(MON, "09:00", "10A", [("PS", "X"), ("LS", "Z")]),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y", "Z"), ["X"], MONDAY_DATE)
        assert len(plan.substitutions) == 1
        sub = plan.substitutions[0]
        assert sub.subject == "PS"
        assert sub.substitute_teacher_id == "Y"

    def test_combined_period_substituted_once(self):
        schedule = _schedule(
            ScheduleEntry.combined(MON, "09:00", ["9A", "9B"], "PE", "X"),
        )
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], MONDAY_DATE)
        assert len(plan.substitutions) == 1
        assert plan.substitutions[0].class_name == "9A & 9B"


# ─── Datum ────────────────────────────────────────────────────────────────────

class TestDates:
    def test_iso_string_accepted(self):
        schedule = _schedule(_single("09:00", "9A", "Math", "X"))
        plan = generate_substitution_plan(schedule, _teachers("X", "Y"), ["X"], "2025-03-10")
        assert plan.date == MONDAY_DATE
        assert plan.day == MON

    @pytest.mark.parametrize("value", ["2025-13-45", "morgen", ""])
    def test_invalid_date_raises(self, value: str):
        schedule = _schedule()
        with pytest.raises(InvalidDateError):
            generate_substitution_plan(schedule, _teachers("X"), ["X"], value)

    def test_invalid_date_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_date("31.02.2025")

    def test_new_plan_replaces_previous(self):
        """Jeder Aufruf startet mit leeren Zählern."""
        schedule = _schedule(_single("09:00", "9A", "Math", "X"))
        planner = SubstitutionPlanner(schedule, _teachers("X", "Y"))
        first = planner.plan(["X"], MONDAY_DATE)
        second = planner.plan(["X"], MONDAY_DATE)
        assert first.duty_counts == second.duty_counts == {"Y": 1}


# ─── Mit generierter Routine ──────────────────────────────────────────────────

class TestWithGeneratedSchedule:
    def test_demo_substitution_plan_is_valid(self):
        data = FakeDataGenerator(seed=5).generate()
        schedule = generate_schedule(data, seed=5)
        absent = [data.teachers[0].id, data.teachers[1].id]
        load = weekly_totals(calculate_teacher_load(schedule, data.teachers, data.config))

        plan = generate_substitution_plan(schedule, data.teachers, absent, MONDAY_DATE, load)

        expected = sum(
            1 for e in schedule.entries_on(MON)
            if e.is_instructional and any(t in absent for t in e.teacher_ids)
        )
        assert len(plan.substitutions) == expected
        assert ScheduleValidator().validate_substitutions(plan).is_valid
        for s in plan.substitutions:
            assert s.substitute_teacher_id not in absent
            if s.is_covered:
                assert s.substitute_weekly_load == load[s.substitute_teacher_id]
