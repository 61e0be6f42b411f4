"""Tests für die Verteilung der Prüfungsaufsichten."""

from config.schema import SchoolConfig, Weekday
from data.fake_data import FakeDataGenerator
from models.schedule import LUNCH, PRAYER, Schedule, ScheduleEntry
from models.teacher import Teacher
from solver.invigilation import (
    DEFAULT_INVIGILATORS_PER_SLOT,
    InvigilationDutyAssigner,
    generate_invigilation_duty,
)
from solver.scheduler import generate_schedule

MON = Weekday.MONDAY
TUE = Weekday.TUESDAY
SLOTS = ["P", "S1", "S2", "L", "S3"]


def _teachers(*ids: str) -> list[Teacher]:
    return [
        Teacher(id=tid, name=f"Lehrkraft {tid}", email=f"{tid.lower()}@dhanpur-school.org")
        for tid in ids
    ]


def _schedule(*entries: ScheduleEntry, days=(MON,)) -> Schedule:
    breaks = [
        ScheduleEntry.fixed_break(day, slot, "9A", label)
        for day in days for slot, label in (("P", PRAYER), ("L", LUNCH))
    ]
    return Schedule(entries=breaks + list(entries), working_days=list(days), time_slots=SLOTS)


class TestInvigilationDuty:
    def test_two_per_slot_by_default(self):
        chart = generate_invigilation_duty(_schedule(), _teachers("A", "B", "C"), SLOTS)
        for slot in ("S1", "S2", "S3"):
            assert len(chart.get(MON, slot)) == DEFAULT_INVIGILATORS_PER_SLOT

    def test_break_slots_excluded(self):
        chart = generate_invigilation_duty(_schedule(), _teachers("A", "B"), SLOTS)
        assert chart.time_slots == ["S1", "S2", "S3"]
        assert chart.get(MON, "P") == []
        assert "L" not in chart.duties[MON]

    def test_break_slots_from_config(self):
        config = SchoolConfig(prayer_time_slot="P", lunch_time_slot="L", invigilators_per_slot=1)
        schedule = Schedule(entries=[], working_days=[MON], time_slots=SLOTS)
        chart = generate_invigilation_duty(schedule, _teachers("A", "B"), SLOTS, config)
        assert chart.time_slots == ["S1", "S2", "S3"]
        assert all(len(chart.get(MON, s)) == 1 for s in chart.time_slots)

    def test_teaching_teachers_excluded(self):
        schedule = _schedule(ScheduleEntry.single(MON, "S1", "9A", "Math", "A"))
        chart = generate_invigilation_duty(schedule, _teachers("A", "B", "C"), SLOTS)
        assert "A" not in chart.get(MON, "S1")
        assert sorted(chart.get(MON, "S1")) == ["B", "C"]

    def test_split_and_combined_teachers_excluded(self):
        schedule = _schedule(
            ScheduleEntry.split(MON, "S2", "10A", [("PS", "A"), ("LS", "B")]),
            ScheduleEntry.combined(MON, "S2", ["9A", "9B"], "PE", "C"),
        )
        chart = generate_invigilation_duty(schedule, _teachers("A", "B", "C", "D"), SLOTS)
        assert chart.get(MON, "S2") == ["D"]

    def test_understaffed_slots_reported(self):
        schedule = _schedule(ScheduleEntry.single(MON, "S1", "9A", "Math", "A"))
        chart = generate_invigilation_duty(schedule, _teachers("A", "B"), SLOTS)
        assert chart.understaffed(2) == [(MON, "S1")]

    def test_duties_balanced(self):
        chart = generate_invigilation_duty(
            _schedule(days=(MON, TUE)), _teachers("A", "B", "C", "D", "E"), SLOTS,
        )
        counts = chart.duty_counts
        # 2 Tage × 3 Slots × 2 Aufsichten = 12 Aufsichten auf 5 Lehrkräfte
        assert sum(counts.values()) == 12
        assert max(counts.values()) - min(counts.values()) <= 1

    def test_deterministic(self):
        schedule = _schedule(ScheduleEntry.single(MON, "S1", "9A", "Math", "A"))
        teachers = _teachers("A", "B", "C", "D")
        a = generate_invigilation_duty(schedule, teachers, SLOTS)
        b = generate_invigilation_duty(schedule, teachers, SLOTS)
        assert a == b

    def test_roster_order_breaks_ties(self):
        chart = generate_invigilation_duty(_schedule(), _teachers("C", "A", "B"), SLOTS)
        assert chart.get(MON, "S1") == ["C", "A"]
        assert chart.get(MON, "S2") == ["B", "C"]

    def test_no_teachers(self):
        chart = generate_invigilation_duty(_schedule(), [], SLOTS)
        assert all(chart.get(MON, s) == [] for s in chart.time_slots)
        assert chart.duty_counts == {}

    def test_with_generated_schedule(self):
        data = FakeDataGenerator(seed=3).generate()
        schedule = generate_schedule(data, seed=3)
        chart = InvigilationDutyAssigner(schedule, data.teachers, data.time_slots, data.config).assign()

        assert set(chart.duties) == set(data.config.working_days)
        assert chart.time_slots == data.instructional_slots
        for day, by_slot in chart.duties.items():
            for slot, ids in by_slot.items():
                assert len(ids) <= data.config.invigilators_per_slot
                assert len(set(ids)) == len(ids)
                for tid in ids:
                    assert not any(
                        e.day == day and e.time_slot == slot
                        for e in schedule.get_teacher_schedule(tid)
                    )
