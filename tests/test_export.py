"""Tests für die Terminal-Darstellung und die CLI."""

import json
from datetime import date

import pytest
from click.testing import CliRunner

from config.schema import Weekday
from export.tui_renderer import (
    render_class_rows,
    render_duty_rows,
    render_substitution_rows,
    render_teacher_rows,
)
from models.schedule import EMPTY_SUBJECT, LUNCH, PRAYER, Schedule, ScheduleEntry
from solver.invigilation import DutyChart
from solver.substitution import Substitution, SubstitutionPlan

MON = Weekday.MONDAY
TUE = Weekday.TUESDAY


def _schedule() -> Schedule:
    return Schedule(
        entries=[
            ScheduleEntry.fixed_break(MON, "P", "9A", PRAYER),
            ScheduleEntry.fixed_break(TUE, "P", "9A", PRAYER),
            ScheduleEntry.single(MON, "S1", "9A", "Math", "T1"),
            ScheduleEntry.empty(TUE, "S1", "9A"),
            ScheduleEntry.fixed_break(MON, "L", "9A", LUNCH),
            ScheduleEntry.fixed_break(TUE, "L", "9A", LUNCH),
            ScheduleEntry.split(MON, "S2", "9A", [("PS", "T1"), ("LS", "T2")]),
            ScheduleEntry.single(TUE, "S2", "9A", "Art", "T2"),
        ],
        working_days=[MON, TUE],
        time_slots=["P", "S1", "L", "S2"],
    )


# ─── Renderer ─────────────────────────────────────────────────────────────────

class TestRenderer:
    def test_class_rows(self):
        rows = render_class_rows("9A", _schedule())
        assert len(rows) == 4
        assert rows[0][0] == PRAYER and rows[2][0] == LUNCH
        assert rows[1] == ["1", "S1", "Math\nT1", EMPTY_SUBJECT]
        assert rows[3] == ["2", "S2", "PS / LS\nT1 & T2", "Art\nT2"]

    def test_teacher_rows(self):
        rows = render_teacher_rows("T2", _schedule())
        assert len(rows) == 4
        assert rows[1][2:] == ["—", "—"]
        assert rows[3][2:] == ["PS / LS\n9A", "Art\n9A"]

    def test_substitution_rows(self):
        plan = SubstitutionPlan(
            date=date(2025, 3, 10), day=MON, duty_counts={"T2": 1},
            substitutions=[
                Substitution(time_slot="S1", class_name="9A", subject="Math",
                             absent_teacher_id="T1", substitute_teacher_id="T2",
                             substitute_weekly_load=12),
            ],
        )
        assert render_substitution_rows(plan) == [["S1", "9A", "Math", "T1", "T2", "12"]]

    def test_duty_rows(self):
        chart = DutyChart(
            duties={MON: {"S1": ["T1", "T2"]}, TUE: {"S1": []}},
            time_slots=["S1"],
            duty_counts={"T1": 1, "T2": 1},
        )
        assert render_duty_rows(chart) == [["S1", "T1, T2", "—"]]


# ─── CLI ──────────────────────────────────────────────────────────────────────

@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, *args: str):
    from main import cli
    return runner.invoke(cli, list(args), catch_exceptions=False)


class TestCli:
    def test_commands_need_config(self, runner, workdir):
        result = _invoke(runner, "generate")
        assert result.exit_code == 1
        assert "Keine Konfiguration" in result.output

    def test_full_pipeline(self, runner, workdir):
        assert _invoke(runner, "setup", "--defaults").exit_code == 0
        assert (workdir / "config" / "school_config.yaml").exists()

        assert _invoke(runner, "config", "show").exit_code == 0

        result = _invoke(runner, "generate", "--seed", "42", "--export-json")
        assert result.exit_code == 0
        assert (workdir / "output" / "school_data.json").exists()

        assert _invoke(runner, "validate").exit_code == 0

        result = _invoke(runner, "solve", "--seed", "1", "--flat-json", "output/flat.json")
        assert result.exit_code == 0, result.output
        assert (workdir / "output" / "schedule.json").exists()
        flat = json.loads((workdir / "output" / "flat.json").read_text(encoding="utf-8"))
        assert set(flat[0]) == {"day", "timeSlot", "className", "subject", "teacher"}
        assert any(" & " in row["className"] for row in flat)

        assert _invoke(runner, "show", "class", "9A").exit_code == 0
        assert _invoke(runner, "show", "teacher", "T01").exit_code == 0
        assert _invoke(runner, "show", "class", "99Z").exit_code == 1

        result = _invoke(runner, "substitute", "--date", "2025-03-10", "--absent", "T01")
        assert result.exit_code == 0, result.output

        assert _invoke(runner, "invigilate").exit_code == 0
        assert _invoke(runner, "load").exit_code == 0

    def test_substitute_date_errors(self, runner, workdir):
        _invoke(runner, "setup", "--defaults")
        _invoke(runner, "generate", "--export-json")
        _invoke(runner, "solve", "--seed", "2")

        result = _invoke(runner, "substitute", "--date", "2025-02-30", "--absent", "T01")
        assert result.exit_code == 1

        result = _invoke(runner, "substitute", "--date", "2025-03-16", "--absent", "T01")
        assert result.exit_code == 0
        assert "kein Unterrichtstag" in result.output

    def test_missing_schedule(self, runner, workdir):
        _invoke(runner, "setup", "--defaults")
        _invoke(runner, "generate", "--export-json")
        result = _invoke(runner, "invigilate")
        assert result.exit_code == 1
        assert "Keine Routine" in result.output
