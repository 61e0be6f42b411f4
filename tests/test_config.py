"""Tests für das Konfigurationssystem (Schema, Defaults, YAML-Manager)."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from config.schema import (
    CombinedClassRule,
    Holiday,
    SchoolConfig,
    SplitClassRule,
    SplitPart,
    SubjectCategory,
    SubjectPriority,
    UnavailabilityRule,
    Weekday,
)
from config.defaults import (
    CURRICULUM,
    DEFAULT_LUNCH_SLOT,
    DEFAULT_PRAYER_SLOT,
    SUBJECT_METADATA,
    default_school_config,
    default_time_slots,
)
from config.manager import ConfigManager


# ─── SCHEMA ───────────────────────────────────────────────────────────────────

class TestWeekday:
    def test_from_date_monday(self):
        assert Weekday.from_date(date(2025, 3, 10)) == Weekday.MONDAY

    def test_from_date_sunday(self):
        assert Weekday.from_date(date(2025, 3, 16)) == Weekday.SUNDAY

    def test_values_are_english_day_names(self):
        assert Weekday("Saturday") == Weekday.SATURDAY
        assert Weekday.MONDAY.value == "Monday"


class TestSchoolConfig:
    def test_empty_config_valid(self):
        """Alle Felder haben Defaults."""
        cfg = SchoolConfig()
        assert cfg.daily_period_quota == 5
        assert cfg.prevent_consecutive_classes is True
        assert cfg.break_slots == set()
        assert Weekday.SUNDAY not in cfg.working_days

    def test_negative_quota_rejected(self):
        with pytest.raises(ValidationError):
            SchoolConfig(daily_period_quota=-1)

    def test_prayer_equals_lunch_rejected(self):
        with pytest.raises(ValidationError):
            SchoolConfig(prayer_time_slot="10:00", lunch_time_slot="10:00")

    def test_break_slots(self):
        cfg = SchoolConfig(prayer_time_slot="P", lunch_time_slot="L")
        assert cfg.break_slots == {"P", "L"}

    def test_missing_category_is_not_main(self):
        cfg = SchoolConfig(subject_categories={"Math": SubjectCategory.MAIN})
        assert cfg.is_main("Math")
        assert not cfg.is_main("Art")
        assert cfg.category_of("Art") is None

    def test_combined_rule_needs_two_classes(self):
        with pytest.raises(ValidationError):
            CombinedClassRule(classes=["9A"], subject="PE", teacher_id="T1")

    def test_split_rule_needs_two_parts(self):
        with pytest.raises(ValidationError):
            SplitClassRule(class_name="10A", parts=[SplitPart(subject="PS", teacher_id="T1")])

    def test_unavailability_day_parsed_from_string(self):
        rule = UnavailabilityRule(teacher_id="T1", day="Monday", time_slot="10:00")
        assert rule.day == Weekday.MONDAY


class TestSchoolCalendar:
    def test_holiday_on(self):
        cfg = SchoolConfig(holidays=[Holiday(date=date(2025, 3, 14), name="Holi")])
        assert cfg.holiday_on(date(2025, 3, 14)).name == "Holi"
        assert cfg.holiday_on(date(2025, 3, 13)) is None

    def test_is_school_day(self):
        cfg = SchoolConfig(holidays=[Holiday(date=date(2025, 3, 14))])
        assert cfg.is_school_day(date(2025, 3, 13))       # Donnerstag
        assert not cfg.is_school_day(date(2025, 3, 14))   # Feiertag
        assert not cfg.is_school_day(date(2025, 3, 16))   # Sonntag


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_time_slots(self):
        slots = default_time_slots()
        assert len(slots) == 9
        assert DEFAULT_PRAYER_SLOT in slots
        assert DEFAULT_LUNCH_SLOT in slots
        assert len(set(slots)) == len(slots)

    def test_default_school_config_valid(self):
        cfg = default_school_config()
        assert cfg.prayer_time_slot == DEFAULT_PRAYER_SLOT
        assert cfg.lunch_time_slot == DEFAULT_LUNCH_SLOT
        assert len(cfg.working_days) == 6
        assert cfg.invigilators_per_slot == 2

    def test_subject_metadata_consistent(self):
        cfg = default_school_config()
        for name, meta in SUBJECT_METADATA.items():
            assert cfg.category_of(name) == meta["category"]
            assert cfg.subject_priorities[name] == meta["priority"]

    def test_curriculum_uses_known_subjects(self):
        for grade, subjects in CURRICULUM.items():
            for s in subjects:
                assert s in SUBJECT_METADATA, f"Jahrgang {grade}: unbekanntes Fach {s}"

    def test_main_subjects_fit_into_a_day(self):
        """Kein Jahrgang hat mehr Hauptfächer als Unterrichtsslots pro Tag."""
        n_instructional = len(default_time_slots()) - 2
        cfg = default_school_config()
        for subjects in CURRICULUM.values():
            assert sum(1 for s in subjects if cfg.is_main(s)) <= n_instructional


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        mgr = ConfigManager()
        cfg = default_school_config().model_copy(update={
            "holidays": [Holiday(date=date(2025, 1, 26), name="Republic Day")],
            "unavailability": [
                UnavailabilityRule(teacher_id="T01", day=Weekday.MONDAY,
                                   time_slot="10:00 - 10:45"),
            ],
        })
        path = tmp_path / "school_config.yaml"
        mgr.save(cfg, path)
        loaded = mgr.load(path)
        assert loaded == cfg

    def test_saved_yaml_has_comments(self, tmp_path: Path):
        mgr = ConfigManager()
        path = tmp_path / "cfg.yaml"
        mgr.save(default_school_config(), path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Pausen ───" in text
        assert "Max. Stunden je Lehrkraft und Tag" in text

    def test_enum_values_written_as_strings(self, tmp_path: Path):
        mgr = ConfigManager()
        path = tmp_path / "cfg.yaml"
        mgr.save(default_school_config(), path)
        text = path.read_text(encoding="utf-8")
        assert "- Monday" in text
        assert "Mathematics: before" in text

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "missing.yaml")

    def test_load_invalid_file(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("daily_period_quota: -3\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            ConfigManager().load(path)

    def test_load_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigManager().load(path) == SchoolConfig()

    def test_priority_enum_after_load(self, tmp_path: Path):
        mgr = ConfigManager()
        path = tmp_path / "cfg.yaml"
        mgr.save(default_school_config(), path)
        loaded = mgr.load(path)
        assert loaded.subject_priorities["History"] == SubjectPriority.AFTER
