from config.schema import (
    SchoolConfig,
    SubjectCategory,
    SubjectPriority,
    Weekday,
)


def default_time_slots() -> list[str]:
    """Standard-Tagesraster einer typischen Schule.

    Stundenraster:
    1. Stunde  09:45 - 10:00   Gebet (Assembly)
    2. Stunde  10:00 - 10:45
    3. Stunde  10:45 - 11:30
    4. Stunde  11:30 - 12:15
    5. Stunde  12:15 - 13:00
       ── Mittagspause 13:00 - 13:30 ──
    6. Stunde  13:30 - 14:15
    7. Stunde  14:15 - 15:00
    8. Stunde  15:00 - 15:45
    """
    return [
        "09:45 - 10:00",
        "10:00 - 10:45",
        "10:45 - 11:30",
        "11:30 - 12:15",
        "12:15 - 13:00",
        "13:00 - 13:30",
        "13:30 - 14:15",
        "14:15 - 15:00",
        "15:00 - 15:45",
    ]


DEFAULT_PRAYER_SLOT = "09:45 - 10:00"
DEFAULT_LUNCH_SLOT = "13:00 - 13:30"


# Fach → Kategorie / Tageszeit-Präferenz
SUBJECT_METADATA: dict[str, dict] = {
    "Bengali":          {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.BEFORE},
    "English":          {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.BEFORE},
    "Mathematics":      {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.BEFORE},
    "Physical Science": {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.NONE},
    "Life Science":     {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.NONE},
    "History":          {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.AFTER},
    "Geography":        {"category": SubjectCategory.MAIN,       "priority": SubjectPriority.AFTER},
    "Computer":         {"category": SubjectCategory.ADDITIONAL, "priority": SubjectPriority.AFTER},
    "Work Education":   {"category": SubjectCategory.ADDITIONAL, "priority": SubjectPriority.AFTER},
    "Physical Education": {"category": SubjectCategory.ADDITIONAL, "priority": SubjectPriority.AFTER},
    "Art":              {"category": SubjectCategory.ADDITIONAL, "priority": SubjectPriority.NONE},
}


# Klassenstufe → Pflichtfächer
CURRICULUM: dict[int, list[str]] = {
    5: ["Bengali", "English", "Mathematics", "Life Science", "History", "Geography",
        "Work Education", "Physical Education", "Art"],
    6: ["Bengali", "English", "Mathematics", "Life Science", "History", "Geography",
        "Work Education", "Physical Education", "Art"],
    7: ["Bengali", "English", "Mathematics", "Physical Science", "Life Science", "History",
        "Geography", "Work Education", "Physical Education", "Art"],
    8: ["Bengali", "English", "Mathematics", "Physical Science", "Life Science", "History",
        "Geography", "Work Education", "Physical Education", "Computer"],
    9: ["Bengali", "English", "Mathematics", "Physical Science", "Life Science", "History",
        "Geography", "Computer", "Physical Education"],
    10: ["Bengali", "English", "Mathematics", "Physical Science", "Life Science", "History",
         "Geography", "Computer", "Physical Education"],
}


def default_school_config() -> SchoolConfig:
    """Standard-Konfiguration ohne Lehrer-/Klassen-Zuordnungen.

    Die Zuordnungen (Lehrer-Fächer, Lehrer-Klassen, Pflichtfächer) kommen aus
    dem Datensatz, siehe data/fake_data.py.
    """
    return SchoolConfig(
        working_days=[Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
                      Weekday.THURSDAY, Weekday.FRIDAY, Weekday.SATURDAY],
        subject_categories={name: m["category"] for name, m in SUBJECT_METADATA.items()},
        subject_priorities={name: m["priority"] for name, m in SUBJECT_METADATA.items()},
        prayer_time_slot=DEFAULT_PRAYER_SLOT,
        lunch_time_slot=DEFAULT_LUNCH_SLOT,
        prevent_consecutive_classes=True,
        daily_period_quota=5,
        invigilators_per_slot=2,
    )
