"""BookingLedger – Belegungsbuch für genau einen Generator-Lauf.

Lehrer-IDs, Klassen, Tage und Slots werden beim Anlegen auf kleine
Integer-Indizes abgebildet; die Belegungen sind Mengen von Index-Tupeln.
Unbekannte Bezeichner (z.B. Lehrer aus einer Regel, die nicht im Katalog
stehen) bekommen beim ersten Zugriff einen neuen Index.
"""

from collections import defaultdict
from typing import Iterable

from config.schema import SchoolConfig, Weekday
from models.schedule import EntryKind, ScheduleEntry


class _Interner:
    """Bildet Bezeichner stabil auf 0, 1, 2, ... ab."""

    def __init__(self, names: Iterable = ()) -> None:
        self._index: dict = {}
        for n in names:
            self.id_of(n)

    def id_of(self, name) -> int:
        idx = self._index.get(name)
        if idx is None:
            idx = len(self._index)
            self._index[name] = idx
        return idx

    def __len__(self) -> int:
        return len(self._index)


class BookingLedger:
    """Beantwortet "ist Lehrkraft/Klasse zu Tag+Slot belegt?" in O(1).

    Verwendung:
        ledger = BookingLedger(config, teacher_ids, classes, days, time_slots)
        if not ledger.is_teacher_booked("T1", Weekday.MONDAY, "09:00"):
            ledger.book(entry)
    """

    def __init__(
        self,
        config: SchoolConfig,
        teacher_ids: Iterable[str] = (),
        classes: Iterable[str] = (),
        days: Iterable[Weekday] = (),
        time_slots: Iterable[str] = (),
    ) -> None:
        self.config = config
        self._teachers = _Interner(teacher_ids)
        self._classes = _Interner(classes)
        self._days = _Interner(days)
        self._slots = _Interner(time_slots)
        self._subjects = _Interner()

        # (teacher, day, slot) / (class, day, slot) / (class, day, subject)
        self._teacher_bookings: set[tuple[int, int, int]] = set()
        self._class_bookings: set[tuple[int, int, int]] = set()
        self._class_subject_bookings: set[tuple[int, int, int]] = set()
        # (teacher, day) → Anzahl Unterrichtsstunden
        self._teacher_day_load: dict[tuple[int, int], int] = defaultdict(int)

        self._break_slots = {self._slots.id_of(s) for s in config.break_slots}
        self._unavailable: set[tuple[int, int, int]] = {
            (self._teachers.id_of(u.teacher_id), self._days.id_of(u.day),
             self._slots.id_of(u.time_slot))
            for u in config.unavailability
        }
        self._entries: set[ScheduleEntry] = set()

    # ─── Abfragen ─────────────────────────────────────────────────────────────

    def is_teacher_booked(self, teacher_id: str, day: Weekday, slot: str) -> bool:
        key = (self._teachers.id_of(teacher_id), self._days.id_of(day), self._slots.id_of(slot))
        return key in self._teacher_bookings

    def is_class_booked(self, class_name: str, day: Weekday, slot: str) -> bool:
        key = (self._classes.id_of(class_name), self._days.id_of(day), self._slots.id_of(slot))
        return key in self._class_bookings

    def is_class_subject_booked_today(self, class_name: str, day: Weekday, subject: str) -> bool:
        """True nur für Hauptfächer, die die Klasse heute schon hat."""
        if not self.config.is_main(subject):
            return False
        key = (self._classes.id_of(class_name), self._days.id_of(day), self._subjects.id_of(subject))
        return key in self._class_subject_bookings

    def is_teacher_unavailable(self, teacher_id: str, day: Weekday, slot: str) -> bool:
        """Statischer Abgleich mit den konfigurierten Sperrzeiten."""
        key = (self._teachers.id_of(teacher_id), self._days.id_of(day), self._slots.id_of(slot))
        return key in self._unavailable

    def teacher_load_today(self, teacher_id: str, day: Weekday) -> int:
        """Belegte Unterrichtsslots der Lehrkraft an diesem Tag (ohne Pausen)."""
        return self._teacher_day_load.get(
            (self._teachers.id_of(teacher_id), self._days.id_of(day)), 0
        )

    def is_teacher_free(self, teacher_id: str, day: Weekday, slot: str) -> bool:
        """Nicht belegt, nicht gesperrt und unter dem Tageskontingent."""
        return (
            not self.is_teacher_booked(teacher_id, day, slot)
            and not self.is_teacher_unavailable(teacher_id, day, slot)
            and self.teacher_load_today(teacher_id, day) < self.config.daily_period_quota
        )

    # ─── Buchen ───────────────────────────────────────────────────────────────

    def book(self, entry: ScheduleEntry) -> bool:
        """Bucht einen Eintrag für alle beteiligten Klassen und Lehrkräfte.

        Idempotent: ein bereits gebuchter Eintrag wird ignoriert.
        Gibt True zurück, wenn der Eintrag neu war.
        """
        if entry in self._entries:
            return False
        self._entries.add(entry)

        d = self._days.id_of(entry.day)
        s = self._slots.id_of(entry.time_slot)

        for tid in entry.teacher_ids:
            t = self._teachers.id_of(tid)
            if (t, d, s) in self._teacher_bookings:
                continue
            self._teacher_bookings.add((t, d, s))
            if s not in self._break_slots:
                self._teacher_day_load[(t, d)] += 1

        main_subjects = []
        if entry.kind in (EntryKind.SINGLE, EntryKind.COMBINED, EntryKind.SPLIT):
            main_subjects = [sub for sub in entry.subjects if self.config.is_main(sub)]

        for class_name in entry.class_names:
            c = self._classes.id_of(class_name)
            self._class_bookings.add((c, d, s))
            for sub in main_subjects:
                self._class_subject_bookings.add((c, d, self._subjects.id_of(sub)))
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"BookingLedger({len(self._teachers)} Lehrkräfte, "
            f"{len(self._classes)} Klassen, {len(self._entries)} Einträge)"
        )
