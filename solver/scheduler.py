"""Greedy-Generator für die Wochen-Routine.

Architektur:
  - Sechs strikt geordnete Durchläufe, keiner greift auf einen früheren zurück:
      1. Feste Pausen (Gebet, Mittag)
      2. Sonderregeln (kombinierte und geteilte Klassen)
      3. Erste Stunde des Klassenlehrers
      4. Hauptfächer (harte Anforderung, höchstens 1× pro Klasse und Tag)
      5. Zusatzfächer (Auffüllen, Wiederholung erlaubt)
      6. Lücken als "---" markieren
  - Alle Kandidatenlisten ohne eigene Priorität werden pro Lauf gemischt.
    Der Seed wird in der Schedule gespeichert → jeder Lauf ist reproduzierbar.
  - Kein Fehler bei unlösbaren Eingaben: nicht besetzbare Slots werden zu Lücken.
"""

import logging
import random
import time
from datetime import datetime, timezone
from typing import Optional, Sequence, TypeVar

from config.schema import SchoolConfig, SubjectCategory, SubjectPriority, Weekday
from models.school_data import SchoolData
from models.schedule import LUNCH, PRAYER, Schedule, ScheduleEntry
from solver.ledger import BookingLedger

logger = logging.getLogger(__name__)

T = TypeVar("T")


def sort_entries(
    entries: list[ScheduleEntry],
    working_days: Sequence[Weekday],
    time_slots: Sequence[str],
) -> list[ScheduleEntry]:
    """Stabile Sortierung nach Tag, Slot und Klassenname (Anzeigereihenfolge)."""
    day_index = {d: i for i, d in enumerate(working_days)}
    slot_index = {s: i for i, s in enumerate(time_slots)}
    return sorted(
        entries,
        key=lambda e: (
            day_index.get(e.day, len(day_index)),
            slot_index.get(e.time_slot, len(slot_index)),
            e.class_name,
        ),
    )


class ScheduleGenerator:
    """Greedy-Generator für die Wochen-Routine.

    Verwendung:
        generator = ScheduleGenerator(school_data, seed=7)
        schedule = generator.generate()
    """

    def __init__(self, school_data: SchoolData, seed: Optional[int] = None) -> None:
        self.data = school_data
        self.config: SchoolConfig = school_data.config

        if seed is None:
            seed = random.SystemRandom().randrange(2**32)
        self.seed = seed
        self._rng = random.Random(seed)

        self.days: list[Weekday] = list(self.config.working_days)
        self.time_slots: list[str] = list(school_data.time_slots)
        self.classes: list[str] = list(school_data.classes)
        self.teacher_ids: list[str] = school_data.teacher_ids

        # Slot-Aufteilung relativ zur Mittagspause
        self.instructional_slots: list[str] = school_data.instructional_slots
        lunch = self.config.lunch_time_slot
        if lunch and lunch in self.time_slots:
            lunch_idx = self.time_slots.index(lunch)
            self.before_lunch = [s for s in self.instructional_slots
                                 if self.time_slots.index(s) < lunch_idx]
            self.after_lunch = [s for s in self.instructional_slots
                                if self.time_slots.index(s) > lunch_idx]
        else:
            # Ohne Mittagspause gilt der ganze Tag als "nach dem Mittag"
            self.before_lunch = []
            self.after_lunch = list(self.instructional_slots)

        self._ledger: Optional[BookingLedger] = None
        self._entries: list[ScheduleEntry] = []
        self._stats: dict[str, int] = {}

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def generate(self) -> Schedule:
        """Führt alle sechs Durchläufe aus und gibt die sortierte Routine zurück."""
        t0 = time.time()
        self._ledger = BookingLedger(
            self.config, self.teacher_ids, self.classes, self.days, self.time_slots
        )
        self._entries = []
        self._stats = {}

        logger.info(
            f"Routine-Generierung: {len(self.days)} Tage × "
            f"{len(self.instructional_slots)} Slots × {len(self.classes)} Klassen "
            f"(Seed {self.seed})"
        )

        self._pass("breaks", self._book_fixed_breaks)
        self._pass("special_rules", self._book_special_rules)
        self._pass("class_teacher", self._book_class_teacher_first_period)
        self._pass("main_subjects", self._book_main_subjects)
        self._pass("additional_subjects", self._book_additional_subjects)
        self._pass("gaps", self._fill_gaps)

        entries = sort_entries(self._entries, self.days, self.time_slots)
        logger.info(
            f"Routine fertig: {len(entries)} Einträge, "
            f"{self._stats.get('gaps', 0)} Lücken ({time.time() - t0:.2f}s)"
        )
        return Schedule(
            entries=entries,
            working_days=self.days,
            time_slots=self.time_slots,
            seed=self.seed,
            generated_at=datetime.now(timezone.utc),
        )

    @property
    def stats(self) -> dict[str, int]:
        """Anzahl gebuchter Einträge je Durchlauf (nach generate())."""
        return dict(self._stats)

    # ─── Hilfsfunktionen ──────────────────────────────────────────────────────

    def _pass(self, name: str, fn) -> None:
        before = len(self._entries)
        fn()
        self._stats[name] = len(self._entries) - before
        logger.debug(f"  Durchlauf '{name}': {self._stats[name]} Einträge")

    def _shuffled(self, items: Sequence[T]) -> list[T]:
        out = list(items)
        self._rng.shuffle(out)
        return out

    def _book(self, entry: ScheduleEntry) -> None:
        if self._ledger.book(entry):
            self._entries.append(entry)

    def _qualified_teachers(self, subject: str, class_name: str) -> list[str]:
        cfg = self.config
        return [
            tid for tid in self.teacher_ids
            if subject in cfg.teacher_subjects.get(tid, [])
            and class_name in cfg.teacher_classes.get(tid, [])
        ]

    def _is_consecutive(self, class_name: str, day: Weekday, slot: str, subject: str) -> bool:
        """True wenn die Klasse dasselbe Fach im Nachbar-Slot schon hat."""
        idx = self.instructional_slots.index(slot)
        neighbours = self.instructional_slots[max(idx - 1, 0):idx] + self.instructional_slots[idx + 1:idx + 2]
        for entry in self._entries:
            if (entry.day == day and entry.time_slot in neighbours
                    and entry.involves_class(class_name) and subject in entry.subjects):
                return True
        return False

    def _defer_consecutive(self, slots: list[str], class_name: str,
                           day: Weekday, subject: str) -> list[str]:
        """Schiebt Nachbar-Slots desselben Fachs ans Ende (weiche Regel)."""
        if not self.config.prevent_consecutive_classes:
            return slots
        preferred = [s for s in slots if not self._is_consecutive(class_name, day, s, subject)]
        deferred = [s for s in slots if s not in preferred]
        return preferred + deferred

    # ─── 1. Feste Pausen ──────────────────────────────────────────────────────

    def _book_fixed_breaks(self) -> None:
        cfg = self.config
        breaks = [(cfg.prayer_time_slot, PRAYER), (cfg.lunch_time_slot, LUNCH)]
        for day in self.days:
            for class_name in self.classes:
                for slot, label in breaks:
                    if slot and not self._ledger.is_class_booked(class_name, day, slot):
                        self._book(ScheduleEntry.fixed_break(day, slot, class_name, label))

    # ─── 2. Sonderregeln ──────────────────────────────────────────────────────

    def _book_special_rules(self) -> None:
        ledger = self._ledger
        for day in self.days:
            for rule in self.config.combined_classes:
                slot = next((
                    s for s in self._shuffled(self.instructional_slots)
                    if ledger.is_teacher_free(rule.teacher_id, day, s)
                    and all(not ledger.is_class_booked(c, day, s) for c in rule.classes)
                    and all(not ledger.is_class_subject_booked_today(c, day, rule.subject)
                            for c in rule.classes)
                ), None)
                if slot is None:
                    logger.debug(f"  Kombiniert {rule.classes} ({day.value}): kein Slot frei")
                    continue
                self._book(ScheduleEntry.combined(day, slot, rule.classes, rule.subject, rule.teacher_id))

            for rule in self.config.split_classes:
                slot = next((
                    s for s in self._shuffled(self.instructional_slots)
                    if not ledger.is_class_booked(rule.class_name, day, s)
                    and all(ledger.is_teacher_free(p.teacher_id, day, s) for p in rule.parts)
                    and all(not ledger.is_class_subject_booked_today(rule.class_name, day, p.subject)
                            for p in rule.parts)
                ), None)
                if slot is None:
                    logger.debug(f"  Geteilt {rule.class_name} ({day.value}): kein Slot frei")
                    continue
                self._book(ScheduleEntry.split(
                    day, slot, rule.class_name,
                    [(p.subject, p.teacher_id) for p in rule.parts],
                ))

    # ─── 3. Erste Stunde des Klassenlehrers ───────────────────────────────────

    def _book_class_teacher_first_period(self) -> None:
        if not self.instructional_slots:
            return
        first_slot = self.instructional_slots[0]
        cfg = self.config
        ledger = self._ledger

        for day in self.days:
            for class_name in self.classes:
                teacher_id = cfg.class_teachers.get(class_name)
                if not teacher_id:
                    continue
                if (ledger.is_class_booked(class_name, day, first_slot)
                        or not ledger.is_teacher_free(teacher_id, day, first_slot)):
                    continue
                suitable = [
                    s for s in cfg.class_requirements.get(class_name, [])
                    if cfg.is_main(s) and s in cfg.teacher_subjects.get(teacher_id, [])
                ]
                for subject in self._shuffled(suitable):
                    if ledger.is_class_subject_booked_today(class_name, day, subject):
                        continue
                    self._book(ScheduleEntry.single(day, first_slot, class_name, subject, teacher_id))
                    break

    # ─── 4. Hauptfächer ───────────────────────────────────────────────────────

    def _preferred_slots(self, subject: str) -> tuple[list[str], list[str]]:
        """(bevorzugte Slots, Rest) gemäß Tageszeit-Präferenz, jeweils gemischt."""
        priority = self.config.subject_priorities.get(subject, SubjectPriority.NONE)
        if priority == SubjectPriority.BEFORE:
            preferred = self.before_lunch
        elif priority == SubjectPriority.AFTER:
            preferred = self.after_lunch
        else:
            preferred = self.instructional_slots
        rest = [s for s in self.instructional_slots if s not in preferred]
        return self._shuffled(preferred), self._shuffled(rest)

    def _book_main_subjects(self) -> None:
        cfg = self.config
        ledger = self._ledger

        for day in self.days:
            for class_name in self._shuffled(self.classes):
                required = [
                    s for s in cfg.class_requirements.get(class_name, [])
                    if cfg.is_main(s)
                ]
                for subject in self._shuffled(required):
                    if ledger.is_class_subject_booked_today(class_name, day, subject):
                        continue
                    for teacher_id in self._shuffled(self._qualified_teachers(subject, class_name)):
                        if ledger.teacher_load_today(teacher_id, day) >= cfg.daily_period_quota:
                            continue
                        preferred, rest = self._preferred_slots(subject)
                        candidates = (
                            self._defer_consecutive(preferred, class_name, day, subject)
                            + self._defer_consecutive(rest, class_name, day, subject)
                        )
                        slot = next((
                            s for s in candidates
                            if not ledger.is_teacher_booked(teacher_id, day, s)
                            and not ledger.is_class_booked(class_name, day, s)
                            and not ledger.is_teacher_unavailable(teacher_id, day, s)
                        ), None)
                        if slot is not None:
                            self._book(ScheduleEntry.single(day, slot, class_name, subject, teacher_id))
                            break

    # ─── 5. Zusatzfächer ──────────────────────────────────────────────────────

    def _book_additional_subjects(self) -> None:
        cfg = self.config
        ledger = self._ledger

        for day in self.days:
            for slot in self.instructional_slots:
                for class_name in self._shuffled(self.classes):
                    if ledger.is_class_booked(class_name, day, slot):
                        continue
                    potential = [
                        s for s in cfg.class_requirements.get(class_name, [])
                        if cfg.category_of(s) in (None, SubjectCategory.ADDITIONAL)
                    ]
                    potential = self._shuffled(potential)
                    if cfg.prevent_consecutive_classes:
                        potential.sort(key=lambda s: self._is_consecutive(class_name, day, slot, s))
                    for subject in potential:
                        teachers = [
                            tid for tid in self._qualified_teachers(subject, class_name)
                            if ledger.is_teacher_free(tid, day, slot)
                        ]
                        if teachers:
                            teacher_id = self._shuffled(teachers)[0]
                            self._book(ScheduleEntry.single(day, slot, class_name, subject, teacher_id))
                            break

    # ─── 6. Lücken ────────────────────────────────────────────────────────────

    def _fill_gaps(self) -> None:
        for day in self.days:
            for slot in self.instructional_slots:
                for class_name in self.classes:
                    if not self._ledger.is_class_booked(class_name, day, slot):
                        self._book(ScheduleEntry.empty(day, slot, class_name))


def generate_schedule(school_data: SchoolData, seed: Optional[int] = None) -> Schedule:
    """Erzeugt eine Wochen-Routine. Gleicher Seed + gleiche Eingaben → gleiche Routine."""
    return ScheduleGenerator(school_data, seed=seed).generate()
