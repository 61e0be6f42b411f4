"""SchoolData: Kataloge der Schule + Konsistenz-Check (Pydantic v2)."""

from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.teacher import Teacher
from config.schema import SchoolConfig, SubjectCategory


class FeasibilityReport(BaseModel):
    """Ergebnis des Konsistenz-Checks."""

    is_feasible: bool
    errors: list[str]      # Kritische Probleme (Eingaben widersprüchlich)
    warnings: list[str]    # Hinweise (Routine wird Lücken enthalten)

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        if self.is_feasible:
            status = "[bold green]✓ KONSISTENT[/bold green]"
        else:
            status = "[bold red]✗ INKONSISTENT[/bold red]"

        lines = [status]
        if self.errors:
            lines.append("\n[red bold]Fehler (kritisch):[/red bold]")
            for e in self.errors:
                lines.append(f"  [red]• {e}[/red]")
        if self.warnings:
            lines.append("\n[yellow bold]Warnungen:[/yellow bold]")
            for w in self.warnings:
                lines.append(f"  [yellow]• {w}[/yellow]")
        if not self.errors and not self.warnings:
            lines.append("[dim]Keine Probleme gefunden.[/dim]")

        console.print(Panel("\n".join(lines), title="Konsistenz-Check", border_style="cyan"))


class SchoolData(BaseModel):
    """Vollständiger Schuldatensatz: Lehrkräfte, Klassen, Fächer, Zeitslots, Config."""

    teachers: list[Teacher]
    classes: list[str]
    subjects: list[str]
    time_slots: list[str]              # geordnet, erster Slot = erste Stunde
    config: SchoolConfig
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Abgeleitete Sichten ───

    @property
    def teacher_ids(self) -> list[str]:
        return [t.id for t in self.teachers]

    @property
    def instructional_slots(self) -> list[str]:
        """Zeitslots ohne Gebet und Mittagspause, in Tagesreihenfolge."""
        breaks = self.config.break_slots
        return [s for s in self.time_slots if s not in breaks]

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.id == teacher_id), None)

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        cfg = self.config
        n_main = sum(1 for s in self.subjects if cfg.is_main(s))
        periods = len(cfg.working_days) * len(self.instructional_slots) * len(self.classes)
        lines = [
            f"Lehrkräfte: {len(self.teachers)}",
            f"Klassen: {len(self.classes)}",
            f"Fächer: {len(self.subjects)} ({n_main} Hauptfächer)",
            f"Zeitslots: {len(self.time_slots)} "
            f"({len(self.instructional_slots)} Unterricht)",
            f"Unterrichtstage: {', '.join(d.value for d in cfg.working_days)}",
            f"Zu besetzende Stunden/Woche: {periods}",
            f"Tageskontingent je Lehrkraft: {cfg.daily_period_quota}",
            f"Sonderregeln: {len(cfg.combined_classes)} kombiniert, "
            f"{len(cfg.split_classes)} geteilt",
        ]
        return "\n".join(lines)

    # ─── Konsistenz-Check ───

    def validate_consistency(self) -> FeasibilityReport:
        """Prüft die Config gegen die Kataloge.

        Der Generator selbst prüft nichts und degradiert zu Lücken; dieser
        Check ist für Aufrufer gedacht, die strikte Eingaben wollen.

        Prüfungen:
        1. Kataloge nicht leer, keine doppelten IDs/E-Mails
        2. Gebet/Mittag existieren im Zeitraster
        3. Alle Maps/Regeln referenzieren bekannte Lehrer/Klassen/Fächer
        4. Jedes Pflichtfach hat mind. eine qualifizierte Lehrkraft
        """
        errors: list[str] = []
        warnings: list[str] = []
        cfg = self.config

        teacher_ids = set(self.teacher_ids)
        classes = set(self.classes)
        subjects = set(self.subjects)
        slots = set(self.time_slots)

        # ── 1. Kataloge ──────────────────────────────────────────────────
        for label, items in (("Lehrkräfte", self.teachers), ("Klassen", self.classes),
                             ("Fächer", self.subjects), ("Zeitslots", self.time_slots)):
            if not items:
                warnings.append(f"Keine {label} definiert – die Routine besteht nur aus Lücken.")

        for tid, n in Counter(self.teacher_ids).items():
            if n > 1:
                errors.append(f"Lehrer-ID '{tid}' ist {n}× vergeben.")
        for mail, n in Counter(t.email.lower() for t in self.teachers).items():
            if n > 1:
                errors.append(f"E-Mail '{mail}' ist {n}× vergeben.")
        for slot, n in Counter(self.time_slots).items():
            if n > 1:
                errors.append(f"Zeitslot '{slot}' ist {n}× vorhanden.")

        # ── 2. Pausen-Slots ──────────────────────────────────────────────
        for label, slot in (("Gebet", cfg.prayer_time_slot), ("Mittagspause", cfg.lunch_time_slot)):
            if slot and slot not in slots:
                errors.append(f"{label}-Slot '{slot}' existiert nicht im Zeitraster.")

        # ── 3. Referenzen ────────────────────────────────────────────────
        def _check_teacher(tid: str, where: str) -> None:
            if tid not in teacher_ids:
                errors.append(f"{where}: unbekannte Lehrkraft '{tid}'.")

        def _check_class(c: str, where: str) -> None:
            if c not in classes:
                errors.append(f"{where}: unbekannte Klasse '{c}'.")

        for tid, subs in cfg.teacher_subjects.items():
            _check_teacher(tid, "Lehrer-Fächer")
            for s in subs:
                if s not in subjects:
                    warnings.append(f"Lehrer-Fächer '{tid}': unbekanntes Fach '{s}'.")
        for tid, cls_list in cfg.teacher_classes.items():
            _check_teacher(tid, "Lehrer-Klassen")
            for c in cls_list:
                _check_class(c, f"Lehrer-Klassen '{tid}'")
        for c, tid in cfg.class_teachers.items():
            _check_class(c, "Klassenlehrer")
            _check_teacher(tid, f"Klassenlehrer '{c}'")
        for c, subs in cfg.class_requirements.items():
            _check_class(c, "Pflichtfächer")
            for s in subs:
                if s not in subjects:
                    errors.append(f"Pflichtfächer '{c}': unbekanntes Fach '{s}'.")
        for u in cfg.unavailability:
            _check_teacher(u.teacher_id, "Sperrzeit")
            if u.time_slot not in slots:
                warnings.append(f"Sperrzeit '{u.teacher_id}': unbekannter Slot '{u.time_slot}'.")
        for rule in cfg.combined_classes:
            where = f"Kombinierte Klassen {'/'.join(rule.classes)}"
            _check_teacher(rule.teacher_id, where)
            for c in rule.classes:
                _check_class(c, where)
        for rule in cfg.split_classes:
            where = f"Geteilte Klasse {rule.class_name}"
            _check_class(rule.class_name, where)
            for part in rule.parts:
                _check_teacher(part.teacher_id, where)
            part_teachers = [p.teacher_id for p in rule.parts]
            if len(set(part_teachers)) < len(part_teachers):
                errors.append(f"{where}: dieselbe Lehrkraft in mehreren Gruppen.")

        # ── 4. Qualifizierte Lehrkräfte je Pflichtfach ───────────────────
        for c, subs in cfg.class_requirements.items():
            for s in subs:
                qualified = [
                    tid for tid in teacher_ids
                    if s in cfg.teacher_subjects.get(tid, [])
                    and c in cfg.teacher_classes.get(tid, [])
                ]
                if not qualified:
                    warnings.append(
                        f"Klasse '{c}', Fach '{s}': keine qualifizierte Lehrkraft – "
                        f"wird nicht eingeplant."
                    )

        n_slots = len(self.instructional_slots)
        for c, subs in cfg.class_requirements.items():
            n_main = sum(1 for s in subs if cfg.category_of(s) == SubjectCategory.MAIN)
            if n_main > n_slots:
                warnings.append(
                    f"Klasse '{c}': {n_main} Hauptfächer, aber nur {n_slots} "
                    f"Unterrichtsslots pro Tag."
                )

        if cfg.daily_period_quota == 0:
            warnings.append("Tageskontingent 0 – keine Lehrkraft kann eingeplant werden.")

        return FeasibilityReport(
            is_feasible=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "SchoolData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
