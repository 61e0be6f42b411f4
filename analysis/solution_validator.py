"""Post-Generierungs-Validierung der fertigen Routine.

Prüft die Routine auf Constraint-Verletzungen als Sicherheitsnetz
unabhängig vom Generator.
"""

from collections import Counter, defaultdict
from typing import Literal

from pydantic import BaseModel

from models.school_data import SchoolData
from models.schedule import EntryKind, Schedule
from solver.substitution import SubstitutionPlan


class ValidationViolation(BaseModel):
    """Eine einzelne Constraint-Verletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "teacher_double_booking"
    description: str
    entity: str          # teacher_id / class_name


class ValidationReport(BaseModel):
    """Ergebnis der Post-Generierungs-Validierung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    def by_constraint(self, constraint: str) -> list[ValidationViolation]:
        return [v for v in self.violations if v.constraint == constraint]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        errors = [v for v in self.violations if v.severity == "error"]
        warnings = [v for v in self.violations if v.severity == "warning"]

        status = (
            "[bold green]✓ VALIDE[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(errors)} | Warnungen: {len(warnings)}"]
        console.print(Panel("\n".join(lines), title="Routine-Validierung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Constraint", width=28)
        table.add_column("Entität", width=12)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class ScheduleValidator:
    """Prüft eine fertige Schedule auf Constraint-Verletzungen."""

    def validate(self, schedule: Schedule, school_data: SchoolData) -> ValidationReport:
        """Führt alle Validierungschecks durch und gibt einen ValidationReport zurück."""
        violations: list[ValidationViolation] = []

        violations.extend(self._check_coverage(schedule, school_data))
        violations.extend(self._check_teacher_double_booking(schedule))
        violations.extend(self._check_daily_quota(schedule, school_data))
        violations.extend(self._check_unavailability(schedule, school_data))
        violations.extend(self._check_main_subject_repeat(schedule, school_data))
        violations.extend(self._check_gaps(schedule))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    def validate_substitutions(self, plan: SubstitutionPlan) -> ValidationReport:
        """Keine Vertretungskraft darf zweimal im selben Slot eingeteilt sein."""
        violations: list[ValidationViolation] = []
        seen = Counter(
            (s.substitute_teacher_id, s.time_slot)
            for s in plan.substitutions if s.is_covered
        )
        for (teacher_id, slot), n in seen.items():
            if n > 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="substitute_double_booking",
                    entity=teacher_id,
                    description=f"{plan.date.isoformat()} {slot}: {n} Vertretungen gleichzeitig.",
                ))
        return ValidationReport(violations=violations, is_valid=not violations)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_coverage(
        self, schedule: Schedule, school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Genau ein Eintrag pro (Tag, Slot, Klasse)."""
        violations: list[ValidationViolation] = []
        counts: Counter = Counter()
        for e in schedule.entries:
            for c in e.class_names:
                counts[(e.day, e.time_slot, c)] += 1

        for day in school_data.config.working_days:
            for slot in school_data.time_slots:
                for c in school_data.classes:
                    n = counts.get((day, slot, c), 0)
                    if n == 1:
                        continue
                    violations.append(ValidationViolation(
                        severity="error",
                        constraint="coverage" if n == 0 else "class_double_booking",
                        entity=c,
                        description=f"{day.value} {slot}: {n} Einträge.",
                    ))
        return violations

    def _check_teacher_double_booking(self, schedule: Schedule) -> list[ValidationViolation]:
        """Keine Lehrkraft darf zur selben Zeit in zwei Einträgen stehen."""
        violations: list[ValidationViolation] = []
        seen: dict[tuple, list[str]] = defaultdict(list)
        for e in schedule.entries:
            for tid in set(e.teacher_ids):
                seen[(tid, e.day, e.time_slot)].append(e.class_name)

        for (teacher_id, day, slot), classes in seen.items():
            if len(classes) > 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="teacher_double_booking",
                    entity=teacher_id,
                    description=(
                        f"{day.value} {slot}: gleichzeitig in "
                        f"{', '.join(classes)} eingeplant."
                    ),
                ))
        return violations

    def _check_daily_quota(
        self, schedule: Schedule, school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Unterrichtsstunden je Lehrkraft und Tag ≤ Tageskontingent."""
        violations: list[ValidationViolation] = []
        quota = school_data.config.daily_period_quota
        load: Counter = Counter()
        for e in schedule.entries:
            if not e.is_instructional:
                continue
            for tid in set(e.teacher_ids):
                load[(tid, e.day)] += 1

        for (teacher_id, day), n in load.items():
            if n > quota:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="daily_quota",
                    entity=teacher_id,
                    description=f"{day.value}: {n} Stunden bei Kontingent {quota}.",
                ))
        return violations

    def _check_unavailability(
        self, schedule: Schedule, school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Keine Lehrkraft in einem gesperrten Slot."""
        violations: list[ValidationViolation] = []
        blocked = {
            (u.teacher_id, u.day, u.time_slot)
            for u in school_data.config.unavailability
        }
        for e in schedule.entries:
            for tid in e.teacher_ids:
                if (tid, e.day, e.time_slot) in blocked:
                    violations.append(ValidationViolation(
                        severity="error",
                        constraint="unavailability",
                        entity=tid,
                        description=f"{e.day.value} {e.time_slot}: in Sperrzeit eingeplant ({e.class_name}).",
                    ))
        return violations

    def _check_main_subject_repeat(
        self, schedule: Schedule, school_data: SchoolData
    ) -> list[ValidationViolation]:
        """Hauptfächer höchstens einmal pro Klasse und Tag."""
        violations: list[ValidationViolation] = []
        cfg = school_data.config
        counts: Counter = Counter()
        for e in schedule.entries:
            if not e.is_instructional:
                continue
            for c in e.class_names:
                for s in e.subjects:
                    if cfg.is_main(s):
                        counts[(c, e.day, s)] += 1

        for (class_name, day, subject), n in counts.items():
            if n > 1:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="main_subject_repeat",
                    entity=class_name,
                    description=f"{day.value}: Hauptfach '{subject}' {n}× eingeplant.",
                ))
        return violations

    def _check_gaps(self, schedule: Schedule) -> list[ValidationViolation]:
        """Lücken ("---") sind erlaubt, werden aber als Warnung je Klasse gemeldet."""
        gaps: Counter = Counter(
            e.class_name for e in schedule.entries if e.kind == EntryKind.EMPTY
        )
        return [
            ValidationViolation(
                severity="warning",
                constraint="unfilled_slots",
                entity=class_name,
                description=f"{n} Stunden ohne Unterricht.",
            )
            for class_name, n in sorted(gaps.items())
        ]
