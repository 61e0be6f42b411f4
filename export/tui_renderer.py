"""Gemeinsamer Renderer für die Terminal-Anzeige (Rich).

Die render_*_rows-Funktionen liefern reine Tabellenzeilen (list[list[str]]),
die print_*-Funktionen geben sie über Rich aus. Wird von main.py verwendet.
"""

from typing import TYPE_CHECKING, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from models.schedule import EMPTY_SUBJECT, EntryKind

if TYPE_CHECKING:
    from analysis.teacher_load import TeacherLoad
    from models.schedule import Schedule, ScheduleEntry
    from solver.invigilation import DutyChart
    from solver.substitution import SubstitutionPlan

console = Console()

_BREAK_CELL = "─" * 8


def _cell(entry: Optional["ScheduleEntry"], show: str) -> str:
    """Zellentext: Fach + Lehrkraft (Klassen-Sicht) bzw. Fach + Klasse (Lehrer-Sicht)."""
    if entry is None:
        return "—"
    if entry.kind == EntryKind.BREAK:
        return entry.subject
    if entry.kind == EntryKind.EMPTY:
        return EMPTY_SUBJECT
    if show == "teacher":
        return f"{entry.subject}\n{entry.teacher}"
    return f"{entry.subject}\n{entry.class_name}"


def _is_break_row(by_day: dict) -> bool:
    return bool(by_day) and all(e.kind == EntryKind.BREAK for e in by_day.values())


def render_class_rows(class_name: str, schedule: "Schedule") -> list[list[str]]:
    """Gibt Tabellenzeilen für die Klassen-Routine zurück.

    Jede Zeile: [Nr., Slot, Tag1, Tag2, ...]. Pausenzeilen tragen die
    Pausenbezeichnung in der Nr.-Spalte.
    """
    grid = schedule.class_grid(class_name)
    rows: list[list[str]] = []
    nr = 0
    for slot in schedule.time_slots:
        by_day = grid.get(slot, {})
        if _is_break_row(by_day):
            label = next(iter(by_day.values())).subject
            rows.append([label, slot] + [_BREAK_CELL] * len(schedule.working_days))
            continue
        nr += 1
        cells = [str(nr), slot]
        for day in schedule.working_days:
            cells.append(_cell(by_day.get(day), show="teacher"))
        rows.append(cells)
    return rows


def render_teacher_rows(teacher_id: str, schedule: "Schedule") -> list[list[str]]:
    """Gibt Tabellenzeilen für die Routine einer Lehrkraft zurück.

    Freistunden bleiben leer ("—").
    """
    grid = schedule.teacher_grid(teacher_id)
    rows: list[list[str]] = []
    for nr, slot in enumerate(schedule.time_slots, start=1):
        by_day = grid.get(slot, {})
        cells = [str(nr), slot]
        for day in schedule.working_days:
            cells.append(_cell(by_day.get(day), show="class"))
        rows.append(cells)
    return rows


def _grid_table(title: str, rows: list[list[str]], schedule: "Schedule") -> Table:
    table = Table(title=title, box=box.ROUNDED, show_lines=True)
    table.add_column("Nr.", style="bold", width=6)
    table.add_column("Zeit", style="dim")
    for day in schedule.working_days:
        table.add_column(day.value, min_width=12)
    for row in rows:
        if row[2:] and all(c == _BREAK_CELL for c in row[2:]):
            table.add_row(*[f"[dim]{c}[/dim]" for c in row])
        else:
            table.add_row(*row)
    return table


def print_class_schedule(class_name: str, schedule: "Schedule") -> None:
    rows = render_class_rows(class_name, schedule)
    console.print(_grid_table(f"Routine Klasse {class_name}", rows, schedule))


def print_teacher_schedule(teacher_id: str, schedule: "Schedule", name: str = "") -> None:
    rows = render_teacher_rows(teacher_id, schedule)
    title = f"Routine {name} ({teacher_id})" if name else f"Routine {teacher_id}"
    console.print(_grid_table(title, rows, schedule))


# ─── Vertretungsplan ──────────────────────────────────────────────────────────

def render_substitution_rows(plan: "SubstitutionPlan") -> list[list[str]]:
    """[Slot, Klasse, Fach, Abwesend, Vertretung, Wochenstunden]"""
    rows = []
    for s in plan.substitutions:
        load = "" if s.substitute_weekly_load is None else str(s.substitute_weekly_load)
        rows.append([
            s.time_slot, s.class_name, s.subject,
            s.absent_teacher_id, s.substitute_teacher_id, load,
        ])
    return rows


def print_substitution_plan(plan: "SubstitutionPlan") -> None:
    table = Table(
        title=f"Vertretungsplan {plan.date.isoformat()} ({plan.day.value})",
        box=box.ROUNDED,
    )
    table.add_column("Slot", style="dim")
    table.add_column("Klasse", style="bold")
    table.add_column("Fach")
    table.add_column("Abwesend")
    table.add_column("Vertretung")
    table.add_column("Wochenstd.", justify="right")

    for s, row in zip(plan.substitutions, render_substitution_rows(plan)):
        if not s.is_covered:
            row[4] = f"[red]{row[4]}[/red]"
        table.add_row(*row)
    console.print(table)

    if not plan.substitutions:
        console.print("[dim]Keine Stunden zu vertreten.[/dim]")
    elif plan.uncovered:
        console.print(f"[yellow]⚠[/yellow]  {len(plan.uncovered)} Stunde(n) ohne Vertretung.")


# ─── Prüfungsaufsichten ───────────────────────────────────────────────────────

def render_duty_rows(chart: "DutyChart") -> list[list[str]]:
    """[Slot, Tag1, Tag2, ...] mit den Lehrer-IDs je Zelle."""
    days = list(chart.duties.keys())
    rows = []
    for slot in chart.time_slots:
        cells = [slot]
        for day in days:
            ids = chart.get(day, slot)
            cells.append(", ".join(ids) if ids else "—")
        rows.append(cells)
    return rows


def print_duty_chart(chart: "DutyChart", target: Optional[int] = None) -> None:
    table = Table(title="Prüfungsaufsichten", box=box.ROUNDED, show_lines=True)
    table.add_column("Slot", style="dim")
    for day in chart.duties:
        table.add_column(day.value)
    for row in render_duty_rows(chart):
        table.add_row(*row)
    console.print(table)

    if target is not None:
        missing = chart.understaffed(target)
        if missing:
            console.print(
                f"[yellow]⚠[/yellow]  {len(missing)} Slot(s) mit weniger als "
                f"{target} Aufsichten."
            )


# ─── Lehrer-Auslastung ────────────────────────────────────────────────────────

def print_teacher_load(load: "TeacherLoad", names: Optional[dict[str, str]] = None) -> None:
    """Tabelle: Lehrkraft × Tag, Zelle = Gesamt (Haupt/Zusatz)."""
    names = names or {}
    columns = next(iter(load.values())).keys() if load else []
    table = Table(title="Lehrer-Auslastung", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    for col in columns:
        table.add_column(col, justify="right")
    for tid, by_day in load.items():
        cells = [tid, names.get(tid, "")]
        for col in columns:
            d = by_day[col]
            cells.append(f"{d.total} ({d.main}/{d.additional})" if d.total else "—")
        table.add_row(*cells)
    console.print(table)
