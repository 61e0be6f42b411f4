"""Routine-Generator: Haupt-CLI.

Verwendung:
  python main.py setup                         Ersteinrichtung (Wizard)
  python main.py config show                   Konfiguration anzeigen
  python main.py generate --export-json        Demo-Datensatz erzeugen + speichern
  python main.py validate                      Konsistenz-Check des Datensatzes
  python main.py solve                         Wochen-Routine erzeugen + prüfen
  python main.py show class 9A                 Routine einer Klasse anzeigen
  python main.py show teacher T01              Routine einer Lehrkraft anzeigen
  python main.py substitute --date 2025-03-10 --absent T01
                                               Vertretungsplan für einen Tag
  python main.py invigilate                    Prüfungsaufsichten verteilen
  python main.py load                          Lehrer-Auslastung
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfade für gespeicherte Daten
DEFAULT_DATA_JSON = Path("output/school_data.json")
DEFAULT_SCHEDULE_JSON = Path("output/schedule.json")


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py setup[/bold] aus."
        )
        sys.exit(1)
    try:
        return mgr, mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_data_or_abort(json_path: str):
    from models.school_data import SchoolData

    p = Path(json_path)
    if not p.exists():
        console.print(
            f"[red]Keine Datendatei gefunden: {p}[/red]\n"
            "Verwenden Sie [bold]python main.py generate --export-json[/bold]."
        )
        sys.exit(1)
    return SchoolData.load_json(p)


def _load_schedule_or_abort(schedule_path: str):
    from models.schedule import Schedule

    p = Path(schedule_path)
    if not p.exists():
        console.print(
            f"[red]Keine Routine gefunden: {p}[/red]\n"
            "Verwenden Sie zunächst [bold]python main.py solve[/bold]."
        )
        sys.exit(1)
    return Schedule.load_json(p)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
@click.option("--defaults", "use_defaults", is_flag=True, default=False,
              help="Standardwerte ohne Rückfragen übernehmen.")
def cmd_setup(use_defaults: bool):
    """Ersteinrichtung: Schulkonfiguration mit dem Setup-Wizard anlegen."""
    from config.wizard import run_wizard
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check() and not use_defaults:
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    config = run_wizard(use_defaults=use_defaults)
    if config is not None:
        mgr.save(config)
        console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
        console.print("Führen Sie jetzt [bold]python main.py generate --export-json[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config_or_abort()

    console.print(Panel(
        f"Tage: [bold]{', '.join(d.value for d in config.working_days)}[/bold]\n"
        f"Gebet: {config.prayer_time_slot or '—'}  |  "
        f"Mittagspause: {config.lunch_time_slot or '—'}\n"
        f"Tageskontingent: {config.daily_period_quota}  |  "
        f"Keine Doppelstunden: {'ja' if config.prevent_consecutive_classes else 'nein'}  |  "
        f"Aufsichten/Slot: {config.invigilators_per_slot}",
        title="Schulkonfiguration",
        border_style="cyan",
    ))

    table = Table(title="Fächer", box=box.ROUNDED)
    table.add_column("Fach", style="bold")
    table.add_column("Kategorie")
    table.add_column("Tageszeit")
    for subject in sorted(set(config.subject_categories) | set(config.subject_priorities)):
        cat = config.category_of(subject)
        prio = config.subject_priorities.get(subject)
        table.add_row(subject, cat.value if cat else "—", prio.value if prio else "—")
    console.print(table)

    if config.holidays:
        table2 = Table(title="Schulkalender", box=box.ROUNDED)
        table2.add_column("Datum")
        table2.add_column("Bezeichnung")
        for h in sorted(config.holidays, key=lambda h: h.date):
            table2.add_row(h.date.isoformat(), h.name)
        console.print(table2)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--export-json", is_flag=True, default=False,
              help="Datensatz als JSON speichern.")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad für JSON-Export.")
def cmd_generate(seed: int, export_json: bool, json_path: str):
    """Erzeugt einen Demo-Datensatz (Lehrkräfte, Klassen, Zuordnungen, Regeln)."""
    mgr, config = _load_config_or_abort()
    from data.fake_data import FakeDataGenerator

    console.print("[bold]Testdaten werden generiert...[/bold]")
    gen = FakeDataGenerator(config, seed=seed)
    data = gen.generate()
    gen.print_summary(data)

    console.print(f"\n[dim]{data.summary()}[/dim]")
    data.validate_consistency().print_rich()

    if export_json:
        out_path = Path(json_path)
        data.save_json(out_path)
        console.print(f"[green]✓[/green] JSON gespeichert: {out_path}")


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zur gespeicherten JSON-Datei.")
def cmd_validate(json_path: str):
    """Führt einen Konsistenz-Check auf dem aktuellen Datensatz durch."""
    console.print(f"[bold]Lade Datensatz:[/bold] {json_path}")
    data = _load_data_or_abort(json_path)

    console.print(f"\n{data.summary()}\n")
    report = data.validate_consistency()
    report.print_rich()

    sys.exit(0 if report.is_feasible else 1)


# ─── SOLVE ────────────────────────────────────────────────────────────────────

@click.command("solve")
@click.option("--json-path", default=str(DEFAULT_DATA_JSON),
              help="Pfad zum Datensatz.")
@click.option("--seed", type=int, default=None,
              help="Zufalls-Seed (ohne Angabe: neuer Seed pro Lauf).")
@click.option("--output", "-o", default=str(DEFAULT_SCHEDULE_JSON),
              help="Pfad für die erzeugte Routine.")
@click.option("--flat-json", default=None,
              help="Zusätzlich als flache Liste (day/timeSlot/className/subject/teacher) speichern.")
def cmd_solve(json_path: str, seed, output: str, flat_json):
    """Erzeugt die Wochen-Routine und prüft sie."""
    from solver.scheduler import ScheduleGenerator
    from analysis.solution_validator import ScheduleValidator

    data = _load_data_or_abort(json_path)

    generator = ScheduleGenerator(data, seed=seed)
    with console.status("[bold]Routine wird erzeugt...[/bold]"):
        schedule = generator.generate()

    table = Table(title=f"Durchläufe (Seed {schedule.seed})", box=box.ROUNDED)
    table.add_column("Durchlauf")
    table.add_column("Einträge", justify="right")
    for name, n in generator.stats.items():
        table.add_row(name, str(n))
    console.print(table)

    report = ScheduleValidator().validate(schedule, data)
    report.print_rich()

    out_path = Path(output)
    schedule.save_json(out_path)
    console.print(f"[green]✓[/green] Routine gespeichert: {out_path}")
    if flat_json:
        flat_path = Path(flat_json)
        flat_path.parent.mkdir(parents=True, exist_ok=True)
        with open(flat_path, "w", encoding="utf-8") as f:
            json.dump(schedule.to_flat(), f, ensure_ascii=False, indent=2)
        console.print(f"[green]✓[/green] Flache Routine gespeichert: {flat_path}")
    console.print(f"[dim]Reproduzierbar mit: python main.py solve --seed {schedule.seed}[/dim]")

    if not report.is_valid:
        sys.exit(1)


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.group("show")
def cmd_show():
    """Routine einer Klasse oder Lehrkraft anzeigen."""


@cmd_show.command("class")
@click.argument("class_name")
@click.option("--schedule-path", default=str(DEFAULT_SCHEDULE_JSON))
def show_class(class_name: str, schedule_path: str):
    """Zeigt die Routine einer Klasse."""
    from export.tui_renderer import print_class_schedule

    schedule = _load_schedule_or_abort(schedule_path)
    if not schedule.get_class_schedule(class_name):
        console.print(f"[red]Klasse '{class_name}' nicht in der Routine.[/red]")
        sys.exit(1)
    print_class_schedule(class_name, schedule)


@cmd_show.command("teacher")
@click.argument("teacher_id")
@click.option("--schedule-path", default=str(DEFAULT_SCHEDULE_JSON))
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def show_teacher(teacher_id: str, schedule_path: str, json_path: str):
    """Zeigt die Routine einer Lehrkraft."""
    from export.tui_renderer import print_teacher_schedule

    schedule = _load_schedule_or_abort(schedule_path)
    data = _load_data_or_abort(json_path)
    teacher = data.get_teacher(teacher_id)
    if teacher is None:
        console.print(f"[red]Lehrkraft '{teacher_id}' nicht gefunden.[/red]")
        sys.exit(1)
    print_teacher_schedule(teacher_id, schedule, name=teacher.name)


# ─── SUBSTITUTE ───────────────────────────────────────────────────────────────

@click.command("substitute")
@click.option("--date", "date_str", required=True, help="Datum (YYYY-MM-DD).")
@click.option("--absent", "-a", multiple=True, required=True,
              help="Lehrer-ID einer abwesenden Lehrkraft (mehrfach möglich).")
@click.option("--schedule-path", default=str(DEFAULT_SCHEDULE_JSON))
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def cmd_substitute(date_str: str, absent: tuple, schedule_path: str, json_path: str):
    """Erstellt den Vertretungsplan für einen Tag."""
    from analysis.solution_validator import ScheduleValidator
    from analysis.teacher_load import calculate_teacher_load, weekly_totals
    from export.tui_renderer import print_substitution_plan
    from solver.substitution import InvalidDateError, generate_substitution_plan, resolve_date

    data = _load_data_or_abort(json_path)
    schedule = _load_schedule_or_abort(schedule_path)

    try:
        the_date = resolve_date(date_str)
    except InvalidDateError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    holiday = data.config.holiday_on(the_date)
    if holiday is not None:
        console.print(f"[yellow]{the_date.isoformat()} ist unterrichtsfrei: {holiday.name or 'Feiertag'}[/yellow]")
        return
    if not data.config.is_school_day(the_date):
        console.print(f"[yellow]{the_date.isoformat()} ist kein Unterrichtstag.[/yellow]")
        return

    unknown = [tid for tid in absent if data.get_teacher(tid) is None]
    if unknown:
        console.print(f"[yellow]⚠[/yellow]  Unbekannte Lehrer-ID(s): {', '.join(unknown)}")

    load = weekly_totals(calculate_teacher_load(schedule, data.teachers, data.config))
    plan = generate_substitution_plan(schedule, data.teachers, list(absent), the_date, load)
    print_substitution_plan(plan)

    report = ScheduleValidator().validate_substitutions(plan)
    if not report.is_valid:
        report.print_rich()
        sys.exit(1)


# ─── INVIGILATE ───────────────────────────────────────────────────────────────

@click.command("invigilate")
@click.option("--schedule-path", default=str(DEFAULT_SCHEDULE_JSON))
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def cmd_invigilate(schedule_path: str, json_path: str):
    """Verteilt Prüfungsaufsichten auf Lehrkräfte ohne Unterricht."""
    from export.tui_renderer import print_duty_chart
    from solver.invigilation import generate_invigilation_duty

    data = _load_data_or_abort(json_path)
    schedule = _load_schedule_or_abort(schedule_path)

    chart = generate_invigilation_duty(schedule, data.teachers, data.time_slots, data.config)
    print_duty_chart(chart, target=data.config.invigilators_per_slot)


# ─── LOAD ─────────────────────────────────────────────────────────────────────

@click.command("load")
@click.option("--schedule-path", default=str(DEFAULT_SCHEDULE_JSON))
@click.option("--json-path", default=str(DEFAULT_DATA_JSON))
def cmd_load(schedule_path: str, json_path: str):
    """Zeigt die Unterrichtsstunden je Lehrkraft und Tag."""
    from analysis.teacher_load import calculate_teacher_load
    from export.tui_renderer import print_teacher_load

    data = _load_data_or_abort(json_path)
    schedule = _load_schedule_or_abort(schedule_path)

    load = calculate_teacher_load(schedule, data.teachers, data.config)
    print_teacher_load(load, names={t.id: t.name for t in data.teachers})


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Log-Ausgabe (DEBUG).")
def cli(verbose: bool):
    """Routine-Generator für Schulen.

    Starten Sie mit: python main.py setup
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main():
    """Einstiegspunkt. Startet automatisch den Wizard beim ersten Aufruf."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Routine-Generator![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Der Setup-Wizard wird jetzt gestartet...",
            border_style="cyan",
        ))
        sys.argv.append("setup")

    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_validate)
cli.add_command(cmd_solve)
cli.add_command(cmd_show)
cli.add_command(cmd_substitute)
cli.add_command(cmd_invigilate)
cli.add_command(cmd_load)


if __name__ == "__main__":
    main()
