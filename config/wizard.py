"""Interaktiver Setup-Wizard für die Ersteinrichtung des Routine-Generators.

Fragt die wenigen globalen Einstellungen ab (Unterrichtstage, Pausen,
Tageskontingent). Lehrer-/Klassen-Zuordnungen kommen aus dem Datensatz.
Nutzt rich für die Konsolenausgabe.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich import box

from config.defaults import default_school_config, default_time_slots
from config.schema import SchoolConfig, Weekday

console = Console()


def _header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold cyan]{title}[/bold cyan]", expand=False))


def _success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def _warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow]  {text}")


def _show_time_slots_table(slots: list[str], prayer: str, lunch: str) -> None:
    """Zeigt das Zeitraster als rich-Tabelle an."""
    table = Table(title="Zeitraster", box=box.ROUNDED)
    table.add_column("Nr.", style="bold", width=5)
    table.add_column("Slot", width=16)
    table.add_column("Info", width=14)
    for i, slot in enumerate(slots, start=1):
        info = "Gebet" if slot == prayer else "Mittagspause" if slot == lunch else ""
        table.add_row(str(i), slot, info)
    console.print(table)


def _wizard_days(default: list[Weekday]) -> list[Weekday]:
    _header("1. Unterrichtstage")
    names = ", ".join(d.value for d in default)
    if Confirm.ask(f"Unterrichtstage übernehmen ({names})?", default=True):
        return default
    raw = Prompt.ask("Tage (englisch, kommagetrennt)", default=names)
    days: list[Weekday] = []
    for part in raw.split(","):
        try:
            day = Weekday(part.strip().capitalize())
        except ValueError:
            _warn(f"Unbekannter Tag ignoriert: {part.strip()!r}")
            continue
        if day not in days:
            days.append(day)
    return days or default


def _wizard_breaks(config: SchoolConfig) -> tuple[str, str]:
    _header("2. Pausen")
    slots = default_time_slots()
    _show_time_slots_table(slots, config.prayer_time_slot, config.lunch_time_slot)
    if Confirm.ask("Gebet und Mittagspause übernehmen?", default=True):
        return config.prayer_time_slot, config.lunch_time_slot

    def _pick(label: str, current: str) -> str:
        default_nr = slots.index(current) + 1 if current in slots else 0
        nr = IntPrompt.ask(f"  {label}: Slot-Nr. (0 = keine)", default=default_nr)
        return slots[nr - 1] if 1 <= nr <= len(slots) else ""

    prayer = _pick("Gebet", config.prayer_time_slot)
    lunch = _pick("Mittagspause", config.lunch_time_slot)
    if prayer and prayer == lunch:
        _warn("Gebet und Mittagspause im selben Slot – Gebet wird entfernt.")
        prayer = ""
    return prayer, lunch


def _wizard_rules(config: SchoolConfig) -> tuple[int, bool, int]:
    _header("3. Regeln")
    quota = IntPrompt.ask("Max. Unterrichtsstunden je Lehrkraft und Tag",
                          default=config.daily_period_quota)
    consecutive = Confirm.ask("Gleiches Fach nicht direkt hintereinander?",
                              default=config.prevent_consecutive_classes)
    invigilators = IntPrompt.ask("Aufsichten pro Prüfungsslot",
                                 default=config.invigilators_per_slot)
    return max(quota, 0), consecutive, max(invigilators, 0)


def run_wizard(use_defaults: bool = False) -> Optional[SchoolConfig]:
    """Führt den Wizard aus. Gibt None zurück, wenn abgebrochen wurde."""
    config = default_school_config()
    if use_defaults:
        return config

    console.print(Panel(
        "[bold]Routine-Generator – Ersteinrichtung[/bold]\n"
        "Enter übernimmt jeweils den Vorschlag in Klammern.",
        border_style="cyan",
    ))

    days = _wizard_days(config.working_days)
    prayer, lunch = _wizard_breaks(config)
    quota, consecutive, invigilators = _wizard_rules(config)

    result = config.model_copy(update={
        "working_days": days,
        "prayer_time_slot": prayer,
        "lunch_time_slot": lunch,
        "daily_period_quota": quota,
        "prevent_consecutive_classes": consecutive,
        "invigilators_per_slot": invigilators,
    })
    # model_copy validiert nicht, daher einmal explizit
    result = SchoolConfig.model_validate(result.model_dump())

    _header("Zusammenfassung")
    console.print(f"Tage: {', '.join(d.value for d in result.working_days)}")
    console.print(f"Gebet: {result.prayer_time_slot or '—'} | Mittag: {result.lunch_time_slot or '—'}")
    console.print(f"Tageskontingent: {result.daily_period_quota} | "
                  f"Aufsichten/Slot: {result.invigilators_per_slot}")
    if not Confirm.ask("Konfiguration speichern?", default=True):
        _warn("Abgebrochen.")
        return None
    _success("Konfiguration erstellt.")
    return result
