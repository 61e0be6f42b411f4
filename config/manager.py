"""Konfigurationsmanager: Laden, Speichern und Validieren der Schulkonfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import SchoolConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Routine-Generator: Schulkonfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "working_days": (
        "Unterrichtstage",
        "Reihenfolge = Anzeigereihenfolge der Routine.",
    ),
    "class_requirements": (
        "Pflichtfächer je Klasse",
        None,
    ),
    "subject_priorities": (
        "Fächer",
        "Tageszeit: before/after (Mittagspause) oder none.\n"
        "Kategorie: main = max. 1× pro Tag, additional = darf sich wiederholen.",
    ),
    "teacher_subjects": (
        "Lehrkräfte",
        "Fächer und Klassen je Lehrer-ID, Klassenlehrer je Klasse.",
    ),
    "prayer_time_slot": (
        "Pausen",
        "Slot-Bezeichner wie im Zeitraster; leer = keine Pause.",
    ),
    "prevent_consecutive_classes": (
        "Regeln",
        "Tageskontingent = max. Unterrichtsstunden je Lehrkraft und Tag.",
    ),
    "unavailability": (
        "Sperrzeiten & Sonderregeln",
        None,
    ),
    "holidays": (
        "Schulkalender",
        "An diesen Tagen wird kein Vertretungsplan erstellt.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "school_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> SchoolConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py setup' aus, um die Schule einzurichten."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return SchoolConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    # ─── Speichern ───

    def save(self, config: SchoolConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit Abschnitts-Kommentaren."""
        target = Path(path) if path else self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: SchoolConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        cm.yaml_add_eol_comment("Max. Stunden je Lehrkraft und Tag", "daily_period_quota")
        return cm
