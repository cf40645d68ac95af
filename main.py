"""
tourneykit — terminal report entry point.

Usage:
    python main.py path/to/event.yaml [--config config.yaml]

Wires together:  config → logging → event file → standings / qualifiers /
brackets → Rich display
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tourneykit.cli.display import (
    console,
    print_bracket,
    print_qualifiers,
    print_standings,
)
from tourneykit.config import Config, load_config
from tourneykit.groups.standings import calculate_standings
from tourneykit.log import configure_logging
from tourneykit.playoffs.qualifiers import (
    select_consolation_qualifiers,
    select_playoff_qualifiers,
)
from tourneykit.serialization import load_event


def main() -> int:
    parser = argparse.ArgumentParser(description="Print standings and brackets for an event file.")
    parser.add_argument("event_file", help="YAML or JSON event document")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    args = parser.parse_args()

    config_path = Path(args.config)
    try:
        config = load_config(config_path) if config_path.exists() else Config()
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        return 1
    configure_logging(config.app)

    try:
        event = load_event(args.event_file)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/] {exc}")
        return 1
    except ValueError as exc:
        console.print(f"[red]Event file error:[/] {exc}")
        return 1

    console.rule(f"[bold green]{event.name}[/]")
    for tournament in event.tournaments:
        console.print(f"\n[bold]{tournament.name}[/]")
        for group in tournament.groups:
            print_standings(group, calculate_standings(group, event.players, tournament.settings))

        print_qualifiers("Playoff qualifiers", select_playoff_qualifiers(tournament, event.players), event)
        print_bracket("Playoffs", tournament.playoffs, event)

        consolation = select_consolation_qualifiers(tournament, event.players)
        if consolation or tournament.consolation_bracket is not None:
            print_qualifiers("Consolation qualifiers", consolation, event)
            print_bracket("Consolation bracket", tournament.consolation_bracket, event)
    return 0


if __name__ == "__main__":
    sys.exit(main())
