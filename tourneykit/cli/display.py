"""
Rich terminal report: group standings, qualifiers and brackets.

This is the ONLY place where terminal output happens; the engine and the
store never print.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tourneykit.groups.standings import StandingsEntry
from tourneykit.models import Event, Group, PlayoffBracket, PlayoffMatch
from tourneykit.playoffs.qualifiers import Qualifier

console = Console(legacy_windows=False)


def round_label(round_num: int, total_rounds: int) -> str:
    """Human-readable round name, counted back from the final."""
    if round_num == total_rounds:
        return "Final"
    if round_num == total_rounds - 1:
        return "Semifinals"
    if round_num == total_rounds - 2:
        return "Quarterfinals"
    return f"Round {round_num}"


def print_standings(group: Group, standings: list[StandingsEntry]) -> None:
    table = Table(
        title=f"{group.name} standings",
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Player", min_width=20)
    table.add_column("Pts", justify="right", width=5)
    table.add_column("P", justify="center", width=4)
    table.add_column("W", justify="center", width=4)
    table.add_column("D", justify="center", width=4)
    table.add_column("L", justify="center", width=4)
    table.add_column("GF", justify="right", width=4)
    table.add_column("GA", justify="right", width=4)
    table.add_column("GD", justify="right", width=5)

    for i, entry in enumerate(standings, 1):
        table.add_row(
            str(i),
            entry.player_name or f"[dim]{entry.player_id}[/]",
            str(entry.points),
            str(entry.played),
            str(entry.wins),
            str(entry.draws),
            str(entry.losses),
            str(entry.goals_for),
            str(entry.goals_against),
            f"{entry.goal_difference:+d}",
            style="bold" if i == 1 and entry.played else "",
        )

    console.print()
    console.print(table)


def print_qualifiers(title: str, qualifiers: list[Qualifier], event: Event) -> None:
    if not qualifiers:
        console.print(f"\n[dim]{title}: no qualifiers configured.[/]")
        return

    table = Table(title=title, show_header=True, header_style="bold", border_style="green")
    table.add_column("Player", min_width=20)
    table.add_column("Group", style="dim")
    table.add_column("Rank", justify="right", width=5)
    for q in qualifiers:
        table.add_row(_name(event, q.player_id), q.group_name, str(q.rank))

    console.print()
    console.print(table)


def print_bracket(title: str, bracket: PlayoffBracket | None, event: Event) -> None:
    if bracket is None or not bracket.is_generated:
        console.print(f"\n[dim]{title}: not generated yet.[/]")
        return

    total_rounds = bracket.num_rounds
    console.print()
    console.rule(f"[bold]{title}[/]", style="bright_blue")

    for round_num in range(1, total_rounds + 1):
        table = Table(
            title=round_label(round_num, total_rounds),
            show_header=True,
            header_style="bold",
            border_style="dim",
        )
        _add_match_columns(table)
        for match in bracket.round_matches(round_num):
            _add_match_row(table, match, event)
        console.print(table)

    bronze = bracket.get(bracket.bronze_final_id)
    if bronze is not None:
        table = Table(title="Bronze final", show_header=True, header_style="bold", border_style="dim")
        _add_match_columns(table)
        _add_match_row(table, bronze, event)
        console.print(table)

    champion = bracket.champion_id
    if champion is not None:
        console.print(
            Panel(
                f"[bold yellow]★  {_name(event, champion)}[/]",
                title="[bold green] Champion [/]",
                border_style="yellow",
                expand=False,
            )
        )


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _name(event: Event, player_id: str | None) -> str:
    if player_id is None:
        return "TBD"
    player = event.player(player_id)
    return player.name if player else player_id


def _add_match_columns(table: Table) -> None:
    table.add_column("Match", style="dim", width=8)
    table.add_column("Player 1", min_width=18)
    table.add_column("Score", justify="center", width=7)
    table.add_column("Player 2", min_width=18)


def _add_match_row(table: Table, match: PlayoffMatch, event: Event) -> None:
    def cell(player_id: str | None) -> str:
        if player_id is None:
            return "[dim]BYE[/]" if match.round == 1 and match.winner_id else "[dim]TBD[/]"
        name = _name(event, player_id)
        if match.winner_id is None:
            return name
        return f"[bold]{name}[/]" if player_id == match.winner_id else f"[strike]{name}[/]"

    score = f"{match.score1}-{match.score2}" if match.score1 is not None else "vs"
    table.add_row(match.id, cell(match.player1_id), score, cell(match.player2_id))
