"""
Elimination brackets: qualifier selection, generation and advancement.
"""

from __future__ import annotations

from tourneykit.playoffs.advancer import record_result, reset_bracket
from tourneykit.playoffs.builder import SeedSlot, bracket_size, build_bracket
from tourneykit.playoffs.qualifiers import (
    Qualifier,
    select_consolation_qualifiers,
    select_playoff_qualifiers,
    select_qualifiers,
)

__all__ = [
    "Qualifier",
    "SeedSlot",
    "select_playoff_qualifiers",
    "select_consolation_qualifiers",
    "select_qualifiers",
    "bracket_size",
    "build_bracket",
    "record_result",
    "reset_bracket",
]
