"""
Injected id generation.

Bracket and match construction never calls uuid/time directly; it takes an
IdGenerator so tests (and brackets) stay deterministic.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Literal, Protocol

IdStrategy = Literal["uuid", "counter"]


class IdGenerator(Protocol):
    def __call__(self, prefix: str) -> str: ...


class CounterIds:
    """Monotonic ids: plm-0, plm-1, …  One counter shared by all prefixes."""

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


class UuidIds:
    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"


def create_id_generator(strategy: IdStrategy) -> IdGenerator:
    match strategy:
        case "counter":
            return CounterIds()
        case "uuid":
            return UuidIds()
        case _:
            raise ValueError(
                f"Unknown id strategy: {strategy!r}. Valid strategies: uuid, counter"
            )
