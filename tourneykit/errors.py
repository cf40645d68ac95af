"""
Error taxonomy shared by the engine and the host layer.

Silent policy no-ops (a score differential no point rule covers, a match
that references a player no longer in the group) are deliberately NOT
errors; see groups/standings.py.
"""

from __future__ import annotations


class TourneyError(Exception):
    """Base class for every error raised by tourneykit."""


class ValidationError(TourneyError):
    """Preconditions for an operation do not hold; nothing was mutated."""


class NotFoundError(ValidationError):
    """An id passed across a boundary does not resolve to anything."""


class ConflictError(TourneyError):
    """
    The target was already changed by someone else: a bracket match that
    is already decided, or a time slot that is already booked.
    """
