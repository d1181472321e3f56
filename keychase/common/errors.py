from __future__ import annotations


class InvalidDistribution(ValueError):
    """Raised when a weighted choice has no positive weight to draw from."""


class IllegalMove(RuntimeError):
    """Raised when a character is moved onto a tile held by another character."""
