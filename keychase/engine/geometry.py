from __future__ import annotations

import math
import random
from dataclasses import dataclass


def _sign(value: int) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


@dataclass(frozen=True)
class Pos:
    """Integer grid position (or offset between two positions).

    All arithmetic returns a new Pos. Scalar multiplication rounds each
    component so positions stay addressable.
    """

    x: int = 0
    y: int = 0

    def __add__(self, other: Pos) -> Pos:
        return Pos(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Pos) -> Pos:
        return Pos(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Pos:
        return Pos(round(self.x * scalar), round(self.y * scalar))

    __rmul__ = __mul__

    def abs(self) -> Pos:
        return Pos(abs(self.x), abs(self.y))

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def square_norm(self) -> int:
        return self.x * self.x + self.y * self.y

    def linear_norm(self) -> int:
        return abs(self.x) + abs(self.y)

    def trunc(self) -> Pos:
        """Truncate to a unit step (each component in {-1, 0, 1})."""
        return Pos(_sign(self.x), _sign(self.y))

    def in_bounds(self, width: int) -> bool:
        return 0 <= self.x < width and 0 <= self.y < width

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    @staticmethod
    def corners(width: int, padding: int) -> list[Pos]:
        """Return the four cells inset ``padding`` cells from each grid corner."""
        padding = max(0, min(padding, (width - 1) // 2))
        far = width - 1 - padding
        return [
            Pos(padding, padding),
            Pos(far, padding),
            Pos(padding, far),
            Pos(far, far),
        ]

    @staticmethod
    def rand(radius: int, rng: random.Random) -> Pos:
        return Pos(rng.randint(-radius, radius), rng.randint(-radius, radius))
