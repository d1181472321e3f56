from __future__ import annotations

from enum import Enum


class CharacterKind(str, Enum):
    PLAYER = "player"
    CHASER = "chaser"
    NOMMER = "nommer"
    RUNNER = "runner"


class Coloring(str, Enum):
    PLAIN = "tile"
    TRAIL = "trail"
    TARGET = "target"
    PLAYER = "player"
    CHASER = "chaser"
    NOMMER = "nommer"
    RUNNER = "runner"

    @classmethod
    def for_character(cls, kind: CharacterKind) -> Coloring:
        return cls(kind.value)


class Effect(str, Enum):
    MOVE = "move"
    EAT = "eat"
