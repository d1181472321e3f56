from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class KeyRequest(BaseModel):
    key: str = Field(min_length=1, max_length=1)


class ClientMessage(BaseModel):
    type: Literal["key", "pause", "restart"]
    key: Optional[str] = Field(default=None, min_length=1, max_length=1)


class TileView(BaseModel):
    key: str
    coloring: str


class GameStateResponse(BaseModel):
    width: int
    language: str
    grid: List[List[TileView]]
    score: int
    losses: int
    heat: float
    paused: bool
    game_over: bool
    move_str: str
    characters: Dict[str, Tuple[int, int]]
    targets: List[Tuple[int, int]]
    trail: List[Tuple[int, int]] = Field(default_factory=list)
    mean_move_seconds: Optional[float] = None
    effects: List[str] = Field(default_factory=list)
