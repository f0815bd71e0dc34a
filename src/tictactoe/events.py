"""Logical input events consumed by the App controller."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Key(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CONFIRM = "confirm"
    RESTART = "restart"
    QUIT = "quit"
    OTHER = "other"


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


Event = Union[Key, Resize]
