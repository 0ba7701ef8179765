"""Typed event definitions (dataclasses)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class EventType(Enum):
    # Physical input
    KEY_DOWN = auto()
    KEY_UP = auto()
    # Candidate box lifecycle
    CANDIDATE_SELECTED = auto()
    CANDIDATE_BOX_CLOSED = auto()


@dataclass
class Event:
    type: EventType
    data: Any
    timestamp: float = 0.0


@dataclass
class KeyboardEvent:
    """Physical key event as delivered by the host.

    ``code`` names the physical key position (``"KeyA"``, ``"ShiftLeft"``),
    ``key`` the produced value (``"a"``, ``"Enter"``). ``repeat`` is set on
    auto-repeated presses of a held key.
    """

    code: str = ""
    key: str = ""
    key_code: int = 0
    shift_key: bool = False
    ctrl_key: bool = False
    alt_key: bool = False
    meta_key: bool = False
    repeat: bool = False
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_immediate_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass
class PointerEvent:
    """Synthesized click/touch event handed to selection callbacks."""

    type: str = "click"
    target: Any = None
