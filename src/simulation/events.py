"""Notifications emitted by the dispatcher to registered sinks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union


@dataclass(frozen=True)
class RequestAccepted:
    target_floor: int
    pending: int
    kind: str = field(default="request_accepted", init=False)


@dataclass(frozen=True)
class Moving:
    elevator_id: int
    target_floor: int
    kind: str = field(default="moving", init=False)


@dataclass(frozen=True)
class Arrived:
    elevator_id: int
    floor: int
    load: int
    kind: str = field(default="arrived", init=False)


@dataclass(frozen=True)
class CapacityExceeded:
    """The closest car was full; the request was dropped."""

    elevator_id: int
    target_floor: int
    kind: str = field(default="capacity_exceeded", init=False)


@dataclass(frozen=True)
class Reset:
    kind: str = field(default="reset", init=False)


DispatchEvent = Union[Moving, CapacityExceeded]
Event = Union[RequestAccepted, Moving, Arrived, CapacityExceeded, Reset]
EventSink = Callable[[Event], None]
