"""Elevator fleet dispatch primitives."""

from .config import FleetConfig
from .dispatcher import Dispatcher
from .elevator import Elevator, ElevatorStatus
from .errors import DispatchError, InvalidFloorError, UnknownElevatorError
from .events import Arrived, CapacityExceeded, Moving, RequestAccepted, Reset
from .fleet import Fleet
from .request import Request

__all__ = [
    "Arrived",
    "CapacityExceeded",
    "DispatchError",
    "Dispatcher",
    "Elevator",
    "ElevatorStatus",
    "Fleet",
    "FleetConfig",
    "InvalidFloorError",
    "Moving",
    "Request",
    "RequestAccepted",
    "Reset",
    "UnknownElevatorError",
]
