from __future__ import annotations


class DispatchError(Exception):
    """Base class for errors raised by the dispatcher."""


class InvalidFloorError(DispatchError, ValueError):
    def __init__(self, floor: object, num_floors: int) -> None:
        self.floor = floor
        self.num_floors = num_floors
        super().__init__(
            f"Invalid floor {floor!r}. Please enter a floor between 0 and {num_floors - 1}."
        )


class UnknownElevatorError(DispatchError, LookupError):
    def __init__(self, elevator_id: int) -> None:
        self.elevator_id = elevator_id
        super().__init__(f"No elevator with id {elevator_id}")
