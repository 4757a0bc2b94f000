from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ElevatorStatus:
    """Read-only view of an elevator for rendering."""

    elevator_id: int
    floor: int
    load: int
    capacity: int


@dataclass
class Elevator:
    """A single car: position, occupancy and a lock guarding both.

    Mutators take ``lock`` themselves. Movement tasks also hold it across a
    whole move so that two tasks on the same car never interleave.
    """

    elevator_id: int
    capacity: int
    current_floor: int = 0
    current_load: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError(f"Elevator capacity must be positive, got {self.capacity}")

    def move_to(self, floor: int) -> None:
        # Floor bounds are checked by the dispatcher when the request is submitted.
        with self.lock:
            self.current_floor = floor

    def try_board(self) -> bool:
        with self.lock:
            if self.current_load < self.capacity:
                self.current_load += 1
                return True
            return False

    def alight(self) -> None:
        with self.lock:
            if self.current_load > 0:
                self.current_load -= 1

    def reset(self) -> None:
        with self.lock:
            self.current_floor = 0
            self.current_load = 0

    def is_full(self) -> bool:
        return self.current_load >= self.capacity

    def status(self) -> ElevatorStatus:
        with self.lock:
            return ElevatorStatus(
                elevator_id=self.elevator_id,
                floor=self.current_floor,
                load=self.current_load,
                capacity=self.capacity,
            )
