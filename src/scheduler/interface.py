from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Lightweight view of an elevator at assignment time."""

    index: int
    elevator_id: int
    floor: int
    load: int
    capacity: int

    @property
    def available_capacity(self) -> int:
        return max(0, self.capacity - self.load)


class Scheduler(Protocol):
    """Strategy interface for picking the car that serves a floor request."""

    def select_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        target_floor: int,
    ) -> ElevatorSnapshot:
        """
        Return the snapshot of the elevator that should take the request.

        Implementations must be deterministic for a given fleet state and
        raise ``ValueError`` when ``elevators`` is empty.
        """
        ...
