from __future__ import annotations

from typing import Sequence

from .interface import ElevatorSnapshot


class NearestElevatorScheduler:
    """Picks the car closest to the requested floor.

    Cars are scanned in fleet order and a later car only wins when it is
    strictly closer, so ties go to the lowest index. Load is ignored here;
    the dispatcher applies the capacity gate after selection.
    """

    def select_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        target_floor: int,
    ) -> ElevatorSnapshot:
        if not elevators:
            raise ValueError("Cannot select from an empty fleet")
        closest = elevators[0]
        for candidate in elevators[1:]:
            if abs(candidate.floor - target_floor) < abs(closest.floor - target_floor):
                closest = candidate
        return closest
