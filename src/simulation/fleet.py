from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .config import FleetConfig
from .elevator import Elevator, ElevatorStatus
from scheduler import ElevatorSnapshot


@dataclass
class Fleet:
    """Ordered, fixed-size group of elevators shared by all dispatch work."""

    elevators: List[Elevator] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: FleetConfig) -> "Fleet":
        return cls(
            elevators=[
                Elevator(elevator_id=i + 1, capacity=config.capacity)
                for i in range(config.num_elevators)
            ]
        )

    def __len__(self) -> int:
        return len(self.elevators)

    def __iter__(self) -> Iterator[Elevator]:
        return iter(self.elevators)

    def __getitem__(self, index: int) -> Elevator:
        return self.elevators[index]

    def get(self, elevator_id: int) -> Optional[Elevator]:
        for elevator in self.elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        return None

    def snapshot(self) -> List[ElevatorSnapshot]:
        snapshots: List[ElevatorSnapshot] = []
        for index, elevator in enumerate(self.elevators):
            status = elevator.status()
            snapshots.append(
                ElevatorSnapshot(
                    index=index,
                    elevator_id=status.elevator_id,
                    floor=status.floor,
                    load=status.load,
                    capacity=status.capacity,
                )
            )
        return snapshots

    def statuses(self) -> List[ElevatorStatus]:
        return [elevator.status() for elevator in self.elevators]

    def reset(self) -> None:
        for elevator in self.elevators:
            elevator.reset()
