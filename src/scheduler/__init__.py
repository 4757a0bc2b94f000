from __future__ import annotations

from typing import Dict, Type

from .interface import ElevatorSnapshot, Scheduler
from .nearest import NearestElevatorScheduler

__all__ = [
    "ElevatorSnapshot",
    "NearestElevatorScheduler",
    "Scheduler",
    "get_scheduler",
]


SCHEDULER_REGISTRY: Dict[str, Type[Scheduler]] = {
    "nearest": NearestElevatorScheduler,
}


def get_scheduler(name: str, **kwargs) -> Scheduler:
    cls = SCHEDULER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown scheduler '{name}'. Available: {', '.join(SCHEDULER_REGISTRY)}")
    return cls(**kwargs)
