from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class FleetConfig:
    """Fixed construction-time settings for a dispatch simulation."""

    num_elevators: int = 2
    num_floors: int = 10
    capacity: int = 5
    max_workers: int = 4
    scheduler_name: str = "nearest"

    def __post_init__(self) -> None:
        for name in ("num_elevators", "num_floors", "capacity", "max_workers"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FleetConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown fleet settings: {', '.join(sorted(unknown))}")
        return cls(**dict(data))
