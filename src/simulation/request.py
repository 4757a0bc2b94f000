from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Request:
    """A floor call waiting in the dispatcher's queue."""

    target_floor: int
    created_at: float = field(default_factory=time.time)
