from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from typing import Deque, List, Optional, Set

from .config import FleetConfig
from .elevator import Elevator, ElevatorStatus
from .errors import InvalidFloorError, UnknownElevatorError
from .events import (
    Arrived,
    CapacityExceeded,
    DispatchEvent,
    Event,
    EventSink,
    Moving,
    RequestAccepted,
    Reset,
)
from .fleet import Fleet
from .request import Request
from scheduler import Scheduler, get_scheduler

logger = logging.getLogger(__name__)


class Dispatcher:
    """Queues floor requests and assigns them to elevators on demand.

    Requests are only queued by :meth:`submit_request`; nothing moves until
    :meth:`dispatch_pending` drains the queue. Each successful assignment
    runs its movement on the worker pool, so the drain loop never waits for
    an elevator to arrive.
    """

    def __init__(
        self,
        config: Optional[FleetConfig] = None,
        executor: Optional[Executor] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or FleetConfig()
        self.fleet = Fleet.from_config(self.config)
        self.scheduler = scheduler or get_scheduler(self.config.scheduler_name)
        self.dispatched_count: int = 0
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="elevator-move",
        )
        self._pending: Deque[Request] = deque()
        self._lock = threading.RLock()
        self._cancel_token = threading.Event()
        self._movements: Set[Future] = set()
        self._movements_lock = threading.Lock()
        self._sinks: List[EventSink] = []

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def on_event(self, callback: EventSink) -> None:
        self._sinks.append(callback)

    def submit_request(self, floor: int) -> Request:
        if isinstance(floor, bool) or not isinstance(floor, int):
            raise InvalidFloorError(floor, self.config.num_floors)
        if not 0 <= floor < self.config.num_floors:
            raise InvalidFloorError(floor, self.config.num_floors)

        request = Request(target_floor=floor)
        with self._lock:
            self._pending.append(request)
            logger.info("Requested floor %d (%d pending)", floor, len(self._pending))
            self._emit(RequestAccepted(target_floor=floor, pending=len(self._pending)))
        return request

    def dispatch_pending(self) -> List[DispatchEvent]:
        events: List[DispatchEvent] = []
        with self._lock:
            while self._pending:
                request = self._pending.popleft()
                events.append(self._dispatch(request))
        return events

    def reset(self) -> None:
        with self._lock:
            # Tasks spawned before this point see their token set and skip the move.
            self._cancel_token.set()
            self._cancel_token = threading.Event()
            self._pending.clear()
            self.fleet.reset()
            self.dispatched_count = 0
            logger.info("Simulation reset")
            self._emit(Reset())

    def elevator_status(self, elevator_id: int) -> ElevatorStatus:
        elevator = self.fleet.get(elevator_id)
        if elevator is None:
            raise UnknownElevatorError(elevator_id)
        return elevator.status()

    def statuses(self) -> List[ElevatorStatus]:
        return self.fleet.statuses()

    def wait_for_movements(self, timeout: Optional[float] = None) -> bool:
        """Block until every spawned movement has finished.

        Returns ``False`` if some movement was still running after ``timeout``
        seconds.
        """
        with self._movements_lock:
            in_flight = list(self._movements)
        if not in_flight:
            return True
        _, not_done = wait_for_futures(in_flight, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _dispatch(self, request: Request) -> DispatchEvent:
        choice = self.scheduler.select_elevator(self.fleet.snapshot(), request.target_floor)
        elevator = self.fleet[choice.index]

        if not elevator.try_board():
            logger.info("Elevator %d is at full capacity", elevator.elevator_id)
            rejected = CapacityExceeded(
                elevator_id=elevator.elevator_id,
                target_floor=request.target_floor,
            )
            self._emit(rejected)
            return rejected

        self.dispatched_count += 1
        moving = Moving(elevator_id=elevator.elevator_id, target_floor=request.target_floor)
        logger.info("Elevator %d moving to floor %d", elevator.elevator_id, request.target_floor)
        self._emit(moving)
        self._spawn_movement(elevator, request.target_floor)
        return moving

    def _spawn_movement(self, elevator: Elevator, floor: int) -> None:
        future = self._executor.submit(self._move, elevator, floor, self._cancel_token)
        with self._movements_lock:
            self._movements.add(future)
        future.add_done_callback(self._movement_finished)

    def _move(self, elevator: Elevator, floor: int, cancelled: threading.Event) -> None:
        with elevator.lock:
            if cancelled.is_set():
                logger.debug(
                    "Skipping move of elevator %d to floor %d after reset",
                    elevator.elevator_id,
                    floor,
                )
                return
            elevator.move_to(floor)
            logger.info("Elevator %d has arrived at floor %d", elevator.elevator_id, floor)
            self._emit(
                Arrived(
                    elevator_id=elevator.elevator_id,
                    floor=floor,
                    load=elevator.current_load,
                )
            )
            elevator.alight()

    def _movement_finished(self, future: Future) -> None:
        with self._movements_lock:
            self._movements.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.error("Movement task failed", exc_info=future.exception())

    def _emit(self, event: Event) -> None:
        for callback in list(self._sinks):
            try:
                callback(event)
            except Exception:
                logger.exception("Event sink failed while handling %s", event.kind)
