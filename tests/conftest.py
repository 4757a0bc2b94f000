from concurrent.futures import Executor, Future

import pytest

from simulation import Dispatcher, FleetConfig


class DeferredExecutor(Executor):
    # Holds submitted movements until the test runs them
    def __init__(self):
        self.queued = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.queued.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        while self.queued:
            future, fn, args, kwargs = self.queued.pop(0)
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)


class InlineExecutor(Executor):
    # Runs each movement to completion inside submit()
    def submit(self, fn, *args, **kwargs):
        future = Future()
        future.set_running_or_notify_cancel()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


@pytest.fixture
def deferred():
    return DeferredExecutor()


@pytest.fixture
def events():
    return []


@pytest.fixture
def make_dispatcher(events):
    created = []

    def _make(executor=None, **settings):
        dispatcher = Dispatcher(FleetConfig(**settings), executor=executor)
        dispatcher.on_event(events.append)
        created.append(dispatcher)
        return dispatcher

    yield _make
    for dispatcher in created:
        dispatcher.shutdown()
