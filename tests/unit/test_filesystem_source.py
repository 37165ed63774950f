import time
from types import SimpleNamespace

from watchdog.events import FileClosedEvent, FileCreatedEvent

from filecourier.errors import SourceError
from filecourier.watchers.filesystem import EventSource


class FakeObserver:
    """Stands in for a watchdog observer thread."""

    def __init__(self, alive: bool = True):
        self.alive = alive
        self.scheduled = []
        self.started = False
        self.stopped = False

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True
        self.alive = False

    def join(self, timeout=None):
        pass

    def is_alive(self):
        return self.alive


class FakeEmitter:
    """Stands in for the per-watch emitter thread of an observer."""

    def __init__(self, path, alive: bool = True):
        self.watch = SimpleNamespace(path=str(path))
        self.alive = alive

    def is_alive(self):
        return self.alive


def test_start_schedules_recursive_watch(tmp_path):
    observer = FakeObserver()
    source = EventSource(tmp_path, observer=observer)

    source.start()

    assert observer.started
    assert observer.scheduled == [(source.handler, str(tmp_path), True)]


def test_events_come_out_in_arrival_order(tmp_path):
    observer = FakeObserver(alive=False)
    source = EventSource(tmp_path, poll_interval=0.01, observer=observer)
    first = FileCreatedEvent(str(tmp_path / "a.txt"))
    second = FileClosedEvent(str(tmp_path / "a.txt"))

    source.handler.dispatch(first)
    source.handler.dispatch(second)

    items = list(source)

    assert items[:2] == [first, second]
    # observer was dead once the queue drained
    assert isinstance(items[2], SourceError)
    assert len(items) == 3


def test_dead_emitter_ends_iteration_with_error(tmp_path):
    observer = FakeObserver()
    observer.emitters = {FakeEmitter(tmp_path, alive=False)}
    source = EventSource(tmp_path, poll_interval=0.01, observer=observer)
    event = FileClosedEvent(str(tmp_path / "a.txt"))
    source.handler.dispatch(event)

    items = list(source)

    assert items[0] is event
    assert isinstance(items[1], SourceError)
    assert str(tmp_path) in str(items[1])
    assert "emitter" in str(items[1])
    assert len(items) == 2


def test_live_emitters_keep_the_source_open(tmp_path):
    observer = FakeObserver()
    observer.emitters = {FakeEmitter(tmp_path)}
    source = EventSource(tmp_path, poll_interval=0.01, observer=observer)
    iterator = iter(source)
    source.handler.dispatch(FileClosedEvent(str(tmp_path / "a.txt")))

    assert isinstance(next(iterator), FileClosedEvent)
    source.close()
    assert list(iterator) == []


def test_close_ends_iteration(tmp_path):
    observer = FakeObserver()
    source = EventSource(tmp_path, poll_interval=0.01, observer=observer)
    source.close()

    started = time.monotonic()
    assert list(source) == []
    assert time.monotonic() - started < 1

    source.stop()
    assert observer.stopped
    assert source.closed
