"""Shared test fixtures for spatialdocs tests."""

import os

import pytest
from PySide6.QtWidgets import QApplication

from spatialdocs.controller.board import Board
from spatialdocs.model.geometry import Viewport
from spatialdocs.model.records import DocumentRecord
from spatialdocs.model.state import BoardStore


class ManualHandle:
    def __init__(self, due: int, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by hand: time only moves on advance()."""

    def __init__(self):
        self.now = 0
        self._handles: list[ManualHandle] = []

    def call_later(self, delay_ms, callback):
        handle = ManualHandle(self.now + max(int(delay_ms), 0), callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self._handles if h.active]

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [h for h in self.pending if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.now = max(self.now, handle.due)
            handle.fired = True
            handle.callback()
        self.now = target

    def run_all(self) -> None:
        for _ in range(1000):
            pending = self.pending
            if not pending:
                return
            self.advance(max(h.due for h in pending) - self.now)
        raise RuntimeError("timers keep rescheduling themselves")


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Signals, QSettings and the graphics items need an application object."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def viewport():
    return Viewport(1000.0, 1000.0)


@pytest.fixture()
def store(viewport):
    return BoardStore(viewport)


def make_record(record_id, name, x=0.0, y=0.0, width=200.0, height=280.0, pages=None, actions=None, **kwargs):
    return DocumentRecord(
        id=record_id,
        name=name,
        label=name.replace("-", " ").title(),
        pages=list(pages) if pages is not None else [f"/pages/{name}-1.png", f"/pages/{name}-2.png"],
        width=width,
        height=height,
        x=x,
        y=y,
        actions=list(actions) if actions is not None else [],
        **kwargs,
    )


@pytest.fixture()
def records():
    return [
        make_record(1, "invoice", x=100.0, y=100.0, actions=["Send to Slack channel", "Archive"]),
        make_record(2, "lease", x=500.0, y=600.0),
        make_record(3, "notes", x=700.0, y=300.0, actions=["Archive"]),
    ]


@pytest.fixture()
def board(store, scheduler, records):
    board = Board(store, scheduler)
    board.populate(records)
    return board


@pytest.fixture()
def tile_ids(board):
    """Tile ids by record name."""
    return {tile.record.name: tile.tile_id for tile in board.store.tiles}


class SignalSpy:
    """Collects the arguments of every emission of a Qt signal."""

    def __init__(self, signal):
        self.calls = []
        signal.connect(self._record)

    def _record(self, *args):
        self.calls.append(args)

    def __len__(self):
        return len(self.calls)


@pytest.fixture()
def spy():
    return SignalSpy


@pytest.fixture()
def record_factory():
    return make_record
