"""pytest configuration: shared fakes and a headless Qt core application."""

import pytest

from core.models import Catalog, Item


class FakeBackend:
    """In-memory stand-in for QMediaPlayer; tests drive its notifications."""

    def __init__(self):
        self.listener = None
        self.sources: list[str] = []
        self.play_calls = 0
        self.pause_calls = 0
        self.position = 0.0
        self.duration = 0.0
        self.reject_play: str | None = None

    def attach(self, listener):
        self.listener = listener

    def set_source(self, source):
        self.sources.append(source)
        self.position = 0.0
        self.duration = 0.0

    def play(self):
        from player.transport import PlaybackRejected

        self.play_calls += 1
        if self.reject_play:
            raise PlaybackRejected(self.reject_play)

    def pause(self):
        self.pause_calls += 1

    def position_seconds(self):
        return self.position

    def duration_seconds(self):
        return self.duration

    def set_position_seconds(self, seconds):
        self.position = seconds

    # --- simulated primitive events ---
    def finish_loading(self, duration=0.0):
        self.duration = duration
        self.listener.notify_loaded()

    def start(self):
        self.listener.notify_started()

    def tick(self, position):
        self.position = position
        self.listener.notify_time_update()

    def end(self):
        self.listener.notify_ended()

    def fail(self, message="boom"):
        self.listener.notify_error(message)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def transport(backend):
    from player.transport import Transport

    return Transport(backend)


@pytest.fixture
def abc_items():
    return [
        Item(id="a", title="A", source_ref="a.mp3"),
        Item(id="b", title="B", source_ref="b.mp3"),
        Item(id="c", title="C", source_ref=""),
    ]


@pytest.fixture
def abc_catalog(abc_items):
    return Catalog(abc_items)


@pytest.fixture(scope="session")
def qt_core_app():
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
