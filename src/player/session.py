# src/player/session.py
from __future__ import annotations

import logging
from concurrent.futures import Future

from PySide6.QtCore import QObject, Signal

from core.models import Catalog, Item
from core.utils import clamp
from player.transport import PlaybackInterrupted, TimeInfo, Transport

logger = logging.getLogger(__name__)


class PlayerSession(QObject):
    """
    Drives Catalog + Transport for the UI: load then play, prev/next,
    auto-advance when a track ends. Views only listen to the signals.
    """

    nowPlayingChanged = Signal(object)  # Item
    progressChanged = Signal(object)    # TimeInfo
    playStateChanged = Signal(bool)     # True while playing
    playbackFailed = Signal(str)

    def __init__(self, catalog: Catalog, transport: Transport, autoplay_next: bool = True):
        super().__init__()
        self.catalog = catalog
        self.transport = transport
        self.autoplay_next = autoplay_next
        self.now_playing: Item | None = None

        self.transport.on_time(self._on_time)
        self.transport.on_end(self._on_end)

    # ------------------ navigation ------------------

    def play_item(self, item: Item | None) -> Future | None:
        if item is None:
            return None

        self.now_playing = item
        loading = self.transport.load(item)
        loading.add_done_callback(self._on_loaded)
        self.nowPlayingChanged.emit(item)
        return loading

    def play_index(self, index: int) -> Future | None:
        self.catalog.set_cursor(index)
        return self.play_item(self.catalog.current())

    def play_current(self) -> Future | None:
        return self.play_item(self.catalog.current())

    def play_next(self) -> Future | None:
        return self.play_item(self.catalog.next())

    def play_previous(self) -> Future | None:
        return self.play_item(self.catalog.previous())

    def select(self, item_id: str) -> Future | None:
        index = self.catalog.index_of(item_id)
        if index is None:
            logger.debug("Unknown item id %s", item_id)
            return None
        return self.play_index(index)

    # ------------------ transport ------------------

    def toggle(self) -> None:
        if self.transport.active_source is None:
            self.play_current()
            return
        started = self.transport.toggle()
        if started is None:
            self.playStateChanged.emit(False)
        else:
            started.add_done_callback(self._on_play_result)

    def seek(self, percent: float) -> None:
        self.transport.seek_percent(clamp(float(percent), 0.0, 1.0))

    # ------------------ callbacks ------------------

    def _on_loaded(self, loading: Future) -> None:
        if loading.cancelled():
            return
        error = loading.exception()
        if error is not None:
            logger.warning("Could not load %s: %s", self.now_playing, error)
            self.playbackFailed.emit(str(error))
            self.playStateChanged.emit(False)
            return
        self.transport.play().add_done_callback(self._on_play_result)

    def _on_play_result(self, started: Future) -> None:
        if started.cancelled():
            return
        error = started.exception()
        if isinstance(error, PlaybackInterrupted):
            logger.debug("Start superseded: %s", error)
            return
        if error is not None:
            logger.warning("Playback rejected: %s", error)
            self.playbackFailed.emit(str(error))
            self.playStateChanged.emit(False)
            return
        self.playStateChanged.emit(True)

    def _on_time(self, info: TimeInfo) -> None:
        self.progressChanged.emit(info)
        self.playStateChanged.emit(not self.transport.is_paused)

    def _on_end(self) -> None:
        self.playStateChanged.emit(False)
        if self.autoplay_next:
            self.play_next()
