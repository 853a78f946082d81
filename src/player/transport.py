# player/transport.py
from __future__ import annotations

import logging
import math
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from core.models import Item
from core.utils import clamp
from player.tone import tone_data_uri

logger = logging.getLogger(__name__)


class TransportError(Exception):
    pass


class PlaybackRejected(TransportError):
    """The playback primitive refused (or was interrupted before) starting."""


class PlaybackInterrupted(PlaybackRejected):
    """A pending start was cancelled by a newer load or a pause."""


class MediaLoadError(TransportError):
    """The playback primitive could not open the assigned source."""


class TransportState(Enum):
    IDLE = auto()
    LOADING = auto()
    PLAYING = auto()
    PAUSED = auto()


@dataclass
class PlaybackState:
    current_item: Optional[Item] = None
    elapsed_seconds: float = 0.0
    total_seconds: float = 0.0
    is_paused: bool = True


@dataclass(frozen=True)
class TimeInfo:
    elapsed: float
    total: float
    percent: float

    @classmethod
    def compute(cls, elapsed: float, total: float) -> "TimeInfo":
        percent = clamp(elapsed / total, 0.0, 1.0) if total > 0 else 0.0
        return cls(elapsed=elapsed, total=total, percent=percent)


TimeHandler = Callable[[TimeInfo], None]
EndHandler = Callable[[], None]


class MediaBackend(Protocol):
    """
    The audio-playback primitive driven by Transport.

    Implementations report back through the attached listener:
      notify_loaded(), notify_started(), notify_time_update(),
      notify_ended(), notify_error(message)
    """

    def attach(self, listener: "Transport") -> None: ...
    def set_source(self, source: str) -> None: ...
    def play(self) -> None: ...  # may raise PlaybackRejected
    def pause(self) -> None: ...
    def position_seconds(self) -> float: ...
    def duration_seconds(self) -> float: ...
    def set_position_seconds(self, seconds: float) -> None: ...


def _finite_or_zero(value) -> float:
    try:
        v = float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


class Transport:
    """
    Playback engine: one live source at a time, single-slot time/end handlers.

    IDLE -> LOADING -> PLAYING <-> PAUSED; end of media lands in PAUSED at 0,
    a new load goes back to LOADING. Items without a source play a short
    synthesized tone.
    """

    def __init__(self, backend: MediaBackend):
        self._backend = backend
        self._state = TransportState.IDLE
        self._playback = PlaybackState()
        self._active_source: str | None = None
        self._tone_uri: str | None = None

        self._pending_load: Future | None = None
        self._pending_plays: list[Future] = []
        self._ended = False

        self._time_handler: TimeHandler | None = None
        self._end_handler: EndHandler | None = None

        backend.attach(self)

    # ----------------------------
    # Read accessors
    # ----------------------------

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def playback(self) -> PlaybackState:
        return self._playback

    @property
    def is_paused(self) -> bool:
        return self._playback.is_paused

    @property
    def active_source(self) -> str | None:
        return self._active_source

    @property
    def tone_source(self) -> str:
        if self._tone_uri is None:
            self._tone_uri = tone_data_uri()
        return self._tone_uri

    def time_info(self) -> TimeInfo:
        return TimeInfo.compute(self._playback.elapsed_seconds, self._playback.total_seconds)

    # ----------------------------
    # Handler registration (last one wins, None clears)
    # ----------------------------

    def on_time(self, callback: TimeHandler | None) -> None:
        self._time_handler = callback

    def on_end(self, callback: EndHandler | None) -> None:
        self._end_handler = callback

    # ----------------------------
    # Commands
    # ----------------------------

    def load(self, item: Item | None) -> Future:
        if self._pending_load is not None and not self._pending_load.done():
            self._pending_load.cancel()
        self._reject_pending_plays("playback interrupted by a new load")

        if item is None or not item.source_ref:
            source = self.tone_source
            logger.debug("No audio source for %s, using synthesized tone", item.id if item else None)
        else:
            source = item.source_ref
            logger.debug("Loading %s", source)

        future: Future = Future()
        self._pending_load = future
        self._playback = PlaybackState(current_item=item)
        self._state = TransportState.LOADING
        self._active_source = source
        self._ended = False

        self._backend.set_source(source)
        return future

    def play(self) -> Future:
        future: Future = Future()

        if self._active_source is None:
            future.set_exception(PlaybackRejected("nothing loaded"))
            return future

        if self._state is TransportState.PLAYING:
            future.set_result(None)
            return future

        self._pending_plays.append(future)
        self._ended = False
        try:
            self._backend.play()
        except PlaybackRejected as e:
            logger.warning("Playback rejected: %s", e)
            self._fail_pending_plays(e)
        return future

    def pause(self) -> None:
        self._backend.pause()
        self._reject_pending_plays("playback paused before it started")
        self._playback.is_paused = True
        if self._state is TransportState.PLAYING:
            self._state = TransportState.PAUSED

    def toggle(self) -> Future | None:
        if not self.is_paused:
            self.pause()
            return None
        return self.play()

    def seek_percent(self, p: float) -> None:
        # p is not clamped; values outside [0, 1] map straight to elapsed time
        total = _finite_or_zero(self._backend.duration_seconds())
        if total <= 0:
            logger.debug("Seek ignored, duration unknown")
            return

        target = p * total
        self._playback.total_seconds = total
        self._playback.elapsed_seconds = target
        self._ended = False
        self._backend.set_position_seconds(target)

    # ----------------------------
    # Backend notifications
    # ----------------------------

    def notify_loaded(self) -> None:
        self._playback.total_seconds = _finite_or_zero(self._backend.duration_seconds())
        if self._state is TransportState.LOADING:
            self._state = TransportState.PAUSED

        future, self._pending_load = self._pending_load, None
        if future is not None and not future.done():
            future.set_result(self._playback.current_item)

    def notify_started(self) -> None:
        self._state = TransportState.PLAYING
        self._playback.is_paused = False

        plays, self._pending_plays = self._pending_plays, []
        for f in plays:
            if not f.done():
                f.set_result(None)

    def notify_time_update(self) -> None:
        self._playback.elapsed_seconds = _finite_or_zero(self._backend.position_seconds())
        self._playback.total_seconds = _finite_or_zero(self._backend.duration_seconds())
        if self._time_handler is not None:
            self._time_handler(self.time_info())

    def notify_ended(self) -> None:
        # Some primitives report end-of-media more than once
        if self._ended:
            return
        self._ended = True

        self._state = TransportState.PAUSED
        self._playback.is_paused = True
        self._playback.elapsed_seconds = 0.0

        if self._end_handler is not None:
            self._end_handler()

    def notify_error(self, message: str) -> None:
        logger.warning("Playback error: %s", message)

        future, self._pending_load = self._pending_load, None
        if future is not None and not future.done():
            future.set_exception(MediaLoadError(message))
            self._state = TransportState.PAUSED

        if self._pending_plays:
            self._fail_pending_plays(PlaybackRejected(message))

        if self._state is TransportState.PLAYING:
            self._state = TransportState.PAUSED
        self._playback.is_paused = True

    # ----------------------------
    # Helpers
    # ----------------------------

    def _reject_pending_plays(self, reason: str) -> None:
        if self._pending_plays:
            self._fail_pending_plays(PlaybackInterrupted(reason))

    def _fail_pending_plays(self, error: PlaybackRejected) -> None:
        plays, self._pending_plays = self._pending_plays, []
        for f in plays:
            if not f.done():
                f.set_exception(error)
