"""
Tests for the Transport state machine.

A FakeBackend (see conftest) stands in for QMediaPlayer and lets each test
fire loaded / started / time-update / ended / error notifications by hand.
"""
import pytest

from core.models import Item
from player.tone import tone_data_uri
from player.transport import (
    MediaLoadError,
    PlaybackInterrupted,
    PlaybackRejected,
    TimeInfo,
    TransportState,
)

SONG = Item(id="s", title="Song", source_ref="music/song.mp3")
SILENT = Item(id="t", title="No file")


# =============================================================================
# Load
# =============================================================================

class TestLoad:

    def test_initial_state(self, transport):
        assert transport.state is TransportState.IDLE
        assert transport.is_paused is True
        assert transport.active_source is None
        assert transport.playback.current_item is None

    def test_load_with_source_uses_it_verbatim(self, transport, backend):
        transport.load(SONG)
        assert transport.active_source == "music/song.mp3"
        assert backend.sources == ["music/song.mp3"]
        assert transport.state is TransportState.LOADING

    def test_load_without_source_uses_tone(self, transport, backend):
        transport.load(SILENT)
        assert transport.active_source == tone_data_uri()
        assert backend.sources == [tone_data_uri()]

    def test_load_none_uses_tone(self, transport):
        transport.load(None)
        assert transport.active_source == tone_data_uri()
        assert transport.playback.current_item is None

    def test_load_resolves_when_backend_reports_loaded(self, transport, backend):
        future = transport.load(SONG)
        assert not future.done()
        backend.finish_loading(duration=120)
        assert future.result(timeout=0) is SONG
        assert transport.state is TransportState.PAUSED
        assert transport.playback.total_seconds == 120

    def test_load_resets_playback_state(self, transport, backend):
        transport.load(SONG)
        backend.finish_loading(duration=120)
        backend.tick(30)
        old_state = transport.playback

        transport.load(SILENT)
        assert transport.playback is not old_state
        assert transport.playback.elapsed_seconds == 0
        assert transport.playback.current_item is SILENT

    def test_new_load_cancels_pending_one(self, transport, backend):
        first = transport.load(SONG)
        second = transport.load(SILENT)
        assert first.cancelled()
        backend.finish_loading(duration=0.25)
        assert second.result(timeout=0) is SILENT

    def test_backend_error_fails_load(self, transport, backend):
        future = transport.load(SONG)
        backend.fail("no such file")
        with pytest.raises(MediaLoadError):
            future.result(timeout=0)
        assert transport.state is TransportState.PAUSED


# =============================================================================
# Play / pause / toggle
# =============================================================================

class TestPlayback:

    def test_play_without_load_is_rejected(self, transport, backend):
        future = transport.play()
        with pytest.raises(PlaybackRejected):
            future.result(timeout=0)
        assert backend.play_calls == 0

    def test_play_resolves_on_start(self, transport, backend):
        transport.load(SONG)
        backend.finish_loading(duration=10)
        future = transport.play()
        assert backend.play_calls == 1
        assert not future.done()

        backend.start()
        assert future.result(timeout=0) is None
        assert transport.state is TransportState.PLAYING
        assert transport.is_paused is False

    def test_play_before_load_completes(self, transport, backend):
        loading = transport.load(SONG)
        started = transport.play()
        backend.start()
        backend.finish_loading(duration=10)
        assert started.done() and loading.done()
        assert transport.state is TransportState.PLAYING

    def test_backend_refusal_is_reported(self, transport, backend):
        backend.reject_play = "autoplay blocked"
        transport.load(SONG)
        future = transport.play()
        with pytest.raises(PlaybackRejected, match="autoplay blocked"):
            future.result(timeout=0)
        assert transport.is_paused is True

    def test_new_load_interrupts_pending_play(self, transport, backend):
        transport.load(SONG)
        started = transport.play()
        transport.load(SILENT)
        with pytest.raises(PlaybackInterrupted):
            started.result(timeout=0)

    def test_play_while_playing_resolves_immediately(self, transport, backend):
        transport.load(SONG)
        transport.play()
        backend.start()
        assert transport.play().result(timeout=0) is None
        assert backend.play_calls == 1

    def test_pause_is_idempotent(self, transport, backend):
        transport.load(SONG)
        transport.play()
        backend.start()
        transport.pause()
        transport.pause()
        assert transport.is_paused is True
        assert transport.state is TransportState.PAUSED

    def test_toggle(self, transport, backend):
        transport.load(SONG)
        backend.finish_loading(duration=10)

        started = transport.toggle()
        assert started is not None
        backend.start()
        assert transport.is_paused is False

        assert transport.toggle() is None
        assert transport.is_paused is True
        assert backend.pause_calls == 1


# =============================================================================
# Seek and time updates
# =============================================================================

class TestTime:

    def test_seek_percent_maps_to_duration(self, transport, backend):
        transport.load(SONG)
        backend.finish_loading(duration=120)
        transport.seek_percent(0.5)
        assert transport.playback.elapsed_seconds == 60
        assert backend.position == 60

    def test_seek_ignored_without_duration(self, transport, backend):
        transport.load(SONG)
        transport.playback.elapsed_seconds = 3
        transport.seek_percent(0.5)
        assert transport.playback.elapsed_seconds == 3
        assert backend.position == 0

    def test_seek_out_of_range_is_not_clamped(self, transport, backend):
        transport.load(SONG)
        backend.finish_loading(duration=100)
        transport.seek_percent(1.5)
        assert transport.playback.elapsed_seconds == 150
        assert transport.time_info().percent == 1.0

    def test_time_handler_receives_info(self, transport, backend):
        seen = []
        transport.on_time(seen.append)
        transport.load(SONG)
        backend.finish_loading(duration=200)
        backend.tick(50)
        assert seen == [TimeInfo(elapsed=50, total=200, percent=0.25)]

    def test_percent_zero_when_duration_unknown(self, transport, backend):
        seen = []
        transport.on_time(seen.append)
        transport.load(SONG)
        backend.tick(42)
        assert seen[-1].percent == 0.0
        assert seen[-1].elapsed == 42

    @pytest.mark.parametrize("elapsed,total,expected", [
        (-5, 10, 0.0),
        (0, 10, 0.0),
        (5, 10, 0.5),
        (15, 10, 1.0),
        (7, 0, 0.0),
    ])
    def test_percent_clamped(self, elapsed, total, expected):
        assert TimeInfo.compute(elapsed, total).percent == expected

    def test_last_time_handler_wins(self, transport, backend):
        first, second = [], []
        transport.on_time(first.append)
        transport.on_time(second.append)
        transport.load(SONG)
        backend.tick(1)
        assert first == []
        assert len(second) == 1

        transport.on_time(None)
        backend.tick(2)
        assert len(second) == 1


# =============================================================================
# End of media
# =============================================================================

class TestEnd:

    def test_end_handler_called_once_per_completion(self, transport, backend):
        ends = []
        transport.on_end(lambda: ends.append(True))
        transport.load(SONG)
        transport.play()
        backend.start()
        backend.tick(9)

        backend.end()
        backend.end()
        assert ends == [True]
        assert transport.state is TransportState.PAUSED
        assert transport.playback.elapsed_seconds == 0
        assert transport.is_paused is True

        transport.play()
        backend.start()
        backend.end()
        assert ends == [True, True]

    def test_last_end_handler_wins(self, transport, backend):
        calls = []
        transport.on_end(lambda: calls.append("first"))
        transport.on_end(lambda: calls.append("second"))
        transport.load(SONG)
        backend.end()
        assert calls == ["second"]

    def test_error_while_playing_pauses(self, transport, backend):
        transport.load(SONG)
        transport.play()
        backend.start()
        backend.fail("device lost")
        assert transport.is_paused is True
        assert transport.state is TransportState.PAUSED

    def test_error_before_start_rejects_play(self, transport, backend):
        transport.load(SONG)
        backend.finish_loading(duration=10)
        started = transport.play()
        backend.fail("decoder crashed")
        with pytest.raises(PlaybackRejected, match="decoder crashed") as info:
            started.result(timeout=0)
        assert not isinstance(info.value, PlaybackInterrupted)
