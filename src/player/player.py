# src/player/player.py
from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QObject, QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from core.utils import clamp
from player.tone import decode_data_uri, is_data_uri
from player.transport import PlaybackRejected

logger = logging.getLogger(__name__)


def source_to_url(source: str) -> QUrl:
    """
    URLs with a scheme (http, file, qrc...) are kept; anything else is a local path.
    Windows drive letters ("C:/...") parse as a scheme, so they count as paths.
    """
    url = QUrl(source)
    scheme = url.scheme()
    if scheme and len(scheme) > 1:
        return url
    return QUrl.fromLocalFile(os.path.abspath(source))


class QtMediaBackend(QObject):
    """
    QMediaPlayer + QAudioOutput behind the Transport backend contract.
    Data URIs are decoded into a QBuffer and fed through setSourceDevice.
    """

    def __init__(self, volume: float = 0.7, parent: Optional[QObject] = None):
        super().__init__(parent)

        self._listener = None
        self._buffer: Optional[QBuffer] = None

        self.audio = QAudioOutput(self)
        self.media = QMediaPlayer(self)
        self.media.setAudioOutput(self.audio)

        # Default volume (0.0 - 1.0)
        self._volume_0_to_1: float = clamp(float(volume), 0.0, 1.0)
        self.audio.setVolume(self._volume_0_to_1)

        # Qt signal forwarding
        self.media.positionChanged.connect(self._on_position)
        self.media.durationChanged.connect(self._on_position)
        self.media.playbackStateChanged.connect(self._on_qt_state_changed)
        self.media.mediaStatusChanged.connect(self._on_qt_media_status)
        self.media.errorOccurred.connect(self._on_qt_error)

    def attach(self, listener) -> None:
        self._listener = listener

    # ----------------------------
    # Qt handlers
    # ----------------------------

    def _on_position(self, _value: int) -> None:
        if self._listener:
            self._listener.notify_time_update()

    def _on_qt_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState and self._listener:
            self._listener.notify_started()

    def _on_qt_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if not self._listener:
            return

        if status == QMediaPlayer.MediaStatus.LoadedMedia:
            self._listener.notify_loaded()
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._listener.notify_ended()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._listener.notify_error(self.media.errorString() or "invalid media")

    def _on_qt_error(self, error: QMediaPlayer.Error, message: str) -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        if self._listener:
            self._listener.notify_error(message or str(error))

    # ----------------------------
    # Backend contract
    # ----------------------------

    def set_source(self, source: str) -> None:
        old_buffer, self._buffer = self._buffer, None

        if is_data_uri(source):
            mime, payload = decode_data_uri(source)
            buf = QBuffer(self)
            buf.setData(QByteArray(payload))
            buf.open(QIODevice.OpenModeFlag.ReadOnly)
            self._buffer = buf
            ext = "wav" if "wav" in mime else "bin"
            self.media.setSourceDevice(buf, QUrl(f"memory.{ext}"))
        else:
            self.media.setSource(source_to_url(source))

        # The previous device must outlive the source switch
        if old_buffer is not None:
            old_buffer.close()
            old_buffer.deleteLater()

    def play(self) -> None:
        if self.media.source().isEmpty() and self._buffer is None:
            raise PlaybackRejected("no media assigned")
        if self.media.mediaStatus() == QMediaPlayer.MediaStatus.InvalidMedia:
            raise PlaybackRejected(self.media.errorString() or "invalid media")
        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def position_seconds(self) -> float:
        return max(0, int(self.media.position())) / 1000.0

    def duration_seconds(self) -> float:
        return max(0, int(self.media.duration())) / 1000.0

    def set_position_seconds(self, seconds: float) -> None:
        self.media.setPosition(int(round(seconds * 1000)))

    def set_volume(self, volume_0_to_1: float) -> None:
        v = clamp(float(volume_0_to_1), 0.0, 1.0)
        self._volume_0_to_1 = v
        self.audio.setVolume(v)

    def backend_name(self) -> str:
        return "qt-multimedia"
