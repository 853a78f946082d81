from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout
from PySide6.QtGui import QShortcut, QKeySequence

from ui.player_bar import PlayerBar
from ui.widgets.track_grid import TrackGridWidget

APP_TITLE = "Player"


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle(APP_TITLE)
        self.resize(900, 600)
        self.app_state = app_state
        self.session = app_state.session

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.track_grid = TrackGridWidget(self.app_state.catalog, parent=self)
        self.layout.addWidget(self.track_grid, 1)

        self.player_bar = PlayerBar(self.session, self)
        self.layout.addWidget(self.player_bar)

        self.app_state.notification.connect(self._on_notify)

        if self.session:
            self.track_grid.trackActivated.connect(self.session.play_index)
            self.session.nowPlayingChanged.connect(self._on_now_playing)
            self.session.playStateChanged.connect(self._on_play_state)
            self.session.playbackFailed.connect(
                lambda msg: self.app_state.notify(f"Playback failed: {msg}", "error")
            )

            # --- Shortcuts ---
            QShortcut(QKeySequence("Space"), self, activated=self.session.toggle)
            QShortcut(QKeySequence("Right"), self, activated=self.session.play_next)
            QShortcut(QKeySequence("Left"), self, activated=self.session.play_previous)

    # ------------------ session + notifications ------------------
    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()

    def _on_notify(self, n):
        # n is core.state.Notify
        msg = getattr(n, "message", "") or ""
        if not msg:
            return
        timeout = 0 if n.notify_type == "error" else 4000
        self.statusBar().showMessage(msg, timeout)

    def _on_now_playing(self, item):
        self.track_grid.set_current(item.id if item else None)
        self._update_title(item, playing=True)

    def _on_play_state(self, playing: bool):
        self._update_title(self.session.now_playing, playing)

    def _update_title(self, item, playing: bool):
        if item is None:
            self.setWindowTitle(APP_TITLE)
            return
        marker = "▶ " if playing else ""
        self.setWindowTitle(f"{marker}{item.title} — {APP_TITLE}")
