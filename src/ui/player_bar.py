# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QIcon, QPixmap, QPainter
from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QToolButton, QSlider
from PySide6.QtCore import QByteArray
from PySide6.QtSvg import QSvgRenderer

from core.utils import format_time

SLIDER_STEPS = 1000

def _svg_icon(path_d: str, size: int = 20, color: str = "#e5e7eb") -> QIcon:
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
      <path d="{path_d}" fill="{color}"/>
    </svg>
    """.strip()

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    return QIcon(pm)


SVG_PREV = "M6 18V6h2v12H6zm3.5-6L18 6v12l-8.5-6z"
SVG_NEXT = "M16 6v12h2V6h-2zM6 18l8.5-6L6 6v12z"
SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"

class PlayerBar(QWidget):
    """Transport controls: prev / play-pause / next, progress and time."""

    def __init__(self, session, parent=None):
        super().__init__(parent)
        self.session = session

        self._dragging = False
        self._total_s = 0.0

        root = QHBoxLayout(self)
        root.setContentsMargins(8, 6, 8, 6)
        root.setSpacing(10)

        self.btn_prev = self._tool_button("BtnPrev", SVG_PREV, 20, "Previous")
        self.btn_play = self._tool_button("BtnPlay", SVG_PLAY, 22, "Play")
        self.btn_next = self._tool_button("BtnNext", SVG_NEXT, 20, "Next")

        self.lbl_title = QLabel("Nothing playing")
        self.lbl_title.setMinimumWidth(220)
        self.lbl_title.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.lbl_title.setObjectName("NowPlaying")

        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")

        # Progress as a fraction of SLIDER_STEPS, so seeking maps to a percentage
        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, SLIDER_STEPS)
        self.slider.setPageStep(SLIDER_STEPS // 20)
        self.slider.setAccessibleName("Progress")

        root.addWidget(self.btn_prev)
        root.addWidget(self.btn_play)
        root.addWidget(self.btn_next)
        root.addSpacing(6)
        root.addWidget(self.lbl_title, 1)
        root.addWidget(self.lbl_time)
        root.addWidget(self.slider, 3)
        root.addWidget(self.lbl_dur)

        self.slider.sliderPressed.connect(self._on_slider_pressed)
        self.slider.sliderReleased.connect(self._on_slider_released)
        self.slider.sliderMoved.connect(self._on_slider_moved)

        if self.session:
            self.session.nowPlayingChanged.connect(self._on_track_changed)
            self.session.playStateChanged.connect(self._set_playing)
            self.session.progressChanged.connect(self._on_progress)

            self.btn_play.clicked.connect(self.session.toggle)
            self.btn_prev.clicked.connect(self.session.play_previous)
            self.btn_next.clicked.connect(self.session.play_next)
        else:
            for w in (self.btn_prev, self.btn_play, self.btn_next, self.slider):
                w.setEnabled(False)

        self.setObjectName("PlayerBar")
        self._apply_styles()

    def _tool_button(self, name: str, path_d: str, size: int, tip: str) -> QToolButton:
        btn = QToolButton()
        btn.setObjectName(name)
        btn.setIcon(_svg_icon(path_d, size))
        btn.setIconSize(QSize(size, size))
        btn.setToolTip(tip)
        return btn

    # --- slider handling ---
    def _on_slider_pressed(self):
        self._dragging = True

    def _on_slider_moved(self, value: int):
        # show preview time while dragging
        self.lbl_time.setText(format_time(self._total_s * value / SLIDER_STEPS))

    def _on_slider_released(self):
        self._dragging = False
        if self.session:
            self.session.seek(self.slider.value() / SLIDER_STEPS)

    # --- session updates ---
    def _on_track_changed(self, item):
        if item:
            self.lbl_title.setText(item.display_name)
        else:
            self.lbl_title.setText("Nothing playing")
        self.slider.setValue(0)
        self.lbl_time.setText("0:00")
        self.lbl_dur.setText("0:00")
        self._total_s = 0.0

    def _set_playing(self, playing: bool):
        if playing:
            self.btn_play.setIcon(_svg_icon(SVG_PAUSE, 22))
            self.btn_play.setToolTip("Pause")
        else:
            self.btn_play.setIcon(_svg_icon(SVG_PLAY, 22))
            self.btn_play.setToolTip("Play")

    def _on_progress(self, info):
        self._total_s = info.total
        self.lbl_dur.setText(format_time(info.total))
        if self._dragging:
            return
        self.lbl_time.setText(format_time(info.elapsed))
        self.slider.setValue(round(info.percent * SLIDER_STEPS))
        self.slider.setToolTip(f"{round(info.percent * 100)}%")

    def _apply_styles(self):
        self.setStyleSheet("""
        QWidget#PlayerBar {
            background-color: #020617;
            border-top: 1px solid #111827;
        }

        QToolButton {
            border: 1px solid transparent;
            background: transparent;
            padding: 6px;
            border-radius: 10px;
        }
        QToolButton:hover {
            background: #0b1222;
            border-color: #1f2937;
        }

        QToolButton#BtnPlay {
            background: #111827;
            border: 1px solid #1f2937;
            border-radius: 999px;
            padding: 8px;
        }
        QToolButton#BtnPlay:hover { border-color: #12c274; }

        QSlider::groove:horizontal {
            height: 4px;
            background: #0f172a;
            border-radius: 2px;
        }
        QSlider::handle:horizontal {
            width: 12px;
            height: 12px;
            margin: -4px 0;
            border-radius: 6px;
            background: #12c274;
        }
        QSlider::sub-page:horizontal {
            background: #12c274;
            border-radius: 2px;
        }

        QLabel {
            color: #9ca3af;
            font-size: 11px;
        }
        QLabel#NowPlaying {
            color: #e5e7eb;
            font-size: 12px;
        }
        """)
