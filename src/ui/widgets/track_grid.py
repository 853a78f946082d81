# ui/widgets/track_grid.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt
from PySide6.QtWidgets import QWidget, QGridLayout, QPushButton, QScrollArea, QVBoxLayout

DEFAULT_COVER = "#1f2937"


class TrackGridWidget(QWidget):
    trackActivated = Signal(int)   # catalog index

    def __init__(self, catalog, columns: int = 4, parent=None):
        super().__init__(parent)
        self.catalog = catalog
        self.columns = max(1, int(columns))
        self._buttons: dict[str, QPushButton] = {}

        inner = QWidget()
        self.grid = QGridLayout(inner)
        self.grid.setContentsMargins(12, 12, 12, 12)
        self.grid.setSpacing(12)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(inner)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(scroll)

        self.refresh()

    def refresh(self):
        for btn in self._buttons.values():
            self.grid.removeWidget(btn)
            btn.deleteLater()
        self._buttons.clear()

        for idx, item in enumerate(self.catalog):
            btn = QPushButton(f"{item.title}\n{item.artist}")
            btn.setObjectName("TrackCard")
            btn.setCheckable(True)
            btn.setMinimumSize(160, 72)
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.setAccessibleName(f"Play {item.title} by {item.artist}")
            btn.setStyleSheet(_card_style(item.accent_color or DEFAULT_COVER))
            btn.clicked.connect(lambda _checked=False, i=idx: self.trackActivated.emit(i))

            self.grid.addWidget(btn, idx // self.columns, idx % self.columns)
            self._buttons[item.id] = btn

        current = self.catalog.current()
        self.set_current(current.id if current else None)

    def set_current(self, item_id: str | None):
        for key, btn in self._buttons.items():
            btn.setChecked(key == item_id)


def _card_style(cover: str) -> str:
    return f"""
    QPushButton#TrackCard {{
        text-align: left;
        padding: 10px 12px;
        border-radius: 12px;
        border: 1px solid #1f2937;
        border-left: 10px solid {cover};
        background: #0b1222;
        color: #e5e7eb;
    }}
    QPushButton#TrackCard:hover {{ border-color: #38bdf8; border-left-color: {cover}; }}
    QPushButton#TrackCard:checked {{ background: #111c30; border-color: #12c274; border-left-color: {cover}; }}
    """
