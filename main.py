import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import AppConfig
from core.models import Catalog
from core.state import AppState, Notify
from library.catalog_file import CatalogFileError, demo_items, load_catalog_file
from library.scan_library import scan_items
from player.player import QtMediaBackend
from player.session import PlayerSession
from player.transport import Transport
from ui.main_window import MainWindow

logger = logging.getLogger("player")


def build_catalog(config: AppConfig, app_state: AppState) -> Catalog:
    items = []
    if config.catalog_path:
        try:
            items = load_catalog_file(config.catalog_path)
        except (OSError, CatalogFileError) as e:
            logger.error("Could not load catalog: %s", e)
            app_state.queued_notifications.append(
                Notify(message=f"Could not load catalog: {e}", notify_type="error")
            )
    if not items and config.music_dirs:
        items = scan_items(config.music_dirs)
    if not items:
        items = demo_items()
    return Catalog(items)


def init_app_state(config: AppConfig) -> AppState:
    app_state = AppState(config)
    app_state.catalog = build_catalog(config, app_state)

    try:
        backend = QtMediaBackend(volume=config.volume)
        app_state.transport = Transport(backend)
        app_state.session = PlayerSession(
            app_state.catalog, app_state.transport, autoplay_next=config.autoplay_next
        )
        logger.info("Audio backend: %s", backend.backend_name())
    except Exception as e:
        logger.exception("Failed to initialize audio player")
        app_state.transport = None
        app_state.session = None
        app_state.queued_notifications.append(
            Notify(message=f"Failed to initialize audio player: {e}", notify_type="error")
        )

    return app_state


def main() -> int:
    config = AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    qt_app = QApplication(sys.argv)

    app_state = init_app_state(config)
    main_window = MainWindow(app_state)
    main_window.show()
    main_window.show_queued_notifications()

    return qt_app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
