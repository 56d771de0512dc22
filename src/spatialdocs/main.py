"""
Application Initialization
==========================
Builds the store, the controllers and the main window, then starts the Qt
event loop. This is the only place that knows about all three layers.
"""
import logging
import sys

from spatialdocs.application import create_app
from spatialdocs.config import DATA_PATH, CACHE_PATH
from spatialdocs.controller.board import Board
from spatialdocs.controller.scheduler import QtScheduler
from spatialdocs.logging_config import setup_logging, level_from_env
from spatialdocs.model.io import DocumentCache, load_documents
from spatialdocs.model.settings import AppSettings
from spatialdocs.model.state import BoardStore
from spatialdocs.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    # 1. Logging (SPATIALDOCS_LOG_LEVEL=DEBUG to see every rejected gesture)
    setup_logging(level=level_from_env(logging.INFO))

    # 2. Qt application (settings format, names)
    app = create_app()

    # 3. Model + controllers
    settings = AppSettings()
    store = BoardStore()
    scheduler = QtScheduler()
    board = Board(store, scheduler, default_zoom=settings.viewer_zoom)

    cache = DocumentCache(CACHE_PATH)
    records = load_documents(DATA_PATH, cache)
    logger.info(f"Loaded {len(records)} document(s).")
    board.populate(records)

    # 4. Main window
    window = MainWindow(board, settings=settings, cache=cache)
    window.show()

    # 5. Event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
