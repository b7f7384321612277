"""Allow running Pomobar as a module: python -m pomobar."""

import logging
import sys

from PyQt6.QtWidgets import QApplication
from sqlalchemy.exc import SQLAlchemyError

from .database.db import init_db
from .settings import SettingsStore
from .app import PomobarApp

logger = logging.getLogger("pomobar")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = SettingsStore()
    store.load()
    try:
        init_db()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Session history unavailable: %s", exc)

    app = QApplication(sys.argv)
    app.setApplicationName("Pomobar")
    app.setOrganizationName("Pomobar")
    app.setQuitOnLastWindowClosed(False)

    window = PomobarApp(store)
    app.aboutToQuit.connect(window.shutdown)
    logger.info("Pomobar ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
