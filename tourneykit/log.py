"""Root logging setup.  Called once by the entry points, never by library code."""

from __future__ import annotations

import logging
import logging.handlers

from tourneykit.config import AppConfig

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def configure_logging(app_config: AppConfig) -> None:
    log_file = app_config.log_file_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, app_config.log_level),
        format=_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
                encoding="utf-8",
            ),
        ],
        force=True,
    )
