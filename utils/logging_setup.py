from __future__ import annotations

import logging
import os
from pathlib import Path


def setup_logging(log_dir: Path, *, level: int | str | None = None) -> logging.Logger:
    log_dir.mkdir(parents=True, exist_ok=True)
    resolved = level or os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    logger = logging.getLogger("internTracker")
    logger.setLevel(resolved)
    logger.handlers.clear()

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    file_handler = logging.FileHandler(log_dir / "run.log", encoding="utf-8")
    file_handler.setFormatter(fmt)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(fmt)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    return logger
