"""
Structured logging for the CDM store.

- Configurable level (DEBUG, INFO, WARNING, ERROR) via CDM_LOG_LEVEL
- Writes to logs/ directory (file handler) plus a console handler
- Helper for logging store events (create, update, delete) as JSON payloads
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

# Default: project root / logs
LOG_DIR = Path(os.getenv("CDM_LOG_DIR", str(Path(__file__).resolve().parent.parent.parent / "logs")))
LOG_LEVEL = os.getenv("CDM_LOG_LEVEL", "INFO").upper()


def configure_logging(
    level: str = LOG_LEVEL,
    log_dir: Optional[Path] = None,
    log_to_console: bool = True,
) -> None:
    """Configure root and cdm_api loggers. Call once at app startup."""
    log_dir = Path(log_dir or LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    level_value = getattr(logging, level, logging.INFO)

    file_handler = logging.FileHandler(log_dir / "cdm_api.log", encoding="utf-8")
    file_handler.setLevel(level_value)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(level_value)
    # Avoid duplicate handlers when reloading
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(file_handler)
    if log_to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level_value)
        console.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
        root.addHandler(console)

    logging.getLogger("cdm_api").setLevel(level_value)


def log_store_event(
    logger: logging.Logger,
    event: str,
    uuid: str,
    kind: str = "model",
    success: bool = True,
    error: Optional[str] = None,
    extra: Optional[dict[str, Any]] = None,
) -> None:
    """Log a store operation (create, update, delete) on one entity."""
    payload = {
        "event": event,
        "kind": kind,
        "uuid": uuid,
        "success": success,
        "error": error,
        "ts": datetime.utcnow().isoformat() + "Z",
    }
    if extra:
        payload.update(extra)
    if success:
        logger.info("Store: %s", json.dumps(payload, default=str))
    else:
        logger.warning("Store: %s", json.dumps(payload, default=str))
