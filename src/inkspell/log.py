from __future__ import annotations

import logging
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: Dict[str, Any]) -> None:
    """Set up root logging once per process from the ``log_level`` config key."""
    level_name = str(config.get("log_level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)
