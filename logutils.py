# SPDX-License-Identifier: GPL-3.0-only

import os
import logging
from typing import Optional

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, LOG_LEVEL, None)

if not isinstance(numeric_level, int):
    raise ValueError(f"Invalid log level: {LOG_LEVEL}")

logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# requests logs every connection at DEBUG; keep it out of dashboard logs
logging.getLogger("urllib3").setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Retrieves a dashboard logger configured with the specified name.

    Args:
        name (str, optional): Usually the calling module's ``__name__``. If None,
            the root logger is returned.

    Returns:
        logging.Logger: A logger sharing the level and format set above.
    """
    return logging.getLogger(name)
