"""
settings.py — Configuration & Logging
=======================================
Defaults for the simulation engine and the web app.

The Flask app loads EngineConfig with `app.config.from_object()` and then
`app.config.from_prefixed_env("SORTVIZ")`, so any key can be overridden
from the environment:

    SORTVIZ_DEFAULT_SPEED=8 SORTVIZ_AUTO_RESET_DELAY=5 python main.py

Ranges here are enforced by clamping at the session boundary.  Producers
never see an out-of-range count.
"""

import logging
import os
from typing import Optional


class EngineConfig:
    # element count
    MIN_ELEMENTS     = 10
    MAX_ELEMENTS     = 200
    DEFAULT_ELEMENTS = 30

    # animation speed (1 = slowest, 10 = fastest)
    MIN_SPEED     = 1
    MAX_SPEED     = 10
    DEFAULT_SPEED = 5

    DEFAULT_DISTRIBUTION    = "random"
    DEFAULT_LEFT_ALGORITHM  = "bubble"
    DEFAULT_RIGHT_ALGORITHM = "quick"
    DEFAULT_SOUND_ENABLED   = True

    # arrays above this size show a loading state until the first step
    LARGE_ARRAY_THRESHOLD = 100

    # seconds between "both panels complete" and the automatic reset
    AUTO_RESET_DELAY = 3.0

    # browser sessions kept in memory; the least recently used is evicted
    MAX_SESSIONS = 256


LOG_FORMAT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Install one stream handler on the root logger.  The level comes from
    `level`, else SORTVIZ_LOG_LEVEL, else WARNING.  Safe to call twice.
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    level_name = (level or os.getenv("SORTVIZ_LOG_LEVEL", "WARNING")).upper()
    root.setLevel(getattr(logging, level_name, logging.WARNING))
    return root
