"""Runtime settings.

Environment-first, with fallbacks that work when the game is installed as
a package or started from an arbitrary CWD. Command line flags override
anything read here.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_POLL_MS = 100
MIN_POLL_MS = 10
MAX_POLL_MS = 1000


def log_file() -> Path | None:
    """Log destination from TTT_LOG_FILE, or None to keep logs off the screen."""
    p = os.getenv("TTT_LOG_FILE")
    return Path(p) if p else None


def poll_interval() -> float:
    """Input poll wait in seconds.

    Reads TTT_POLL_MS (milliseconds), clamped to [10, 1000]; unparsable
    values fall back to the 100 ms default.
    """
    raw = os.getenv("TTT_POLL_MS")
    if not raw:
        return DEFAULT_POLL_MS / 1000.0
    try:
        ms = int(raw)
    except ValueError:
        logging.warning("Ignoring invalid TTT_POLL_MS=%r", raw)
        return DEFAULT_POLL_MS / 1000.0
    ms = min(max(ms, MIN_POLL_MS), MAX_POLL_MS)
    return ms / 1000.0
