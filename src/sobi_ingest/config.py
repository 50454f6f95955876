"""Centralized configuration for the SOBI ingest pipeline.

All settings live here so they can be overridden by environment variables or a
``.env`` file without touching source code.

**Profile system:** Set ``SOBI_PROFILE=dev`` (default) or ``SOBI_PROFILE=prod``
to get sensible defaults for each environment.  Any individual ``SOBI_*`` var
still overrides the profile value.

Usage::

    from sobi_ingest.config import STORAGE_DIR, UNPUBLISHED_LIST

    storage = Storage(STORAGE_DIR)
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# Load .env from current working directory (project root when running scripts/)
load_dotenv()

LOGGER = logging.getLogger(__name__)

# ── Profile: one knob for the whole environment ──────────────────────────────
# "dev" = verbose local mode, "prod" = quieter defaults for scheduled runs.
# Individual vars always override the profile.

PROFILE: str = os.getenv("SOBI_PROFILE", "dev").lower().strip()

_PROFILE_DEFAULTS: dict[str, dict[str, str]] = {
    "dev": {
        "SOBI_LOG_LEVEL": "DEBUG",
        "SOBI_STORAGE_DIR": "storage",
    },
    "prod": {
        "SOBI_LOG_LEVEL": "INFO",
        "SOBI_STORAGE_DIR": "/var/lib/sobi/storage",
    },
}

if PROFILE not in _PROFILE_DEFAULTS:
    LOGGER.warning("Unknown SOBI_PROFILE=%r, falling back to 'dev'.", PROFILE)
    PROFILE = "dev"

_defaults = _PROFILE_DEFAULTS[PROFILE]


def _env(key: str, fallback: str = "") -> str:
    """Read an env var, falling back to profile default then *fallback*."""
    return os.getenv(key, _defaults.get(key, fallback))


# ── Directories / files ──────────────────────────────────────────────────────
STORAGE_DIR: Path = Path(_env("SOBI_STORAGE_DIR", "storage"))
CHANGE_LOG_PATH: Path = Path(_env("SOBI_CHANGE_LOG", str(STORAGE_DIR / "change_log.jsonl")))
RUN_LOG_PATH: Path = Path(_env("SOBI_RUN_LOG", ".run_log.jsonl"))

# Text file of bill ids that must never be published (one per line).
_unpublished = _env("SOBI_UNPUBLISHED_LIST").strip()
UNPUBLISHED_LIST: Path | None = Path(_unpublished) if _unpublished else None

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = _env("SOBI_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ── Feed quirks ──────────────────────────────────────────────────────────────
# Text blocks without a closing *END* header were unreliable before this date.
TEXT_FOOTER_FIX_DATE = datetime(2011, 4, 23)
