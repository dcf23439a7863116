"""
HPV Tracker - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("HPVTRACK_DB", f"sqlite:///{BASE_DIR / 'hpvtrack.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("HPVTRACK_HOST", "0.0.0.0")
PORT   = int(os.environ.get("HPVTRACK_PORT", "5000"))
DEBUG  = os.environ.get("HPVTRACK_DEBUG", "0") == "1"
SECRET = os.environ.get("HPVTRACK_SECRET", "hpvtrack-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("HPVTRACK_LOG_LEVEL", "INFO").upper()

# ── Import pipeline ────────────────────────────────────────────────────
# Rows per upsert call when persisting imported reports
IMPORT_BATCH_SIZE = int(os.environ.get("HPVTRACK_IMPORT_BATCH_SIZE", "100"))
MAX_UPLOAD_BYTES  = int(os.environ.get("HPVTRACK_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# ── Auth ───────────────────────────────────────────────────────────────
# Session handling is delegated to the hosted auth provider; the gateway
# forwards the signed-in user's id in this header.
USER_HEADER = "X-User-Id"

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100
DASHBOARD_MONTHS  = 12
