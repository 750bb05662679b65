"""
Backend — Shared Configuration
================================

Ledger singleton, caller identity and shared utilities.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from algosdk import encoding
from dotenv import load_dotenv
from fastapi import Header, HTTPException

from ledger_engine import (
    AuthorizationViolation,
    Ledger,
    LedgerError,
    LedgerStore,
    RecordNotFound,
)

logger = logging.getLogger("backend.config")

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ─────────────────────────────────────────────────────────────────────────────
# Load .env
# ─────────────────────────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────
ADMIN_ADDRESS = os.getenv("LEARNOPOLY_ADMIN", "")
STATE_PATH = Path(os.getenv("LEARNOPOLY_STATE_PATH", str(PROJECT_ROOT / "ledger_state.json")))

# ─────────────────────────────────────────────────────────────────────────────
# Singleton ledger
# ─────────────────────────────────────────────────────────────────────────────
_store: LedgerStore | None = None
_ledger: Ledger | None = None


def configure(state_path: str | Path, administrator: str | None = None) -> None:
    """Point the backend at another snapshot (and administrator for a new one)."""
    global _store, _ledger, ADMIN_ADDRESS

    _store = LedgerStore(state_path)
    _ledger = None
    if administrator is not None:
        ADMIN_ADDRESS = administrator


def get_ledger() -> tuple[Ledger, LedgerStore]:
    """Lazy-load the ledger from its snapshot."""
    global _store, _ledger

    if _store is None:
        _store = LedgerStore(STATE_PATH)

    if _ledger is None:
        if ADMIN_ADDRESS and not encoding.is_valid_address(ADMIN_ADDRESS):
            raise RuntimeError(f"LEARNOPOLY_ADMIN is not a valid address: {ADMIN_ADDRESS}")
        if not ADMIN_ADDRESS and not _store.exists():
            logger.error("No ledger snapshot at %s and LEARNOPOLY_ADMIN is not set", _store.path)
            raise HTTPException(
                status_code=503,
                detail=f"No ledger snapshot at {_store.path}; set LEARNOPOLY_ADMIN to start a new ledger",
            )
        _ledger = _store.load(administrator=ADMIN_ADDRESS or None)
        logger.info("Ledger ready — administrator: %s", _ledger.administrator)

    return _ledger, _store


def commit() -> None:
    """Persist the current ledger state.

    On failure the in-memory ledger is dropped so the next request reloads
    the last good snapshot.
    """
    global _ledger

    ledger, store = get_ledger()
    try:
        store.save(ledger)
    except OSError as exc:
        _ledger = None
        logger.error("Snapshot write failed: %s", exc, exc_info=True)
        raise HTTPException(status_code=500, detail=f"Could not persist ledger: {exc}")


# ─────────────────────────────────────────────────────────────────────────────
# Caller identity & errors
# ─────────────────────────────────────────────────────────────────────────────
def caller_address(x_caller_address: str = Header(...)) -> str:
    """Read and validate the calling identity from ``X-Caller-Address``."""
    return require_address(x_caller_address, "X-Caller-Address")


def require_address(address: str, field: str = "address") -> str:
    if not encoding.is_valid_address(address):
        raise HTTPException(status_code=422, detail=f"{field} is not a valid Algorand address")
    return address


def http_error(exc: LedgerError) -> HTTPException:
    """Map a rejected ledger operation to an HTTP error carrying its reason."""
    if isinstance(exc, AuthorizationViolation):
        return HTTPException(status_code=403, detail=exc.reason)
    if isinstance(exc, RecordNotFound):
        return HTTPException(status_code=404, detail=exc.reason)
    return HTTPException(status_code=400, detail=exc.reason)
