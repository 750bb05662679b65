"""Ledger Engine — Package."""

from ledger_engine.engine import Ledger
from ledger_engine.errors import (
    AuthorizationViolation,
    LedgerError,
    PreconditionViolation,
    RecordNotFound,
)
from ledger_engine.models import (
    Course,
    EventKind,
    LedgerEvent,
    LedgerState,
    Post,
    Profile,
)
from ledger_engine.store import LedgerStore

__all__ = [
    "Ledger",
    "LedgerStore",
    "LedgerError",
    "PreconditionViolation",
    "RecordNotFound",
    "AuthorizationViolation",
    "Course",
    "EventKind",
    "LedgerEvent",
    "LedgerState",
    "Post",
    "Profile",
]
