"""
Ledger Engine — Errors
=======================

Every rejected operation raises one of these. The ledger checks all
preconditions before touching state, so a raised error always means
nothing changed.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for rejected ledger operations."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PreconditionViolation(LedgerError):
    """The operation's precondition does not hold (duplicate profile, self-connection, ...)."""


class RecordNotFound(PreconditionViolation):
    """The operation names a course or post that was never created."""


class AuthorizationViolation(LedgerError):
    """The caller is not allowed to perform a privileged operation."""
