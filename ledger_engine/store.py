"""
Ledger Engine — Snapshot Store
================================

Persists the whole ``LedgerState`` as one JSON document.

Writes go to a sibling temp file first and are then renamed over the
snapshot, so a crash mid-write leaves the previous snapshot intact.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ledger_engine.engine import Ledger
from ledger_engine.models import LedgerState

logger = logging.getLogger("ledger_engine.store")


class LedgerStore:
    """Load and save a ledger snapshot at a fixed path."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self, administrator: str | None = None) -> Ledger:
        """Return the persisted ledger, or a fresh one for ``administrator``.

        The administrator recorded in an existing snapshot always wins;
        a differing ``administrator`` argument is only logged.

        Raises
        ------
        ValueError
            If there is no snapshot and no administrator to create one.
        pydantic.ValidationError
            If the snapshot is not a valid ledger state.
        """
        if not self.exists():
            if not administrator:
                raise ValueError(
                    f"No ledger snapshot at {self.path} and no administrator to create one"
                )
            logger.info("No snapshot at %s — starting a new ledger", self.path)
            return Ledger.create(administrator)

        state = LedgerState.model_validate_json(self.path.read_text(encoding="utf-8"))
        if administrator and administrator != state.administrator:
            logger.warning(
                "Configured administrator %s ignored; snapshot is administered by %s",
                administrator,
                state.administrator,
            )
        logger.info(
            "Loaded ledger from %s — %d profiles, %d courses, %d posts",
            self.path,
            len(state.profiles),
            len(state.courses),
            len(state.posts),
        )
        return Ledger(state)

    def save(self, ledger: Ledger) -> None:
        """Write the ledger's state to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(ledger.state.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug("Snapshot written to %s", self.path)
