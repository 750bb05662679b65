"""Backend — Learnopoly ledger REST API."""
