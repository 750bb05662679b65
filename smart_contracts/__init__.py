"""Algorand smart contracts."""
