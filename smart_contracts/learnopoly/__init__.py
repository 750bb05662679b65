"""Learnopoly ARC-4 contract and deploy script."""
