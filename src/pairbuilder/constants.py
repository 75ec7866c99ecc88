"""Shared package-level defaults used across CLI and pairing modules."""

from __future__ import annotations

DEFAULT_POLICY = "exhaustive"
DEFAULT_OVERLAP = 1
DEFAULT_PAIRS_FILENAME = "pairs.txt"
PAIR_POLICY_CHOICES = (
    "exhaustive",
    "contiguous",
)
