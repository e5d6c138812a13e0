"""Fuzzy key matching for targets produced by the extraction collaborator.

The extractor sometimes returns near-miss keys (``Background-Identity``,
``background_identity``).  Matching is tried in order:

1. exact match
2. case / hyphen normalized match
3. containment (target contains a valid key, or a valid key contains target)
"""

from __future__ import annotations

from typing import Iterable


def normalize_key(key: str) -> str:
    return key.strip().lower().replace("-", "_").replace(" ", "_")


def fuzzy_match_key(target: str, valid_keys: Iterable[str]) -> str | None:
    """Return the valid key closest to *target*, or None when nothing matches."""
    keys = list(valid_keys)
    if target in keys:
        return target

    normalized = normalize_key(target)
    if not normalized:
        return None

    for key in keys:
        if normalize_key(key) == normalized:
            return key

    for key in keys:
        if key in normalized or normalized in key:
            return key

    return None
