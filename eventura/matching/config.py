from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingConfig:
    per_category_limit: int = 3
    exclusion_sentinel: float = -999
    retention_threshold: float = -100
    # False restores the plain "score > retention_threshold" rule, under which
    # a strong Blacklisted vendor can still be retained.
    exclude_blacklisted: bool = True
    shortlist_limit: int = 8


DEFAULT_MATCHING_CONFIG = MatchingConfig()
