from __future__ import annotations

from collections.abc import Iterable

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .models import Vendor


def top_vendors_for_city(
    vendors: Iterable[Vendor],
    city: str,
    limit: int | None = None,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> list[Vendor]:
    """Top-rated vendors serving *city*, whatever their category.

    A vendor serves the city when its own city contains the requested one
    (case-insensitive) or when it has no city at all.
    """
    wanted = city.strip().lower()
    local = [v for v in vendors if not v.city or wanted in v.city.lower()]
    ordered = sorted(local, key=lambda v: v.rating, reverse=True)
    return ordered[: limit if limit is not None else config.shortlist_limit]
