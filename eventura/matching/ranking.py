from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .models import Category, MatchRequest, MatchResult, ScoreBreakdown, Vendor, VendorMatch
from .scoring import explain

logger = logging.getLogger(__name__)


def rank(
    vendors: Iterable[Vendor],
    request: MatchRequest,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> MatchResult:
    """Pick the best vendors for each category the request needs.

    Every vendor is scored once. Retained vendors are sorted by score,
    highest first; equal scores keep their directory order. Each requested
    category then takes its first ``config.per_category_limit`` vendors.
    """
    retained: list[tuple[Vendor, float]] = []
    for vendor in vendors:
        breakdown = explain(vendor, request, config)
        if breakdown.eligible:
            retained.append((vendor, breakdown.total))

    # sorted() is stable, including with reverse=True
    retained = sorted(retained, key=lambda pair: pair[1], reverse=True)

    matches: dict[Category, list[VendorMatch]] = {}
    for category in request.needed_categories:
        in_category = [
            VendorMatch(vendor=vendor, score=total)
            for vendor, total in retained
            if vendor.category == category
        ]
        matches[category] = in_category[: config.per_category_limit]

    logger.debug(
        "Ranked %d retained vendors for %s in %r across %d categories",
        len(retained),
        request.event_type,
        request.city,
        len(matches),
    )
    return MatchResult(matches=matches, total_candidates=len(retained))


def explain_all(
    vendors: Iterable[Vendor],
    request: MatchRequest,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> list[ScoreBreakdown]:
    """Score breakdowns for every vendor, in directory order."""
    return [explain(vendor, request, config) for vendor in vendors]
