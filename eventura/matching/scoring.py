"""
Vendor scoring.

Points per vendor/request pair (additive):
- Category gate: vendor outside the requested categories -> exclusion sentinel
- Availability: +15 available, -20 otherwise
- Status: Preferred +15, Active +8, OnHold -10, Blacklisted -100
- Rating: rating x 6
- City: +12 same city, +3 otherwise
- Budget: +18 inside the price range, -10 below it, -4 above it
- Tags: event-specific and general tag bonuses
"""
from __future__ import annotations

import math

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .models import EventType, MatchRequest, ScoreBreakdown, Vendor, VendorStatus
from .normalize import same_city

_STATUS_POINTS: dict[VendorStatus, float] = {
    VendorStatus.PREFERRED: 15,
    VendorStatus.ACTIVE: 8,
    VendorStatus.ON_HOLD: -10,
    VendorStatus.BLACKLISTED: -100,
}

_WEDDING_TAGS = {"premium": 6, "royal": 6}

_EVENT_TAG_POINTS: dict[EventType, dict[str, float]] = {
    EventType.WEDDING: _WEDDING_TAGS,
    EventType.RECEPTION: _WEDDING_TAGS,
    EventType.CORPORATE: {"corporate": 8, "professional": 6},
}

_GENERAL_TAG_POINTS: dict[str, float] = {"budget": 3, "fast": 2}


def _budget_points(vendor: Vendor, budget: float) -> float:
    low = vendor.price_min if vendor.price_min is not None else 0.0
    high = vendor.price_max if vendor.price_max is not None else math.inf
    if low <= budget <= high:
        return 18
    if budget < low:
        return -10
    return -4


def _tag_points(vendor: Vendor, event_type: EventType) -> float:
    tags = {t.lower() for t in vendor.tags}
    points = 0.0
    for tag, bonus in _EVENT_TAG_POINTS.get(event_type, {}).items():
        if tag in tags:
            points += bonus
    for tag, bonus in _GENERAL_TAG_POINTS.items():
        if tag in tags:
            points += bonus
    return points


def is_retained(
    vendor: Vendor,
    request: MatchRequest,
    total: float,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> bool:
    """Whether a scored vendor may appear in a match result.

    The vendor's category must be one the request needs. After that,
    either its status must not be Blacklisted (default) or, with
    ``exclude_blacklisted`` off, its score must beat the retention threshold.
    """
    if vendor.category not in request.needed_categories:
        return False
    if config.exclude_blacklisted:
        return vendor.status != VendorStatus.BLACKLISTED
    return total > config.retention_threshold


def explain(
    vendor: Vendor,
    request: MatchRequest,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> ScoreBreakdown:
    """Score *vendor* against *request*, keeping every term separately."""
    if vendor.category not in request.needed_categories:
        return ScoreBreakdown(
            vendor_id=vendor.id,
            category_match=False,
            eligible=False,
            total=config.exclusion_sentinel,
        )

    terms = {
        "availability": 15 if vendor.available else -20,
        "status": _STATUS_POINTS.get(vendor.status, 0.0),
        "rating": float(vendor.rating) * 6,
        "city": 12 if same_city(vendor.city, request.city) else 3,
        "budget": _budget_points(vendor, request.budget),
        "tags": _tag_points(vendor, request.event_type),
    }
    total = sum(terms.values())
    return ScoreBreakdown(
        vendor_id=vendor.id,
        category_match=True,
        eligible=is_retained(vendor, request, total, config),
        total=total,
        **terms,
    )


def score(
    vendor: Vendor,
    request: MatchRequest,
    config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
) -> float:
    return explain(vendor, request, config).total
