from __future__ import annotations

from eventura.matching.config import MatchingConfig
from eventura.matching.models import Category, EventType, MatchRequest, Vendor, VendorStatus
from eventura.matching.ranking import explain_all, rank


def _vendor(vid: str, category: Category = Category.DECOR, **overrides) -> Vendor:
    data = {
        "id": vid,
        "name": f"Vendor {vid}",
        "category": category,
        "city": "Surat",
        "rating": 4.0,
        "status": VendorStatus.ACTIVE,
        "available": True,
    }
    data.update(overrides)
    return Vendor(**data)


def _request(*categories: Category, **overrides) -> MatchRequest:
    data = {
        "event_type": EventType.WEDDING,
        "city": "Surat",
        "budget": 100000,
        "needed_categories": list(categories) or [Category.DECOR],
    }
    data.update(overrides)
    return MatchRequest(**data)


def test_empty_directory_maps_every_category_to_empty_list():
    result = rank([], _request(Category.DECOR, Category.CATERING))
    assert result.matches == {Category.DECOR: [], Category.CATERING: []}
    assert result.total_candidates == 0


def test_category_containment():
    vendors = [
        _vendor("d1"),
        _vendor("c1", Category.CATERING, rating=5.0, status=VendorStatus.PREFERRED),
        _vendor("v1", Category.VENUE),
    ]
    result = rank(vendors, _request(Category.DECOR))
    assert list(result.matches) == [Category.DECOR]
    assert [v.id for v in result.vendors(Category.DECOR)] == ["d1"]


def test_each_category_capped_at_three():
    vendors = [_vendor(f"d{i}", rating=i * 0.5) for i in range(6)]
    vendors += [_vendor(f"c{i}", Category.CATERING) for i in range(5)]
    result = rank(vendors, _request(Category.DECOR, Category.CATERING))
    assert all(len(items) <= 3 for items in result.matches.values())
    assert [v.id for v in result.vendors(Category.DECOR)] == ["d5", "d4", "d3"]


def test_scores_descending():
    vendors = [
        _vendor("a", rating=2.0),
        _vendor("b", rating=4.5, status=VendorStatus.PREFERRED),
        _vendor("c", rating=3.0),
    ]
    result = rank(vendors, _request())
    scores = [m.score for m in result.matches[Category.DECOR]]
    assert scores == sorted(scores, reverse=True)
    assert [m.vendor.id for m in result.matches[Category.DECOR]] == ["b", "c", "a"]


def test_ties_keep_directory_order():
    vendors = [_vendor("first"), _vendor("second"), _vendor("third"), _vendor("fourth")]
    result = rank(vendors, _request())
    assert [v.id for v in result.vendors(Category.DECOR)] == ["first", "second", "third"]


def test_deterministic_output():
    vendors = [
        _vendor("a", tags=["royal"]),
        _vendor("b", Category.CATERING, tags=["fast"]),
        _vendor("c", city="Mumbai"),
        _vendor("d", Category.CATERING, available=False),
    ]
    request = _request(Category.CATERING, Category.DECOR)
    first = rank(vendors, request).model_dump_json()
    second = rank(list(vendors), request).model_dump_json()
    assert first == second


def test_result_keys_follow_category_order():
    request = _request(Category.SECURITY, Category.DECOR, Category.CATERING)
    result = rank([], request)
    assert list(result.matches) == [Category.DECOR, Category.CATERING, Category.SECURITY]


def test_blacklisted_vendor_excluded_by_default():
    vendors = [
        _vendor("bad", status=VendorStatus.BLACKLISTED, rating=5.0, tags=["premium"]),
        _vendor("ok", rating=1.0),
    ]
    result = rank(vendors, _request())
    assert [v.id for v in result.vendors(Category.DECOR)] == ["ok"]
    assert result.total_candidates == 1


def test_blacklisted_vendor_kept_under_threshold_rule():
    config = MatchingConfig(exclude_blacklisted=False)
    vendors = [
        _vendor("bad", status=VendorStatus.BLACKLISTED, rating=5.0, tags=["premium"]),
        _vendor("ok", rating=1.0),
    ]
    result = rank(vendors, _request(), config)
    ranked = result.matches[Category.DECOR]
    assert [m.vendor.id for m in ranked] == ["ok", "bad"]
    assert ranked[1].score == -19


def test_low_scoring_blacklisted_vendor_dropped_under_threshold_rule():
    config = MatchingConfig(exclude_blacklisted=False)
    vendor = _vendor(
        "worst",
        status=VendorStatus.BLACKLISTED,
        available=False,
        rating=0.0,
        city="Delhi",
        price_min=500000,
    )
    result = rank([vendor], _request(), config)
    assert result.matches[Category.DECOR] == []


def test_on_hold_and_unavailable_vendors_still_ranked():
    vendors = [_vendor("held", status=VendorStatus.ON_HOLD, available=False, rating=0.0)]
    result = rank(vendors, _request())
    assert [v.id for v in result.vendors(Category.DECOR)] == ["held"]


def test_custom_category_limit():
    vendors = [_vendor(f"d{i}") for i in range(5)]
    result = rank(vendors, _request(), MatchingConfig(per_category_limit=1))
    assert [v.id for v in result.vendors(Category.DECOR)] == ["d0"]


def test_ranking_does_not_mutate_vendors():
    vendors = [_vendor("a", tags=["royal"]), _vendor("b")]
    before = [v.model_dump() for v in vendors]
    rank(vendors, _request())
    assert [v.model_dump() for v in vendors] == before


def test_empty_category_request_looks_for_other():
    vendors = [_vendor("misc", Category.OTHER), _vendor("d1")]
    request = MatchRequest(event_type=EventType.BIRTHDAY, city="Surat", needed_categories=[])
    result = rank(vendors, request)
    assert list(result.matches) == [Category.OTHER]
    assert [v.id for v in result.vendors(Category.OTHER)] == ["misc"]


def test_explain_all_keeps_directory_order():
    vendors = [_vendor("z", Category.VENUE), _vendor("a"), _vendor("m")]
    breakdowns = explain_all(vendors, _request())
    assert [b.vendor_id for b in breakdowns] == ["z", "a", "m"]
    assert breakdowns[0].total == -999


def test_unvalidated_vendor_with_extreme_score_still_ranked():
    vendor = Vendor.model_construct(
        id="x",
        name="Odd",
        category=Category.DECOR,
        city="Surat",
        price_min=None,
        price_max=None,
        rating=-200.0,
        status=VendorStatus.ACTIVE,
        available=True,
        tags=(),
    )
    result = rank([vendor], _request())
    assert [v.id for v in result.vendors(Category.DECOR)] == ["x"]
    assert result.matches[Category.DECOR][0].score < -999
