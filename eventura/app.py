from __future__ import annotations

from collections.abc import Sequence

from fastapi import FastAPI, HTTPException, Query

from .directory.store import DirectoryUnavailableError, get_directory
from .matching.models import (
    Category,
    EventType,
    MatchForm,
    MatchResult,
    ScoreBreakdown,
    Vendor,
    VendorStatus,
)
from .matching.ranking import explain_all, rank
from .matching.shortlist import top_vendors_for_city

app = FastAPI(title="Eventura Vendor Match API", version="1.0.0")


def _directory() -> Sequence[Vendor]:
    try:
        return get_directory()
    except DirectoryUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _vendors_for(form: MatchForm) -> Sequence[Vendor]:
    # Inline vendors win; an empty inline list is a valid (empty) snapshot
    if form.vendors is not None:
        return form.vendors
    return _directory()


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "categories": [c.value for c in Category],
        "event_types": [e.value for e in EventType],
        "statuses": [s.value for s in VendorStatus],
    }


# ── Matching endpoints ───────────────────────────────────────────────────


@app.post("/matches", response_model=MatchResult)
def matches(body: MatchForm) -> MatchResult:
    return rank(_vendors_for(body), body.to_request())


@app.post("/matches/explain", response_model=list[ScoreBreakdown])
def explain_matches(body: MatchForm) -> list[ScoreBreakdown]:
    return explain_all(_vendors_for(body), body.to_request())


@app.get("/vendors/shortlist", response_model=list[Vendor])
def shortlist(
    city: str = Query(..., min_length=1),
    limit: int | None = Query(default=None, ge=1, le=50),
) -> list[Vendor]:
    return top_vendors_for_city(_directory(), city, limit=limit)
