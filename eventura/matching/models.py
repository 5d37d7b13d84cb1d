from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .normalize import lookup_key, parse_amount


class _LabelEnum(str, Enum):
    """String enum that also accepts loosely written labels (``"on hold"``)."""

    @classmethod
    def _missing_(cls, value: object):
        key = lookup_key(value)
        for member in cls:
            if key in (lookup_key(member.value), lookup_key(member.name)):
                return member
        return None


class Category(_LabelEnum):
    DECOR = "Decor"
    CATERING = "Catering"
    VENUE = "Venue"
    PHOTOGRAPHY = "Photography"
    VIDEOGRAPHY = "Videography"
    DJ_SOUND = "DJ/Sound"
    MAKEUP = "Makeup"
    MEHNDI = "Mehndi"
    TRANSPORT = "Transport"
    LIGHTING = "Lighting"
    FLORIST = "Florist"
    INVITATION_PRINT = "Invitation/Print"
    HOTEL = "Hotel"
    SECURITY = "Security"
    OTHER = "Other"


class VendorStatus(_LabelEnum):
    ACTIVE = "Active"
    PREFERRED = "Preferred"
    ON_HOLD = "OnHold"
    BLACKLISTED = "Blacklisted"


class EventType(_LabelEnum):
    WEDDING = "Wedding"
    ENGAGEMENT = "Engagement"
    RECEPTION = "Reception"
    SANGEET = "Sangeet"
    CORPORATE = "Corporate"
    BIRTHDAY = "Birthday"
    OTHER = "Other"


_CATEGORY_ORDER = {c: i for i, c in enumerate(Category)}


def normalize_categories(value: Any) -> tuple[Category, ...]:
    """Turn a category selection into a de-duplicated tuple in enum order.

    Accepts a list of labels, a comma-separated string, or a toggle mapping
    such as ``{"Decor": True, "Catering": False}``. An empty selection
    becomes ``(Category.OTHER,)``.
    """
    if value is None:
        items: list[Any] = []
    elif isinstance(value, Mapping):
        items = [label for label, on in value.items() if on]
    elif isinstance(value, str):
        items = [part for part in value.split(",") if part.strip()]
    else:
        items = list(value)

    selected = {Category(item) for item in items}
    if not selected:
        return (Category.OTHER,)
    return tuple(sorted(selected, key=_CATEGORY_ORDER.__getitem__))


def _to_event_type(value: Any) -> Any:
    return EventType(value) if isinstance(value, str) else value


def _normalize_tags(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    elif isinstance(value, (bool, int, float)) or not isinstance(value, Iterable):
        raise ValueError("tags must be text or a list of labels")
    tags: list[str] = []
    for raw in value:
        tag = str(raw).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


class Vendor(BaseModel):
    """A directory snapshot entry. Read-only to the matching engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: Category = Category.OTHER
    city: str = ""
    price_min: float | None = Field(default=None, ge=0)
    price_max: float | None = Field(default=None, ge=0)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    status: VendorStatus = VendorStatus.ACTIVE
    available: bool = True
    tags: tuple[str, ...] = ()
    notes: str = ""
    phone: str | None = None
    email: str | None = None
    contact_person: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, v: Any) -> Any:
        return Category(v) if isinstance(v, str) else v

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> Any:
        return VendorStatus(v) if isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> tuple[str, ...]:
        return _normalize_tags(v)

    @model_validator(mode="after")
    def _check_price_range(self) -> "Vendor":
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise ValueError("priceMin must not exceed priceMax")
        return self


class MatchRequest(BaseModel):
    """What one event needs. Built per query and never stored."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    event_type: EventType
    city: str = ""
    budget: float = 0.0
    needed_categories: tuple[Category, ...] = (Category.OTHER,)

    @field_validator("event_type", mode="before")
    @classmethod
    def _coerce_event_type(cls, v: Any) -> Any:
        return _to_event_type(v)

    @field_validator("city", mode="before")
    @classmethod
    def _coerce_city(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("budget", mode="before")
    @classmethod
    def _coerce_budget(cls, v: Any) -> float:
        return parse_amount(v)

    @field_validator("needed_categories", mode="before")
    @classmethod
    def _coerce_categories(cls, v: Any) -> tuple[Category, ...]:
        return normalize_categories(v)


class MatchForm(BaseModel):
    """Raw host form input: budget as typed text, categories as toggles or a list."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    event_type: EventType
    city: str = ""
    budget: float = 0.0
    categories: tuple[Category, ...] = (Category.OTHER,)
    vendors: list[Vendor] | None = Field(
        default=None, description="Inline directory snapshot; the configured one is used when omitted"
    )

    @field_validator("event_type", mode="before")
    @classmethod
    def _coerce_event_type(cls, v: Any) -> Any:
        return _to_event_type(v)

    @field_validator("budget", mode="before")
    @classmethod
    def _coerce_budget(cls, v: Any) -> float:
        return parse_amount(v)

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, v: Any) -> tuple[Category, ...]:
        return normalize_categories(v)

    def to_request(self) -> MatchRequest:
        return MatchRequest(
            event_type=self.event_type,
            city=self.city,
            budget=self.budget,
            needed_categories=self.categories,
        )


class VendorMatch(BaseModel):
    vendor: Vendor
    score: float


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    matches: dict[Category, list[VendorMatch]]
    total_candidates: int

    def vendors(self, category: Category) -> list[Vendor]:
        return [m.vendor for m in self.matches.get(category, [])]


class ScoreBreakdown(BaseModel):
    """Per-term contributions behind a single score."""

    vendor_id: str
    category_match: bool
    eligible: bool
    availability: float = 0.0
    status: float = 0.0
    rating: float = 0.0
    city: float = 0.0
    budget: float = 0.0
    tags: float = 0.0
    total: float
