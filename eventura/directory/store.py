from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
from pydantic import ValidationError

from ..matching.models import Category, Vendor, VendorStatus
from ..matching.normalize import lookup_key, parse_optional_amount
from .config import DEFAULT_DIRECTORY_CONFIG, DirectoryConfig

logger = logging.getLogger(__name__)

_STATUS_ALIASES: dict[str, VendorStatus] = {
    "inactive": VendorStatus.ON_HOLD,
    "hold": VendorStatus.ON_HOLD,
    "paused": VendorStatus.ON_HOLD,
    "blocked": VendorStatus.BLACKLISTED,
    "banned": VendorStatus.BLACKLISTED,
}

_FALSY = {"false", "no", "n", "0", "off", "unavailable", "busy"}

_snapshots: dict[DirectoryConfig, tuple[Vendor, ...]] = {}


class DirectoryUnavailableError(RuntimeError):
    """The vendor directory snapshot is not configured or cannot be read."""


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and str(value).strip() != "":
            return value
    return None


def _parse_category(value: Any) -> Category:
    if value is None:
        return Category.OTHER
    try:
        return Category(str(value))
    except ValueError:
        return Category.OTHER


def _parse_status(value: Any) -> VendorStatus:
    if value is None:
        return VendorStatus.ACTIVE
    alias = _STATUS_ALIASES.get(lookup_key(value))
    if alias is not None:
        return alias
    try:
        return VendorStatus(str(value))
    except ValueError:
        return VendorStatus.ACTIVE


def _parse_rating(value: Any) -> float:
    if value is None:
        return 0.0
    raw = str(value).strip()
    # Handle "X/5" format (e.g. "4.1/5")
    if "/" in raw:
        raw = raw.split("/")[0].strip()
    rating = parse_optional_amount(raw)
    if rating is None:
        return 0.0
    return max(0.0, min(5.0, rating))


def _parse_available(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in _FALSY


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Host timestamps are epoch milliseconds
        ts = pd.to_datetime(value, unit="ms", errors="coerce", utc=True)
    else:
        ts = pd.to_datetime(str(value), errors="coerce", utc=True)
    return None if pd.isna(ts) else ts.to_pydatetime()


def _optional_text(value: Any) -> str | None:
    return str(value).strip() if value is not None and str(value).strip() else None


def normalize_record(raw: Mapping[str, Any]) -> Vendor:
    """Build a Vendor from one host record, filling gaps the way the host does.

    Raises ``pydantic.ValidationError`` when the record cannot satisfy the
    Vendor invariants (negative prices, ``priceMin > priceMax``).
    """
    vendor_id = _first(raw, "id", "_id", "name", "vendorName") or uuid.uuid4().hex
    return Vendor(
        id=str(vendor_id),
        name=str(_first(raw, "name", "vendorName") or "Vendor"),
        category=_parse_category(_first(raw, "category", "type")),
        city=str(_first(raw, "city", "location") or ""),
        price_min=parse_optional_amount(_first(raw, "priceMin", "price_min", "minPrice")),
        price_max=parse_optional_amount(_first(raw, "priceMax", "price_max", "maxPrice")),
        rating=_parse_rating(_first(raw, "rating")),
        status=_parse_status(_first(raw, "status")),
        available=_parse_available(_first(raw, "available", "isAvailable")),
        tags=_first(raw, "tags"),
        notes=str(_first(raw, "notes", "note") or ""),
        phone=_optional_text(_first(raw, "phone", "mobile")),
        email=_optional_text(_first(raw, "email")),
        contact_person=_optional_text(_first(raw, "contactPerson", "contact_person", "contact")),
        created_at=_parse_timestamp(_first(raw, "createdAt", "created_at")),
        updated_at=_parse_timestamp(_first(raw, "updatedAt", "updated_at")),
    )


def normalize_records(records: Iterable[Any]) -> list[Vendor]:
    """Normalize host records, skipping the ones that cannot be repaired."""
    vendors: list[Vendor] = []
    for index, raw in enumerate(records):
        if not isinstance(raw, Mapping):
            logger.warning("Skipping vendor record %d: not an object", index)
            continue
        try:
            vendors.append(normalize_record(raw))
        except ValidationError as exc:
            logger.warning(
                "Skipping vendor record %d (%s): %d validation error(s)",
                index,
                raw.get("name") or raw.get("id") or "unnamed",
                exc.error_count(),
            )
    return vendors


def _read_json_records(path: Path, storage_keys: tuple[str, ...]) -> list[Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        # Key-value export: use the first storage key holding a list
        for key in storage_keys:
            value = data.get(key)
            if isinstance(value, str):
                try:
                    value = json.loads(value)
                except ValueError:
                    continue
            if isinstance(value, list):
                return value
    return []


def _read_csv_records(path: Path) -> list[dict[str, Any]]:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return df.to_dict(orient="records")


def load_directory(config: DirectoryConfig = DEFAULT_DIRECTORY_CONFIG) -> list[Vendor]:
    """Read and normalize the snapshot named by *config*."""
    path = config.snapshot_path
    if path is None:
        raise DirectoryUnavailableError("No vendor directory snapshot configured")
    if not path.is_file():
        raise DirectoryUnavailableError(f"Vendor directory snapshot not found: {path}")

    try:
        if path.suffix.lower() == ".csv":
            records = _read_csv_records(path)
        else:
            records = _read_json_records(path, config.storage_keys)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read vendor directory %s", path, exc_info=True)
        raise DirectoryUnavailableError(f"Unreadable vendor directory snapshot: {path}") from exc

    vendors = normalize_records(records)
    logger.info("Loaded %d of %d vendor records from %s", len(vendors), len(records), path)
    return vendors


def get_directory(config: DirectoryConfig = DEFAULT_DIRECTORY_CONFIG) -> tuple[Vendor, ...]:
    """Return the in-memory snapshot for *config*, loading it on first call."""
    snapshot = _snapshots.get(config)
    if snapshot is None:
        snapshot = _snapshots[config] = tuple(load_directory(config))
    return snapshot


def clear_directory() -> None:
    _snapshots.clear()
