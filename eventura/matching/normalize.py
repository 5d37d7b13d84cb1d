from __future__ import annotations

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def parse_amount(value: Any) -> float:
    """Parse a money amount leniently. Anything unusable becomes ``0``.

    Thousands separators are stripped first, so ``"1,50,000"`` parses as
    ``150000``. Negative and non-finite values also become ``0``.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        raw = str(value if value is not None else "").replace(",", "").strip()
        try:
            amount = float(raw)
        except ValueError:
            logger.debug("Unparseable amount %r, using 0", value)
            return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def parse_optional_amount(value: Any) -> float | None:
    """Like :func:`parse_amount`, but blank or unparseable input gives ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        raw = str(value).replace(",", "").strip()
        if not raw:
            return None
        try:
            amount = float(raw)
        except ValueError:
            return None
    if not math.isfinite(amount):
        return None
    return amount


def lookup_key(value: Any) -> str:
    """Fold a label for enum lookup: ``"DJ / Sound"`` -> ``"djsound"``."""
    return _NON_ALNUM_RE.sub("", str(value).lower())


def same_city(a: str | None, b: str | None) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()
