# src/flight_sorter/core/extractors.py
"""
Typed field extraction over offer-shaped records.

Every extractor accepts a canonical Offer or any JSON mapping and returns a
typed value, or None when the value is unknown. None of them raise: a record
with a malformed field only loses accuracy for that field.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from flight_sorter.core.models import Offer

LEG_KEYS = ("legs", "segments", "flights")


def as_record(offer: Any) -> Mapping[str, Any]:
    if isinstance(offer, Offer):
        return offer.to_dict()
    if isinstance(offer, Mapping):
        return offer
    return {}


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a quantity here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def legs_of(offer: Any) -> Optional[List[Any]]:
    """
    Leg list of an offer, looked up under legs / segments / flights.
    Returns [] when only empty lists are present and None when there is no
    leg data at all.
    """
    record = as_record(offer)
    found_empty = False
    for key in LEG_KEYS:
        value = record.get(key)
        if isinstance(value, list):
            if value:
                return value
            found_empty = True
    return [] if found_empty else None


def price(offer: Any) -> Optional[float]:
    p = as_record(offer).get("price")
    if is_number(p):
        return p
    if isinstance(p, Mapping):
        for key in ("amount", "total"):
            if is_number(p.get(key)):
                return p[key]
    return None


def duration_minutes(offer: Any) -> Optional[float]:
    record = as_record(offer)
    for key in ("totalDurationMinutes", "duration", "durationMinutes"):
        if is_number(record.get(key)):
            return record[key]
    return None


def stops(offer: Any) -> Optional[int]:
    value = as_record(offer).get("stops")
    if is_number(value) and value >= 0 and float(value).is_integer():
        return int(value)

    legs = legs_of(offer)
    if not legs:
        return None
    return max(0, len(legs) - 1)


def parse_timestamp(value: Any) -> Optional[float]:
    """
    Parse ISO-8601 strings like:
      - '2026-02-15T10:30:00'
      - '2026-02-15T10:30:00Z'
      - '2026-02-15T10:30:00+00:00'
      - '2026-02-15'
      - '2026-02-15 10:30', '2026-02-15T10:30:00.5Z'
    into POSIX seconds. Naive values are read as UTC. Strings that do not
    parse give nan; anything that is not a non-empty string gives None.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return math.nan
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def departure_time(offer: Any) -> Optional[float]:
    legs = legs_of(offer)
    if not legs or not isinstance(legs[0], Mapping):
        return None

    first = legs[0]
    dep = first.get("departure") or first.get("departure_airport")
    if not isinstance(dep, Mapping):
        return None
    return parse_timestamp(dep.get("time") or dep.get("date"))


def preference_score(offer: Any) -> Optional[float]:
    s = as_record(offer).get("preferenceScore")
    return s if is_number(s) else None


def leg_carrier(leg: Any) -> Optional[str]:
    if not isinstance(leg, Mapping):
        return None
    code = leg.get("carrier") or leg.get("airline")
    if isinstance(code, str):
        return code.strip() or None
    if is_number(code):
        return str(code)
    return None


def carriers(offer: Any) -> List[str]:
    out: List[str] = []
    for leg in legs_of(offer) or []:
        code = leg_carrier(leg)
        if code:
            out.append(code)
    return out
