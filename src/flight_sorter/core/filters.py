# src/flight_sorter/core/filters.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from flight_sorter.core import extractors
from flight_sorter.core.classifier import DomainClassifier, default_classifier

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]
Stage = Tuple[str, Predicate]


def to_number(value: Any) -> Optional[float]:
    """
    Lenient numeric option parsing. Numbers and numeric strings are accepted;
    None, booleans, blanks and anything that does not parse give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        v = value.strip()
        if not v:
            return None
        try:
            n = float(v)
        except ValueError:
            return None
        return None if math.isnan(n) else n
    return None


def to_code_set(value: Any) -> FrozenSet[str]:
    # Accept: ["KQ","EY"] or "KQ,EY" or "KQ".
    if isinstance(value, str):
        items: Sequence[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        return frozenset()
    codes = (str(x).strip().upper() for x in items if x is not None)
    return frozenset(c for c in codes if c)


@dataclass(frozen=True)
class FilterCriteria:
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    max_stops: Optional[float] = None
    direct_only: bool = False
    include_airlines: FrozenSet[str] = frozenset()
    exclude_airlines: FrozenSet[str] = frozenset()

    @classmethod
    def from_input(cls, data: Mapping[str, Any]) -> "FilterCriteria":
        numbers = {}
        for key, attr in (("minPrice", "min_price"),
                          ("maxPrice", "max_price"),
                          ("maxStops", "max_stops")):
            raw = data.get(key)
            n = to_number(raw)
            if raw is not None and n is None:
                logger.warning("Ignoring non-numeric %s=%r", key, raw)
            numbers[attr] = n

        return cls(
            direct_only=data.get("directOnly") is True,
            include_airlines=to_code_set(data.get("includeAirlines")),
            exclude_airlines=to_code_set(data.get("excludeAirlines")),
            **numbers,
        )


def _matches_any(offer: Any, codes: FrozenSet[str]) -> bool:
    return any(c.upper() in codes for c in extractors.carriers(offer))


def build_stages(
    criteria: FilterCriteria,
    classifier: Optional[DomainClassifier] = None,
) -> List[Stage]:
    """
    One (name, predicate) stage per criterion that is set, in the fixed order
    minPrice, maxPrice, maxStops, directOnly, includeAirlines, excludeAirlines.
    """
    classifier = classifier or default_classifier
    stages: List[Stage] = []

    if criteria.min_price is not None:
        lo = criteria.min_price

        def _min_price(o: Any) -> bool:
            p = extractors.price(o)
            return (0 if p is None else p) >= lo

        stages.append(("minPrice", _min_price))

    if criteria.max_price is not None:
        hi = criteria.max_price

        def _max_price(o: Any) -> bool:
            p = extractors.price(o)
            return (math.inf if p is None else p) <= hi

        stages.append(("maxPrice", _max_price))

    if criteria.max_stops is not None:
        limit = criteria.max_stops

        def _max_stops(o: Any) -> bool:
            s = extractors.stops(o)
            return (math.inf if s is None else s) <= limit

        stages.append(("maxStops", _max_stops))

    if criteria.direct_only:
        stages.append(("directOnly", classifier.is_direct_airline))

    if criteria.include_airlines:
        include = criteria.include_airlines
        stages.append(
            ("includeAirlines", lambda o: _matches_any(o, include)))

    if criteria.exclude_airlines:
        exclude = criteria.exclude_airlines
        stages.append(
            ("excludeAirlines", lambda o: not _matches_any(o, exclude)))

    return stages


def apply_filters(
    offers: Sequence[Any],
    criteria: FilterCriteria,
    classifier: Optional[DomainClassifier] = None,
) -> List[Any]:
    out = list(offers)
    for name, keep in build_stages(criteria, classifier):
        before = len(out)
        out = [o for o in out if keep(o)]
        logger.debug("Filter %s: %d -> %d", name, before, len(out))
    return out
