# src/flight_sorter/core/ranking.py

from __future__ import annotations

import logging
import math
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from flight_sorter.core import extractors

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    DURATION_ASC = "duration_asc"
    DURATION_DESC = "duration_desc"
    STOPS_ASC = "stops_asc"
    STOPS_DESC = "stops_desc"
    DEPARTURE_ASC = "departure_asc"
    DEPARTURE_DESC = "departure_desc"
    SCORE_DESC = "score_desc"


DEFAULT_SORT_KEY = SortKey.PRICE_ASC

# key -> (extractor, descending)
_ORDERINGS: Dict[SortKey, Tuple[Callable[[Any], Optional[float]], bool]] = {
    SortKey.PRICE_ASC: (extractors.price, False),
    SortKey.PRICE_DESC: (extractors.price, True),
    SortKey.DURATION_ASC: (extractors.duration_minutes, False),
    SortKey.DURATION_DESC: (extractors.duration_minutes, True),
    SortKey.STOPS_ASC: (extractors.stops, False),
    SortKey.STOPS_DESC: (extractors.stops, True),
    SortKey.DEPARTURE_ASC: (extractors.departure_time, False),
    SortKey.DEPARTURE_DESC: (extractors.departure_time, True),
    SortKey.SCORE_DESC: (extractors.preference_score, True),
}


def resolve_sort_key(value: Any) -> SortKey:
    """Valid sort key for `value`, falling back to price_asc."""
    if isinstance(value, SortKey):
        return value
    try:
        return SortKey(value)
    except ValueError:
        if value is not None:
            logger.warning("Unknown sortBy %r, using %s",
                           value, DEFAULT_SORT_KEY.value)
        return DEFAULT_SORT_KEY


def _ranked_value(value: Optional[float], descending: bool) -> float:
    # Unknown (None or nan) always lands in the worst position.
    if value is None or math.isnan(value):
        return -math.inf if descending else math.inf
    return value


def compare(sort_key: Any, a: Any, b: Any) -> int:
    """
    Three-way comparison of two offers under `sort_key`: negative when `a`
    ranks first, positive when `b` does, 0 on a tie.
    """
    extract, descending = _ORDERINGS[resolve_sort_key(sort_key)]
    va = _ranked_value(extract(a), descending)
    vb = _ranked_value(extract(b), descending)
    if va == vb:
        return 0
    if descending:
        return -1 if va > vb else 1
    return -1 if va < vb else 1


def sort_offers(offers: Sequence[Any], sort_key: Any = DEFAULT_SORT_KEY) -> List[Any]:
    """Stable sort; ties keep their input order."""
    key = resolve_sort_key(sort_key)
    return sorted(offers, key=cmp_to_key(lambda a, b: compare(key, a, b)))
