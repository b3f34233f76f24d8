# src/flight_sorter/services/offer_bridge.py

from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from flight_sorter.core import extractors
from flight_sorter.core.classifier import DomainClassifier, booking_url, default_classifier
from flight_sorter.core.models import Offer

SUMMARY_COLUMNS = [
    "price", "currency", "duration_min", "stops", "carriers",
    "departure", "direct_airline", "score", "booking_url",
]


def offers_to_records(offers: Iterable[Any]) -> List[Mapping[str, Any]]:
    """Canonical Offers become their JSON record; mappings pass through untouched."""
    return [o.to_dict() if isinstance(o, Offer) else o for o in offers]


def _currency(record: Mapping[str, Any]) -> Any:
    p = record.get("price")
    return p.get("currency") if isinstance(p, Mapping) else None


def _departure(record: Mapping[str, Any]) -> Any:
    ts = extractors.departure_time(record)
    if ts is None or ts != ts:
        return None
    try:
        return pd.Timestamp(ts, unit="s", tz="UTC")
    except (ValueError, OverflowError):
        # outside the pandas datetime range
        return None


def summarize(record: Any, classifier: DomainClassifier = default_classifier) -> Dict[str, Any]:
    """Flat row of the extracted fields, for tables and UIs."""
    r = extractors.as_record(record)
    return {
        "price": extractors.price(r),
        "currency": _currency(r),
        "duration_min": extractors.duration_minutes(r),
        "stops": extractors.stops(r),
        "carriers": ", ".join(extractors.carriers(r)),
        "departure": _departure(r),
        "direct_airline": classifier.is_direct_airline(r),
        "score": extractors.preference_score(r),
        "booking_url": booking_url(r),
    }


def records_to_frame(records: Iterable[Any], classifier: DomainClassifier = default_classifier) -> pd.DataFrame:
    rows = [summarize(r, classifier) for r in records]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
