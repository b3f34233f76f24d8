# src/flight_sorter/providers/base.py

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from flight_sorter.core.extractors import is_number
from flight_sorter.core.models import Endpoint, Leg, Offer
from flight_sorter.services.page_fetcher import PageFetcher, ProviderError

logger = logging.getLogger(__name__)

PathPart = Union[str, int]
Path = Tuple[PathPart, ...]
Check = Callable[[Any], bool]
# (where to look, what counts as a usable value)
Candidate = Tuple[Path, Check]

MAX_RESULTS = 50


def dig(obj: Any, path: Path) -> Any:
    """Walk `path` through nested dicts/lists; None as soon as a step is missing."""
    cur = obj
    for part in path:
        if isinstance(part, int):
            if not isinstance(cur, list) or not -len(cur) <= part < len(cur):
                return None
            cur = cur[part]
        else:
            if not isinstance(cur, Mapping):
                return None
            cur = cur.get(part)
    return cur


def first_match(obj: Any, candidates: Iterable[Candidate], default: Any = None) -> Any:
    for path, check in candidates:
        value = dig(obj, path)
        if check(value):
            return value
    return default


# Common checks

def non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def finite(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def positive(value: Any) -> bool:
    return finite(value) and value > 0


def amount(value: Any) -> bool:
    """Numbers, or strings holding one (e.g. '199.99')."""
    return as_amount(value) is not None


def non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value)


def as_amount(value: Any) -> Optional[float]:
    """Finite float from a number or numeric string, else None."""
    if isinstance(value, str):
        value = value.strip()
    elif not is_number(value):
        return None
    try:
        n = float(value)
    except (ValueError, OverflowError):
        return None
    return n if math.isfinite(n) else None


def code(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if is_number(value):
        return str(value)
    return None


def sum_durations(legs: Sequence[Any], key: str = "duration") -> Optional[int]:
    total = 0
    seen = False
    for leg in legs:
        d = leg.get(key) if isinstance(leg, Mapping) else None
        if finite(d):
            total += d
            seen = True
    return int(total) if seen and total > 0 else None


def stops_from_legs(legs: Sequence[Any]) -> Optional[int]:
    return max(0, len(legs) - 1) if legs else None


class OfferNormalizer(ABC):
    """
    Maps one provider's raw JSON document to canonical Offers.

    Subclasses declare where the result list lives (RESULTS) and how a single
    result item becomes an Offer (`normalize_item`).
    """

    name: str = ""
    label: str = ""
    # read only __NEXT_DATA__ from the page
    NEXT_DATA_ONLY: bool = False
    RESULTS: Sequence[Candidate] = ()

    def results(self, payload: Any) -> List[Any]:
        items = first_match(payload, self.RESULTS, default=[])
        return [it for it in items[:MAX_RESULTS] if isinstance(it, Mapping)]

    @abstractmethod
    def normalize_item(self, item: Mapping[str, Any]) -> Offer:
        ...

    def normalize(self, payload: Any) -> List[Offer]:
        if not isinstance(payload, Mapping):
            return []
        return [self.normalize_item(it) for it in self.results(payload)]

    def normalize_documents(self, payloads: Iterable[Any]) -> List[Offer]:
        """First document on a page that yields any offers wins."""
        for payload in payloads:
            offers = self.normalize(payload)
            if offers:
                return offers
        return []

    def fetch(self, url: str, fetcher: Optional[PageFetcher] = None) -> List[Offer]:
        """Fetch a search page and normalize it; fetch failures give no offers."""
        fetcher = fetcher or PageFetcher()
        logger.info("%s: fetching %s", self.label, url)
        try:
            documents = fetcher.fetch_documents(url, next_data_only=self.NEXT_DATA_ONLY)
        except ProviderError as exc:
            logger.warning("%s fetch failed: %s", self.label, exc)
            return []

        offers = self.normalize_documents(documents)
        logger.info("%s: extracted %d offers", self.label, len(offers))
        return offers


@dataclass(frozen=True)
class EndpointPaths:
    """Where one end of a raw segment lives. Candidates are relative to the segment."""

    key: str
    airport: Sequence[Candidate]
    time: Sequence[Candidate]


@dataclass(frozen=True)
class LegPaths:
    carrier: Sequence[Candidate]
    departure: EndpointPaths
    arrival: EndpointPaths


LEG_DURATION: Sequence[Candidate] = (
    (("duration",), finite),
    (("durationMinutes",), finite),
)


def build_endpoint(seg: Mapping[str, Any], paths: EndpointPaths) -> Optional[Endpoint]:
    # no endpoint object on the segment -> leave it out of the leg
    if not isinstance(seg.get(paths.key), Mapping):
        return None
    return Endpoint(
        airport=code(first_match(seg, paths.airport)),
        time=first_match(seg, paths.time),
    )


def build_leg(seg: Any, paths: LegPaths) -> Leg:
    if not isinstance(seg, Mapping):
        return Leg()
    duration = first_match(seg, LEG_DURATION)
    return Leg(
        carrier=code(first_match(seg, paths.carrier)),
        departure=build_endpoint(seg, paths.departure),
        arrival=build_endpoint(seg, paths.arrival),
        duration_minutes=int(duration) if duration is not None else None,
    )
