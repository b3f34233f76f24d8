# src/flight_sorter/providers/kayak.py

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from flight_sorter.core.models import Offer, Price, SearchParams
from flight_sorter.providers.base import (
    EndpointPaths,
    LegPaths,
    OfferNormalizer,
    amount,
    as_amount,
    build_leg,
    first_match,
    non_empty_list,
    non_empty_str,
    positive,
    stops_from_legs,
    sum_durations,
)
from flight_sorter.services.page_fetcher import PageFetcher

logger = logging.getLogger(__name__)

BASE_URL = "https://www.kayak.com"
DEFAULT_BOOKING_URL = "https://www.kayak.com/flights"


def _results_paths():
    # Next.js page data: props.pageProps or props, then the results object,
    # then the list inside it.
    roots = (("props", "pageProps"), ("props",))
    containers = (("searchResults",), ("results",), ("data", "searchResults"))
    lists = (("listings",), ("flights",), ("itineraries",))
    paths = [
        (root + container + lst, non_empty_list)
        for root in roots
        for container in containers
        for lst in lists
    ]
    # window.__INITIAL_STATE__
    paths.append((("search", "results", "listings"), non_empty_list))
    return tuple(paths)


class KayakNormalizer(OfferNormalizer):
    name = "kayak"
    label = "Kayak"

    RESULTS = _results_paths()

    PRICE = (
        (("price", "value"), amount),
        (("totalPrice", "amount"), amount),
        (("amount",), amount),
    )
    CURRENCY = (
        (("price", "currency"), non_empty_str),
        (("currency",), non_empty_str),
    )
    SEGMENTS = (
        (("segments",), non_empty_list),
        (("legs",), non_empty_list),
        (("slices",), non_empty_list),
    )
    DURATION = (
        (("duration",), positive),
        (("totalDuration",), positive),
    )
    BOOKING_URL = (
        (("bookingUrl",), non_empty_str),
        (("deeplink",), non_empty_str),
        (("url",), non_empty_str),
    )
    LEG = LegPaths(
        carrier=(
            (("carrier", "code"), non_empty_str),
            (("operatingCarrier", "code"), non_empty_str),
            (("marketingCarrier", "code"), non_empty_str),
            (("carrier",), non_empty_str),
        ),
        departure=EndpointPaths(
            key="departure",
            airport=(
                (("departure", "airport", "code"), non_empty_str),
                (("departure", "airport"), non_empty_str),
                (("origin",), non_empty_str),
            ),
            time=(
                (("departure", "time"), non_empty_str),
                (("departure", "dateTime"), non_empty_str),
            ),
        ),
        arrival=EndpointPaths(
            key="arrival",
            airport=(
                (("arrival", "airport", "code"), non_empty_str),
                (("arrival", "airport"), non_empty_str),
                (("destination",), non_empty_str),
            ),
            time=(
                (("arrival", "time"), non_empty_str),
                (("arrival", "dateTime"), non_empty_str),
            ),
        ),
    )

    def normalize_item(self, item: Mapping[str, Any]) -> Offer:
        segments = first_match(item, self.SEGMENTS, default=[])

        duration = first_match(item, self.DURATION)
        if duration is None:
            duration = sum_durations(segments)

        return Offer(
            price=Price(
                amount=as_amount(first_match(item, self.PRICE)),
                currency=first_match(item, self.CURRENCY, default="USD"),
            ),
            total_duration_minutes=int(duration) if duration is not None else None,
            stops=stops_from_legs(segments),
            legs=tuple(build_leg(seg, self.LEG) for seg in segments),
            booking_url=first_match(
                item, self.BOOKING_URL, default=DEFAULT_BOOKING_URL),
            provider=self.name,
        )


def build_search_url(params: SearchParams) -> Optional[str]:
    o = "".join((params.origin or "").upper().split())
    d = "".join((params.destination or "").upper().split())
    if not o or not d or not params.depart_date:
        return None

    path = f"/flights/{o}-{d}/{params.depart_date}"
    if params.return_date:
        path += f"/{params.return_date}"
    path += "?sort=bestflight_a"
    if params.adults > 1:
        path += f"&adults={params.adults}"
    if params.cabin_class and params.cabin_class != "economy":
        path += f"&cabin={params.cabin_class}"
    return BASE_URL + path


def fetch_offers(params: SearchParams, fetcher: Optional[PageFetcher] = None) -> List[Offer]:
    url = build_search_url(params)
    if not url:
        logger.warning("Kayak: missing origin, destination or departDate")
        return []
    return KayakNormalizer().fetch(url, fetcher)
