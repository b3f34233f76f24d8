# src/flight_sorter/providers/skyscanner.py

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

BASE_URL = "https://www.skyscanner.com"
DEFAULT_BOOKING_URL = "https://www.skyscanner.com/booking"


class SkyscannerNormalizer(OfferNormalizer):
    """
    Skyscanner renders client-side; itineraries are read either from the
    Next.js page data or from window.__INITIAL_STATE__.
    """

    name = "skyscanner"
    label = "Skyscanner"
    NEXT_DATA_ONLY = True

    RESULTS = (
        (("props", "pageProps", "initialState", "results", "itineraries"), non_empty_list),
        (("props", "pageProps", "itineraries"), non_empty_list),
        (("props", "pageProps", "results", "itineraries"), non_empty_list),
        (("props", "initialState", "results", "itineraries"), non_empty_list),
        (("props", "itineraries"), non_empty_list),
        (("props", "results", "itineraries"), non_empty_list),
        # window.__INITIAL_STATE__
        (("results", "itineraries"), non_empty_list),
    )

    PRICE = (
        (("pricing", "options", 0, "price", "amount"), amount),
        (("price", "amount"), amount),
        (("minPrice",), amount),
    )
    LEGS = (
        (("legs",), non_empty_list),
        (("slices",), non_empty_list),
        (("segments",), non_empty_list),
    )
    BOOKING_URL = (
        (("bookingUrl",), non_empty_str),
        (("deeplink",), non_empty_str),
    )
    LEG = LegPaths(
        carrier=(
            (("carrier", "id"), non_empty_str),
            (("marketingCarrier", "id"), non_empty_str),
            (("carrier",), non_empty_str),
        ),
        departure=EndpointPaths(
            key="departure",
            airport=(
                (("departure", "origin", "id"), non_empty_str),
                (("departure", "from"), non_empty_str),
                (("departure", "airport"), non_empty_str),
            ),
            time=(
                (("departure", "time"), non_empty_str),
                (("departure", "dateTime"), non_empty_str),
            ),
        ),
        arrival=EndpointPaths(
            key="arrival",
            airport=(
                (("arrival", "destination", "id"), non_empty_str),
                (("arrival", "to"), non_empty_str),
                (("arrival", "airport"), non_empty_str),
            ),
            time=(
                (("arrival", "time"), non_empty_str),
                (("arrival", "dateTime"), non_empty_str),
            ),
        ),
    )

    def normalize_item(self, item: Mapping[str, Any]) -> Offer:
        legs = first_match(item, self.LEGS, default=[])

        duration = item.get("duration")
        if not positive(duration):
            duration = sum_durations(legs)

        return Offer(
            price=Price(amount=as_amount(first_match(item, self.PRICE)),
                        currency="USD"),
            total_duration_minutes=int(duration) if duration is not None else None,
            stops=stops_from_legs(legs),
            legs=tuple(build_leg(leg, self.LEG) for leg in legs),
            booking_url=first_match(
                item, self.BOOKING_URL, default=DEFAULT_BOOKING_URL),
            provider=self.name,
        )


def build_search_url(params: SearchParams) -> Optional[str]:
    o = "".join((params.origin or "").lower().split())
    d = "".join((params.destination or "").lower().split())
    if not o or not d or not params.depart_date:
        return None

    path = f"/transport/flights-from/{o}/to/{d}/{params.depart_date}/"
    if params.return_date:
        path += f"{params.return_date}/"
    return BASE_URL + path


def fetch_offers(params: SearchParams, fetcher: Optional[PageFetcher] = None) -> List[Offer]:
    url = build_search_url(params)
    if not url:
        logger.warning("Skyscanner: missing origin, destination or departDate")
        return []
    return SkyscannerNormalizer().fetch(url, fetcher)
