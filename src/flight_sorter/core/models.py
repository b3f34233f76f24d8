# src/flight_sorter/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class SearchParams:
    origin: str
    destination: str
    depart_date: str  # "YYYY-MM-DD"
    return_date: Optional[str] = None
    adults: int = 1
    currency: str = "USD"
    cabin_class: str = "economy"

    @classmethod
    def from_input(cls, data: Any) -> Optional["SearchParams"]:
        if not isinstance(data, dict):
            return None
        try:
            adults = int(data.get("adults") or 1)
        except (TypeError, ValueError):
            adults = 1
        return cls(
            origin=str(data.get("origin") or ""),
            destination=str(data.get("destination") or ""),
            depart_date=str(data.get("departDate") or ""),
            return_date=data.get("returnDate") or None,
            adults=max(1, adults),
            currency=str(data.get("currency") or "USD"),
            cabin_class=str(data.get("cabinClass") or "economy"),
        )


@dataclass(frozen=True)
class Price:
    amount: Optional[float]
    currency: str = "USD"


@dataclass(frozen=True)
class Endpoint:
    """One end of a leg: airport code and local/UTC time string."""

    airport: Optional[str] = None
    time: Optional[str] = None


@dataclass(frozen=True)
class Leg:
    """A single flown segment."""

    carrier: Optional[str] = None  # e.g. "UA"
    departure: Optional[Endpoint] = None
    arrival: Optional[Endpoint] = None
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class Offer:
    """Canonical offer representation used throughout the system.

    Built once by a provider normalizer and never edited afterwards. Filtering
    and ranking work on `to_dict()` records, so an Offer and an already
    canonical JSON object are interchangeable downstream.
    """

    price: Optional[Price] = None
    total_duration_minutes: Optional[int] = None
    stops: Optional[int] = None
    legs: Tuple[Leg, ...] = field(default_factory=tuple)
    booking_url: Optional[str] = None
    is_direct_airline: Optional[bool] = None
    preference_score: Optional[float] = None

    # Metadata
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.price is not None:
            d["price"] = {"amount": self.price.amount,
                          "currency": self.price.currency}
        if self.total_duration_minutes is not None:
            d["totalDurationMinutes"] = self.total_duration_minutes
        if self.stops is not None:
            d["stops"] = self.stops
        d["legs"] = [_leg_to_dict(leg) for leg in self.legs]
        if self.booking_url is not None:
            d["bookingUrl"] = self.booking_url
        if self.is_direct_airline is not None:
            d["isDirectAirline"] = self.is_direct_airline
        if self.preference_score is not None:
            d["preferenceScore"] = self.preference_score
        if self.provider is not None:
            d["provider"] = self.provider
        return d


def _endpoint_to_dict(ep: Optional[Endpoint]) -> Optional[Dict[str, Any]]:
    if ep is None:
        return None
    return {"airport": ep.airport, "time": ep.time}


def _leg_to_dict(leg: Leg) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    if leg.carrier:
        d["carrier"] = leg.carrier
    if leg.departure is not None:
        d["departure"] = _endpoint_to_dict(leg.departure)
    if leg.arrival is not None:
        d["arrival"] = _endpoint_to_dict(leg.arrival)
    if leg.duration_minutes is not None:
        d["durationMinutes"] = leg.duration_minutes
    return d
