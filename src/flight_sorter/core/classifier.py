# src/flight_sorter/core/classifier.py

from __future__ import annotations

import re
from typing import Any, Iterable, Optional
from urllib.parse import urlsplit

from flight_sorter.core.extractors import as_record, leg_carrier, legs_of

OTA_DOMAINS = frozenset({
    "expedia.com", "booking.com", "priceline.com", "kayak.com",
    "orbitz.com", "travelocity.com", "cheaptickets.com",
    "hotwire.com", "agoda.com", "hotels.com",
})

AIRLINE_DOMAINS = frozenset({
    "united.com", "aa.com", "delta.com", "southwest.com",
    "jetblue.com", "alaskaair.com", "britishairways.com",
    "lufthansa.com", "airfrance.com", "klm.com",
    "virgin-atlantic.com", "qantas.com", "emirates.com",
})

URL_KEYS = ("bookingUrl", "bookingLink", "url")

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


def extract_domain(url: Any) -> Optional[str]:
    """
    Host of a booking link, lowercased, without a leading 'www.'.
    Links without a scheme are read as https.
    """
    if not isinstance(url, str) or not url.strip():
        return None
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None


def booking_url(offer: Any) -> Optional[str]:
    record = as_record(offer)
    for key in URL_KEYS:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


class DomainClassifier:
    """
    Decides whether an offer books directly with the airline or redirects
    through an online travel agency.

    Precedence: explicit isDirectAirline flag, known airline domain, known
    OTA domain, first-carrier substring of the domain, then False.
    """

    def __init__(
        self,
        airline_domains: Iterable[str] = AIRLINE_DOMAINS,
        ota_domains: Iterable[str] = OTA_DOMAINS,
    ):
        self.airline_domains = frozenset(d.lower() for d in airline_domains)
        self.ota_domains = frozenset(d.lower() for d in ota_domains)

    def is_direct_airline(self, offer: Any) -> bool:
        record = as_record(offer)
        if record.get("isDirectAirline") is True:
            return True

        domain = extract_domain(booking_url(record))
        if not domain:
            return False
        if domain in self.airline_domains:
            return True
        if domain in self.ota_domains:
            return False

        legs = legs_of(record)
        carrier = leg_carrier(legs[0]) if legs else None
        return bool(carrier) and carrier.lower() in domain


default_classifier = DomainClassifier()


def is_direct_airline(offer: Any) -> bool:
    return default_classifier.is_direct_airline(offer)
