# src/flight_sorter/providers/registry.py

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from flight_sorter.core.models import Offer, SearchParams
from flight_sorter.providers import kayak, skyscanner
from flight_sorter.providers.base import OfferNormalizer
from flight_sorter.services.page_fetcher import PageFetcher, ProviderError

Fetch = Callable[[SearchParams, Optional[PageFetcher]], List[Offer]]

ALIASES = {
    "kayak": "kayak",
    "kayak.com": "kayak",
    "skyscanner": "skyscanner",
    "skyscanner.com": "skyscanner",
    "sky-scanner": "skyscanner",
}

_NORMALIZERS: Dict[str, Callable[[], OfferNormalizer]] = {
    "kayak": kayak.KayakNormalizer,
    "skyscanner": skyscanner.SkyscannerNormalizer,
}

_FETCHERS: Dict[str, Fetch] = {
    "kayak": kayak.fetch_offers,
    "skyscanner": skyscanner.fetch_offers,
}


def canonical_name(raw_name: str) -> str:
    name = str(raw_name or "").strip().lower()
    name = ALIASES.get(name, name)
    if name not in _NORMALIZERS:
        raise ProviderError(f"Unknown flights provider: {name}", status_code=400)
    return name


def get_normalizer(raw_name: str) -> OfferNormalizer:
    """Return the normalizer for a provider name (aliases accepted)."""
    return _NORMALIZERS[canonical_name(raw_name)]()


def get_fetcher(raw_name: str) -> Fetch:
    return _FETCHERS[canonical_name(raw_name)]
