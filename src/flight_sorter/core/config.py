# src/flight_sorter/core/config.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from flight_sorter.core.filters import FilterCriteria
from flight_sorter.core.models import SearchParams
from flight_sorter.core.ranking import DEFAULT_SORT_KEY, SortKey, resolve_sort_key


@dataclass(frozen=True)
class RunConfig:
    """
    Options for one run, read from the actor-style input object:

      flightOffers     offer-shaped objects to rank (default [])
      sortBy           one of SortKey, invalid values become price_asc
      minPrice, maxPrice, maxStops, directOnly,
      includeAirlines, excludeAirlines
                       see FilterCriteria
      sources          provider names to fetch and merge (default [])
      search           search parameters for those providers
    """

    flight_offers: List[Any] = field(default_factory=list)
    sort_by: SortKey = DEFAULT_SORT_KEY
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    sources: Tuple[str, ...] = ()
    search: Optional[SearchParams] = None

    @classmethod
    def from_input(cls, data: Any) -> "RunConfig":
        if not isinstance(data, Mapping):
            data = {}

        offers = data.get("flightOffers")
        sources = data.get("sources")
        if isinstance(sources, str):
            sources = sources.split(",")

        return cls(
            flight_offers=list(offers) if isinstance(offers, list) else [],
            sort_by=resolve_sort_key(data.get("sortBy")),
            criteria=FilterCriteria.from_input(data),
            sources=tuple(
                s.strip().lower()
                for s in (sources if isinstance(sources, list) else [])
                if isinstance(s, str) and s.strip()
            ),
            search=SearchParams.from_input(data.get("search")),
        )
