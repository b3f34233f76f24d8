# src/flight_sorter/runner.py
"""
One sorter run: collect offers, filter, rank, emit.

Mirrors the actor flow: empty input ends the run immediately; otherwise the
filtered and sorted records are pushed to the sink one at a time, in final
order.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Protocol

from flight_sorter.core.classifier import DomainClassifier
from flight_sorter.core.config import RunConfig
from flight_sorter.core.filters import apply_filters
from flight_sorter.core.ranking import sort_offers
from flight_sorter.providers.registry import get_fetcher
from flight_sorter.services.offer_bridge import offers_to_records
from flight_sorter.services.page_fetcher import PageFetcher, ProviderError

logger = logging.getLogger(__name__)


class Sink(Protocol):
    def push(self, record: Mapping[str, Any]) -> None:
        ...


def collect_offers(config: RunConfig, fetcher: Optional[PageFetcher] = None) -> List[Any]:
    """Input offers followed by whatever the configured providers return."""
    offers: List[Any] = offers_to_records(config.flight_offers)
    if not config.sources:
        return offers
    if config.search is None:
        logger.warning("sources=%s given without search parameters",
                       list(config.sources))
        return offers

    for name in config.sources:
        try:
            fetch = get_fetcher(name)
        except ProviderError as exc:
            logger.warning("Skipping source: %s", exc)
            continue
        offers.extend(offers_to_records(fetch(config.search, fetcher)))
    return offers


def run(
    config: Any,
    sink: Sink,
    classifier: Optional[DomainClassifier] = None,
    fetcher: Optional[PageFetcher] = None,
) -> List[Any]:
    if not isinstance(config, RunConfig):
        config = RunConfig.from_input(config)

    offers = collect_offers(config, fetcher)
    if not offers:
        logger.info("No flight offers to process.")
        return []

    filtered = apply_filters(offers, config.criteria, classifier)
    logger.info(
        "Filtered: %d -> %d offers", len(offers), len(filtered),
        extra={"before": len(offers), "after": len(filtered)},
    )

    ranked = sort_offers(filtered, config.sort_by)
    for record in ranked:
        sink.push(record)

    logger.info(
        "Filtered and sorted %d flight offers by: %s",
        len(ranked), config.sort_by.value,
        extra={"sort_by": config.sort_by.value},
    )
    return ranked
