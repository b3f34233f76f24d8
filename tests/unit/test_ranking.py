import itertools

import pytest

from flight_sorter.core.ranking import DEFAULT_SORT_KEY, SortKey, compare, resolve_sort_key, sort_offers


def _ids(offers):
    return [o["id"] for o in offers]


@pytest.fixture
def a_and_b():
    a = {"id": "A", "price": {"amount": 500}}
    b = {"id": "B", "price": {"amount": 300}, "totalDurationMinutes": 120}
    return a, b


def test_price_and_duration_scenario(a_and_b):
    a, b = a_and_b
    assert _ids(sort_offers([a, b], "price_asc")) == ["B", "A"]
    # A has no duration and sorts last
    assert _ids(sort_offers([a, b], "duration_asc")) == ["B", "A"]
    assert _ids(sort_offers([a, b], "duration_desc")) == ["B", "A"]


def test_descending_keys(a_and_b):
    a, b = a_and_b
    assert _ids(sort_offers([b, a], SortKey.PRICE_DESC)) == ["A", "B"]


def test_unknown_values_sort_last_in_both_directions():
    offers = [
        {"id": "none"},
        {"id": "low", "stops": 0},
        {"id": "high", "stops": 2},
    ]
    assert _ids(sort_offers(offers, "stops_asc")) == ["low", "high", "none"]
    assert _ids(sort_offers(offers, "stops_desc")) == ["high", "low", "none"]


def test_score_desc():
    offers = [
        {"id": "mid", "preferenceScore": 0.5},
        {"id": "none"},
        {"id": "top", "preferenceScore": 0.9},
    ]
    assert _ids(sort_offers(offers, "score_desc")) == ["top", "mid", "none"]


def test_departure_sort_treats_invalid_dates_as_missing():
    offers = [
        {"id": "bad", "legs": [{"departure": {"time": "not-a-date"}}]},
        {"id": "late", "legs": [{"departure": {"time": "2026-03-01T18:00:00Z"}}]},
        {"id": "none", "legs": []},
        {"id": "early", "legs": [{"departure": {"time": "2026-03-01T06:00:00Z"}}]},
    ]
    assert _ids(sort_offers(offers, "departure_asc")) == ["early", "late", "bad", "none"]
    assert _ids(sort_offers(offers, "departure_desc")) == ["late", "early", "bad", "none"]


def test_sort_is_stable_for_ties():
    offers = [{"id": str(i), "price": 100} for i in range(5)]
    assert _ids(sort_offers(offers, "price_asc")) == ["0", "1", "2", "3", "4"]
    assert _ids(sort_offers(offers, "price_desc")) == ["0", "1", "2", "3", "4"]


def test_sort_does_not_mutate_input(a_and_b):
    offers = list(a_and_b)
    sort_offers(offers, "price_asc")
    assert _ids(offers) == ["A", "B"]


@pytest.mark.parametrize("value", [None, "", "cheapest", 3, ["price_asc"]])
def test_invalid_sort_key_falls_back_to_price_asc(value):
    assert resolve_sort_key(value) is DEFAULT_SORT_KEY is SortKey.PRICE_ASC


def test_resolve_valid_keys():
    for key in SortKey:
        assert resolve_sort_key(key.value) is key


@pytest.mark.parametrize("key", list(SortKey))
def test_compare_is_a_total_order(key):
    offers = [
        {"price": 300, "duration": 100, "stops": 0, "preferenceScore": 1,
         "legs": [{"departure": {"time": "2026-01-01T00:00:00Z"}}]},
        {"price": {"amount": 200}, "legs": [{"departure": {"time": "garbage"}}, {}]},
        {"price": {"total": 300}, "durationMinutes": 50, "preferenceScore": 0.2,
         "legs": [{"departure": {"time": "2025-06-01T00:00:00Z"}}]},
        {},
        {"price": float("nan"), "stops": 3},
    ]
    for a, b, c in itertools.product(offers, repeat=3):
        if compare(key, a, b) <= 0 and compare(key, b, c) <= 0:
            assert compare(key, a, c) <= 0
    for a, b in itertools.product(offers, repeat=2):
        assert compare(key, a, b) == -compare(key, b, a)
