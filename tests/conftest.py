import pytest


@pytest.fixture
def united_offer():
    return {
        "price": {"amount": 450, "currency": "USD"},
        "stops": 1,
        "legs": [{"carrier": "UA"}],
    }


@pytest.fixture
def mixed_offers():
    return [
        {
            "id": "cheap-ota",
            "price": {"amount": 300, "currency": "USD"},
            "totalDurationMinutes": 410,
            "stops": 1,
            "legs": [
                {"carrier": "AA", "departure": {"airport": "JFK", "time": "2026-03-01T08:00:00Z"}},
                {"carrier": "AA", "departure": {"airport": "DFW", "time": "2026-03-01T12:00:00Z"}},
            ],
            "bookingUrl": "https://www.expedia.com/Flights-Search",
        },
        {
            "id": "direct-delta",
            "price": {"amount": 520, "currency": "USD"},
            "totalDurationMinutes": 330,
            "stops": 0,
            "legs": [
                {"carrier": "DL", "departure": {"airport": "JFK", "time": "2026-03-01T06:30:00Z"}},
            ],
            "bookingUrl": "https://www.delta.com/booking",
            "preferenceScore": 0.9,
        },
        {
            "id": "no-price",
            "segments": [
                {"airline": "ua", "departure": {"airport": "EWR", "time": "2026-03-02T09:00:00Z"}},
                {"airline": "lh"},
            ],
            "url": "united.com/en/us/book",
            "preferenceScore": 0.4,
        },
    ]
