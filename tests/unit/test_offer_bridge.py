from flight_sorter.core.models import Endpoint, Leg, Offer, Price
from flight_sorter.services.offer_bridge import SUMMARY_COLUMNS, offers_to_records, records_to_frame, summarize


def _offer():
    return Offer(
        price=Price(amount=250.0, currency="EUR"),
        total_duration_minutes=95,
        stops=0,
        legs=(Leg(carrier="AF", departure=Endpoint("CDG", "2026-06-01T10:00:00Z"),
                  arrival=Endpoint("NCE", "2026-06-01T11:35:00Z"), duration_minutes=95),),
        booking_url="https://www.airfrance.com/book",
        provider="kayak",
    )


def test_offer_to_dict_is_canonical():
    assert _offer().to_dict() == {
        "price": {"amount": 250.0, "currency": "EUR"},
        "totalDurationMinutes": 95,
        "stops": 0,
        "legs": [{
            "carrier": "AF",
            "departure": {"airport": "CDG", "time": "2026-06-01T10:00:00Z"},
            "arrival": {"airport": "NCE", "time": "2026-06-01T11:35:00Z"},
            "durationMinutes": 95,
        }],
        "bookingUrl": "https://www.airfrance.com/book",
        "provider": "kayak",
    }


def test_offers_to_records_passes_mappings_through():
    raw = {"price": 1}
    records = offers_to_records([_offer(), raw])
    assert records[0]["provider"] == "kayak"
    assert records[1] is raw


def test_summarize():
    row = summarize(_offer())
    assert row["price"] == 250.0
    assert row["currency"] == "EUR"
    assert row["carriers"] == "AF"
    assert row["direct_airline"] is True
    assert row["departure"].isoformat() == "2026-06-01T10:00:00+00:00"


def test_summarize_unknowns():
    row = summarize({"legs": [{"departure": {"time": "soon"}}]})
    assert row["price"] is None
    assert row["departure"] is None
    assert row["direct_airline"] is False


def test_records_to_frame_columns():
    df = records_to_frame([])
    assert list(df.columns) == SUMMARY_COLUMNS
    assert records_to_frame([_offer(), {"price": 10}])["price"].tolist() == [250.0, 10]
