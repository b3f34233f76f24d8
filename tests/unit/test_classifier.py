import pytest

from flight_sorter.core.classifier import DomainClassifier, booking_url, extract_domain, is_direct_airline


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.delta.com/booking", "delta.com"),
        ("HTTPS://WWW.United.COM/x?y=1", "united.com"),
        ("aa.com/booking", "aa.com"),
        ("http://book.lufthansa.com", "book.lufthansa.com"),
        ("https://wwwexpedia.com", "wwwexpedia.com"),
        ("", None),
        ("   ", None),
        (None, None),
        ("https://[broken", None),
    ],
)
def test_extract_domain(url, expected):
    assert extract_domain(url) == expected


def test_booking_url_fallback_order():
    assert booking_url({"bookingUrl": "a.com", "url": "b.com"}) == "a.com"
    assert booking_url({"bookingUrl": " ", "bookingLink": "c.com"}) == "c.com"
    assert booking_url({"url": "d.com"}) == "d.com"
    assert booking_url({}) is None


def test_airline_domain_is_direct():
    assert is_direct_airline({"bookingUrl": "https://www.delta.com/booking"})


def test_ota_domain_is_not_direct_even_with_carrier():
    offer = {"bookingUrl": "https://www.expedia.com/x", "legs": [{"carrier": "DL"}]}
    assert not is_direct_airline(offer)


def test_explicit_flag_wins_over_url():
    offer = {"isDirectAirline": True, "bookingUrl": "https://www.expedia.com/x"}
    assert is_direct_airline(offer)


def test_explicit_false_does_not_short_circuit():
    offer = {"isDirectAirline": False, "bookingUrl": "https://www.delta.com/booking"}
    assert is_direct_airline(offer)


def test_carrier_substring_heuristic():
    offer = {"bookingUrl": "https://book.flyuax.example", "legs": [{"carrier": "UA"}]}
    assert is_direct_airline(offer)
    offer = {"bookingUrl": "https://tickets.example.org", "legs": [{"carrier": "UA"}]}
    assert not is_direct_airline(offer)


def test_unknown_domain_without_legs_is_not_direct():
    assert not is_direct_airline({"bookingUrl": "https://somewhere.example"})
    assert not is_direct_airline({})


def test_injected_domain_sets():
    classifier = DomainClassifier(airline_domains={"flyexample.com"}, ota_domains={"delta.com"})
    assert classifier.is_direct_airline({"bookingUrl": "https://flyexample.com/b"})
    assert not classifier.is_direct_airline(
        {"bookingUrl": "https://www.delta.com/booking", "legs": [{"carrier": "DL"}]})
