import json
from datetime import date, timedelta

import streamlit as st

from flight_sorter.core.ranking import SortKey
from flight_sorter.runner import run
from flight_sorter.services.offer_bridge import records_to_frame
from flight_sorter.services.sink import ListSink

st.set_page_config(
    page_title="Flight Offer Sorter",
    layout="wide",
)

st.title("✈️ Flight Offer Sorter")
st.write("Filter and rank flight offers from any provider in one canonical view.")

with st.sidebar:
    st.header("Offers")

    uploaded = st.file_uploader("Offers JSON (list or run input)", type=["json"])
    pasted = st.text_area("…or paste offers JSON", value="", height=120)

    use_sources = st.checkbox(
        "Also fetch from providers",
        value=False,
        help="Fetches Kayak / Skyscanner result pages over plain HTTP. "
             "Client-side rendered pages may return no offers.",
    )
    sources = []
    search = None
    if use_sources:
        sources = st.multiselect(
            "Providers", options=["kayak", "skyscanner"], default=["kayak"])
        origin = st.text_input("Departing from", "SJU")
        destination = st.text_input("Departing to", "JFK")
        today = date.today()
        depart_date = st.date_input(
            "Departure date", value=today, min_value=today)
        round_trip = st.checkbox("Return flight", value=False)
        return_date = None
        if round_trip:
            return_date = st.date_input(
                "Return date",
                value=depart_date + timedelta(days=3),
                min_value=depart_date,
            )
        adults = st.number_input("Adults", min_value=1, value=1, step=1)
        search = {
            "origin": origin,
            "destination": destination,
            "departDate": depart_date.isoformat(),
            "returnDate": return_date.isoformat() if return_date else None,
            "adults": int(adults),
        }

    st.markdown("---")
    st.header("Filters")

    sort_by = st.selectbox(
        "Sort by", options=[k.value for k in SortKey], index=0)
    min_price = st.number_input("Min price", min_value=0.0, value=0.0, step=10.0)
    max_price = st.number_input(
        "Max price (0 = no limit)", min_value=0.0, value=0.0, step=10.0)
    max_stops = st.selectbox(
        "Max stops", options=["Any", "Nonstop only", "Up to 1 stop", "Up to 2 stops"], index=0)
    direct_only = st.checkbox("Direct airline booking only")
    include_airlines = st.text_input("Only these carriers (e.g. UA,DL)", "")
    exclude_airlines = st.text_input("Exclude carriers", "")

    run_clicked = st.button("Sort offers")


def _load_offers():
    raw = None
    if uploaded is not None:
        raw = uploaded.getvalue().decode("utf-8")
    elif pasted.strip():
        raw = pasted
    if raw is None:
        return {}
    data = json.loads(raw)
    # a bare list is the offers themselves; an object is a full run input
    if isinstance(data, list):
        return {"flightOffers": data}
    return data if isinstance(data, dict) else {}


if run_clicked:
    try:
        run_input = _load_offers()
    except ValueError as exc:
        st.error(f"Offers JSON could not be parsed: {exc}")
        st.stop()

    stops_limit = {"Nonstop only": 0, "Up to 1 stop": 1, "Up to 2 stops": 2}.get(max_stops)
    run_input.update({
        "sortBy": sort_by,
        "minPrice": min_price or None,
        "maxPrice": max_price or None,
        "maxStops": stops_limit,
        "directOnly": direct_only,
        "includeAirlines": include_airlines,
        "excludeAirlines": exclude_airlines,
        "sources": sources,
        "search": search,
    })

    sink = ListSink()
    total_in = len(run_input.get("flightOffers") or [])
    ranked = run(run_input, sink)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric(label="Offers supplied", value=total_in)
    with col2:
        st.metric(label="Offers after filters", value=len(ranked))
    with col3:
        st.metric(label="Sorted by", value=sort_by)

    if not ranked:
        st.warning("No offers left to show.")
    else:
        st.subheader("Ranked offers")
        st.dataframe(records_to_frame(sink.items), width="stretch")

        with st.expander("Raw records (emission order)"):
            st.json(sink.items)

        st.caption(
            "Unknown values always rank last. Direct-airline detection uses the booking link's "
            "domain, then the first carrier code."
        )
else:
    st.info("Load offers in the sidebar, then click **Sort offers**. 🚀")
