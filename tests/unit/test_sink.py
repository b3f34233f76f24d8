import os

from flight_sorter.services.sink import ListSink, SqliteDatasetSink, dump_record


def test_list_sink_keeps_push_order():
    sink = ListSink()
    sink.push({"id": 2})
    sink.push({"id": 1})
    assert sink.items == [{"id": 2}, {"id": 1}]


def test_sqlite_sink_round_trips_in_emission_order(tmp_path):
    db_path = os.path.join(str(tmp_path), "nested", "dataset.sqlite")
    sink = SqliteDatasetSink(db_path, run_id="run-1")
    records = [
        {"id": "b", "price": {"amount": 300, "currency": "USD"}, "legs": [{"carrier": "UA"}]},
        {"id": "a", "price": 500},
    ]
    for r in records:
        sink.push(r)

    assert os.path.exists(db_path)
    assert sink.items() == records


def test_sqlite_sink_separates_runs(tmp_path):
    db_path = str(tmp_path / "dataset.sqlite")
    first = SqliteDatasetSink(db_path, run_id="first")
    second = SqliteDatasetSink(db_path, run_id="second")
    first.push({"id": 1})
    second.push({"id": 2})

    assert first.items() == [{"id": 1}]
    assert second.items() == [{"id": 2}]
    assert second.items(run_id="first") == [{"id": 1}]


def test_sqlite_sink_dataframe(tmp_path):
    sink = SqliteDatasetSink(str(tmp_path / "dataset.sqlite"))
    sink.push({"price": {"amount": 300, "currency": "USD"}, "stops": 0,
               "legs": [{"carrier": "DL"}], "bookingUrl": "https://www.delta.com/x"})

    df = sink.to_dataframe()
    assert len(df) == 1
    row = df.iloc[0]
    assert row["price"] == 300
    assert row["carriers"] == "DL"
    assert bool(row["direct_airline"]) is True


def test_records_are_written_as_strict_json(tmp_path):
    assert dump_record({"price": float("nan"), "legs": [{"duration": float("inf")}]}) == \
        '{"price": null, "legs": [{"duration": null}]}'
    assert dump_record({"price": 12.5}) == '{"price": 12.5}'

    sink = SqliteDatasetSink(str(tmp_path / "dataset.sqlite"), run_id="nan")
    sink.push({"id": "x", "score": float("nan")})
    assert sink.items() == [{"id": "x", "score": None}]
