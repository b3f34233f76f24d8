# src/flight_sorter/main.py

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Mapping, Optional

from flight_sorter.runner import run
from flight_sorter.services.sink import SqliteDatasetSink, dump_record

logger = logging.getLogger(__name__)


class JsonLinesSink:
    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def push(self, record: Mapping[str, Any]) -> None:
        self.stream.write(dump_record(record) + "\n")


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="flight-sorter",
        description="Filter and sort flight offers from an input JSON file.",
    )
    parser.add_argument("input", help="Path to the run input JSON")
    parser.add_argument("--dataset", help="Write results to this SQLite dataset instead of stdout")
    parser.add_argument("--run-id", help="Dataset run id (default: current UTC time)")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        with open(args.input, encoding="utf-8") as fh:
            run_input = json.load(fh)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read input %s: %s", args.input, exc)
        return 2

    if args.dataset:
        sink = SqliteDatasetSink(args.dataset, run_id=args.run_id)
    else:
        sink = JsonLinesSink()
    run(run_input, sink)
    return 0


if __name__ == "__main__":
    sys.exit(main())
