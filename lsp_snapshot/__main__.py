#!/usr/bin/env python3
# just a canvas to play in.
import argparse
import json
import logging
import os
import sys
import typing as t

from .diff import apply_changes, diff
from .snapshot import Snapshot
from .utils import calculate_change_events


def _read(path: str) -> str:
    # newline="" keeps \r and \r\n as they are in the file
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def main(argv: t.Optional[t.List[str]] = None) -> int:
    logging.basicConfig(
        level=os.environ.get("LSP_SNAPSHOT_LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(prog="python -m lsp_snapshot")
    subparsers = parser.add_subparsers(dest="command", required=True)

    diff_parser = subparsers.add_parser("diff", help="print the changes as JSON")
    diff_parser.add_argument("old_file")
    diff_parser.add_argument("new_file")

    events_parser = subparsers.add_parser(
        "events", help="print LSP content change events as JSON"
    )
    events_parser.add_argument("old_file")
    events_parser.add_argument("new_file")

    position_parser = subparsers.add_parser(
        "position", help="print the line and column of an offset"
    )
    position_parser.add_argument("file")
    position_parser.add_argument("offset", type=int)

    args = parser.parse_args(argv)

    if args.command == "position":
        snapshot = Snapshot(version=0, content=_read(args.file))
        print(json.dumps(snapshot.position_at(args.offset).model_dump()))
        return 0

    old_text = _read(args.old_file)
    new_text = _read(args.new_file)
    if args.command == "diff":
        changes = diff(old_text, new_text)
        assert apply_changes(old_text, changes) == new_text
        print(json.dumps([change.model_dump(mode="json") for change in changes], indent=2))
    else:
        events = calculate_change_events(old_text, new_text)
        print(json.dumps([event.model_dump(mode="json") for event in events], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
