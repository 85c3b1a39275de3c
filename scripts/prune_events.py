#!/usr/bin/env python3
"""Drop events that cannot be placed on the week grid and write a new SQLite database."""

from __future__ import annotations

import argparse
import sqlite3
from pathlib import Path

from schedule_grid import ScheduleEvent, validate_event
from schedule_tool import fetch_events, init_db, load_events
from timeslots import DAY_ORDER, TimeSlotTable, default_table


def load_meta(conn: sqlite3.Connection) -> dict[str, str]:
    rows = conn.execute("SELECT key, value FROM meta").fetchall()
    return {key: value for key, value in rows}


def prune_events(
    events: tuple[ScheduleEvent, ...] | list[ScheduleEvent],
    table: TimeSlotTable,
    days: tuple[str, ...] = DAY_ORDER,
) -> tuple[list[ScheduleEvent], list[tuple[ScheduleEvent, list[str]]]]:
    kept: list[ScheduleEvent] = []
    removed: list[tuple[ScheduleEvent, list[str]]] = []
    for event in events:
        problems = validate_event(event, table, days)
        if problems:
            removed.append((event, problems))
        else:
            kept.append(event)
    return kept, removed


def main() -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Remove events whose day or times do not match the slot catalog and "
            "write a new SQLite database."
        )
    )
    parser.add_argument("--db", type=Path, default=Path("schedule.db"))
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("schedule-pruned.db"),
        help="Output SQLite DB path",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite output DB if it already exists",
    )
    args = parser.parse_args()

    if not args.db.exists():
        raise SystemExit(f"Input DB not found: {args.db}")
    if args.out.exists() and not args.overwrite:
        raise SystemExit(
            f"Output DB already exists: {args.out} (use --overwrite to replace)"
        )

    source_conn = sqlite3.connect(str(args.db))
    events = fetch_events(source_conn)
    meta = load_meta(source_conn)
    source_conn.close()

    kept, removed = prune_events(events, default_table())

    if args.out.exists():
        args.out.unlink()

    out_conn = init_db(args.out)
    load_events(out_conn, kept, meta.get("source", str(args.db)))
    out_conn.close()

    for event, problems in removed:
        print(f"- {event.id} {event.subject_name or '(Untitled)'}: {'; '.join(problems)}")
    print(f"Input events: {len(events)}")
    print(f"Removed: {len(removed)}")
    print(f"Output events: {len(kept)}")
    print(f"Wrote: {args.out}")


if __name__ == "__main__":
    main()
