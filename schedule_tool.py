#!/usr/bin/env python3
"""Load weekly class events into SQLite and render the week grid as HTML."""

from __future__ import annotations

import argparse
import datetime as dt
import html
import json
import logging
import sqlite3
from pathlib import Path

import layout_config
from schedule_grid import (
    DIAGONAL_SPLIT,
    EMPTY,
    GRID_2X2,
    SINGLE_FULL,
    RenderCell,
    ScheduleEvent,
    assemble_grid,
    lunch_segments,
    overflowing_cells,
    validate_event,
)
from timeslots import DAY_ORDER, ConfigurationError, TimeSlotTable, default_table

logger = logging.getLogger(__name__)

MAKEUP_ABBREVIATIONS = {
    "lecture": "(L)",
    "seminar": "(S)",
    "lab": "(LAB)",
}
CONTROL_FORMS = {
    "exam": "Exam",
    "ongoing": "Continuous assessment",
}
PROJECT_TYPES = {
    "course_project": "Course project",
    "course_work": "Course work",
}
SUBGROUP_LABELS = {
    "a": "Subgroup A",
    "b": "Subgroup B",
}
CATEGORY_LABELS = {
    "lecture": "Lecture",
    "seminar": "Seminar",
    "lab": "Lab",
    "makeup": "Makeup session",
}
CATEGORY_FILL_COLORS = {
    "lecture": "#d3ffd7",
    "seminar": "#a4fff1",
    "lab": "#e3d0ff",
    "makeup": "#ffdbf8",
}
WEEK_LABELS = {"odd": "Odd week", "even": "Even week"}
WEEK_BADGES = {"odd": "ODD", "even": "EVEN"}
WEEK_COLORS = {"odd": "#85daff", "even": "#ff9ec6"}
LUNCH_LABEL = "Lunch break"
DEFAULT_FILL_COLOR = "#f4f4f4"

EVENT_COLUMNS = [
    "id",
    "day_name",
    "start_time",
    "end_time",
    "week_cycle",
    "event_type",
    "subject_type",
    "subject_name",
    "room",
    "control_form",
    "project_type",
    "subgroup",
    "group_number",
]
EVENT_COLUMN_LIST = ", ".join(EVENT_COLUMNS)
EVENT_PLACEHOLDERS = ", ".join("?" for _ in EVENT_COLUMNS)


def truncate_text(text: str, max_length: int | None) -> str:
    if not text:
        return ""
    if not max_length or max_length <= 0:
        return text
    if len(text) <= max_length:
        return text
    suffix = "..."
    if max_length <= len(suffix):
        return text[:max_length]
    trimmed = text[: max_length - len(suffix)].rstrip()
    if not trimmed:
        return text[:max_length]
    return trimmed + suffix


def normalize_display_settings(
    display_options: dict | None, title_max_length: int | None
) -> tuple[dict, int]:
    display = dict(layout_config.DEFAULT_DISPLAY_OPTIONS)
    if display_options:
        display.update(display_options)
    if title_max_length is None:
        title_max_length = layout_config.DEFAULT_TITLE_MAX_LENGTH
    return display, title_max_length


# ----------------------------------------------------------------------
# Event text
# ----------------------------------------------------------------------


def event_category(event: ScheduleEvent) -> str:
    return "makeup" if event.is_makeup else event.subject_type


def event_fill_color(event: ScheduleEvent) -> str:
    return CATEGORY_FILL_COLORS.get(event_category(event), DEFAULT_FILL_COLOR)


def group_label(event: ScheduleEvent) -> str | None:
    if event.subgroup != "none":
        return SUBGROUP_LABELS.get(event.subgroup, event.subgroup)
    if event.group_number:
        return f"Group {event.group_number}"
    return None


def event_title(event: ScheduleEvent, title_max_length: int | None = None) -> str:
    title = truncate_text(event.subject_name or "(Untitled)", title_max_length)
    if event.is_makeup and event.subject_type in MAKEUP_ABBREVIATIONS:
        title = f"{title} {MAKEUP_ABBREVIATIONS[event.subject_type]}"
    return title


def week_badge(event: ScheduleEvent, show: bool) -> str | None:
    if not show or event.week_cycle == "every":
        return None
    return WEEK_BADGES[event.week_cycle]


def event_text(
    event: ScheduleEvent,
    display: dict,
    title_max_length: int | None,
    compact: bool,
) -> dict:
    """Title, detail lines and badges shown for one event block."""
    details: list[str] = []
    badges: list[str] = []
    if display.get("show_room"):
        details.append(event.room or "-")

    is_lecture = event.subject_type == "lecture"
    label = group_label(event)
    if compact:
        if label and display.get("show_group"):
            badges.append(label)
    elif event.is_makeup:
        if label and display.get("show_group"):
            badges.append(label)
    else:
        if is_lecture and event.control_form != "none" and display.get("show_control_form"):
            form = CONTROL_FORMS.get(event.control_form, event.control_form)
            details.append(f"({form})")
        if (
            event.subgroup != "none"
            and event.subject_type in ("seminar", "lab")
            and display.get("show_group")
        ):
            badges.append(SUBGROUP_LABELS.get(event.subgroup, event.subgroup))
        if is_lecture and event.project_type != "none" and display.get("show_project"):
            badges.append(PROJECT_TYPES.get(event.project_type, event.project_type))

    return {
        "title": event_title(event, title_max_length),
        "details": details,
        "badges": badges,
    }


# ----------------------------------------------------------------------
# Event store
# ----------------------------------------------------------------------


def init_db(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS events (
            id INTEGER PRIMARY KEY,
            day_name TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            week_cycle TEXT NOT NULL DEFAULT 'every',
            event_type TEXT NOT NULL DEFAULT 'regular',
            subject_type TEXT NOT NULL DEFAULT 'lecture',
            subject_name TEXT,
            room TEXT,
            control_form TEXT,
            project_type TEXT,
            subgroup TEXT,
            group_number TEXT
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS meta (
            key TEXT PRIMARY KEY,
            value TEXT
        )
        """
    )
    return conn


def store_id(value: int | str | None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def load_events(conn: sqlite3.Connection, events: list[ScheduleEvent], source: str) -> None:
    """Replace the stored snapshot with events in a single transaction."""
    rows = [
        (
            store_id(event.id),
            event.day,
            event.start_time,
            event.end_time,
            event.week_cycle,
            event.event_type,
            event.subject_type,
            event.subject_name,
            event.room,
            event.control_form,
            event.project_type,
            event.subgroup,
            event.group_number,
        )
        for event in events
    ]
    with conn:
        conn.execute("DELETE FROM events")
        conn.execute("DELETE FROM meta")
        conn.execute(
            "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
            ("source", source),
        )
        conn.execute(
            "INSERT OR REPLACE INTO meta (key, value) VALUES (?, ?)",
            ("generated_at", dt.datetime.now(dt.timezone.utc).isoformat()),
        )
        conn.executemany(
            f"INSERT INTO events ({EVENT_COLUMN_LIST}) VALUES ({EVENT_PLACEHOLDERS})",
            rows,
        )


def fetch_events(conn: sqlite3.Connection) -> tuple[ScheduleEvent, ...]:
    rows = conn.execute(
        f"SELECT {EVENT_COLUMN_LIST} FROM events ORDER BY id"
    ).fetchall()
    return tuple(ScheduleEvent.from_dict(dict(zip(EVENT_COLUMNS, row))) for row in rows)


def read_events_json(json_path: Path) -> list[ScheduleEvent]:
    if not json_path.exists():
        raise SystemExit(f"Events file not found: {json_path}")
    try:
        data = json.loads(json_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {json_path}: {exc}")
    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise SystemExit(f"Expected a list of events in {json_path}")

    events: list[ScheduleEvent] = []
    seen_ids: set[int] = set()
    for position, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise SystemExit(f"Event #{position} in {json_path} is not an object")
        try:
            event = ScheduleEvent.from_dict(item)
        except ValueError as exc:
            raise SystemExit(f"Event #{position} in {json_path}: {exc}")
        key = store_id(event.id)
        if key is not None:
            if key in seen_ids:
                raise SystemExit(f"Duplicate event id {key} in {json_path} (event #{position})")
            seen_ids.add(key)
        events.append(event)
    return events


def validate_snapshot(
    events: list[ScheduleEvent] | tuple[ScheduleEvent, ...],
    table: TimeSlotTable,
    days: tuple[str, ...] = DAY_ORDER,
) -> list[str]:
    messages: list[str] = []
    for event in events:
        name = event.subject_name or "(Untitled)"
        for problem in validate_event(event, table, days):
            messages.append(f"Event {event.id} ({name}): {problem}")
    for cell in overflowing_cells(assemble_grid(events, table, days)):
        dropped = ", ".join(str(event.id) for event in cell.layout.dropped)
        messages.append(
            f"{cell.day} {cell.slot.label()}: {len(cell.layout.dropped)} event(s) not shown ({dropped})"
        )
    return messages


def import_events(json_path: Path, db_path: Path) -> tuple[int, list[str]]:
    events = read_events_json(json_path)
    if not events:
        raise SystemExit(f"No events found in {json_path}")
    logger.debug("Read %d events from %s", len(events), json_path)
    warnings = validate_snapshot(events, default_table())
    conn = init_db(db_path)
    load_events(conn, events, json_path.name)
    conn.close()
    return len(events), warnings


def grid_payload(
    events: list[ScheduleEvent] | tuple[ScheduleEvent, ...],
    layout: dict | None = None,
    table: TimeSlotTable | None = None,
    days: tuple[str, ...] = DAY_ORDER,
) -> dict:
    table = table or default_table()
    visible = layout_config.apply_layout(events, layout)
    cells = assemble_grid(visible, table, days)
    return {
        "days": list(days),
        "slots": [
            {"index": idx, "start": slot.start, "end": slot.end, "is_lunch": slot.is_lunch}
            for idx, slot in enumerate(table)
        ],
        "events": [event.as_dict() for event in visible],
        "cells": [cell.as_dict() for cell in cells],
    }


# ----------------------------------------------------------------------
# HTML rendering
# ----------------------------------------------------------------------


def render_event_html(
    event: ScheduleEvent,
    display: dict,
    title_max_length: int | None,
    compact: bool = False,
    show_week_badge: bool = False,
    extra_class: str = "",
) -> str:
    text = event_text(event, display, title_max_length, compact)
    classes = ["event-block", event_category(event)]
    if compact:
        classes.append("compact")
    if extra_class:
        classes.append(extra_class)

    badge_html = ""
    badge = week_badge(event, show_week_badge and display.get("show_week_badges"))
    corner = [f"<span class=\"week-badge {event.week_cycle}-badge\">{badge}</span>"] if badge else []
    corner.extend(
        f"<span class=\"glassy-badge\">{html.escape(label)}</span>" for label in text["badges"]
    )
    if corner:
        badge_html = f"<div class=\"event-badges {event.week_cycle}\">{''.join(corner)}</div>"

    detail_html = "".join(
        f"<div class=\"event-detail\">{html.escape(detail)}</div>" for detail in text["details"]
    )
    return (
        f"<div class=\"{' '.join(classes)}\" data-event-id=\"{html.escape(str(event.id))}\" "
        f"style=\"background-color: {event_fill_color(event)}\">"
        f"<div class=\"event-title\">{html.escape(text['title'])}</div>"
        f"{detail_html}{badge_html}</div>"
    )


def render_cell_html(cell: RenderCell, display: dict, title_max_length: int | None) -> str:
    layout = cell.layout
    day, start, end = cell.click_target
    attrs = (
        f"rowspan=\"{cell.row_span}\" data-day=\"{html.escape(day)}\" "
        f"data-start=\"{start}\" data-end=\"{end}\""
    )

    if layout.variant == EMPTY:
        return f"<td class=\"slot-cell empty\" {attrs}><span class=\"add\">+</span></td>"

    if layout.variant == SINGLE_FULL:
        body = render_event_html(layout.event_at("full"), display, title_max_length)
    elif layout.variant == GRID_2X2:
        quadrants = []
        for position, event in layout.placements:
            if event is None:
                quadrants.append(f"<div class=\"grid-quadrant {position} empty\"></div>")
                continue
            block = render_event_html(
                event,
                display,
                title_max_length,
                compact=True,
                show_week_badge=layout.show_week_badges,
            )
            quadrants.append(f"<div class=\"grid-quadrant {position}\">{block}</div>")
        body = f"<div class=\"grid-2x2\">{''.join(quadrants)}</div>"
    elif layout.variant == DIAGONAL_SPLIT:
        halves = []
        for cycle in ("odd", "even"):
            event = layout.event_at(cycle)
            if event is None:
                inner = "<div class=\"diagonal-empty\"></div>"
            else:
                inner = render_event_html(
                    event, display, title_max_length, compact=True, extra_class="diagonal"
                )
            halves.append(
                f"<div class=\"diagonal-{cycle}\">{inner}"
                f"<div class=\"week-badge {cycle}-badge\">{WEEK_LABELS[cycle]}</div></div>"
            )
        divider = (
            "<svg class=\"diagonal-divider\" viewBox=\"0 0 100 100\" preserveAspectRatio=\"none\" "
            "aria-hidden=\"true\"><line x1=\"0\" y1=\"100\" x2=\"100\" y2=\"0\" "
            f"stroke=\"{layout.divider_color}\" stroke-width=\"2\" "
            "vector-effect=\"non-scaling-stroke\"/></svg>"
        )
        body = f"<div class=\"diagonal-container\">{''.join(halves)}{divider}</div>"
    else:
        blocks = "".join(
            render_event_html(
                event, display, title_max_length, compact=True, show_week_badge=True
            )
            for event in layout.events
        )
        body = f"<div class=\"linear-list\">{blocks}</div>"

    if layout.dropped and display.get("show_overflow_count"):
        body += f"<div class=\"overflow-count\">+{len(layout.dropped)} more</div>"
    return f"<td class=\"slot-cell {layout.variant}\" {attrs}>{body}</td>"


def render_lunch_row_html(
    cell: RenderCell, cells: list[RenderCell], days: tuple[str, ...]
) -> str:
    label = f"{LUNCH_LABEL} {cell.slot.start}-{cell.slot.end}"
    parts = [
        "<tr class=\"lunch-row\">",
        f"<td class=\"time-col\">{html.escape(cell.slot.label())}</td>",
    ]
    for _, colspan in lunch_segments(cells, cell.slot_index, days):
        parts.append(
            f"<td class=\"lunch-cell\" colspan=\"{colspan}\">{html.escape(label)}</td>"
        )
    parts.append("</tr>")
    return "".join(parts)


def render_legend_html() -> str:
    items = [
        f"<span class=\"legend-item\"><span class=\"swatch\" style=\"background-color: "
        f"{CATEGORY_FILL_COLORS[key]}\"></span>{html.escape(label)}</span>"
        for key, label in CATEGORY_LABELS.items()
    ]
    items.extend(
        f"<span class=\"legend-item\"><span class=\"swatch\" style=\"background-color: "
        f"{WEEK_COLORS[cycle]}\"></span>{html.escape(label)}</span>"
        for cycle, label in WEEK_LABELS.items()
    )
    return f"<div class=\"legend\">{''.join(items)}</div>"


def render_week_html(
    cells: list[RenderCell],
    days: tuple[str, ...] = DAY_ORDER,
    title: str = "Weekly schedule",
    subtitle: str = "",
    display_options: dict | None = None,
    title_max_length: int | None = None,
    table: TimeSlotTable | None = None,
) -> str:
    display, title_max_length = normalize_display_settings(
        display_options, title_max_length
    )
    table = table or default_table()

    css = """
:root {
  --paper: #fbfaf6;
  --ink: #1c1b1a;
  --muted: #6b665f;
  --grid: rgba(46, 42, 37, 0.14);
  --lunch: #ffe4bd;
  --odd: #85daff;
  --even: #ff9ec6;
  --slot-height: 64px;
}
* { box-sizing: border-box; }
body {
  margin: 0;
  background: #f0ece3;
  color: var(--ink);
  font-family: 'Avenir Next', 'Segoe UI', sans-serif;
}
.page {
  max-width: 1280px;
  margin: 24px auto;
  background: var(--paper);
  border-radius: 14px;
  box-shadow: 0 12px 32px rgba(28, 27, 26, 0.12);
  padding: 28px 32px 36px;
}
header h1 { margin: 0 0 4px; font-size: 28px; }
header .subtitle { font-size: 13px; letter-spacing: 1.4px; text-transform: uppercase; color: var(--muted); }
.legend { display: flex; flex-wrap: wrap; gap: 16px; margin: 16px 0; font-size: 12px; }
.legend-item { display: inline-flex; align-items: center; gap: 6px; }
.swatch { width: 12px; height: 12px; border-radius: 3px; border: 1px solid rgba(0, 0, 0, 0.1); }
table { width: 100%; border-collapse: collapse; table-layout: fixed; }
thead th {
  background: #fff8a9;
  font-size: 12px;
  text-transform: uppercase;
  letter-spacing: 1.2px;
  padding: 10px 8px;
  border-bottom: 3px solid rgba(0, 0, 0, 0.1);
}
tbody tr { height: var(--slot-height); }
td { border: 1px solid var(--grid); vertical-align: top; padding: 0; font-size: 12px; }
.time-col { width: 96px; padding: 6px 8px; font-weight: 600; white-space: nowrap; background: rgba(46, 42, 37, 0.04); }
.lunch-row { height: 36px; }
.lunch-cell { text-align: center; vertical-align: middle; font-weight: 700; background: var(--lunch); }
.slot-cell { position: relative; }
.slot-cell.empty { text-align: center; vertical-align: middle; color: rgba(0, 0, 0, 0.25); cursor: pointer; }
.event-block { height: 100%; min-height: var(--slot-height); padding: 6px 8px; position: relative; cursor: pointer; overflow: hidden; }
.event-block.compact { min-height: 0; padding: 4px 6px; font-size: 11px; }
.event-title { font-weight: 700; line-height: 1.2; }
.event-detail { margin-top: 2px; color: #4a4640; font-weight: 600; }
.event-badges { display: flex; gap: 4px; margin-top: 4px; }
.event-badges.even { justify-content: flex-end; }
.glassy-badge { font-size: 10px; padding: 1px 6px; border-radius: 8px; background: rgba(255, 255, 255, 0.7); }
.week-badge { font-size: 10px; font-weight: 700; padding: 1px 6px; border-radius: 8px; }
.odd-badge { background: var(--odd); }
.even-badge { background: var(--even); }
.grid-2x2 { display: grid; grid-template-columns: 1fr 1fr; grid-template-rows: 1fr 1fr; height: 100%; gap: 1px; }
.grid-quadrant.empty { background: rgba(46, 42, 37, 0.03); }
.diagonal-container { position: relative; height: 100%; min-height: var(--slot-height); }
.diagonal-odd, .diagonal-even { position: absolute; inset: 0; }
.diagonal-odd { clip-path: polygon(0 0, 100% 0, 0 100%); }
.diagonal-even { clip-path: polygon(100% 0, 100% 100%, 0 100%); text-align: right; }
.diagonal-odd .week-badge { position: absolute; top: 4px; left: 4px; }
.diagonal-even .week-badge { position: absolute; bottom: 4px; right: 4px; }
.diagonal-divider { position: absolute; inset: 0; width: 100%; height: 100%; pointer-events: none; }
.linear-list { display: flex; flex-direction: column; gap: 2px; padding: 2px; }
.overflow-count { position: absolute; right: 4px; bottom: 2px; font-size: 10px; color: var(--muted); }
@media print {
  body { background: #ffffff; }
  .page { margin: 0; box-shadow: none; border-radius: 0; }
}
"""

    html_parts = [
        "<!DOCTYPE html>",
        "<html lang=\"en\">",
        "<head>",
        "<meta charset=\"utf-8\">",
        f"<title>{html.escape(title)}</title>",
        "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">",
        f"<style>{css}</style>",
        "</head>",
        "<body>",
        "<div class=\"page\">",
        "<header>",
        f"<h1>{html.escape(title)}</h1>",
        f"<div class=\"subtitle\">{html.escape(subtitle)}</div>",
        "</header>",
        render_legend_html(),
        "<table>",
        "<thead>",
        "<tr>",
        "<th class=\"time-col\">Time</th>",
    ]
    for day in days:
        html_parts.append(f"<th>{html.escape(day)}</th>")
    html_parts.extend(["</tr>", "</thead>", "<tbody>"])

    rows: dict[int, list[RenderCell]] = {}
    for cell in cells:
        rows.setdefault(cell.slot_index, []).append(cell)

    # Every slot gets a row, even when all of its day cells are covered by spans.
    for slot_index, slot in enumerate(table):
        row_cells = rows.get(slot_index, [])
        if row_cells and row_cells[0].is_lunch:
            html_parts.append(render_lunch_row_html(row_cells[0], cells, days))
            continue
        html_parts.append("<tr>")
        html_parts.append(f"<td class=\"time-col\">{html.escape(slot.label())}</td>")
        for cell in row_cells:
            html_parts.append(render_cell_html(cell, display, title_max_length))
        html_parts.append("</tr>")

    html_parts.extend([
        "</tbody>",
        "</table>",
        "</div>",
        "</body>",
        "</html>",
    ])
    return "\n".join(html_parts)


def render_html(
    conn: sqlite3.Connection,
    outdir: Path,
    layout_path: Path | None = None,
    title: str = "Weekly schedule",
) -> list[Path]:
    outdir.mkdir(parents=True, exist_ok=True)
    layout = layout_config.load_layout(layout_path) if layout_path else None
    display_options, title_max_length = layout_config.get_display_settings(layout)

    table = default_table()
    events = layout_config.apply_layout(fetch_events(conn), layout)
    cells = assemble_grid(events, table, DAY_ORDER)

    source = conn.execute("SELECT value FROM meta WHERE key = 'source'").fetchone()
    html_content = render_week_html(
        cells,
        DAY_ORDER,
        title=title,
        subtitle=source[0] if source else "",
        display_options=display_options,
        title_max_length=title_max_length,
        table=table,
    )
    week_path = outdir / "week.html"
    week_path.write_text(html_content, encoding="utf-8")

    grid_path = outdir / "grid.json"
    payload = grid_payload(events, None, table, DAY_ORDER)
    grid_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return [week_path, grid_path]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Load weekly class events into SQLite and render the week grid."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Load events JSON into SQLite")
    import_parser.add_argument("events", type=Path, help="Path to events JSON")
    import_parser.add_argument("--db", type=Path, default=Path("schedule.db"))

    validate_parser = subparsers.add_parser("validate", help="Report events that do not fit the grid")
    validate_parser.add_argument("--db", type=Path, default=Path("schedule.db"))

    render_parser = subparsers.add_parser("render", help="Render the week grid as HTML")
    render_parser.add_argument("--db", type=Path, default=Path("schedule.db"))
    render_parser.add_argument("--outdir", type=Path, default=Path("output"))
    render_parser.add_argument("--title", default="Weekly schedule")
    render_parser.add_argument(
        "--layout",
        type=Path,
        default=Path("layout.json"),
        help="Display settings JSON",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "import":
            count, warnings = import_events(args.events, args.db)
            for warning in warnings:
                print(f"warning: {warning}")
            print(f"Imported {count} events into {args.db}")
            return

        if args.command == "validate":
            if not args.db.exists():
                raise SystemExit(f"Database not found: {args.db}")
            conn = init_db(args.db)
            problems = validate_snapshot(fetch_events(conn), default_table())
            for problem in problems:
                print(problem)
            if problems:
                raise SystemExit(f"{len(problems)} problem(s) found")
            print("All events fit the grid")
            return

        if args.command == "render":
            conn = init_db(args.db)
            outputs = render_html(conn, args.outdir, layout_path=args.layout, title=args.title)
            print(f"Rendered {len(outputs)} files in {args.outdir}")
    except ConfigurationError as exc:
        raise SystemExit(f"Configuration error: {exc}")


if __name__ == "__main__":
    main()
