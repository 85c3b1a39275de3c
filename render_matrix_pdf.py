#!/usr/bin/env python3
"""Render the weekly slot-by-day grid as a PDF directly from the SQLite database."""

from __future__ import annotations

import argparse
import logging
import sqlite3
import unicodedata
from dataclasses import dataclass
from pathlib import Path

from fpdf import FPDF

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
)
from schedule_tool import (
    LUNCH_LABEL,
    WEEK_BADGES,
    WEEK_LABELS,
    event_fill_color,
    event_text,
    fetch_events,
    normalize_display_settings,
)
from timeslots import DAY_ORDER, ConfigurationError, TimeSlotTable, default_table

GRID_COLOR = (180, 170, 160)
HEADER_FILL = (255, 248, 169)
TIME_FILL = (244, 239, 231)
EMPTY_FILL = (250, 248, 243)
LUNCH_FILL = (255, 228, 189)


@dataclass
class RenderConfig:
    page_size: str
    orientation: str
    margin: float
    header_height: float
    time_col_width: float
    header_font_size: float
    body_font_size: float
    padding: float


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    text = value.lstrip("#")
    if len(text) == 3:
        text = "".join(char * 2 for char in text)
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)


def sanitize_text(value: str | None) -> str:
    if not value:
        return ""
    text = str(value)
    replacements = {
        "\u2013": "-",
        "\u2014": "-",
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": "\"",
        "\u201d": "\"",
        "\u2026": "...",
    }
    for src, dest in replacements.items():
        text = text.replace(src, dest)
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    return " ".join(text.split())


def wrap_text(pdf: FPDF, text: str, max_width: float) -> list[str]:
    words = text.split()
    if not words:
        return []
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}".strip()
        if pdf.get_string_width(candidate) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        if pdf.get_string_width(word) <= max_width:
            current = word
            continue
        chunk = ""
        for char in word:
            test = chunk + char
            if pdf.get_string_width(test) <= max_width:
                chunk = test
            else:
                if chunk:
                    lines.append(chunk)
                chunk = char
        current = chunk
    if current:
        lines.append(current)
    return lines


def shorten_line(pdf: FPDF, text: str, max_width: float, suffix: str = "...") -> str:
    if pdf.get_string_width(text) <= max_width:
        return text
    trimmed = text
    while trimmed and pdf.get_string_width(trimmed + suffix) > max_width:
        trimmed = trimmed[:-1]
    if not trimmed:
        return suffix
    return trimmed.rstrip() + suffix


def truncate_lines(
    pdf: FPDF, lines: list[str], max_width: float, max_lines: int
) -> list[str]:
    if len(lines) <= max_lines:
        return lines
    trimmed = lines[:max_lines]
    trimmed[-1] = shorten_line(pdf, trimmed[-1], max_width)
    return trimmed


def draw_text(
    pdf: FPDF,
    x: float,
    y: float,
    width: float,
    height: float,
    lines: list[str],
    align: str = "L",
    valign: str = "T",
    bold: bool = False,
    font_size: float | None = None,
    padding: float = 1.0,
) -> None:
    if not lines:
        return
    style = "B" if bold else ""
    if font_size is not None:
        pdf.set_font("Helvetica", style=style, size=font_size)
    else:
        pdf.set_font("Helvetica", style=style)
    line_height = pdf.font_size * 1.2
    max_lines = max(1, int((height - 2 * padding) / line_height))
    text_lines = truncate_lines(pdf, lines, width - 2 * padding, max_lines)
    if valign == "B":
        cursor_y = y + height - padding - line_height * len(text_lines)
    elif valign == "M":
        cursor_y = y + (height - line_height * len(text_lines)) / 2
    else:
        cursor_y = y + padding
    for line in text_lines:
        pdf.set_xy(x + padding, cursor_y)
        pdf.cell(width - 2 * padding, line_height, line, align=align)
        cursor_y += line_height


def draw_cell(
    pdf: FPDF,
    x: float,
    y: float,
    width: float,
    height: float,
    lines: list[str],
    fill_color: tuple[int, int, int] | None,
    align: str = "L",
    bold: bool = False,
    font_size: float | None = None,
    padding: float = 1.0,
) -> None:
    if fill_color:
        pdf.set_fill_color(*fill_color)
        pdf.rect(x, y, width, height, style="DF")
    else:
        pdf.rect(x, y, width, height)
    draw_text(
        pdf,
        x,
        y,
        width,
        height,
        lines,
        align=align,
        bold=bold,
        font_size=font_size,
        padding=padding,
    )


def build_event_lines(
    pdf: FPDF,
    event: ScheduleEvent,
    display: dict,
    title_max_length: int | None,
    max_width: float,
    compact: bool = False,
    show_week_badge: bool = False,
) -> list[str]:
    text = event_text(event, display, title_max_length, compact)
    lines: list[str] = []
    if show_week_badge and display.get("show_week_badges") and event.week_cycle != "every":
        lines.append(f"[{WEEK_BADGES[event.week_cycle]}]")
    lines.extend(wrap_text(pdf, sanitize_text(text["title"]), max_width))
    for detail in text["details"]:
        lines.extend(wrap_text(pdf, sanitize_text(detail), max_width))
    if text["badges"]:
        lines.extend(wrap_text(pdf, sanitize_text(" | ".join(text["badges"])), max_width))
    return lines


def draw_diagonal(
    pdf: FPDF,
    cell: RenderCell,
    x: float,
    y: float,
    width: float,
    height: float,
    display: dict,
    title_max_length: int | None,
    config: RenderConfig,
) -> None:
    layout = cell.layout
    pdf.set_fill_color(*EMPTY_FILL)
    pdf.rect(x, y, width, height, style="DF")

    odd_event = layout.event_at("odd")
    even_event = layout.event_at("even")
    if odd_event is not None:
        pdf.set_fill_color(*hex_to_rgb(event_fill_color(odd_event)))
        pdf.polygon([(x, y), (x + width, y), (x, y + height)], style="F")
    if even_event is not None:
        pdf.set_fill_color(*hex_to_rgb(event_fill_color(even_event)))
        pdf.polygon([(x + width, y), (x + width, y + height), (x, y + height)], style="F")

    text_width = width * 0.62
    text_height = height * 0.62
    pdf.set_font("Helvetica", size=config.body_font_size)
    for cycle, event in (("odd", odd_event), ("even", even_event)):
        badge = [WEEK_LABELS[cycle]]
        if cycle == "odd":
            box_x, box_y, align, valign = x, y, "L", "T"
        else:
            box_x, box_y, align, valign = x + width - text_width, y + height - text_height, "R", "B"
        lines = badge
        if event is not None:
            body = build_event_lines(
                pdf, event, display, title_max_length, text_width - 2 * config.padding, compact=True
            )
            lines = badge + body if cycle == "odd" else body + badge
        draw_text(
            pdf,
            box_x,
            box_y,
            text_width,
            text_height,
            lines,
            align=align,
            valign=valign,
            font_size=config.body_font_size,
            padding=config.padding,
        )

    pdf.set_draw_color(*hex_to_rgb(layout.divider_color))
    pdf.set_line_width(0.3)
    pdf.line(x, y + height, x + width, y)
    pdf.set_draw_color(*GRID_COLOR)
    pdf.set_line_width(0.1)
    pdf.rect(x, y, width, height)


def draw_render_cell(
    pdf: FPDF,
    cell: RenderCell,
    x: float,
    y: float,
    width: float,
    height: float,
    display: dict,
    title_max_length: int | None,
    config: RenderConfig,
) -> None:
    layout = cell.layout
    padding = config.padding
    font_size = config.body_font_size

    if layout.variant == EMPTY:
        draw_cell(pdf, x, y, width, height, [], EMPTY_FILL, padding=padding)
        return

    if layout.variant == SINGLE_FULL:
        event = layout.event_at("full")
        lines = build_event_lines(pdf, event, display, title_max_length, width - 2 * padding)
        draw_cell(
            pdf, x, y, width, height, lines, hex_to_rgb(event_fill_color(event)),
            font_size=font_size, padding=padding,
        )
        return

    if layout.variant == DIAGONAL_SPLIT:
        draw_diagonal(pdf, cell, x, y, width, height, display, title_max_length, config)
        return

    if layout.variant == GRID_2X2:
        half_w, half_h = width / 2, height / 2
        offsets = [(0, 0), (half_w, 0), (0, half_h), (half_w, half_h)]
        for (dx, dy), (_, event) in zip(offsets, layout.placements):
            if event is None:
                draw_cell(pdf, x + dx, y + dy, half_w, half_h, [], EMPTY_FILL, padding=padding)
                continue
            lines = build_event_lines(
                pdf, event, display, title_max_length, half_w - 2 * padding,
                compact=True, show_week_badge=layout.show_week_badges,
            )
            draw_cell(
                pdf, x + dx, y + dy, half_w, half_h, lines,
                hex_to_rgb(event_fill_color(event)), font_size=font_size, padding=padding,
            )
    else:
        events = layout.events
        item_h = height / max(1, len(events))
        for idx, event in enumerate(events):
            lines = build_event_lines(
                pdf, event, display, title_max_length, width - 2 * padding,
                compact=True, show_week_badge=True,
            )
            draw_cell(
                pdf, x, y + idx * item_h, width, item_h, lines,
                hex_to_rgb(event_fill_color(event)), font_size=font_size, padding=padding,
            )

    if layout.dropped and display.get("show_overflow_count"):
        draw_text(
            pdf, x, y, width, height, [f"+{len(layout.dropped)} more"],
            align="R", valign="B", font_size=font_size, padding=padding,
        )


def render_week(
    pdf: FPDF,
    title: str,
    cells: list[RenderCell],
    table: TimeSlotTable,
    config: RenderConfig,
    days: tuple[str, ...] = DAY_ORDER,
    display_options: dict | None = None,
    title_max_length: int | None = None,
) -> None:
    display, title_max_length = normalize_display_settings(display_options, title_max_length)

    pdf.add_page()
    pdf.set_auto_page_break(auto=False, margin=0)

    pdf.set_font("Helvetica", style="B", size=14)
    pdf.set_xy(config.margin, config.margin)
    pdf.cell(0, 6, sanitize_text(title))

    table_x = config.margin
    table_y = config.margin + config.header_height
    table_width = pdf.w - 2 * config.margin
    table_height = pdf.h - config.margin - table_y

    time_col_width = config.time_col_width
    day_col_width = (table_width - time_col_width) / max(1, len(days))
    header_height = config.header_font_size * 0.6 + 2 * config.padding
    body_height = max(1.0, table_height - header_height)
    row_height = body_height / max(1, len(table))

    pdf.set_draw_color(*GRID_COLOR)
    pdf.set_line_width(0.1)

    draw_cell(
        pdf, table_x, table_y, time_col_width, header_height, ["Time"], HEADER_FILL,
        align="C", bold=True, font_size=config.header_font_size, padding=config.padding,
    )
    for idx, day in enumerate(days):
        draw_cell(
            pdf,
            table_x + time_col_width + idx * day_col_width,
            table_y,
            day_col_width,
            header_height,
            [sanitize_text(day)],
            HEADER_FILL,
            align="C",
            bold=True,
            font_size=config.header_font_size,
            padding=config.padding,
        )

    body_y = table_y + header_height
    for slot_index, slot in enumerate(table):
        draw_cell(
            pdf, table_x, body_y + slot_index * row_height, time_col_width, row_height,
            [slot.label()], TIME_FILL, align="C", bold=slot.is_lunch,
            font_size=config.body_font_size, padding=config.padding,
        )

    day_x = {day: table_x + time_col_width + idx * day_col_width for idx, day in enumerate(days)}
    for cell in cells:
        row_y = body_y + cell.slot_index * row_height
        if cell.is_lunch:
            for start, count in lunch_segments(cells, cell.slot_index, days):
                draw_cell(
                    pdf,
                    table_x + time_col_width + start * day_col_width,
                    row_y,
                    day_col_width * count,
                    row_height,
                    [LUNCH_LABEL],
                    LUNCH_FILL,
                    align="C",
                    bold=True,
                    font_size=config.body_font_size,
                    padding=config.padding,
                )
            continue
        draw_render_cell(
            pdf,
            cell,
            day_x[cell.day],
            row_y,
            day_col_width,
            row_height * cell.row_span,
            display,
            title_max_length,
            config,
        )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render the weekly grid PDF directly from schedule.db."
    )
    parser.add_argument("--db", type=Path, default=Path("schedule.db"))
    parser.add_argument("--outdir", type=Path, default=Path("output-pdf"))
    parser.add_argument("--page-size", default="A4")
    parser.add_argument(
        "--orientation", choices=["portrait", "landscape"], default="landscape"
    )
    parser.add_argument("--font-size", type=float, default=6.5)
    parser.add_argument("--title", default="Weekly schedule")
    parser.add_argument(
        "--layout",
        type=Path,
        default=Path("layout.json"),
        help="Display settings JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.db.exists():
        raise SystemExit(f"Database not found: {args.db}")
    conn = sqlite3.connect(str(args.db))
    layout = layout_config.load_layout(args.layout)
    display_options, title_max_length = layout_config.get_display_settings(layout)
    events = layout_config.apply_layout(fetch_events(conn), layout)
    if not events:
        print("No events found to render.")
        return

    try:
        table = default_table()
        cells = assemble_grid(events, table, DAY_ORDER)
    except ConfigurationError as exc:
        raise SystemExit(f"Configuration error: {exc}")

    config = RenderConfig(
        page_size=args.page_size,
        orientation=args.orientation,
        margin=8.0,
        header_height=10.0,
        time_col_width=22.0,
        header_font_size=8.0,
        body_font_size=float(args.font_size),
        padding=1.2,
    )

    args.outdir.mkdir(parents=True, exist_ok=True)
    pdf = FPDF(
        orientation=args.orientation[0].upper(),
        unit="mm",
        format=args.page_size,
    )
    render_week(
        pdf,
        args.title,
        cells,
        table,
        config,
        DAY_ORDER,
        display_options=display_options,
        title_max_length=title_max_length,
    )
    output_path = args.outdir / "week.pdf"
    pdf.output(str(output_path))
    print(f"Rendered {output_path}")


if __name__ == "__main__":
    main()
