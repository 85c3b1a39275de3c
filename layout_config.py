"""Helpers for reading and applying grid display settings."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_OPTIONS = {
    "show_room": True,
    "show_group": True,
    "show_control_form": True,
    "show_project": True,
    "show_week_badges": True,
    "show_overflow_count": False,
}

DEFAULT_TITLE_MAX_LENGTH = 48

DEFAULT_LAYOUT = {
    "hidden_event_ids": [],
    "display_options": DEFAULT_DISPLAY_OPTIONS,
    "title_max_length": DEFAULT_TITLE_MAX_LENGTH,
}


def normalize_layout(data: dict | None) -> dict:
    layout = copy.deepcopy(DEFAULT_LAYOUT)
    if not isinstance(data, dict):
        return layout

    hidden = data.get("hidden_event_ids")
    if isinstance(hidden, list):
        normalized = []
        for item in hidden:
            try:
                normalized.append(int(item))
            except (TypeError, ValueError):
                continue
        layout["hidden_event_ids"] = sorted(set(normalized))

    display_options = data.get("display_options")
    if isinstance(display_options, dict):
        for key in DEFAULT_DISPLAY_OPTIONS:
            value = display_options.get(key)
            if isinstance(value, bool):
                layout["display_options"][key] = value

    title_max_length = data.get("title_max_length")
    if title_max_length is not None:
        try:
            layout["title_max_length"] = max(0, int(title_max_length))
        except (TypeError, ValueError):
            pass

    return layout


def load_layout(path: Path) -> dict:
    if not path.exists():
        return copy.deepcopy(DEFAULT_LAYOUT)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable layout file %s", path)
        return copy.deepcopy(DEFAULT_LAYOUT)
    return normalize_layout(data)


def save_layout(path: Path, layout: dict) -> None:
    normalized = normalize_layout(layout)
    path.write_text(json.dumps(normalized, indent=2), encoding="utf-8")


def event_key(value) -> int | None:
    """Integer form of an event id, as the event store keeps it."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def apply_layout(events: list, layout: dict | None) -> list:
    # Non-numeric ids get a fresh integer id in the store and cannot be hidden.
    if not layout:
        return list(events)
    hidden_ids = {event_key(item) for item in layout.get("hidden_event_ids", [])}
    hidden_ids.discard(None)
    return [event for event in events if event_key(event.id) not in hidden_ids]


def get_display_settings(layout: dict | None) -> tuple[dict, int]:
    display = copy.deepcopy(DEFAULT_DISPLAY_OPTIONS)
    title_max_length = DEFAULT_TITLE_MAX_LENGTH
    if layout:
        display.update(layout.get("display_options", {}))
        title_max_length = layout.get("title_max_length", title_max_length)
    return display, title_max_length
