import json

import layout_config
from schedule_grid import ScheduleEvent


def make_event(event_id: int | str) -> ScheduleEvent:
    return ScheduleEvent(id=event_id, day="Monday", start_time="09:00", end_time="10:00")


def test_normalize_ignores_invalid_values() -> None:
    layout = layout_config.normalize_layout(
        {
            "hidden_event_ids": [3, "4", "x", None, 3],
            "display_options": {"show_room": False, "show_group": "no", "unknown": True},
            "title_max_length": "-5",
        }
    )
    assert layout["hidden_event_ids"] == [3, 4]
    assert layout["display_options"]["show_room"] is False
    assert layout["display_options"]["show_group"] is True
    assert "unknown" not in layout["display_options"]
    assert layout["title_max_length"] == 0


def test_defaults_are_not_shared() -> None:
    first = layout_config.normalize_layout(None)
    first["display_options"]["show_room"] = False
    assert layout_config.normalize_layout(None)["display_options"]["show_room"] is True


def test_load_missing_or_broken_file(tmp_path) -> None:
    assert layout_config.load_layout(tmp_path / "missing.json") == layout_config.DEFAULT_LAYOUT
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert layout_config.load_layout(broken) == layout_config.DEFAULT_LAYOUT


def test_save_then_load(tmp_path) -> None:
    path = tmp_path / "layout.json"
    layout_config.save_layout(path, {"hidden_event_ids": [2], "title_max_length": 20})
    assert json.loads(path.read_text(encoding="utf-8"))["title_max_length"] == 20
    assert layout_config.load_layout(path)["hidden_event_ids"] == [2]


def test_apply_layout_hides_events() -> None:
    events = [make_event(1), make_event(2), make_event(3)]
    layout = layout_config.normalize_layout({"hidden_event_ids": [2]})
    assert [event.id for event in layout_config.apply_layout(events, layout)] == [1, 3]
    assert layout_config.apply_layout(events, None) == events


def test_display_settings() -> None:
    display, title_max_length = layout_config.get_display_settings(None)
    assert display == layout_config.DEFAULT_DISPLAY_OPTIONS
    assert title_max_length == layout_config.DEFAULT_TITLE_MAX_LENGTH
    layout = layout_config.normalize_layout({"display_options": {"show_overflow_count": True}})
    display, _ = layout_config.get_display_settings(layout)
    assert display["show_overflow_count"] is True


def test_apply_layout_matches_string_ids() -> None:
    events = [make_event("1"), make_event("2"), make_event("lab-7")]
    layout = layout_config.normalize_layout({"hidden_event_ids": ["2", "lab-7"]})
    assert layout["hidden_event_ids"] == [2]
    assert [event.id for event in layout_config.apply_layout(events, layout)] == ["1", "lab-7"]
