import json

import pytest

import schedule_tool
from schedule_grid import ScheduleEvent, assemble_grid
from schedule_tool import (
    event_text,
    fetch_events,
    grid_payload,
    import_events,
    init_db,
    load_events,
    read_events_json,
    render_html,
    render_week_html,
    truncate_text,
    validate_snapshot,
)
from timeslots import DAY_ORDER, default_table

DISPLAY = {
    "show_room": True,
    "show_group": True,
    "show_control_form": True,
    "show_project": True,
    "show_week_badges": True,
    "show_overflow_count": False,
}


def make_event(event_id: int, day: str, start: str, end: str, **kwargs) -> ScheduleEvent:
    return ScheduleEvent(
        id=event_id,
        day=day,
        start_time=start,
        end_time=end,
        subject_name=kwargs.pop("subject_name", f"Subject {event_id}"),
        **kwargs,
    )


def test_truncate_text() -> None:
    assert truncate_text("Operating Systems", 0) == "Operating Systems"
    assert truncate_text("Operating Systems", 12) == "Operating..."
    assert truncate_text("Short", 12) == "Short"


def test_full_event_text_for_lecture() -> None:
    event = make_event(
        1, "Monday", "08:00", "10:00",
        subject_name="Algebra", room="A-101", control_form="exam", project_type="course_work",
    )
    text = event_text(event, DISPLAY, None, compact=False)
    assert text["title"] == "Algebra"
    assert text["details"] == ["A-101", "(Exam)"]
    assert text["badges"] == ["Course work"]


def test_compact_event_text_hides_control_form() -> None:
    event = make_event(
        1, "Monday", "08:00", "10:00",
        room="", control_form="exam", subgroup="a", subject_type="seminar",
    )
    text = event_text(event, DISPLAY, None, compact=True)
    assert text["details"] == ["-"]
    assert text["badges"] == ["Subgroup A"]


def test_makeup_title_gets_abbreviation() -> None:
    event = make_event(
        1, "Monday", "08:00", "09:00",
        subject_name="Physics", event_type="makeup", subject_type="lab", group_number="3",
    )
    text = event_text(event, DISPLAY, None, compact=False)
    assert text["title"] == "Physics (LAB)"
    assert text["badges"] == ["Group 3"]


def test_store_round_trip(tmp_path) -> None:
    conn = init_db(tmp_path / "schedule.db")
    events = [
        make_event(2, "Tuesday", "09:00", "11:00", week_cycle="odd", room="B-2"),
        make_event(5, "Monday", "13:00", "14:00", event_type="makeup"),
    ]
    load_events(conn, events, "events.json")
    assert fetch_events(conn) == tuple(events)

    load_events(conn, events[:1], "events.json")
    assert fetch_events(conn) == (events[0],)


def test_read_events_json_rejects_bad_input(tmp_path) -> None:
    with pytest.raises(SystemExit):
        read_events_json(tmp_path / "missing.json")
    path = tmp_path / "events.json"
    path.write_text(json.dumps([{"day": "Mon", "start_time": "08:00", "end_time": "09:00",
                                 "week_cycle": "sometimes"}]), encoding="utf-8")
    with pytest.raises(SystemExit):
        read_events_json(path)


def test_import_reports_misaligned_events(tmp_path) -> None:
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            {
                "events": [
                    {"id": 1, "day": "Mon", "start_time": "08:00", "end_time": "10:00"},
                    {"id": 2, "day": "Tue", "start_time": "08:30", "end_time": "10:00"},
                ]
            }
        ),
        encoding="utf-8",
    )
    count, warnings = import_events(path, tmp_path / "schedule.db")
    assert count == 2
    assert len(warnings) == 1
    assert warnings[0].startswith("Event 2 ")
    stored = fetch_events(init_db(tmp_path / "schedule.db"))
    assert [event.day for event in stored] == ["Monday", "Tuesday"]


def test_validate_snapshot_reports_overflow() -> None:
    events = [make_event(idx, "Friday", "08:00", "09:00") for idx in range(1, 6)]
    messages = validate_snapshot(events, default_table())
    assert messages == ["Friday 08:00-09:00: 1 event(s) not shown (5)"]


def test_week_html_spans_lunch() -> None:
    event = make_event(1, "Monday", "10:00", "13:00", subject_name="Databases")
    cells = assemble_grid([event], default_table())
    html = render_week_html(cells)
    assert "rowspan=\"4\"" in html
    assert "colspan=\"4\"" in html
    assert "Databases" in html
    assert "data-day=\"Tuesday\" data-start=\"08:00\" data-end=\"09:00\"" in html


def test_week_html_variants() -> None:
    events = [
        make_event(1, "Wednesday", "09:00", "10:00", week_cycle="odd"),
        make_event(2, "Wednesday", "09:00", "10:00", week_cycle="even"),
        make_event(3, "Thursday", "09:00", "10:00"),
        make_event(4, "Thursday", "09:00", "10:00"),
    ]
    html = render_week_html(assemble_grid(events, default_table()))
    assert "diagonal-container" in html
    assert "Odd week" in html
    assert "grid-quadrant q3 empty" in html


def test_overflow_count_is_opt_in() -> None:
    events = [make_event(idx, "Friday", "08:00", "09:00") for idx in range(1, 6)]
    cells = assemble_grid(events, default_table())
    assert "more</div>" not in render_week_html(cells)
    display = dict(DISPLAY, show_overflow_count=True)
    assert "+1 more" in render_week_html(cells, display_options=display)


def test_grid_payload_applies_hidden_ids() -> None:
    events = [
        make_event(1, "Monday", "08:00", "09:00"),
        make_event(2, "Monday", "08:00", "09:00"),
    ]
    payload = grid_payload(events, {"hidden_event_ids": [2]})
    assert [event["id"] for event in payload["events"]] == [1]
    first = payload["cells"][0]
    assert first["key"] == "Monday-0"
    assert first["layout"]["variant"] == "single-full"
    assert len(payload["slots"]) == len(default_table())


def test_render_html_writes_outputs(tmp_path) -> None:
    conn = init_db(tmp_path / "schedule.db")
    load_events(conn, [make_event(1, "Monday", "08:00", "10:00")], "events.json")
    outputs = render_html(conn, tmp_path / "output")
    assert [path.name for path in outputs] == ["week.html", "grid.json"]
    grid = json.loads((tmp_path / "output" / "grid.json").read_text(encoding="utf-8"))
    assert grid["cells"][0]["row_span"] == 2
    assert "events.json" in (tmp_path / "output" / "week.html").read_text(encoding="utf-8")


def test_cli_validate_exits_on_problems(tmp_path, monkeypatch, capsys) -> None:
    db_path = tmp_path / "schedule.db"
    conn = init_db(db_path)
    load_events(conn, [make_event(1, "Monday", "08:15", "09:00")], "events.json")
    conn.close()
    monkeypatch.setattr("sys.argv", ["schedule_tool", "validate", "--db", str(db_path)])
    with pytest.raises(SystemExit):
        schedule_tool.main()
    assert "does not match a slot start" in capsys.readouterr().out


def test_week_html_has_a_row_per_slot() -> None:
    events = [make_event(idx, day, "08:00", "10:00") for idx, day in enumerate(DAY_ORDER, start=1)]
    table = default_table()
    html = render_week_html(assemble_grid(events, table), table=table)
    body = html.split("<tbody>", 1)[1]
    assert body.count("<tr") == len(table)
    assert "<td class=\"time-col\">09:00-10:00</td></tr>" in html.replace("\n", "")


def test_import_rejects_duplicate_ids(tmp_path) -> None:
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            [
                {"id": 1, "day": "Monday", "start_time": "08:00", "end_time": "09:00"},
                {"id": "1", "day": "Tuesday", "start_time": "08:00", "end_time": "09:00"},
            ]
        ),
        encoding="utf-8",
    )
    with pytest.raises(SystemExit, match="Duplicate event id"):
        import_events(path, tmp_path / "schedule.db")
    assert not (tmp_path / "schedule.db").exists()
