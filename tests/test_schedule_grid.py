import logging

from schedule_grid import (
    DIAGONAL_SPLIT,
    GRID_2X2,
    SINGLE_FULL,
    ScheduleEvent,
    assemble_grid,
    group_events,
    lunch_segments,
    occupied_cells,
    row_span,
    validate_event,
)
from timeslots import DAY_ORDER, TimeSlot, TimeSlotTable

TABLE = TimeSlotTable(
    (
        TimeSlot("09:00", "10:00"),
        TimeSlot("10:00", "11:00"),
        TimeSlot("11:00", "12:00"),
        TimeSlot("12:00", "13:00", is_lunch=True),
        TimeSlot("13:00", "14:00"),
        TimeSlot("14:00", "15:00"),
        TimeSlot("15:00", "16:00"),
    )
)


def make_event(
    event_id: int,
    day: str,
    start: str,
    end: str,
    week_cycle: str = "every",
    **kwargs,
) -> ScheduleEvent:
    return ScheduleEvent(
        id=event_id,
        day=day,
        start_time=start,
        end_time=end,
        week_cycle=week_cycle,
        subject_name=f"Subject {event_id}",
        **kwargs,
    )


def find_cell(cells, day, slot_index):
    for cell in cells:
        if cell.day == day and cell.slot_index == slot_index:
            return cell
    return None


def test_grouper_prepopulates_every_cell() -> None:
    grid = group_events([], TABLE)
    assert list(grid) == list(DAY_ORDER)
    for day in DAY_ORDER:
        assert sorted(grid[day]) == list(range(len(TABLE)))
        assert all(events == [] for events in grid[day].values())


def test_grouper_buckets_by_start_slot() -> None:
    first = make_event(1, "Monday", "09:00", "11:00")
    second = make_event(2, "Monday", "09:00", "10:00", "odd")
    third = make_event(3, "Friday", "14:00", "15:00")
    grid = group_events([first, second, third], TABLE)
    assert grid["Monday"][0] == [first, second]
    assert grid["Friday"][5] == [third]


def test_grouper_excludes_misaligned_events(caplog) -> None:
    misaligned = make_event(1, "Monday", "09:30", "11:00")
    unknown_day = make_event(2, "Sunday", "09:00", "10:00")
    with caplog.at_level(logging.WARNING, logger="schedule_grid"):
        grid = group_events([misaligned, unknown_day], TABLE)
    assert all(not events for day in grid.values() for events in day.values())
    assert "not aligned" in caplog.text
    assert "unknown day" in caplog.text


def test_occupancy_without_lunch() -> None:
    occupied = occupied_cells([make_event(1, "Monday", "09:00", "11:00")], TABLE)
    assert occupied["Monday"] == {1}
    assert occupied["Tuesday"] == set()


def test_occupancy_walks_through_lunch() -> None:
    occupied = occupied_cells([make_event(1, "Monday", "09:00", "13:00")], TABLE)
    assert occupied["Monday"] == {1, 2, 3, 4}


def test_occupancy_never_covers_start_cells() -> None:
    events = [
        make_event(1, "Tuesday", "09:00", "11:00"),
        make_event(2, "Tuesday", "11:00", "12:00"),
        make_event(3, "Tuesday", "13:00", "16:00"),
        make_event(4, "Tuesday", "11:00", "12:00", "odd"),
    ]
    occupied = occupied_cells(events, TABLE)
    starts = {TABLE.slot_index_of(event.start_time) for event in events}
    assert occupied["Tuesday"].isdisjoint(starts)
    assert occupied["Tuesday"] == {1, 5, 6}


def test_row_span_matches_slot_count_before_lunch() -> None:
    event = make_event(1, "Monday", "09:00", "11:00")
    assert row_span(0, [event], TABLE) == 2


def test_row_span_after_lunch_is_not_adjusted() -> None:
    event = make_event(1, "Monday", "13:00", "15:00")
    assert row_span(4, [event], TABLE) == 2


def test_row_span_adds_lunch_row() -> None:
    event = make_event(1, "Monday", "09:00", "13:00")
    assert row_span(0, [event], TABLE) == 5


def test_row_span_uses_longest_event() -> None:
    short = make_event(1, "Monday", "10:00", "11:00", "odd")
    long = make_event(2, "Monday", "10:00", "12:00", "even")
    assert row_span(1, [short, long], TABLE) == 2


def test_row_span_floor() -> None:
    assert row_span(2, [], TABLE) == 1
    backwards = make_event(1, "Monday", "11:00", "10:00")
    assert row_span(2, [backwards], TABLE) == 1


def test_scenario_single_event() -> None:
    event = make_event(1, "Monday", "09:00", "11:00")
    cells = assemble_grid([event], TABLE)
    cell = find_cell(cells, "Monday", 0)
    assert cell.row_span == 2
    assert cell.variant == SINGLE_FULL
    assert cell.events == [event]
    assert find_cell(cells, "Monday", 1) is None
    assert find_cell(cells, "Tuesday", 1) is not None


def test_scenario_span_across_lunch() -> None:
    event = make_event(1, "Monday", "09:00", "13:00")
    cells = assemble_grid([event], TABLE)
    assert find_cell(cells, "Monday", 0).row_span == 5
    for slot_index in (1, 2, 4):
        assert find_cell(cells, "Monday", slot_index) is None
    lunch = [cell for cell in cells if cell.is_lunch]
    assert len(lunch) == 1
    assert lunch[0].slot_index == 3
    assert lunch[0].col_span == len(DAY_ORDER)
    assert lunch_segments(cells, 3, DAY_ORDER) == [(1, 4)]


def test_scenario_odd_even_pair() -> None:
    odd = make_event(1, "Tuesday", "10:00", "11:00", "odd")
    even = make_event(2, "Tuesday", "10:00", "11:00", "even")
    cell = find_cell(assemble_grid([even, odd], TABLE), "Tuesday", 1)
    assert cell.variant == DIAGONAL_SPLIT
    assert cell.layout.event_at("odd") == odd
    assert cell.layout.event_at("even") == even


def test_scenario_four_mixed_events() -> None:
    every1 = make_event(1, "Wednesday", "14:00", "15:00")
    odd1 = make_event(2, "Wednesday", "14:00", "15:00", "odd")
    even1 = make_event(3, "Wednesday", "14:00", "15:00", "even")
    odd2 = make_event(4, "Wednesday", "14:00", "15:00", "odd")
    cell = find_cell(assemble_grid([every1, odd1, even1, odd2], TABLE), "Wednesday", 5)
    assert cell.variant == GRID_2X2
    assert [event for _, event in cell.layout.placements] == [odd1, odd2, even1, every1]
    assert [position for position, _ in cell.layout.placements] == ["q1", "q2", "q3", "q4"]


def test_scenario_five_colliding_events() -> None:
    events = [
        make_event(1, "Thursday", "09:00", "10:00", "even"),
        make_event(2, "Thursday", "09:00", "10:00"),
        make_event(3, "Thursday", "09:00", "10:00", "odd"),
        make_event(4, "Thursday", "09:00", "10:00", "odd"),
        make_event(5, "Thursday", "09:00", "10:00", "even"),
    ]
    cell = find_cell(assemble_grid(events, TABLE), "Thursday", 0)
    assert cell.variant == GRID_2X2
    assert [event.id for event in cell.events] == [3, 4, 1, 5]
    assert [event.id for event in cell.layout.dropped] == [2]


def test_assembly_is_row_major_and_stable() -> None:
    events = [
        make_event(1, "Friday", "09:00", "11:00"),
        make_event(2, "Monday", "13:00", "14:00", "odd"),
        make_event(3, "Wednesday", "10:00", "13:00"),
    ]
    first = assemble_grid(events, TABLE)
    second = assemble_grid(list(events), TABLE)
    assert first == second
    order = [
        (cell.slot_index, -1 if cell.day is None else DAY_ORDER.index(cell.day))
        for cell in first
    ]
    assert order == sorted(order)


def test_assembly_emits_one_cell_per_visible_pair() -> None:
    cells = assemble_grid([], TABLE)
    regular = [cell for cell in cells if not cell.is_lunch]
    assert len(regular) == 6 * len(DAY_ORDER)
    assert all(cell.row_span == 1 for cell in regular)
    assert cells[0].click_target == ("Monday", "09:00", "10:00")


def test_event_inside_earlier_span_is_hidden(caplog) -> None:
    outer = make_event(1, "Monday", "09:00", "12:00")
    inner = make_event(2, "Monday", "10:00", "11:00")
    with caplog.at_level(logging.WARNING, logger="schedule_grid"):
        cells = assemble_grid([outer, inner], TABLE)
    assert find_cell(cells, "Monday", 1) is None
    assert "earlier span" in caplog.text


def test_validate_event_reports_problems() -> None:
    assert validate_event(make_event(1, "Monday", "09:00", "11:00"), TABLE) == []
    problems = validate_event(make_event(2, "Monday", "09:30", "10:30"), TABLE)
    assert len(problems) == 2
    assert validate_event(make_event(3, "Monday", "12:00", "13:00"), TABLE) == [
        "start time '12:00' falls on the lunch slot"
    ]
    assert "end time is not after start time" in validate_event(
        make_event(4, "Monday", "11:00", "10:00"), TABLE
    )


def covered_pairs(cells) -> set[tuple[str, int]]:
    pairs = set()
    for cell in cells:
        if cell.is_lunch:
            pairs.update((day, cell.slot_index) for day in DAY_ORDER)
            continue
        pairs.update((cell.day, idx) for idx in range(cell.slot_index, cell.slot_index + cell.row_span))
    return pairs


def test_lunch_start_event_leaves_no_hole(caplog) -> None:
    event = make_event(1, "Monday", "12:00", "14:00")
    assert occupied_cells([event], TABLE)["Monday"] == set()
    with caplog.at_level(logging.WARNING, logger="schedule_grid"):
        cells = assemble_grid([event], TABLE)
    assert find_cell(cells, "Monday", 4) is not None
    assert "lunch slot" in caplog.text
    expected = {(day, idx) for day in DAY_ORDER for idx in range(len(TABLE))}
    assert covered_pairs(cells) == expected


def test_every_pair_is_emitted_or_spanned() -> None:
    events = [
        make_event(1, "Monday", "09:00", "14:00"),
        make_event(2, "Tuesday", "10:00", "13:00"),
        make_event(3, "Wednesday", "11:00", "12:00", "odd"),
        make_event(4, "Thursday", "13:00", "16:00"),
        make_event(5, "Friday", "09:00", "11:00"),
    ]
    cells = assemble_grid(events, TABLE)
    expected = {(day, idx) for day in DAY_ORDER for idx in range(len(TABLE))}
    assert covered_pairs(cells) == expected
