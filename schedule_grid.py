"""Place weekly class events onto the slot-by-day grid.

The grid is derived from a snapshot of events and the static slot catalog:

    events -> group_events       (day, start slot) -> events
           -> occupied_cells     (day) -> slot indices covered by a span
           -> assemble_grid      ordered RenderCell list, one per visible cell

Every step is a pure function of its inputs and is recomputed in full for a
new snapshot; inserting one event can change which cells follow it in the
same day column.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from timeslots import (
    DAY_ORDER,
    TimeSlot,
    TimeSlotTable,
    default_table,
    normalize_day,
    parse_clock,
    validate_days,
)

logger = logging.getLogger(__name__)

WEEK_CYCLES = ("every", "odd", "even")
EVENT_TYPES = ("regular", "makeup")
SUBJECT_TYPES = ("lecture", "seminar", "lab")

EMPTY = "empty"
SINGLE_FULL = "single-full"
GRID_2X2 = "grid-2x2"
DIAGONAL_SPLIT = "diagonal-split"
LINEAR_LIST = "linear-list"
LAYOUT_VARIANTS = (EMPTY, SINGLE_FULL, GRID_2X2, DIAGONAL_SPLIT, LINEAR_LIST)

GRID_CAPACITY = 4
QUADRANTS = ("q1", "q2", "q3", "q4")

CATEGORY_BORDER_COLORS = {
    "makeup": "#5fcfb8",
    "lecture": "#5fa86a",
    "seminar": "#d9894a",
    "lab": "#8a78c9",
}
NEUTRAL_DIVIDER_COLOR = "#a0a0a0"


@dataclass(frozen=True)
class ScheduleEvent:
    id: int | str | None
    day: str
    start_time: str
    end_time: str
    week_cycle: str = "every"
    event_type: str = "regular"
    subject_type: str = "lecture"
    subject_name: str = ""
    room: str = ""
    control_form: str = "none"
    project_type: str = "none"
    subgroup: str = "none"
    group_number: str = ""

    def __post_init__(self) -> None:
        if self.week_cycle not in WEEK_CYCLES:
            raise ValueError(f"Invalid week cycle for event {self.id!r}: {self.week_cycle!r}")
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"Invalid event type for event {self.id!r}: {self.event_type!r}")

    @property
    def is_makeup(self) -> bool:
        return self.event_type == "makeup"

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleEvent":
        day = str(data.get("day") or data.get("day_name") or "").strip()
        return cls(
            id=data.get("id"),
            day=normalize_day(day) or day,
            start_time=str(data.get("start_time") or "").strip(),
            end_time=str(data.get("end_time") or "").strip(),
            week_cycle=str(data.get("week_cycle") or "every").strip().lower(),
            event_type=str(data.get("event_type") or "regular").strip().lower(),
            subject_type=str(data.get("subject_type") or "lecture").strip().lower(),
            subject_name=str(data.get("subject_name") or ""),
            room=str(data.get("room") or ""),
            control_form=str(data.get("control_form") or "none"),
            project_type=str(data.get("project_type") or "none"),
            subgroup=str(data.get("subgroup") or "none"),
            group_number=str(data.get("group_number") or ""),
        )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "week_cycle": self.week_cycle,
            "event_type": self.event_type,
            "subject_type": self.subject_type,
            "subject_name": self.subject_name,
            "room": self.room,
            "control_form": self.control_form,
            "project_type": self.project_type,
            "subgroup": self.subgroup,
            "group_number": self.group_number,
        }


def event_border_color(event: ScheduleEvent | None) -> str:
    if event is None:
        return NEUTRAL_DIVIDER_COLOR
    if event.is_makeup:
        return CATEGORY_BORDER_COLORS["makeup"]
    return CATEGORY_BORDER_COLORS.get(event.subject_type, NEUTRAL_DIVIDER_COLOR)


def validate_event(
    event: ScheduleEvent,
    table: TimeSlotTable,
    days: tuple[str, ...] = DAY_ORDER,
) -> list[str]:
    """Return human-readable problems that would keep the event off the grid."""
    problems: list[str] = []
    if event.day not in days:
        problems.append(f"unknown day {event.day!r}")
    start_idx = table.slot_index_of(event.start_time)
    if start_idx is None:
        problems.append(f"start time {event.start_time!r} does not match a slot start")
    elif table[start_idx].is_lunch:
        problems.append(f"start time {event.start_time!r} falls on the lunch slot")
    if table.slot_index_ending_at(event.end_time) is None:
        problems.append(f"end time {event.end_time!r} does not match a slot end")
    start_min, end_min = parse_clock(event.start_time), parse_clock(event.end_time)
    if start_min is not None and end_min is not None and end_min <= start_min:
        problems.append("end time is not after start time")
    return problems


# ----------------------------------------------------------------------
# Grouping and occupancy
# ----------------------------------------------------------------------


def empty_grid(table: TimeSlotTable, days: tuple[str, ...]) -> dict[str, dict[int, list[ScheduleEvent]]]:
    return {day: {idx: [] for idx in range(len(table))} for day in days}


def group_events(
    events: list[ScheduleEvent] | tuple[ScheduleEvent, ...],
    table: TimeSlotTable,
    days: tuple[str, ...] = DAY_ORDER,
) -> dict[str, dict[int, list[ScheduleEvent]]]:
    grid = empty_grid(table, days)
    for event in events:
        if event.day not in grid:
            logger.warning("Skipping event %r: unknown day %r", event.id, event.day)
            continue
        start_idx = table.slot_index_of(event.start_time)
        if start_idx is None:
            logger.warning(
                "Skipping event %r: start %r is not aligned to a slot", event.id, event.start_time
            )
            continue
        grid[event.day][start_idx].append(event)
    return grid


def occupied_cells(
    events: list[ScheduleEvent] | tuple[ScheduleEvent, ...],
    table: TimeSlotTable,
    days: tuple[str, ...] = DAY_ORDER,
) -> dict[str, set[int]]:
    occupied: dict[str, set[int]] = {day: set() for day in days}
    for event in events:
        if event.day not in occupied:
            continue
        start_idx = table.slot_index_of(event.start_time)
        # Lunch-start events are never rendered, so they cover nothing.
        if start_idx is None or table[start_idx].is_lunch:
            continue
        needed = table.slot_count_between(event.start_time, event.end_time) - 1
        covered = 0
        idx = start_idx + 1
        while idx < len(table) and covered < needed:
            # The lunch row is always skipped but never counts toward duration.
            occupied[event.day].add(idx)
            if not table[idx].is_lunch:
                covered += 1
            idx += 1
    return occupied


def row_span(start_index: int, cell_events: list[ScheduleEvent], table: TimeSlotTable) -> int:
    if not cell_events:
        return 1
    max_slot_count = max(
        table.slot_count_between(event.start_time, event.end_time) for event in cell_events
    )
    span = max_slot_count
    end_index = start_index + max_slot_count - 1
    lunch_idx = table.lunch_index()
    if start_index < lunch_idx <= end_index:
        span += 1
    span = min(span, len(table) - start_index)
    return max(1, span)


# ----------------------------------------------------------------------
# Cell layout
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class CellLayout:
    variant: str
    placements: tuple[tuple[str, ScheduleEvent | None], ...] = ()
    compact: bool = False
    show_week_badges: bool = False
    divider_color: str | None = None
    dropped: tuple[ScheduleEvent, ...] = ()

    @property
    def events(self) -> list[ScheduleEvent]:
        return [event for _, event in self.placements if event is not None]

    def event_at(self, position: str) -> ScheduleEvent | None:
        for name, event in self.placements:
            if name == position:
                return event
        return None

    def as_dict(self) -> dict:
        return {
            "variant": self.variant,
            "placements": [
                {"position": position, "event_id": event.id if event else None}
                for position, event in self.placements
            ],
            "compact": self.compact,
            "show_week_badges": self.show_week_badges,
            "divider_color": self.divider_color,
            "dropped_event_ids": [event.id for event in self.dropped],
        }


def partition_by_cycle(
    events: list[ScheduleEvent],
) -> tuple[list[ScheduleEvent], list[ScheduleEvent], list[ScheduleEvent]]:
    odd = [event for event in events if event.week_cycle == "odd"]
    even = [event for event in events if event.week_cycle == "even"]
    every = [event for event in events if event.week_cycle == "every"]
    return odd, even, every


def select_variant(odd_count: int, even_count: int, every_count: int) -> str:
    total = odd_count + even_count + every_count
    if total == 0:
        return EMPTY
    if every_count == 1 and odd_count == 0 and even_count == 0:
        return SINGLE_FULL
    if every_count >= 2 and odd_count == 0 and even_count == 0:
        return GRID_2X2
    if total >= 3:
        return GRID_2X2
    if (odd_count > 0 or even_count > 0) and total <= 2:
        return DIAGONAL_SPLIT
    return LINEAR_LIST


def grid_layout(source: list[ScheduleEvent], show_week_badges: bool) -> CellLayout:
    shown = source[:GRID_CAPACITY]
    padded = shown + [None] * (GRID_CAPACITY - len(shown))
    return CellLayout(
        variant=GRID_2X2,
        placements=tuple(zip(QUADRANTS, padded)),
        compact=True,
        show_week_badges=show_week_badges,
        dropped=tuple(source[GRID_CAPACITY:]),
    )


def diagonal_layout(
    odd: list[ScheduleEvent], even: list[ScheduleEvent], every: list[ScheduleEvent]
) -> CellLayout:
    odd_event = odd[0] if odd else None
    even_event = even[0] if even else None
    return CellLayout(
        variant=DIAGONAL_SPLIT,
        placements=(("odd", odd_event), ("even", even_event)),
        compact=True,
        show_week_badges=True,
        divider_color=event_border_color(odd_event or even_event),
        dropped=tuple(odd[1:] + even[1:] + every),
    )


def linear_layout(events: list[ScheduleEvent]) -> CellLayout:
    return CellLayout(
        variant=LINEAR_LIST,
        placements=tuple((f"item-{idx + 1}", event) for idx, event in enumerate(events)),
        compact=True,
        show_week_badges=True,
    )


def resolve_cell_layout(cell_events: list[ScheduleEvent]) -> CellLayout:
    odd, even, every = partition_by_cycle(cell_events)
    variant = select_variant(len(odd), len(even), len(every))

    if variant == EMPTY:
        layout = CellLayout(variant=EMPTY)
    elif variant == SINGLE_FULL:
        layout = CellLayout(variant=SINGLE_FULL, placements=(("full", every[0]),))
    elif variant == GRID_2X2:
        if not odd and not even:
            layout = grid_layout(every, show_week_badges=False)
        else:
            layout = grid_layout(odd + even + every, show_week_badges=True)
    elif variant == DIAGONAL_SPLIT:
        layout = diagonal_layout(odd, even, every)
    else:
        layout = linear_layout(list(cell_events))

    if layout.dropped:
        logger.debug(
            "Cell over capacity: omitting events %s",
            ", ".join(repr(event.id) for event in layout.dropped),
        )
    return layout


# ----------------------------------------------------------------------
# Assembly
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class RenderCell:
    day: str | None
    slot_index: int
    slot: TimeSlot
    row_span: int = 1
    layout: CellLayout | None = None
    col_span: int = 1

    @property
    def is_lunch(self) -> bool:
        return self.layout is None

    @property
    def variant(self) -> str | None:
        return self.layout.variant if self.layout else None

    @property
    def events(self) -> list[ScheduleEvent]:
        return self.layout.events if self.layout else []

    @property
    def click_target(self) -> tuple[str, str, str] | None:
        if self.day is None:
            return None
        return (self.day, self.slot.start, self.slot.end)

    def key(self) -> str:
        if self.day is None:
            return f"lunch-{self.slot_index}"
        return f"{self.day}-{self.slot_index}"

    def as_dict(self) -> dict:
        return {
            "key": self.key(),
            "day": self.day,
            "slot_index": self.slot_index,
            "start": self.slot.start,
            "end": self.slot.end,
            "row_span": self.row_span,
            "col_span": self.col_span,
            "is_lunch": self.is_lunch,
            "layout": self.layout.as_dict() if self.layout else None,
        }


def assemble_grid(
    events: list[ScheduleEvent] | tuple[ScheduleEvent, ...],
    table: TimeSlotTable | None = None,
    days: tuple[str, ...] | list[str] = DAY_ORDER,
) -> list[RenderCell]:
    table = table or default_table()
    days = validate_days(days)
    grid = group_events(events, table, days)
    occupied = occupied_cells(events, table, days)

    cells: list[RenderCell] = []
    for slot_index, slot in enumerate(table):
        if slot.is_lunch:
            for day in days:
                if grid[day][slot_index]:
                    logger.warning(
                        "Events starting on the lunch slot are not shown: %s",
                        ", ".join(repr(event.id) for event in grid[day][slot_index]),
                    )
            cells.append(
                RenderCell(day=None, slot_index=slot_index, slot=slot, col_span=len(days))
            )
            continue
        for day in days:
            cell_events = grid[day][slot_index]
            if slot_index in occupied[day]:
                if cell_events:
                    logger.warning(
                        "Events on %s at %s start inside an earlier span and are not shown: %s",
                        day,
                        slot.start,
                        ", ".join(repr(event.id) for event in cell_events),
                    )
                continue
            cells.append(
                RenderCell(
                    day=day,
                    slot_index=slot_index,
                    slot=slot,
                    row_span=row_span(slot_index, cell_events, table),
                    layout=resolve_cell_layout(cell_events),
                )
            )
    return cells


def days_spanning(cells: list[RenderCell], slot_index: int) -> set[str]:
    """Days whose cell started above slot_index and reaches down into it."""
    return {
        cell.day
        for cell in cells
        if cell.day is not None
        and cell.slot_index < slot_index < cell.slot_index + cell.row_span
    }


def lunch_segments(
    cells: list[RenderCell], slot_index: int, days: tuple[str, ...]
) -> list[tuple[int, int]]:
    """(first day index, column count) runs of the lunch row not crossed by a span."""
    spanning = days_spanning(cells, slot_index)
    segments: list[tuple[int, int]] = []
    start: int | None = None
    for idx, day in enumerate(days):
        if day in spanning:
            if start is not None:
                segments.append((start, idx - start))
            start = None
        elif start is None:
            start = idx
    if start is not None:
        segments.append((start, len(days) - start))
    return segments


def overflowing_cells(cells: list[RenderCell]) -> list[RenderCell]:
    return [cell for cell in cells if cell.layout is not None and cell.layout.dropped]
