"""Time slot and day catalogs for the weekly class grid."""

from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass

CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

DAY_ORDER = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)
DAY_ABBR_TO_NAME = {
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
}


class ConfigurationError(ValueError):
    """Raised when the slot or day catalog cannot drive the grid."""


def parse_clock(value: str | dt.time) -> int | None:
    """Convert '09:00' (or a time object) to minutes from midnight."""
    if isinstance(value, dt.time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        return None
    match = CLOCK_RE.match(value.strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def minutes_to_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_day(value: str | None, days: tuple[str, ...] = DAY_ORDER) -> str | None:
    if not value:
        return None
    text = str(value).strip()
    if text in days:
        return text
    by_lower = {day.lower(): day for day in days}
    if text.lower() in by_lower:
        return by_lower[text.lower()]
    expanded = DAY_ABBR_TO_NAME.get(text.title())
    if expanded in days:
        return expanded
    return None


def validate_days(days: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    days = tuple(days)
    if not days:
        raise ConfigurationError("Day catalog is empty")
    if len(set(days)) != len(days):
        raise ConfigurationError("Day catalog contains duplicates")
    return days


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str
    is_lunch: bool = False

    @property
    def start_min(self) -> int:
        return parse_clock(self.start)

    @property
    def end_min(self) -> int:
        return parse_clock(self.end)

    def label(self) -> str:
        return f"{self.start}-{self.end}"


class TimeSlotTable:
    """Ordered catalog of slots tiling the working day, with one lunch slot.

    Slot lookups are exact: a clock time resolves to an index only when it
    equals some slot's start.
    """

    def __init__(self, slots: list[TimeSlot] | tuple[TimeSlot, ...]) -> None:
        self.slots = tuple(slots)
        if not self.slots:
            raise ConfigurationError("Time slot catalog is empty")

        previous_end: int | None = None
        for idx, slot in enumerate(self.slots):
            start, end = parse_clock(slot.start), parse_clock(slot.end)
            if start is None or end is None:
                raise ConfigurationError(f"Slot {idx} has an invalid clock time: {slot.label()}")
            if end <= start:
                raise ConfigurationError(f"Slot {idx} ends before it starts: {slot.label()}")
            if previous_end is not None and start != previous_end:
                raise ConfigurationError(
                    f"Slot {idx} ({slot.label()}) does not follow the previous slot without a gap"
                )
            previous_end = end

        lunch = [idx for idx, slot in enumerate(self.slots) if slot.is_lunch]
        if not lunch:
            raise ConfigurationError("Time slot catalog has no lunch slot")
        if len(lunch) > 1:
            raise ConfigurationError("Time slot catalog has more than one lunch slot")
        self._lunch_index = lunch[0]
        self._index_by_start = {
            parse_clock(slot.start): idx for idx, slot in enumerate(self.slots)
        }

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self):
        return iter(self.slots)

    def __getitem__(self, index: int) -> TimeSlot:
        return self.slots[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TimeSlotTable) and self.slots == other.slots

    def __hash__(self) -> int:
        return hash(self.slots)

    def slot_index_of(self, clock: str | dt.time) -> int | None:
        minutes = parse_clock(clock)
        if minutes is None:
            return None
        return self._index_by_start.get(minutes)

    def slot_index_ending_at(self, clock: str | dt.time) -> int | None:
        minutes = parse_clock(clock)
        if minutes is None:
            return None
        for idx, slot in enumerate(self.slots):
            if slot.end_min == minutes:
                return idx
        return None

    def slot_count_between(self, start: str | dt.time, end: str | dt.time) -> int:
        """Number of slots (lunch included) lying inside [start, end), at least 1."""
        start_min, end_min = parse_clock(start), parse_clock(end)
        if start_min is None or end_min is None or end_min <= start_min:
            return 1
        count = sum(
            1
            for slot in self.slots
            if slot.start_min >= start_min and slot.end_min <= end_min
        )
        return max(1, count)

    def lunch_index(self) -> int:
        return self._lunch_index

    def lunch_slot(self) -> TimeSlot:
        return self.slots[self._lunch_index]


DEFAULT_TIME_SLOTS = (
    TimeSlot("08:00", "09:00"),
    TimeSlot("09:00", "10:00"),
    TimeSlot("10:00", "11:00"),
    TimeSlot("11:00", "12:00"),
    TimeSlot("12:00", "13:00", is_lunch=True),
    TimeSlot("13:00", "14:00"),
    TimeSlot("14:00", "15:00"),
    TimeSlot("15:00", "16:00"),
    TimeSlot("16:00", "17:00"),
    TimeSlot("17:00", "18:00"),
)


def default_table() -> TimeSlotTable:
    return TimeSlotTable(DEFAULT_TIME_SLOTS)
