"""Projection of timetable entries onto the day x hour-slot grid."""
from __future__ import annotations

from datetime import time
from typing import Iterable, List, Sequence, Union

from ..common.datetime_utils import parse_time_of_day
from ..core.constants import DAYS, TIME_SLOTS
from .model import TimetableEntry


def cell_occupants(
    entries: Iterable[TimetableEntry], day: int, slot_start: Union[time, str]
) -> List[TimetableEntry]:
    """Entries covering `slot_start` on `day`.

    Intervals are half-open: an entry ending exactly at `slot_start` does not
    occupy it, and an entry with start == end occupies no cell.
    """
    t = parse_time_of_day(slot_start)
    return [e for e in entries if e.day_of_week == day and e.start_time <= t < e.end_time]


def build_week_grid(
    entries: Sequence[TimetableEntry], slots: Sequence[str] = TIME_SLOTS
) -> List[List[List[TimetableEntry]]]:
    """One row per slot, one cell per day (Sunday first)."""
    return [[cell_occupants(entries, day, slot) for day in range(len(DAYS))] for slot in slots]
