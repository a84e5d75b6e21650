from __future__ import annotations

from datetime import time
from typing import Any, Dict, List, Optional, Union

from ..common.datetime_utils import format_time_of_day
from ..common.store import Store
from ..core.constants import TIMETABLE_TABLE
from ..gateway.base import Gateway, require_user
from .model import TimetableEntry

TimeLike = Union[time, str]

# Each entry carries its subject so views need not look it up.
ENTRY_COLUMNS = "*, subject:subjects(id, name, type)"


class TimetableStore(Store):
    """Weekly timetable entries, ordered by day then start time."""

    def __init__(self, gateway: Gateway):
        super().__init__()
        self._gateway = gateway
        self.entries: List[TimetableEntry] = []

    async def _reload(self) -> None:
        result = await self._gateway.select(
            TIMETABLE_TABLE,
            columns=ENTRY_COLUMNS,
            order_by=("day_of_week", "start_time"),
        )
        self._set(entries=[TimetableEntry.from_row(r) for r in result.unwrap() or []])

    async def fetch_entries(self) -> None:
        await self._run(self._reload)

    async def create_entry(self, *, subject_id: str, day_of_week: int, start_time: TimeLike, end_time: TimeLike) -> None:
        async def operation() -> None:
            user = await require_user(self._gateway)
            row = {
                "subject_id": subject_id,
                "day_of_week": int(day_of_week),
                "start_time": format_time_of_day(start_time),
                "end_time": format_time_of_day(end_time),
                "user_id": user.id,
            }
            (await self._gateway.insert(TIMETABLE_TABLE, [row])).unwrap()
            await self._reload()

        await self._run(operation)

    async def update_entry(
        self,
        entry_id: str,
        *,
        subject_id: Optional[str] = None,
        day_of_week: Optional[int] = None,
        start_time: Optional[TimeLike] = None,
        end_time: Optional[TimeLike] = None,
    ) -> None:
        async def operation() -> None:
            changes: Dict[str, Any] = {}
            if subject_id is not None:
                changes["subject_id"] = subject_id
            if day_of_week is not None:
                changes["day_of_week"] = int(day_of_week)
            if start_time is not None:
                changes["start_time"] = format_time_of_day(start_time)
            if end_time is not None:
                changes["end_time"] = format_time_of_day(end_time)

            if changes:
                (await self._gateway.update(TIMETABLE_TABLE, changes, entry_id)).unwrap()
            await self._reload()

        await self._run(operation)

    async def delete_entry(self, entry_id: str) -> None:
        async def operation() -> None:
            (await self._gateway.delete(TIMETABLE_TABLE, entry_id)).unwrap()
            await self._reload()

        await self._run(operation)
