from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..common.store import Store
from ..core.constants import DEFAULT_ATTENDANCE_THRESHOLD, SUBJECTS_TABLE
from ..core.enums import SubjectKind
from ..gateway.base import Gateway, require_user
from .model import Subject


class SubjectsStore(Store):
    """Subjects of the signed-in user, ordered by name.

    Every mutation is followed by a full re-read; the list is never patched
    in place.
    """

    def __init__(self, gateway: Gateway):
        super().__init__()
        self._gateway = gateway
        self.subjects: List[Subject] = []

    async def _reload(self) -> None:
        rows = (await self._gateway.select(SUBJECTS_TABLE, order_by=("name",))).unwrap()
        self._set(subjects=[Subject.from_row(r) for r in rows or []])

    async def fetch_subjects(self) -> None:
        await self._run(self._reload)

    async def create_subject(
        self,
        *,
        name: str,
        kind: SubjectKind,
        attendance_threshold: int = DEFAULT_ATTENDANCE_THRESHOLD,
    ) -> None:
        async def operation() -> None:
            user = await require_user(self._gateway)
            row = {
                "name": name,
                "type": SubjectKind(kind).value,
                "attendance_threshold": attendance_threshold,
                "user_id": user.id,
            }
            (await self._gateway.insert(SUBJECTS_TABLE, [row])).unwrap()
            await self._reload()

        await self._run(operation)

    async def update_subject(
        self,
        subject_id: str,
        *,
        name: Optional[str] = None,
        kind: Optional[SubjectKind] = None,
        attendance_threshold: Optional[int] = None,
    ) -> None:
        async def operation() -> None:
            changes: Dict[str, Any] = {}
            if name is not None:
                changes["name"] = name
            if kind is not None:
                changes["type"] = SubjectKind(kind).value
            if attendance_threshold is not None:
                changes["attendance_threshold"] = attendance_threshold

            # Nothing to write, but the list is still re-read.
            if changes:
                (await self._gateway.update(SUBJECTS_TABLE, changes, subject_id)).unwrap()
            await self._reload()

        await self._run(operation)

    async def delete_subject(self, subject_id: str) -> None:
        async def operation() -> None:
            (await self._gateway.delete(SUBJECTS_TABLE, subject_id)).unwrap()
            await self._reload()

        await self._run(operation)
