from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..core.constants import DEFAULT_ATTENDANCE_THRESHOLD
from ..core.enums import SubjectKind


@dataclass(frozen=True)
class Subject:
    """A subject owned by one user.

    `attendance_threshold` is a percentage; its 0..100 bounds are checked by
    the web layer only.
    """

    id: str
    name: str
    kind: SubjectKind
    attendance_threshold: int
    owner_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, r: Mapping[str, Any]) -> "Subject":
        threshold = r.get("attendance_threshold")
        return cls(
            id=str(r["id"]),
            name=r["name"],
            kind=SubjectKind(r["type"]),
            attendance_threshold=int(threshold if threshold is not None else DEFAULT_ATTENDANCE_THRESHOLD),
            owner_id=str(r["user_id"]),
            created_at=parse_timestamp(r.get("created_at")),
            updated_at=parse_timestamp(r.get("updated_at")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "attendance_threshold": self.attendance_threshold,
            "owner_id": self.owner_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
