from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_time_of_day, parse_time_of_day, parse_timestamp
from ..core.enums import SubjectKind


@dataclass(frozen=True)
class SubjectRef:
    """Subject columns embedded into a timetable entry by the join."""

    id: str
    name: str
    kind: SubjectKind

    @classmethod
    def from_row(cls, r: Mapping[str, Any]) -> "SubjectRef":
        return cls(id=str(r["id"]), name=r["name"], kind=SubjectKind(r["type"]))


@dataclass(frozen=True)
class TimetableEntry:
    id: str
    subject_id: str
    day_of_week: int
    start_time: time
    end_time: time
    owner_id: str
    subject: Optional[SubjectRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, r: Mapping[str, Any]) -> "TimetableEntry":
        subject = r.get("subject")
        return cls(
            id=str(r["id"]),
            subject_id=str(r["subject_id"]),
            day_of_week=int(r["day_of_week"]),
            start_time=parse_time_of_day(r["start_time"]),
            end_time=parse_time_of_day(r["end_time"]),
            owner_id=str(r["user_id"]),
            subject=SubjectRef.from_row(subject) if subject else None,
            created_at=parse_timestamp(r.get("created_at")),
            updated_at=parse_timestamp(r.get("updated_at")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "day_of_week": self.day_of_week,
            "start_time": format_time_of_day(self.start_time),
            "end_time": format_time_of_day(self.end_time),
            "owner_id": self.owner_id,
            "subject": (
                {"id": self.subject.id, "name": self.subject.name, "kind": self.subject.kind.value}
                if self.subject
                else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
