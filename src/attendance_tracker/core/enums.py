from __future__ import annotations

from enum import Enum


class SubjectKind(str, Enum):
    """Kind of a subject, stored in the `type` column."""

    LECTURE = "LECTURE"
    LAB = "LAB"


class StoreStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
