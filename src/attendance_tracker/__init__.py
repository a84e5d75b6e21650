"""Attendance Tracker package.

Feature modules (auth, subjects, timetable) each hold a store that keeps
`{data, loading, error}` state in sync with the remote gateway, plus a thin
Flask controller exposing that state as JSON.
"""
from __future__ import annotations

__version__ = "0.1.0"
