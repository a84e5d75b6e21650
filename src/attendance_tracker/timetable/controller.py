from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.http import error_response, json_body, login_required, store_response
from ..common.datetime_utils import format_time_of_day
from ..common.validators import require_int_range, require_non_empty, require_time
from ..container import Container
from ..core.constants import DAYS, TIME_SLOTS
from ..core.exceptions import ValidationError
from .grid import build_week_grid


def _entry_fields(data: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if not partial or "subject_id" in data:
        fields["subject_id"] = require_non_empty(data.get("subject_id"), "Subject")
    if not partial or "day_of_week" in data:
        fields["day_of_week"] = require_int_range(data.get("day_of_week"), "Day", minimum=0, maximum=len(DAYS) - 1)
    if not partial or "start_time" in data:
        fields["start_time"] = require_time(data.get("start_time"), "Start time")
    if not partial or "end_time" in data:
        fields["end_time"] = require_time(data.get("end_time"), "End time")
    return fields


def register(app: Flask, container: Container) -> None:
    store = container.timetable_store
    requires_session = login_required(container.session_store)

    @app.route("/api/timetable", methods=["GET"], endpoint="timetable_list")
    @requires_session
    def timetable_list():
        container.runner.run(store.fetch_entries())
        return store_response(store, store.entries)

    @app.route("/api/timetable/grid", methods=["GET"], endpoint="timetable_grid")
    @requires_session
    def timetable_grid():
        container.runner.run(store.fetch_entries())
        grid = build_week_grid(store.entries)
        payload = {
            "days": list(DAYS),
            "slots": list(TIME_SLOTS),
            "rows": [
                {
                    "slot": slot,
                    "cells": [
                        [
                            {
                                "id": e.id,
                                "subject": e.subject.name if e.subject else None,
                                "kind": e.subject.kind.value if e.subject else None,
                                "start_time": format_time_of_day(e.start_time),
                                "end_time": format_time_of_day(e.end_time),
                            }
                            for e in cell
                        ]
                        for cell in row
                    ],
                }
                for slot, row in zip(TIME_SLOTS, grid)
            ],
            "loading": store.loading,
            "error": store.error,
        }
        return jsonify(payload), (502 if store.error else 200)

    @app.route("/api/timetable", methods=["POST"], endpoint="timetable_create")
    @requires_session
    def timetable_create():
        try:
            fields = _entry_fields(json_body(), partial=False)
        except ValidationError as e:
            return error_response(str(e), 400)

        container.runner.run(store.create_entry(**fields))
        return store_response(store, store.entries, success_status=201)

    @app.route("/api/timetable/<entry_id>", methods=["PATCH"], endpoint="timetable_update")
    @requires_session
    def timetable_update(entry_id: str):
        try:
            fields = _entry_fields(json_body(), partial=True)
        except ValidationError as e:
            return error_response(str(e), 400)

        container.runner.run(store.update_entry(entry_id, **fields))
        return store_response(store, store.entries)

    @app.route("/api/timetable/<entry_id>", methods=["DELETE"], endpoint="timetable_delete")
    @requires_session
    def timetable_delete(entry_id: str):
        container.runner.run(store.delete_entry(entry_id))
        return store_response(store, store.entries)
