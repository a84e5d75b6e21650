from __future__ import annotations

from typing import Any, Dict

from flask import Flask

from ..common.http import error_response, json_body, login_required, store_response
from ..common.validators import require_choice, require_int_range, require_non_empty
from ..container import Container
from ..core.constants import DEFAULT_ATTENDANCE_THRESHOLD
from ..core.enums import SubjectKind
from ..core.exceptions import ValidationError


def _subject_fields(data: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if not partial or "name" in data:
        fields["name"] = require_non_empty(data.get("name"), "Subject name")
    if not partial or "kind" in data:
        fields["kind"] = require_choice(data.get("kind", SubjectKind.LECTURE.value), "Type", SubjectKind)
    if "attendance_threshold" in data:
        fields["attendance_threshold"] = require_int_range(
            data["attendance_threshold"], "Attendance threshold", minimum=0, maximum=100
        )
    elif not partial:
        fields["attendance_threshold"] = DEFAULT_ATTENDANCE_THRESHOLD
    return fields


def register(app: Flask, container: Container) -> None:
    store = container.subjects_store
    requires_session = login_required(container.session_store)

    @app.route("/api/subjects", methods=["GET"], endpoint="subjects_list")
    @requires_session
    def subjects_list():
        container.runner.run(store.fetch_subjects())
        return store_response(store, store.subjects)

    @app.route("/api/subjects", methods=["POST"], endpoint="subjects_create")
    @requires_session
    def subjects_create():
        try:
            fields = _subject_fields(json_body(), partial=False)
        except ValidationError as e:
            return error_response(str(e), 400)

        container.runner.run(store.create_subject(**fields))
        return store_response(store, store.subjects, success_status=201)

    @app.route("/api/subjects/<subject_id>", methods=["PATCH"], endpoint="subjects_update")
    @requires_session
    def subjects_update(subject_id: str):
        try:
            fields = _subject_fields(json_body(), partial=True)
        except ValidationError as e:
            return error_response(str(e), 400)

        container.runner.run(store.update_subject(subject_id, **fields))
        return store_response(store, store.subjects)

    @app.route("/api/subjects/<subject_id>", methods=["DELETE"], endpoint="subjects_delete")
    @requires_session
    def subjects_delete(subject_id: str):
        container.runner.run(store.delete_subject(subject_id))
        return store_response(store, store.subjects)
