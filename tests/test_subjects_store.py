from __future__ import annotations

import asyncio

from fakes import InMemoryGateway

from attendance_tracker.core.enums import StoreStatus, SubjectKind
from attendance_tracker.subjects.store import SubjectsStore


def _store():
    gateway = InMemoryGateway()
    return gateway, SubjectsStore(gateway)


def test_create_subject_then_fetch_returns_it():
    gateway, store = _store()
    user = gateway.login_as()

    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE, attendance_threshold=75))
    asyncio.run(store.fetch_subjects())

    assert store.error is None
    assert len(store.subjects) == 1
    subject = store.subjects[0]
    assert subject.name == "Algorithms"
    assert subject.kind == SubjectKind.LECTURE
    assert subject.attendance_threshold == 75
    assert subject.owner_id == user.id
    assert subject.id
    assert subject.created_at is not None and subject.updated_at is not None


def test_threshold_defaults_to_75():
    gateway, store = _store()
    gateway.login_as()

    asyncio.run(store.create_subject(name="Physics Lab", kind=SubjectKind.LAB))

    assert store.subjects[0].attendance_threshold == 75
    assert gateway.tables["subjects"][0]["attendance_threshold"] == 75


def test_subjects_stay_sorted_by_name_after_mutations():
    gateway, store = _store()
    gateway.login_as()

    async def scenario():
        await store.create_subject(name="Networks", kind=SubjectKind.LECTURE)
        await store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE)
        await store.create_subject(name="Databases", kind=SubjectKind.LAB)
        by_name = {s.name: s.id for s in store.subjects}
        await store.update_subject(by_name["Algorithms"], name="Zoology")
        await store.delete_subject(by_name["Databases"])

    asyncio.run(scenario())

    names = [s.name for s in store.subjects]
    assert names == ["Networks", "Zoology"]
    assert names == sorted(names)


def test_create_without_session_fails_and_writes_nothing():
    gateway, store = _store()

    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))

    assert store.error == "User not authenticated"
    assert store.status == StoreStatus.ERROR
    assert gateway.writes() == []
    assert store.loading is False


def test_empty_update_skips_write_but_refetches():
    gateway, store = _store()
    gateway.login_as()
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))
    before = list(store.subjects)
    selects = gateway.count("select", "subjects")

    asyncio.run(store.update_subject(before[0].id))

    assert gateway.count("select", "subjects") == selects + 1
    assert gateway.count("update", "subjects") == 0
    assert store.subjects == before


def test_update_sends_only_given_fields():
    gateway, store = _store()
    gateway.login_as()
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))
    subject_id = store.subjects[0].id

    asyncio.run(store.update_subject(subject_id, kind=SubjectKind.LAB, attendance_threshold=80))

    assert ("update", "subjects", {"type": "LAB", "attendance_threshold": 80}) in gateway.calls
    assert store.subjects[0].kind == SubjectKind.LAB
    assert store.subjects[0].attendance_threshold == 80
    assert store.subjects[0].name == "Algorithms"


def test_failed_fetch_keeps_previous_data():
    gateway, store = _store()
    gateway.login_as()
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))

    gateway.fail["select:subjects"] = "network down"
    asyncio.run(store.fetch_subjects())

    assert store.error == "network down"
    assert [s.name for s in store.subjects] == ["Algorithms"]
    assert store.loading is False


def test_error_is_cleared_when_next_operation_starts():
    gateway, store = _store()
    gateway.login_as()
    gateway.fail["select:subjects"] = "network down"
    asyncio.run(store.fetch_subjects())
    assert store.error == "network down"

    seen = []
    store.subscribe(lambda: seen.append((store.loading, store.error)))
    del gateway.fail["select:subjects"]
    asyncio.run(store.fetch_subjects())

    assert seen[0] == (True, None)
    assert seen[-1] == (False, None)
    assert store.status == StoreStatus.IDLE


def test_loading_is_true_until_refetch_completes():
    gateway, store = _store()
    gateway.login_as()
    observed = []

    original_select = gateway.select

    async def spying_select(*args, **kwargs):
        observed.append(store.loading)
        return await original_select(*args, **kwargs)

    gateway.select = spying_select
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))

    assert observed == [True]
    assert store.loading is False


def test_delete_of_referenced_subject_surfaces_gateway_error():
    gateway, store = _store()
    user = gateway.login_as()
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))
    subject_id = store.subjects[0].id
    gateway.tables["timetable_entries"].append(
        {
            "id": "entry-1",
            "subject_id": subject_id,
            "day_of_week": 1,
            "start_time": "09:00:00",
            "end_time": "10:00:00",
            "user_id": user.id,
        }
    )

    asyncio.run(store.delete_subject(subject_id))

    assert store.error is not None
    assert "violates foreign key constraint" in store.error
    assert [s.id for s in store.subjects] == [subject_id]


def test_other_users_subjects_are_not_visible():
    gateway, store = _store()
    gateway.login_as("a@example.com")
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))

    gateway.login_as("b@example.com")
    asyncio.run(store.fetch_subjects())

    assert store.subjects == []


def test_malformed_row_is_recorded_as_error():
    gateway, store = _store()
    user = gateway.login_as()
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))
    gateway.tables["subjects"].append(
        {"id": "subject-x", "name": "Seminar", "type": "SEMINAR", "attendance_threshold": 75, "user_id": user.id}
    )

    asyncio.run(store.fetch_subjects())

    assert "SEMINAR" in store.error
    assert [s.name for s in store.subjects] == ["Algorithms"]
    assert store.loading is False


def test_bad_partial_field_is_recorded_without_writing():
    gateway, store = _store()
    gateway.login_as()
    asyncio.run(store.create_subject(name="Algorithms", kind=SubjectKind.LECTURE))

    asyncio.run(store.update_subject(store.subjects[0].id, kind="SEMINAR"))

    assert store.status == StoreStatus.ERROR
    assert "SEMINAR" in store.error
    assert gateway.count("update", "subjects") == 0
    assert store.loading is False
