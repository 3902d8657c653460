# tests/test_task_query.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from task_api.core.access import parse_entity_id
from task_api.core.errors import MalformedIdentifier, ValidationError
from task_api.core.task_query import (
    MAX_OFFSET,
    MAX_PAGE_VALUE,
    TaskListParams,
    coerce_positive,
    list_project_tasks,
    parse_due_date,
)
from task_api.models.project import Project
from task_api.models.task import Task, TaskStatus
from task_api.models.user import User

from .helpers import UNKNOWN_ID


def test_defaults() -> None:
    params = TaskListParams.from_query()

    assert params.status is None
    assert params.due_date is None
    assert (params.page, params.limit, params.offset) == (1, 10, 0)
    assert params.sort_by == "created_at"
    assert params.descending is False


def test_unknown_sort_field_falls_back_to_created_at() -> None:
    assert TaskListParams.from_query(sort_by="password").sort_by == "created_at"
    assert TaskListParams.from_query(sort_by="due_date").sort_by == "due_date"


def test_only_desc_reverses_order() -> None:
    assert TaskListParams.from_query(order="desc").descending is True
    assert TaskListParams.from_query(order="DESC").descending is False
    assert TaskListParams.from_query(order="asc").descending is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 7), ("", 7), ("3", 3), ("0", 1), ("-2", 1), ("1.9", 1), ("x", 1), ("nan", 1), ("inf", 1),
        ("1e30", MAX_PAGE_VALUE), ("4000000000", MAX_PAGE_VALUE),
    ],
)
def test_coerce_positive(raw, expected) -> None:
    assert coerce_positive(raw, 7) == expected


def test_offset_follows_page_and_limit() -> None:
    assert TaskListParams.from_query(page="3", limit="5").offset == 10


def test_offset_stays_in_store_range() -> None:
    params = TaskListParams.from_query(page="4000000000", limit="4000000000")

    assert (params.page, params.limit) == (MAX_PAGE_VALUE, MAX_PAGE_VALUE)
    assert params.offset == (MAX_PAGE_VALUE - 1) * MAX_PAGE_VALUE
    assert params.offset <= MAX_OFFSET


@pytest.mark.parametrize(
    "raw",
    ["2024-05-01", "2024-05-01T18:45:00", "2024-05-01T18:45:00Z", "2024-05-01T18:45:00+02:00"],
)
def test_due_date_keeps_calendar_day(raw) -> None:
    assert parse_due_date(raw) == date(2024, 5, 1)


@pytest.mark.parametrize("raw", ["yesterday", "2024-13-01", "05/01/2024"])
def test_bad_due_date(raw) -> None:
    with pytest.raises(ValidationError, match="Invalid date format for due_date"):
        parse_due_date(raw)


def test_status_filter_is_validated() -> None:
    assert TaskListParams.from_query(status="in-progress").status is TaskStatus.IN_PROGRESS
    with pytest.raises(ValidationError, match="Invalid status value"):
        TaskListParams.from_query(status="in_progress")


def test_parse_entity_id() -> None:
    assert parse_entity_id(UNKNOWN_ID.upper(), "Task") == UNKNOWN_ID
    for bad in ("", "invalidtaskID", UNKNOWN_ID[:-1], UNKNOWN_ID + "0", UNKNOWN_ID.replace("-", "")):
        with pytest.raises(MalformedIdentifier, match="Invalid Task ID format"):
            parse_entity_id(bad, "Task")


@pytest.fixture()
def session(database):
    database.init(max_retries=1)
    yield from database.session()


@pytest.fixture()
def seeded(session):
    user = User(username="owner", email="owner@example.com", hashed_password="x")
    session.add(user)
    session.flush()
    project = Project(name="P", owner_id=user.id)
    other = Project(name="Q", owner_id=user.id)
    session.add_all([project, other])
    session.flush()

    base = datetime(2024, 5, 1, 9, 0)
    for i in range(12):
        session.add(
            Task(
                title=f"task-{i:02d}",
                status=TaskStatus.COMPLETED.value if i % 3 == 0 else TaskStatus.PENDING.value,
                due_date=base + timedelta(days=i % 2),
                project_id=project.id,
                created_at=base + timedelta(minutes=i),
                is_deleted=i == 11,
            )
        )
    session.add(Task(title="elsewhere", status="pending", project_id=other.id, due_date=base))
    session.commit()
    return project


def test_list_excludes_deleted_and_foreign_tasks(session, seeded) -> None:
    tasks, pagination = list_project_tasks(session, seeded.id, TaskListParams.from_query(limit="50"))

    assert len(tasks) == 11
    assert all(t.project_id == seeded.id and not t.is_deleted for t in tasks)
    assert pagination.total_count == 11
    assert pagination.total_pages == 1


def test_count_uses_the_same_filter(session, seeded) -> None:
    params = TaskListParams.from_query(status="completed", due_date="2024-05-01", limit="1")

    tasks, pagination = list_project_tasks(session, seeded.id, params)

    # completed: 0, 3, 6, 9; on May 1st (even index): 0, 6
    assert [t.title for t in tasks] == ["task-00"]
    assert pagination.total_count == 2
    assert pagination.total_pages == 2


def test_pages_partition_the_result(session, seeded) -> None:
    titles = []
    for page in range(1, 5):
        tasks, pagination = list_project_tasks(session, seeded.id, TaskListParams.from_query(page=str(page), limit="3"))
        assert len(tasks) <= 3
        titles.extend(t.title for t in tasks)

    assert pagination.total_pages == 4
    assert titles == [f"task-{i:02d}" for i in range(11)]


def test_page_past_the_end_is_empty(session, seeded) -> None:
    tasks, pagination = list_project_tasks(session, seeded.id, TaskListParams.from_query(page="9"))

    assert tasks == []
    assert pagination.current_page == 9
    assert pagination.total_count == 11


def test_descending_sort(session, seeded) -> None:
    tasks, _ = list_project_tasks(session, seeded.id, TaskListParams.from_query(order="desc", limit="2"))

    assert [t.title for t in tasks] == ["task-10", "task-09"]
