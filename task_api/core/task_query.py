"""
Filtered, sorted and paginated listing of a project's tasks.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import asc, desc, func, select
from sqlalchemy.orm import Session

from ..models.task import Task, TaskStatus
from .errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT = "created_at"

# Page, limit and offset must stay inside the store's signed integer range
MAX_PAGE_VALUE = 2**31 - 1
MAX_OFFSET = 2**63 - 1

SORTABLE_FIELDS = {
    "created_at": Task.created_at,
    "due_date": Task.due_date,
    "title": Task.title,
    "status": Task.status,
    "_id": Task.id,
}


@dataclass
class Pagination:
    current_page: int
    page_size: int
    total_count: int
    total_pages: int


@dataclass
class TaskListParams:
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = DEFAULT_SORT
    descending: bool = False

    @classmethod
    def from_query(
        cls,
        status: Optional[str] = None,
        due_date: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
        default_limit: int = DEFAULT_LIMIT,
    ) -> "TaskListParams":
        """Normalize raw query-string values, rejecting bad status and date filters."""
        return cls(
            status=parse_status_filter(status),
            due_date=parse_due_date(due_date),
            page=coerce_positive(page, DEFAULT_PAGE),
            limit=coerce_positive(limit, default_limit),
            sort_by=sort_by if sort_by in SORTABLE_FIELDS else DEFAULT_SORT,
            descending=order == "desc",
        )

    @property
    def offset(self) -> int:
        return min((self.page - 1) * self.limit, MAX_OFFSET)


def parse_status_filter(raw: Optional[str]) -> Optional[TaskStatus]:
    if not raw:
        return None
    try:
        return TaskStatus(raw)
    except ValueError:
        raise ValidationError("Invalid status value")


def parse_due_date(raw: Optional[str]) -> Optional[date]:
    """Accept a calendar date or a full ISO timestamp; only the date part is kept."""
    if not raw:
        return None
    try:
        value = raw.strip()
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise ValidationError("Invalid date format for due_date")


def coerce_positive(raw: Optional[str], default: int) -> int:
    """Coerce to an int between 1 and MAX_PAGE_VALUE; non-numeric input collapses to 1."""
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 1
    if math.isnan(value) or math.isinf(value):
        return 1
    return min(max(int(value), 1), MAX_PAGE_VALUE)


def task_filter(project_id: str, params: TaskListParams) -> list:
    """WHERE clause shared by the page query and the count query."""
    clause = [Task.project_id == project_id, Task.is_deleted.is_(False)]
    if params.status is not None:
        clause.append(Task.status == params.status.value)
    if params.due_date is not None:
        start = datetime.combine(params.due_date, time.min)
        clause.append(Task.due_date >= start)
        clause.append(Task.due_date < start + timedelta(days=1))
    return clause


def list_project_tasks(db: Session, project_id: str, params: TaskListParams) -> Tuple[List[Task], Pagination]:
    clause = task_filter(project_id, params)

    sort_column = SORTABLE_FIELDS[params.sort_by]
    direction = desc if params.descending else asc
    # Secondary key keeps page boundaries stable when the sort column has ties
    query = (
        select(Task)
        .where(*clause)
        .order_by(direction(sort_column), direction(Task.id))
        .offset(params.offset)
        .limit(params.limit)
    )
    tasks = list(db.scalars(query).all())

    total_count = db.scalar(select(func.count()).select_from(Task).where(*clause)) or 0
    pagination = Pagination(
        current_page=params.page,
        page_size=params.limit,
        total_count=total_count,
        total_pages=math.ceil(total_count / params.limit),
    )
    logger.debug(f"Listed {len(tasks)}/{total_count} tasks for project {project_id}")
    return tasks, pagination
