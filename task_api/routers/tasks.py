import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from ..core.access import (
    TASK_NOT_FOUND,
    get_owned_project,
    get_project_task,
    parse_entity_id,
    project_task_clause,
)
from ..core.auth import CurrentUser, get_current_user
from ..core.config import get_settings
from ..core.database import get_db
from ..core.errors import NotFoundOrUnauthorized
from ..core.task_query import TaskListParams, list_project_tasks
from ..models.base import to_naive_utc
from ..models.task import Task
from ..schemas.project import MessageResponse
from ..schemas.task import (
    PaginationResponse,
    TaskBulkStatusUpdate,
    TaskCreate,
    TaskEnvelope,
    TaskList,
    TaskResponse,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _envelope(task: Task) -> TaskEnvelope:
    return TaskEnvelope(task=TaskResponse.model_validate(task))


@router.post("/{project_id}/tasks", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    project_id: str,
    task_data: TaskCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a task inside a project owned by the caller"""
    project = get_owned_project(db, project_id, current_user)

    db_task = Task(
        title=task_data.title,
        description=task_data.description,
        status=task_data.status.value,
        due_date=to_naive_utc(task_data.due_date),
        project_id=project.id,
    )
    db.add(db_task)
    db.commit()
    db.refresh(db_task)

    logger.info(f"Task {db_task.id} created in project {project.id}")
    return _envelope(db_task)


@router.get("/{project_id}/tasks", response_model=TaskList)
def get_tasks(
    project_id: str,
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    due_date: Optional[str] = Query(None, description="Filter by due date (calendar day)"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Number of tasks per page"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Field to sort by"),
    order: Optional[str] = Query(None, description="'desc' for descending, ascending otherwise"),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a project's tasks with filtering, sorting and pagination"""
    project = get_owned_project(db, project_id, current_user)
    params = TaskListParams.from_query(
        status=status_filter,
        due_date=due_date,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        default_limit=get_settings().default_page_size,
    )

    tasks, pagination = list_project_tasks(db, project.id, params)
    return TaskList(
        tasks=[TaskResponse.model_validate(task) for task in tasks],
        pagination=PaginationResponse.model_validate(pagination),
    )


@router.put("/{project_id}/tasks/bulk-update", response_model=MessageResponse)
def bulk_update_task_status(
    project_id: str,
    bulk: TaskBulkStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Set one status on every listed task that belongs to the project"""
    task_ids = [parse_entity_id(task_id, "Task") for task_id in bulk.task_ids]
    project = get_owned_project(db, project_id, current_user, include_deleted=True)

    # Not transactional across the set; the count reports what changed
    modified = 0
    if task_ids:
        result = db.execute(
            update(Task)
            .where(
                Task.id.in_(task_ids),
                Task.project_id == project.id,
                Task.status != bulk.status.value,
            )
            .values(status=bulk.status.value)
            .execution_options(synchronize_session=False)
        )
        modified = result.rowcount
        db.commit()

    logger.info(f"Bulk update in project {project.id}: {modified} tasks set to {bulk.status.value}")
    return MessageResponse(message=f"{modified} tasks updated to status '{bulk.status.value}'")


@router.get("/{project_id}/tasks/{task_id}", response_model=TaskEnvelope)
def get_task(
    project_id: str,
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a specific task by ID"""
    parse_entity_id(project_id, "Project")
    parse_entity_id(task_id, "Task")
    project = get_owned_project(db, project_id, current_user)
    return _envelope(get_project_task(db, project, task_id))


@router.put("/{project_id}/tasks/{task_id}", response_model=TaskEnvelope)
def update_task(
    project_id: str,
    task_id: str,
    task_update: TaskUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a task"""
    parse_entity_id(project_id, "Project")
    task_id = parse_entity_id(task_id, "Task")
    project = get_owned_project(db, project_id, current_user)

    values = task_update.model_dump(exclude_unset=True)
    if not values:
        return _envelope(get_project_task(db, project, task_id))
    if "status" in values:
        values["status"] = values["status"].value
    if "due_date" in values:
        values["due_date"] = to_naive_utc(values["due_date"])
    if "description" in values and values["description"] is None:
        values["description"] = ""

    result = db.execute(
        update(Task)
        .where(*project_task_clause(project.id, task_id))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Update of task {task_id} rejected in project {project.id}")
        raise NotFoundOrUnauthorized(TASK_NOT_FOUND)
    db.commit()

    return _envelope(db.get(Task, task_id))


@router.put("/{project_id}/tasks/{task_id}/soft-delete", response_model=MessageResponse)
def soft_delete_task(
    project_id: str,
    task_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark a task as deleted; repeating the call on a deleted task succeeds"""
    parse_entity_id(project_id, "Project")
    task_id = parse_entity_id(task_id, "Task")
    project = get_owned_project(db, project_id, current_user)

    result = db.execute(
        update(Task)
        .where(*project_task_clause(project.id, task_id, include_deleted=True))
        .values(is_deleted=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Soft delete of task {task_id} rejected in project {project.id}")
        raise NotFoundOrUnauthorized(TASK_NOT_FOUND)
    db.commit()

    logger.info(f"Task {task_id} soft deleted in project {project.id}")
    return MessageResponse(message="Task soft deleted successfully")
