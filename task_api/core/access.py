"""
Ownership checks shared by the project and task routers.

A project is only ever visible to its owner, and a task only through its
parent project. Lookups that miss report "not found or unauthorized"
without saying which.
"""
import logging
import re

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.project import Project
from ..models.task import Task
from .auth import CurrentUser
from .errors import MalformedIdentifier, NotFoundOrUnauthorized

logger = logging.getLogger(__name__)

_ENTITY_ID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

PROJECT_NOT_FOUND = "Project not found or you do not have permission to view it"
TASK_NOT_FOUND = "Task not found within this project"


def parse_entity_id(value: str, label: str) -> str:
    """Return the canonical form of an entity reference or raise MalformedIdentifier."""
    if not isinstance(value, str) or not _ENTITY_ID_RE.match(value):
        raise MalformedIdentifier(f"Invalid {label} ID format")
    return value.lower()


def owned_project_clause(project_id: str, user: CurrentUser, include_deleted: bool = False) -> list:
    clause = [Project.id == project_id, Project.owner_id == user.user_id]
    if not include_deleted:
        clause.append(Project.is_deleted.is_(False))
    return clause


def project_task_clause(project_id: str, task_id: str, include_deleted: bool = False) -> list:
    clause = [Task.id == task_id, Task.project_id == project_id]
    if not include_deleted:
        clause.append(Task.is_deleted.is_(False))
    return clause


def get_owned_project(
    db: Session,
    project_id: str,
    user: CurrentUser,
    include_deleted: bool = False,
) -> Project:
    """
    Resolve a project the caller owns.

    Args:
        db: Database session
        project_id: Raw project reference from the request path
        user: Authenticated caller
        include_deleted: Also match soft-deleted projects

    Raises:
        MalformedIdentifier: before any store access, for a bad reference
        NotFoundOrUnauthorized: if no matching project is owned by the caller
    """
    project_id = parse_entity_id(project_id, "Project")
    project = db.scalars(
        select(Project).where(*owned_project_clause(project_id, user, include_deleted))
    ).first()
    if project is None:
        logger.warning(f"Project {project_id} not resolved for {user}")
        raise NotFoundOrUnauthorized(PROJECT_NOT_FOUND)
    return project


def get_project_task(
    db: Session,
    project: Project,
    task_id: str,
    include_deleted: bool = False,
) -> Task:
    """Resolve a task inside an already resolved project."""
    task_id = parse_entity_id(task_id, "Task")
    task = db.scalars(
        select(Task).where(*project_task_clause(project.id, task_id, include_deleted))
    ).first()
    if task is None:
        logger.warning(f"Task {task_id} not found in project {project.id}")
        raise NotFoundOrUnauthorized(TASK_NOT_FOUND)
    return task
