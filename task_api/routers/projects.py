import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.access import (
    PROJECT_NOT_FOUND,
    get_owned_project,
    owned_project_clause,
    parse_entity_id,
)
from ..core.auth import CurrentUser, get_current_user
from ..core.database import get_db
from ..core.errors import NotFoundOrUnauthorized
from ..models.project import Project
from ..schemas.project import (
    MessageResponse,
    ProjectCreate,
    ProjectEnvelope,
    ProjectList,
    ProjectResponse,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _envelope(project: Project) -> ProjectEnvelope:
    return ProjectEnvelope(project=ProjectResponse.model_validate(project))


@router.post("", response_model=ProjectEnvelope, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a project owned by the authenticated user"""
    project = Project(
        name=project_in.name,
        description=project_in.description,
        owner_id=current_user.user_id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info(f"Project {project.id} created by {current_user}")
    return _envelope(project)


@router.get("", response_model=ProjectList)
def list_projects(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's projects that are not soft-deleted"""
    projects = db.scalars(
        select(Project)
        .where(Project.owner_id == current_user.user_id, Project.is_deleted.is_(False))
        .order_by(Project.created_at, Project.id)
    ).all()
    return ProjectList(projects=[ProjectResponse.model_validate(p) for p in projects])


@router.get("/{project_id}", response_model=ProjectEnvelope)
def get_project(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a specific project by ID"""
    return _envelope(get_owned_project(db, project_id, current_user))


@router.put("/{project_id}", response_model=ProjectEnvelope)
def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the name and/or description of a project"""
    project_id = parse_entity_id(project_id, "Project")
    values = project_update.model_dump(exclude_unset=True)
    if not values:
        return _envelope(get_owned_project(db, project_id, current_user))

    result = db.execute(
        update(Project)
        .where(*owned_project_clause(project_id, current_user))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Update of project {project_id} rejected for {current_user}")
        raise NotFoundOrUnauthorized(PROJECT_NOT_FOUND)
    db.commit()

    return _envelope(db.get(Project, project_id))


@router.put("/{project_id}/soft-delete", response_model=MessageResponse)
def soft_delete_project(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark a project as deleted; repeating the call on a deleted project succeeds"""
    project_id = parse_entity_id(project_id, "Project")
    result = db.execute(
        update(Project)
        .where(*owned_project_clause(project_id, current_user, include_deleted=True))
        .values(is_deleted=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Soft delete of project {project_id} rejected for {current_user}")
        raise NotFoundOrUnauthorized(PROJECT_NOT_FOUND)
    db.commit()

    logger.info(f"Project {project_id} soft deleted by {current_user}")
    return MessageResponse(message="Project soft deleted successfully")
