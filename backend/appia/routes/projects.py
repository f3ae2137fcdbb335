# appia/routes/projects.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, Engine

from appia.core.deps import authorize_user, get_engine
from appia.core.errors import AuthorizationError, NotFoundError
from appia.models.project import Project, ProjectCreate, ProjectUpdate
from appia.services.database import projects_table, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


def _load_owned(conn: Connection, project_id: str, user_id: str) -> Dict[str, Any]:
    row = conn.execute(
        select(projects_table).where(projects_table.c.id == project_id)
    ).mappings().first()
    if row is None:
        raise NotFoundError("Project not found")
    if row["user_id"] != user_id:
        logger.warning(f"User {user_id} tried to access project {project_id}")
        raise AuthorizationError("You do not have permission to access this project")
    return dict(row)


@router.post("", response_model=Project, status_code=201)
def create_project(req: ProjectCreate, request: Request, engine: Engine = Depends(get_engine)):
    user_id = authorize_user(request, req.user_id)
    now = utcnow()
    values = {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "name": req.name,
        "description": req.description,
        "language": req.language,
        "prompt": req.prompt,
        "code": req.code,
        "files": req.files,
        "chat_history": req.chat_history,
        "is_public": req.is_public,
        "created_at": now,
        "updated_at": now,
    }
    with engine.begin() as conn:
        conn.execute(insert(projects_table).values(**values))
    logger.info(f"Created project {values['id']} for user {user_id}")
    return Project(**values)


@router.get("", response_model=List[Project])
def list_projects(
    request: Request,
    user_id: str = Query(alias="userId", min_length=1),
    engine: Engine = Depends(get_engine),
):
    user_id = authorize_user(request, user_id)
    with engine.begin() as conn:
        rows = conn.execute(
            select(projects_table)
            .where(projects_table.c.user_id == user_id)
            .order_by(projects_table.c.updated_at.desc())
        ).mappings().all()
    return [Project(**row) for row in rows]


@router.get("/{project_id}", response_model=Project)
def get_project(
    project_id: str,
    request: Request,
    user_id: str = Query(alias="userId", min_length=1),
    engine: Engine = Depends(get_engine),
):
    user_id = authorize_user(request, user_id)
    with engine.begin() as conn:
        row = _load_owned(conn, project_id, user_id)
    return Project(**row)


@router.put("/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    req: ProjectUpdate,
    request: Request,
    engine: Engine = Depends(get_engine),
):
    user_id = authorize_user(request, req.user_id)
    # Only "files" may be cleared with an explicit null.
    changes = {
        key: value
        for key, value in req.model_dump(exclude_unset=True, exclude={"user_id"}).items()
        if value is not None or key == "files"
    }
    changes["updated_at"] = utcnow()

    with engine.begin() as conn:
        _load_owned(conn, project_id, user_id)
        conn.execute(
            update(projects_table).where(projects_table.c.id == project_id).values(**changes)
        )
        row = conn.execute(
            select(projects_table).where(projects_table.c.id == project_id)
        ).mappings().first()
    logger.info(f"Updated project {project_id}: {sorted(changes)}")
    return Project(**row)


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    request: Request,
    user_id: str = Query(alias="userId", min_length=1),
    engine: Engine = Depends(get_engine),
):
    user_id = authorize_user(request, user_id)
    with engine.begin() as conn:
        _load_owned(conn, project_id, user_id)
        conn.execute(delete(projects_table).where(projects_table.c.id == project_id))
    logger.info(f"Deleted project {project_id}")
    return {"success": True}
