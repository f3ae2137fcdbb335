# appia/routes/publish.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Engine

from appia.core.config import Settings
from appia.core.deps import (
    authorize_user,
    bearer_user_id,
    get_engine,
    get_settings,
    get_usage_tracker,
    get_vercel_client,
)
from appia.core.errors import AuthenticationError, AuthorizationError, NotFoundError
from appia.models.publish import (
    DeploymentStatus,
    ExpoSnackRequest,
    ExpoSnackResponse,
    PublishRequest,
    PublishResponse,
)
from appia.services.database import deployments_table, utcnow
from appia.services.expo_client import create_snack
from appia.services.usage_tracker import UsageTracker
from appia.services.vercel_client import VercelClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["publish"])


@router.post("/publish", response_model=PublishResponse)
def publish(
    req: PublishRequest,
    request: Request,
    engine: Engine = Depends(get_engine),
    vercel: VercelClient = Depends(get_vercel_client),
    tracker: UsageTracker = Depends(get_usage_tracker),
):
    user_id = authorize_user(request, req.user_id)
    deployment = vercel.deploy(
        req.project_name,
        req.files,
        environment_variables=req.environment_variables,
        framework=req.framework,
    )

    with engine.begin() as conn:
        conn.execute(
            insert(deployments_table).values(
                id=deployment["deployment_id"],
                user_id=user_id,
                project_id=req.project_id,
                project_name=req.project_name,
                deployment_url=deployment["url"],
                created_at=utcnow(),
            )
        )
    tracker.record_best_effort(
        user_id,
        "publish",
        0,
        {"deploymentId": deployment["deployment_id"], "projectId": req.project_id},
    )
    return PublishResponse(url=deployment["url"], deployment_id=deployment["deployment_id"])


def _acting_user(request: Request, user_id: Optional[str]) -> str:
    if user_id is None:
        user_id = bearer_user_id(request)
        if user_id is None:
            raise AuthenticationError("userId is required")
    return authorize_user(request, user_id)


def _check_owner(engine: Engine, deployment_id: str, user_id: str) -> None:
    with engine.begin() as conn:
        row = conn.execute(
            select(deployments_table.c.user_id).where(deployments_table.c.id == deployment_id)
        ).first()
    if row is None:
        raise NotFoundError("Deployment not found")
    if row.user_id != user_id:
        logger.warning(f"User {user_id} tried to access deployment {deployment_id}")
        raise AuthorizationError("You do not have permission to access this deployment")


@router.get("/publish/{deployment_id}", response_model=DeploymentStatus)
def deployment_status(
    deployment_id: str,
    request: Request,
    user_id: Optional[str] = Query(default=None, alias="userId", min_length=1),
    engine: Engine = Depends(get_engine),
    vercel: VercelClient = Depends(get_vercel_client),
):
    _check_owner(engine, deployment_id, _acting_user(request, user_id))
    data = vercel.get_deployment(deployment_id)
    return DeploymentStatus(
        deployment={
            "id": data.get("id"),
            "url": f"https://{data['url']}" if data.get("url") else None,
            "state": data.get("readyState") or data.get("state"),
            "createdAt": data.get("createdAt"),
        }
    )


@router.delete("/publish/{deployment_id}")
def delete_deployment(
    deployment_id: str,
    request: Request,
    user_id: Optional[str] = Query(default=None, alias="userId", min_length=1),
    engine: Engine = Depends(get_engine),
    vercel: VercelClient = Depends(get_vercel_client),
):
    _check_owner(engine, deployment_id, _acting_user(request, user_id))
    vercel.delete_deployment(deployment_id)
    with engine.begin() as conn:
        conn.execute(delete(deployments_table).where(deployments_table.c.id == deployment_id))
    logger.info(f"Deleted deployment {deployment_id}")
    return {"success": True}


@router.post("/expo-snack", response_model=ExpoSnackResponse)
def expo_snack(req: ExpoSnackRequest, settings: Settings = Depends(get_settings)):
    snack = create_snack(settings, req.files, req.name, req.description)
    return ExpoSnackResponse(**snack)
