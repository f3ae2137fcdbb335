# appia/routes/github.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine

from appia.core.deps import authorize_user, get_engine, get_github_client
from appia.core.errors import UpstreamError
from appia.models.publish import GithubConnectRequest, GithubConnectResponse, GithubStatus, GithubUser
from appia.services.database import github_connections_table, utcnow
from appia.services.github_client import GithubOAuthClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["github"])


@router.post("/github-oauth", response_model=GithubConnectResponse)
def connect_github(
    req: GithubConnectRequest,
    request: Request,
    engine: Engine = Depends(get_engine),
    github: GithubOAuthClient = Depends(get_github_client),
):
    user_id = authorize_user(request, req.user_id)
    token = github.exchange_code(req.code, req.state)
    gh_user = github.get_user(token)
    if gh_user is None:
        raise UpstreamError("GitHub rejected the new access token")

    now = utcnow()
    values = {
        "github_id": gh_user["id"],
        "github_username": gh_user["login"],
        "access_token": token,
        "connected_at": now,
    }
    with engine.begin() as conn:
        conn.execute(delete(github_connections_table).where(github_connections_table.c.user_id == user_id))
        conn.execute(insert(github_connections_table).values(user_id=user_id, **values))
    logger.info(f"GitHub account {gh_user['login']} connected for user {user_id}")

    return GithubConnectResponse(
        github_user=GithubUser(
            id=gh_user["id"],
            username=gh_user["login"],
            name=gh_user.get("name"),
            avatar=gh_user.get("avatar_url"),
            connected_at=now,
        )
    )


@router.get("/github-oauth", response_model=GithubStatus, response_model_exclude_none=True)
def github_status(
    request: Request,
    user_id: str = Query(alias="userId", min_length=1),
    engine: Engine = Depends(get_engine),
    github: GithubOAuthClient = Depends(get_github_client),
):
    user_id = authorize_user(request, user_id)
    with engine.begin() as conn:
        row = conn.execute(
            select(github_connections_table).where(github_connections_table.c.user_id == user_id)
        ).mappings().first()

    if row is None or not row["access_token"]:
        return GithubStatus(connected=False)

    gh_user = github.get_user(row["access_token"])
    if gh_user is None:
        # Revoked or expired; forget the token so the user reconnects.
        with engine.begin() as conn:
            conn.execute(
                update(github_connections_table)
                .where(github_connections_table.c.user_id == user_id)
                .values(access_token=None)
            )
        logger.info(f"GitHub token for user {user_id} is no longer valid")
        return GithubStatus(connected=False)

    return GithubStatus(
        connected=True,
        github_user=GithubUser(
            id=gh_user["id"],
            username=gh_user["login"],
            name=gh_user.get("name"),
            avatar=gh_user.get("avatar_url"),
            connected_at=row["connected_at"],
        ),
    )
