# appia/core/deps.py
"""
FastAPI dependencies. Everything long-lived is created once in
appia.main.create_app and hung off ``app.state``; routes reach it here.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine

from appia.core.config import Settings
from appia.core.errors import AuthenticationError, AuthorizationError
from appia.services.anthropic_client import AnthropicClient
from appia.services.github_client import GithubOAuthClient
from appia.services.usage_tracker import UsageTracker
from appia.services.vercel_client import VercelClient

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_llm_client(request: Request) -> AnthropicClient:
    return request.app.state.llm_client


def get_usage_tracker(request: Request) -> UsageTracker:
    return request.app.state.usage_tracker


def get_vercel_client(request: Request) -> VercelClient:
    return request.app.state.vercel_client


def get_github_client(request: Request) -> GithubOAuthClient:
    return request.app.state.github_client


def client_id(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def enforce_rate_limit(request: Request) -> None:
    request.app.state.rate_limiter.check(client_id(request))


def bearer_user_id(request: Request) -> Optional[str]:
    # The bearer token is the user id issued by the identity provider.
    auth = request.headers.get("authorization")
    if auth is None:
        return None

    scheme, _, token = auth.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Invalid authorization header")
    return token


def authorize_user(request: Request, claimed_user_id: str) -> str:
    """
    Returns the acting user id. An authenticated caller may only act as
    themselves; anonymous callers are trusted with the id they send.
    """
    authenticated = bearer_user_id(request)
    if authenticated and authenticated != claimed_user_id:
        logger.warning(f"Authorization failed: {authenticated} acting as {claimed_user_id}")
        raise AuthorizationError("You do not have permission to access this resource")
    return claimed_user_id
