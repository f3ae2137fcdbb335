# appia/routes/usage.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from appia.core.deps import authorize_user, get_usage_tracker
from appia.models.usage import (
    UsageSummary,
    UsageTrackRequest,
    UsageTrackResponse,
    UserSetupRequest,
    UserSetupResponse,
)
from appia.services.usage_tracker import UsageTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["usage"])


@router.post("/usage", response_model=UsageTrackResponse)
def track_usage(
    req: UsageTrackRequest,
    request: Request,
    tracker: UsageTracker = Depends(get_usage_tracker),
):
    user_id = authorize_user(request, req.user_id)
    event = tracker.record(user_id, req.action_type, req.tokens_used, req.metadata)
    return UsageTrackResponse(usage=event)


@router.get("/usage/{user_id}", response_model=UsageSummary)
def usage_summary(
    user_id: str,
    request: Request,
    tracker: UsageTracker = Depends(get_usage_tracker),
):
    user_id = authorize_user(request, user_id)
    return tracker.summary(user_id)


@router.post("/user-setup", response_model=UserSetupResponse)
def user_setup(
    req: UserSetupRequest,
    request: Request,
    tracker: UsageTracker = Depends(get_usage_tracker),
):
    user_id = authorize_user(request, req.user_id)
    subscription = tracker.ensure_subscription(user_id)
    logger.info(f"User setup complete for {user_id}: tier={subscription.tier}")
    return UserSetupResponse(message="User setup completed", subscription=subscription)
