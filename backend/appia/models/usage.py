# appia/models/usage.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, StrictInt

from appia.models.base import ApiModel


class UsageTrackRequest(ApiModel):
    user_id: str = Field(min_length=1)
    action_type: str = Field(min_length=1)
    tokens_used: StrictInt = Field(default=0, ge=0)
    metadata: Optional[Dict[str, Any]] = None


class UsageEvent(ApiModel):
    id: int
    tokens_used: int
    created_at: datetime


class UsageTrackResponse(ApiModel):
    success: bool = True
    usage: UsageEvent


class SubscriptionInfo(ApiModel):
    tier: str
    limit: int
    used: int
    remaining: int
    reset_date: datetime


class UsageSummary(ApiModel):
    user_id: str
    total_tokens_used: int
    monthly_tokens_used: int
    usage_by_type: Dict[str, int] = Field(default_factory=dict)
    subscription: Optional[SubscriptionInfo] = None


class UserSetupRequest(ApiModel):
    user_id: str = Field(min_length=1)


class UserSetupResponse(ApiModel):
    message: str
    subscription: SubscriptionInfo
