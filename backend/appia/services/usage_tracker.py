# appia/services/usage_tracker.py
"""
Per-user token accounting.

Every call appends a row to ``usage`` and bumps the running total on the
user's subscription with a single SQL increment, so concurrent calls for the
same user add up regardless of the order they land in. Limits are advisory:
going over is logged, nothing is blocked here.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from appia.core.config import Settings
from appia.models.usage import SubscriptionInfo, UsageEvent, UsageSummary
from appia.services.database import subscriptions_table, usage_table, utcnow

logger = logging.getLogger(__name__)


class UsageTracker:
    def __init__(self, engine: Engine, settings: Settings):
        self.engine = engine
        self.settings = settings

    def tier_limit(self, tier: str) -> int:
        return self.settings.pro_tokens_limit if tier == "pro" else self.settings.free_tokens_limit

    def _get_subscription(self, conn: Connection, user_id: str) -> Optional[Dict[str, Any]]:
        row = conn.execute(
            select(subscriptions_table).where(subscriptions_table.c.user_id == user_id)
        ).mappings().first()
        return dict(row) if row else None

    def _create_subscription(self, user_id: str) -> None:
        now = utcnow()
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    insert(subscriptions_table).values(
                        user_id=user_id,
                        tier="free",
                        tokens_limit=self.tier_limit("free"),
                        tokens_used=0,
                        reset_date=now + timedelta(days=self.settings.usage_period_days),
                        status="active",
                        created_at=now,
                    )
                )
            logger.info(f"Created free subscription for user {user_id}")
        except IntegrityError:
            # Another request created it first.
            logger.debug(f"Subscription for user {user_id} already exists")

    def _roll_over(self, conn: Connection, user_id: str) -> None:
        now = utcnow()
        result = conn.execute(
            update(subscriptions_table)
            .where(subscriptions_table.c.user_id == user_id)
            .where(subscriptions_table.c.reset_date <= now)
            .values(tokens_used=0, reset_date=now + timedelta(days=self.settings.usage_period_days))
        )
        if result.rowcount:
            logger.info(f"Usage period rolled over for user {user_id}")

    def ensure_subscription(self, user_id: str) -> SubscriptionInfo:
        with self.engine.begin() as conn:
            exists = self._get_subscription(conn, user_id) is not None
        if not exists:
            self._create_subscription(user_id)

        with self.engine.begin() as conn:
            self._roll_over(conn, user_id)
            subscription = self._get_subscription(conn, user_id)
        return _subscription_info(subscription)

    def record(
        self,
        user_id: str,
        action_type: str,
        tokens_used: int = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> UsageEvent:
        if isinstance(tokens_used, bool) or not isinstance(tokens_used, int):
            raise TypeError("tokens_used must be an integer")
        if tokens_used < 0:
            raise ValueError("tokens_used must not be negative")

        self.ensure_subscription(user_id)

        now = utcnow()
        with self.engine.begin() as conn:
            result = conn.execute(
                insert(usage_table).values(
                    user_id=user_id,
                    action_type=action_type,
                    tokens_used=tokens_used,
                    metadata=metadata or {},
                    created_at=now,
                )
            )
            usage_id = result.inserted_primary_key[0]

            conn.execute(
                update(subscriptions_table)
                .where(subscriptions_table.c.user_id == user_id)
                .values(tokens_used=subscriptions_table.c.tokens_used + tokens_used)
            )
            subscription = self._get_subscription(conn, user_id)

        if subscription and subscription["tokens_used"] >= subscription["tokens_limit"]:
            logger.warning(
                f"User {user_id} exceeded token limit: "
                f"{subscription['tokens_used']}/{subscription['tokens_limit']}"
            )

        return UsageEvent(id=usage_id, tokens_used=tokens_used, created_at=now)

    def record_best_effort(
        self,
        user_id: str,
        action_type: str,
        tokens_used: int = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[UsageEvent]:
        """Same as ``record`` but never raises; usage is telemetry, not the caller's contract."""
        try:
            return self.record(user_id, action_type, tokens_used, metadata)
        except Exception as e:
            logger.warning(f"Usage tracking failed for user {user_id}: {e}")
            return None

    def summary(self, user_id: str) -> UsageSummary:
        now = utcnow()
        start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        with self.engine.begin() as conn:
            total = conn.execute(
                select(func.coalesce(func.sum(usage_table.c.tokens_used), 0)).where(
                    usage_table.c.user_id == user_id
                )
            ).scalar_one()
            monthly = conn.execute(
                select(func.coalesce(func.sum(usage_table.c.tokens_used), 0))
                .where(usage_table.c.user_id == user_id)
                .where(usage_table.c.created_at >= start_of_month)
            ).scalar_one()
            by_type = conn.execute(
                select(usage_table.c.action_type, func.sum(usage_table.c.tokens_used))
                .where(usage_table.c.user_id == user_id)
                .group_by(usage_table.c.action_type)
            ).all()
            self._roll_over(conn, user_id)
            subscription = self._get_subscription(conn, user_id)

        return UsageSummary(
            user_id=user_id,
            total_tokens_used=int(total),
            monthly_tokens_used=int(monthly),
            usage_by_type={action: int(tokens or 0) for action, tokens in by_type},
            subscription=_subscription_info(subscription) if subscription else None,
        )


def _subscription_info(subscription: Dict[str, Any]) -> SubscriptionInfo:
    limit = subscription["tokens_limit"]
    used = subscription["tokens_used"]
    return SubscriptionInfo(
        tier=subscription["tier"],
        limit=limit,
        used=used,
        remaining=max(0, limit - used),
        reset_date=subscription["reset_date"],
    )
