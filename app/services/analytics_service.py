"""
Predicsure AI — Usage analytics.

Three views over the same tables:

- per-user dashboard (volume, trends, confidence mix, streaks)
- public global counters, cached for ``GLOBAL_STATS_CACHE_SECONDS``
- admin business dashboard (tiers, revenue estimate, conversion)
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import cache_get, cache_set
from app.config import get_settings
from app.models.prediction import Prediction
from app.models.subscription import Subscription
from app.models.user import User
from app.services.plans import PAID_TIERS, TIERS, TRAJECTORY_TYPES, monthly_equivalent

logger = structlog.get_logger("predicsure.analytics_service")

DATE_RANGE_DAYS = {"7d": 7, "30d": 30, "90d": 90, "all": None}
TREND_WEEKS = 8
GLOBAL_STATS_CACHE_KEY = "stats:global"
RECENT_ACTIVITY_DAYS = 30
MOST_LIKED_LIMIT = 10


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Pure helpers
# ══════════════════════════════════════════════════════════════════════════


def weekly_trends(created: Iterable[datetime], now: datetime) -> list[dict]:
    """Counts for the last eight calendar-aligned weeks, oldest first."""
    stamps = [_utc(c) for c in created]
    now = _utc(now)
    trends = []
    for i in range(TREND_WEEKS):
        start_day = (now - timedelta(weeks=TREND_WEEKS - 1 - i)).date()
        end_day = (now - timedelta(weeks=TREND_WEEKS - 2 - i)).date()
        start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
        end = datetime.combine(end_day, time.max, tzinfo=timezone.utc)
        trends.append({
            "week": f"Week {i + 1}",
            "count": sum(1 for s in stamps if start <= s <= end),
        })
    return trends


def confidence_distribution(scores: Iterable[Optional[int]]) -> dict:
    dist = {"low": 0, "moderate": 0, "high": 0, "very_high": 0}
    for score in scores:
        if score is None:
            continue
        if score < 50:
            dist["low"] += 1
        elif score < 70:
            dist["moderate"] += 1
        elif score < 85:
            dist["high"] += 1
        else:
            dist["very_high"] += 1
    return dist


def prediction_streaks(created_desc: list[datetime], today: date) -> tuple[int, int]:
    """Return ``(current_streak, longest_streak)`` in consecutive days.

    *created_desc* must be newest first.  The current streak is only alive
    when the newest prediction was made today or yesterday.
    """
    days = [_utc(c).date() for c in created_desc]
    if not days:
        return 0, 0

    runs = [1]
    previous = days[0]
    for day in days[1:]:
        gap = (previous - day).days
        if gap == 1:
            runs[-1] += 1
        elif gap > 1:
            runs.append(1)
        previous = day

    current = runs[0] if (today - days[0]).days <= 1 else 0
    return current, max(runs)


# ══════════════════════════════════════════════════════════════════════════
# Service
# ══════════════════════════════════════════════════════════════════════════


class AnalyticsService:

    async def user_analytics(
        self,
        db: AsyncSession,
        user: User,
        date_range: str = "30d",
        now: Optional[datetime] = None,
    ) -> dict:
        if date_range not in DATE_RANGE_DAYS:
            raise ValueError(f"Unknown date range: {date_range}")

        now = _utc(now or datetime.now(timezone.utc))
        conditions = [Prediction.user_id == user.id]
        days = DATE_RANGE_DAYS[date_range]
        if days is not None:
            conditions.append(Prediction.created_at >= now - timedelta(days=days))

        result = await db.execute(
            select(Prediction).where(*conditions).order_by(Prediction.created_at.desc())
        )
        predictions = list(result.scalars().all())

        trajectory_breakdown = {t: 0 for t in TRAJECTORY_TYPES}
        for p in predictions:
            trajectory = p.trajectory_type or "instant"
            if trajectory in trajectory_breakdown:
                trajectory_breakdown[trajectory] += 1

        deep = [p for p in predictions if p.prediction_mode == "deep"]
        deep_scores = [p.confidence_score for p in deep if p.confidence_score is not None]
        confidence_average = round(sum(deep_scores) / len(deep_scores)) if deep_scores else None

        all_created = (
            await db.execute(
                select(Prediction.created_at)
                .where(Prediction.user_id == user.id)
                .order_by(Prediction.created_at.desc())
            )
        ).scalars().all()
        current_streak, longest_streak = prediction_streaks(list(all_created), now.date())

        return {
            "total_predictions": len(predictions),
            "trajectory_breakdown": trajectory_breakdown,
            "weekly_trends": weekly_trends((p.created_at for p in predictions), now),
            "confidence_distribution": confidence_distribution(p.confidence_score for p in predictions),
            "feedback_stats": {
                "liked": sum(1 for p in predictions if p.user_feedback == "like"),
                "disliked": sum(1 for p in predictions if p.user_feedback == "dislike"),
            },
            "deep_mode_stats": {"count": len(deep)},
            "confidence_average": confidence_average,
            "current_streak": current_streak,
            "longest_streak": longest_streak,
        }

    async def global_stats(self, db: AsyncSession, now: Optional[datetime] = None) -> dict:
        cached = await cache_get(GLOBAL_STATS_CACHE_KEY)
        if cached is not None:
            return cached

        now = _utc(now or datetime.now(timezone.utc))
        midnight = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)

        total_predictions = (
            await db.execute(select(func.count()).select_from(Prediction))
        ).scalar_one()
        total_users = (
            await db.execute(select(func.count(func.distinct(Prediction.user_id))))
        ).scalar_one()
        predictions_today = (
            await db.execute(
                select(func.count()).select_from(Prediction).where(Prediction.created_at >= midnight)
            )
        ).scalar_one()

        stats = {
            "total_predictions": total_predictions or 0,
            "total_users": total_users or 0,
            "predictions_today": predictions_today or 0,
        }
        await cache_set(GLOBAL_STATS_CACHE_KEY, stats, get_settings().GLOBAL_STATS_CACHE_SECONDS)
        return stats

    async def admin_dashboard(self, db: AsyncSession, now: Optional[datetime] = None) -> dict:
        """Business overview for the admin console.

        Revenue is an estimate: active paid subscriptions times the plan's
        monthly list price (yearly plans divided by twelve).
        """
        now = _utc(now or datetime.now(timezone.utc))
        since = now - timedelta(days=RECENT_ACTIVITY_DAYS)

        total_users = (await db.execute(select(func.count()).select_from(User))).scalar_one()

        tier_rows = (
            await db.execute(
                select(Subscription.tier, func.count()).group_by(Subscription.tier)
            )
        ).all()
        users_by_tier = {tier: 0 for tier in TIERS}
        for tier, count in tier_rows:
            if tier in users_by_tier:
                users_by_tier[tier] = count

        active_rows = (
            await db.execute(
                select(Subscription.tier, func.count())
                .where(Subscription.is_active.is_(True))
                .group_by(Subscription.tier)
            )
        ).all()
        mrr = sum(count * monthly_equivalent(tier) for tier, count in active_rows if tier in PAID_TIERS)

        total_predictions = (
            await db.execute(select(func.count()).select_from(Prediction))
        ).scalar_one()
        category_rows = (
            await db.execute(
                select(Prediction.category, func.count()).group_by(Prediction.category)
            )
        ).all()
        feedback_rows = (
            await db.execute(
                select(Prediction.user_feedback, func.count())
                .where(Prediction.user_feedback.is_not(None))
                .group_by(Prediction.user_feedback)
            )
        ).all()

        total_shared = (
            await db.execute(
                select(func.count()).select_from(Prediction).where(Prediction.share_token.is_not(None))
            )
        ).scalar_one()
        most_liked = (
            await db.execute(
                select(Prediction.id, Prediction.user_input, Prediction.category, Prediction.share_token)
                .where(Prediction.user_feedback == "like")
                .order_by(Prediction.created_at.desc())
                .limit(MOST_LIKED_LIMIT)
            )
        ).all()

        new_users = (
            await db.execute(select(func.count()).select_from(User).where(User.created_at >= since))
        ).scalar_one()
        new_predictions = (
            await db.execute(
                select(func.count()).select_from(Prediction).where(Prediction.created_at >= since)
            )
        ).scalar_one()

        subscribed = sum(users_by_tier.values())
        paid = sum(users_by_tier[t] for t in PAID_TIERS)

        def rate(part: int, whole: int) -> float:
            return round(part / whole * 100, 2) if whole else 0.0

        logger.info("admin_dashboard_built", total_users=total_users, mrr=round(mrr, 2))
        return {
            "users": {"total": total_users, **users_by_tier},
            "predictions": {
                "total": total_predictions,
                "by_category": [
                    {"category": category or "unknown", "count": count} for category, count in category_rows
                ],
                "by_feedback": [
                    {"feedback": feedback, "count": count} for feedback, count in feedback_rows
                ],
            },
            "sharing": {
                "total_shared": total_shared,
                "most_liked": [
                    {"id": row.id, "user_input": row.user_input, "category": row.category, "share_token": row.share_token}
                    for row in most_liked
                ],
            },
            "revenue": {"mrr": round(mrr, 2), "arr": round(mrr * 12, 2)},
            "conversion": {
                **{f"free_to_{tier}_rate": rate(users_by_tier[tier], subscribed) for tier in PAID_TIERS},
                "overall_conversion_rate": rate(paid, total_users),
            },
            "recent_activity": {"new_users": new_users, "new_predictions": new_predictions},
        }
