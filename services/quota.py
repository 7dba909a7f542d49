"""
Quota Service

Monthly recipe quota for the free tier. The counter rolls over on the
first request in a new calendar month; paid tiers are never gated.
"""

import logging

import sqlalchemy as sa
from flask import current_app

from models import db, User

logger = logging.getLogger(__name__)

DEFAULT_FREE_LIMIT = 2

LIMIT_REACHED_MESSAGE = "Monthly recipe limit reached. Upgrade to Pro for unlimited recipes."


class QuotaExceededError(Exception):
    """Raised when a free user has used up this month's generations."""

    def __init__(self, message=LIMIT_REACHED_MESSAGE):
        super().__init__(message)
        self.message = message


def months_between(last_reset, now):
    """Calendar months from last_reset to now; day of month is ignored."""
    if last_reset is None:
        return 0
    return (now.year - last_reset.year) * 12 + (now.month - last_reset.month)


def free_limit():
    return current_app.config.get('FREE_MONTHLY_RECIPE_LIMIT', DEFAULT_FREE_LIMIT)


def effective_count(user, now):
    """Count for the current month: 0 once a calendar month has passed since the last reset."""
    if months_between(user.last_reset_date, now) >= 1:
        return 0
    return user.monthly_recipe_count or 0


def check_quota(user, now):
    """Raise QuotaExceededError if the user may not generate right now."""
    count = effective_count(user, now)
    limit = free_limit()
    logger.info("Quota check for user %s: tier=%s count=%d limit=%d",
                user.id, user.subscription_status, count, limit)

    if user.subscription_status != 'free':
        return
    if count >= limit:
        raise QuotaExceededError()


def record_generation(user, now):
    """
    Count one successful generation with a single UPDATE statement.

    On rollover the counter is reset to 1, guarded on the last_reset_date we
    read; if another request rolled the month first the guard misses and we
    fall through to the plain increment.
    """
    if months_between(user.last_reset_date, now) >= 1:
        snapshot = user.last_reset_date
        guard = User.last_reset_date.is_(None) if snapshot is None else User.last_reset_date == snapshot
        result = db.session.execute(
            sa.update(User)
            .where(User.id == user.id, guard)
            .values(monthly_recipe_count=1, last_reset_date=now)
        )
        if result.rowcount:
            db.session.commit()
            db.session.refresh(user)
            return user
        logger.debug("Quota rollover for user %s already applied by another request", user.id)

    db.session.execute(
        sa.update(User)
        .where(User.id == user.id)
        .values(monthly_recipe_count=User.monthly_recipe_count + 1)
    )
    db.session.commit()
    db.session.refresh(user)
    return user


def usage_summary(user, now):
    """Usage block returned with the current user."""
    count = effective_count(user, now)
    if user.subscription_status == 'free':
        limit = free_limit()
        remaining = max(0, limit - count)
    else:
        limit = None
        remaining = None
    return {
        'tier': user.subscription_status,
        'monthlyRecipeCount': count,
        'monthlyLimit': limit,
        'remaining': remaining,
        'limitReached': remaining == 0,
    }
