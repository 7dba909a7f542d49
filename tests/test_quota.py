from datetime import datetime

import pytest
import sqlalchemy as sa

from models import db, User
from services import (
    QuotaExceededError, months_between, effective_count, check_quota,
    record_generation, usage_summary,
)


def test_months_between_ignores_day_of_month():
    assert months_between(datetime(2026, 1, 31), datetime(2026, 2, 1)) == 1
    assert months_between(datetime(2026, 3, 1), datetime(2026, 3, 31)) == 0
    assert months_between(datetime(2025, 11, 20), datetime(2026, 2, 3)) == 3
    assert months_between(None, datetime(2026, 2, 3)) == 0


def test_free_user_below_limit_may_generate(make_user):
    user = make_user(monthly_recipe_count=1, last_reset_date=datetime(2026, 10, 1))
    check_quota(user, datetime(2026, 10, 16))


def test_free_user_at_limit_is_refused(make_user):
    user = make_user(monthly_recipe_count=2, last_reset_date=datetime(2026, 10, 1))
    with pytest.raises(QuotaExceededError) as excinfo:
        check_quota(user, datetime(2026, 10, 16))
    assert 'Upgrade to Pro' in excinfo.value.message


@pytest.mark.parametrize('tier', ['pro', 'premium'])
def test_paid_tiers_are_never_gated(make_user, tier):
    user = make_user(tier=tier, monthly_recipe_count=500, last_reset_date=datetime(2026, 10, 1))
    check_quota(user, datetime(2026, 10, 16))


def test_new_month_resets_the_effective_count(make_user):
    user = make_user(monthly_recipe_count=2, last_reset_date=datetime(2026, 9, 30))
    now = datetime(2026, 10, 1, 0, 5)
    assert effective_count(user, now) == 0
    check_quota(user, now)


def test_record_generation_increments_in_the_same_month(make_user):
    user = make_user(monthly_recipe_count=1, last_reset_date=datetime(2026, 10, 1))
    record_generation(user, datetime(2026, 10, 16))
    assert user.monthly_recipe_count == 2
    assert user.last_reset_date == datetime(2026, 10, 1)


def test_record_generation_rolls_the_month_over(make_user):
    user = make_user(monthly_recipe_count=2, last_reset_date=datetime(2026, 9, 14))
    now = datetime(2026, 10, 2, 9, 30)
    record_generation(user, now)
    assert user.monthly_recipe_count == 1
    assert user.last_reset_date == now


def test_rollover_already_applied_falls_through_to_increment(make_user):
    user = make_user(monthly_recipe_count=2, last_reset_date=datetime(2026, 9, 14))
    now = datetime(2026, 10, 2, 9, 30)

    # Another request rolls the month over behind this session's back
    db.session.execute(
        sa.update(User).where(User.id == user.id)
        .values(monthly_recipe_count=1, last_reset_date=datetime(2026, 10, 2, 9, 0))
        .execution_options(synchronize_session=False)
    )
    assert user.last_reset_date == datetime(2026, 9, 14)  # stale snapshot

    record_generation(user, now)
    assert user.monthly_recipe_count == 2
    assert user.last_reset_date == datetime(2026, 10, 2, 9, 0)


def test_usage_summary_for_free_and_paid(make_user):
    now = datetime(2026, 10, 16)
    free = make_user(monthly_recipe_count=2, last_reset_date=datetime(2026, 10, 1))
    assert usage_summary(free, now) == {
        'tier': 'free',
        'monthlyRecipeCount': 2,
        'monthlyLimit': 2,
        'remaining': 0,
        'limitReached': True,
    }

    pro = make_user(email='pro@example.com', tier='pro', monthly_recipe_count=7,
                    last_reset_date=datetime(2026, 10, 1))
    summary = usage_summary(pro, now)
    assert summary['monthlyLimit'] is None
    assert summary['limitReached'] is False


def test_unknown_tier_is_rejected_by_the_database(app):
    db.session.add(User(id='gold', email='gold@example.com', subscription_status='gold'))
    with pytest.raises(sa.exc.IntegrityError):
        db.session.commit()
    db.session.rollback()
