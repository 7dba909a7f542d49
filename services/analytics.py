"""
Analytics Service

Cooking history statistics and daily nutrition progress.
"""

from collections import Counter
from datetime import timedelta

from models import CookingHistory, DailyNutritionLog, UserHealthGoals

TOP_RATED_MIN = 4
TOP_RATED_LIMIT = 5

NUTRIENTS = (
    # (progress key, log column, goal column)
    ('calories', 'calories', 'daily_calories'),
    ('protein', 'protein', 'daily_protein'),
    ('carbs', 'carbs', 'daily_carbs'),
    ('fat', 'fat', 'daily_fat'),
    ('fiber', 'fiber', 'daily_fiber'),
    ('sodium', 'sodium', 'max_sodium'),
)


def cooking_analytics(user):
    """
    Totals over the user's cooking history.

    Unrated entries count as 0 in the average. Frequency is grouped by
    YYYY-MM in ascending order; top rated recipes are the best entries
    rated 4 or more.
    """
    history = (CookingHistory.query
               .filter_by(user_id=user.id)
               .order_by(CookingHistory.cooked_at, CookingHistory.id)
               .all())

    total = len(history)
    average = sum(h.rating or 0 for h in history) / total if total else 0

    months = Counter(h.cooked_at.strftime('%Y-%m') for h in history if h.cooked_at)
    frequency = [{'month': month, 'count': count} for month, count in sorted(months.items())]

    rated = [h for h in history if h.rating and h.rating >= TOP_RATED_MIN and h.recipe]
    rated.sort(key=lambda h: h.rating, reverse=True)
    top = [h.recipe.to_dict() for h in rated[:TOP_RATED_LIMIT]]

    return {
        'totalRecipesCooked': total,
        'averageRating': round(average, 2),
        'cookingFrequency': frequency,
        'topRatedRecipes': top,
    }


def day_bounds(day):
    start = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def logs_for_day(user, day):
    start, end = day_bounds(day)
    return (DailyNutritionLog.query
            .filter(DailyNutritionLog.user_id == user.id,
                    DailyNutritionLog.date >= start,
                    DailyNutritionLog.date < end)
            .order_by(DailyNutritionLog.date, DailyNutritionLog.id)
            .all())


def nutrition_progress(user, day):
    """Consumed totals for one day against the user's goals ({key: {consumed, target}})."""
    logs = logs_for_day(user, day)
    goals = UserHealthGoals.query.filter_by(user_id=user.id).first()

    progress = {'date': day_bounds(day)[0].date().isoformat()}
    for key, log_col, goal_col in NUTRIENTS:
        consumed = sum(getattr(log, log_col) or 0 for log in logs)
        target = getattr(goals, goal_col) if goals else None
        progress[key] = {
            'consumed': round(consumed, 1),
            'target': target,
        }
    return progress
