"""
Meal Plan Service

Budget-driven weekly plan generation and the substitution-based
optimization pass.
"""

import logging
import math
from datetime import timedelta

from constants import DEFAULT_SUBSTITUTIONS, GENERIC_SUBSTITUTION
from models import db, Recipe, MealPlan, PlannedMeal, SmartSubstitution

logger = logging.getLogger(__name__)

# Share of the weekly budget per meal type; the remaining 10% is slack
BUDGET_SHARES = {
    'breakfast': 0.15,
    'lunch': 0.35,
    'dinner': 0.40,
}

DAYS_PER_WEEK = 7


class InvalidBudgetError(Exception):
    """Weekly budget missing, non-numeric or not positive."""


def week_start(now):
    """Monday on or before ``now``, at midnight."""
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_budget(value):
    """Validate a weekly budget. Accepts numbers and numeric strings."""
    if value is None or isinstance(value, bool):
        raise InvalidBudgetError("Weekly budget is required")
    try:
        budget = float(value)
    except (TypeError, ValueError):
        raise InvalidBudgetError("Weekly budget must be a number")
    if not math.isfinite(budget) or budget <= 0:
        raise InvalidBudgetError("Weekly budget must be greater than zero")
    return budget


def meal_target(budget, meal_type):
    """Per-meal cost target: the meal type's share of the budget spread over the week."""
    return budget * BUDGET_SHARES[meal_type] / DAYS_PER_WEEK


def filter_compatible(recipes, restrictions):
    """
    Narrow candidates to recipes compatible with the user's restrictions.

    Recipes carry no structured dietary tags, so every recipe passes.
    """
    return list(recipes)


def generate_budget_meal_plan(user, weekly_budget, now, restrictions=None, name=None):
    """
    Build a week of breakfast/lunch/dinner slots against a budget.

    The plan row, the meals and the final cost are committed separately.
    Returns {mealPlan, plannedMeals, totalCost, savings}.
    """
    budget = parse_budget(weekly_budget)
    start = week_start(now)

    plan = MealPlan(
        user_id=user.id,
        name=name or f"Budget Plan - Week of {start.strftime('%b %d')}",
        description=f"Generated plan for a ${budget:.2f} weekly budget",
        week_start_date=start,
        total_budget=budget,
        actual_cost=0.0,
        is_active=True,
    )
    db.session.add(plan)
    db.session.commit()

    candidates = filter_compatible(
        Recipe.query.filter_by(user_id=user.id).order_by(Recipe.id).all(),
        user.dietary_restrictions if restrictions is None else restrictions,
    )

    meals = []
    for day in range(DAYS_PER_WEEK):
        scheduled = start + timedelta(days=day)
        for meal_type in BUDGET_SHARES:
            if not candidates:
                continue
            recipe = candidates[0]
            meal = PlannedMeal(
                meal_plan_id=plan.id,
                recipe_id=recipe.id,
                meal_type=meal_type,
                scheduled_date=scheduled,
                servings=1,
                estimated_cost=meal_target(budget, meal_type),
            )
            db.session.add(meal)
            meals.append(meal)
    db.session.commit()

    total_cost = sum(m.estimated_cost for m in meals)
    plan.actual_cost = round(total_cost, 2)
    db.session.commit()

    logger.info("Generated meal plan %s for user %s: %d meals, total %.2f of %.2f",
                plan.id, user.id, len(meals), total_cost, budget)

    return {
        'mealPlan': plan.to_dict(),
        'plannedMeals': [m.to_dict() for m in meals],
        'totalCost': round(total_cost, 2),
        'savings': round(budget - total_cost, 2),
    }


def substitution_rules():
    """Rules as (original, substitute, percent) from the table, else the built-in defaults."""
    rows = SmartSubstitution.query.order_by(SmartSubstitution.id).all()
    if rows:
        return [(r.original_ingredient, r.substitute_ingredient, r.cost_savings_percent) for r in rows]
    return [(orig, sub, pct) for orig, sub, pct, _, _ in DEFAULT_SUBSTITUTIONS]


def pick_substitution(recipe, rules):
    """First rule whose original appears in a recipe ingredient name, scanning ingredients in order."""
    for ingredient in recipe.ingredients or []:
        name = str(ingredient.get('name') or '').lower()
        for original, substitute, percent in rules:
            if original.lower() in name:
                return original, substitute, percent
    return GENERIC_SUBSTITUTION


def optimize_meal_plan(plan):
    """
    Apply one substitution per planned meal and lower its estimated cost.

    Costs are clamped at zero. Returns
    {optimizedMeals, totalSavings, substitutions: [{original, substitute, savings}]}.
    """
    rules = substitution_rules()
    optimized = []
    substitutions = []
    total_savings = 0.0

    for meal in plan.meals:
        if meal.recipe is None:
            continue
        original, substitute, percent = pick_substitution(meal.recipe, rules)
        cost = meal.estimated_cost or 0.0
        reduction = round(cost * percent / 100, 2)
        new_cost = max(0.0, cost - reduction)
        saved = round(cost - new_cost, 2)

        meal.estimated_cost = new_cost
        total_savings += saved
        optimized.append(meal)
        substitutions.append({
            'original': original,
            'substitute': substitute,
            'savings': saved,
        })

    plan.actual_cost = round(sum(m.estimated_cost or 0.0 for m in plan.meals), 2)
    db.session.commit()

    logger.info("Optimized meal plan %s: %d meals, saved %.2f", plan.id, len(optimized), total_savings)

    return {
        'optimizedMeals': [m.to_dict() for m in optimized],
        'totalSavings': round(total_savings, 2),
        'substitutions': substitutions,
    }
