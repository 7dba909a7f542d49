from datetime import datetime, timedelta

import pytest

from models import db, MealPlan, PlannedMeal
from services import (
    BUDGET_SHARES, InvalidBudgetError, week_start, meal_target,
    generate_budget_meal_plan, optimize_meal_plan,
)

THURSDAY = datetime(2026, 10, 15, 14, 30)


def test_budget_shares_leave_ten_percent_slack():
    assert sum(BUDGET_SHARES.values()) == pytest.approx(0.90)


@pytest.mark.parametrize('day', range(14))
def test_week_start_is_monday_midnight_on_or_before(day):
    now = datetime(2026, 10, 5, 18, 45) + timedelta(days=day)
    start = week_start(now)
    assert start.weekday() == 0
    assert (start.hour, start.minute, start.second, start.microsecond) == (0, 0, 0, 0)
    assert start <= now
    assert now - start < timedelta(days=7)


def test_week_start_from_sunday_goes_back_six_days():
    assert week_start(datetime(2026, 10, 18, 23, 59)) == datetime(2026, 10, 12)


def test_meal_target_spreads_share_over_the_week():
    assert meal_target(70, 'breakfast') == pytest.approx(1.5)
    assert meal_target(70, 'lunch') == pytest.approx(3.5)
    assert meal_target(70, 'dinner') == pytest.approx(4.0)


def test_seventy_dollar_week_with_one_recipe(user, make_recipe):
    make_recipe(user)
    result = generate_budget_meal_plan(user, 70, THURSDAY)

    meals = result['plannedMeals']
    assert len(meals) == 21
    assert result['totalCost'] == pytest.approx(63.0)
    assert result['savings'] == pytest.approx(7.0)
    assert result['mealPlan']['actualCost'] == pytest.approx(63.0)
    assert result['mealPlan']['weekStartDate'] == '2026-10-12T00:00:00'

    costs = {m['mealType']: m['estimatedCost'] for m in meals}
    assert costs == {'breakfast': 1.5, 'lunch': 3.5, 'dinner': 4.0}
    assert all(m['servings'] == 1 for m in meals)

    days = sorted({m['scheduledDate'] for m in meals})
    assert days[0] == '2026-10-12T00:00:00'
    assert days[-1] == '2026-10-18T00:00:00'
    assert len(days) == 7


def test_first_recipe_fills_every_slot(user, make_recipe):
    first = make_recipe(user, title='Oatmeal')
    make_recipe(user, title='Soup')
    result = generate_budget_meal_plan(user, '140', THURSDAY)
    assert {m['recipeId'] for m in result['plannedMeals']} == {first.id}


def test_user_without_recipes_gets_an_empty_plan(user):
    result = generate_budget_meal_plan(user, 50, THURSDAY)
    assert result['plannedMeals'] == []
    assert result['totalCost'] == 0
    assert result['savings'] == pytest.approx(50)
    assert MealPlan.query.count() == 1


@pytest.mark.parametrize('budget', [None, 'abc', 0, -10, True, float('nan'), float('inf'), '1e999'])
def test_invalid_budget_writes_nothing(user, make_recipe, budget):
    make_recipe(user)
    with pytest.raises(InvalidBudgetError):
        generate_budget_meal_plan(user, budget, THURSDAY)
    assert MealPlan.query.count() == 0


def test_default_plan_name_uses_week_start(user):
    result = generate_budget_meal_plan(user, 70, THURSDAY)
    assert result['mealPlan']['name'] == 'Budget Plan - Week of Oct 12'


def test_optimize_applies_first_matching_rule(user, make_recipe):
    make_recipe(user, ingredients=[
        {'name': 'Flour', 'amount': '2', 'unit': 'cups'},
        {'name': 'Unsalted Butter', 'amount': '4', 'unit': 'tbsp'},
        {'name': 'Heavy cream', 'amount': '1', 'unit': 'cup'},
    ])
    plan_data = generate_budget_meal_plan(user, 70, THURSDAY)
    plan = db.session.get(MealPlan, plan_data['mealPlan']['id'])

    result = optimize_meal_plan(plan)

    assert len(result['optimizedMeals']) == 21
    assert result['substitutions'][0]['original'] == 'butter'
    assert result['substitutions'][0]['substitute'] == 'vegetable oil'
    assert result['substitutions'][0]['savings'] == pytest.approx(0.45)
    # 30% off 63.00
    assert result['totalSavings'] == pytest.approx(18.9)
    assert plan.actual_cost == pytest.approx(44.1)

    costs = {m['mealType']: m['estimatedCost'] for m in result['optimizedMeals']}
    assert costs == {'breakfast': 1.05, 'lunch': 2.45, 'dinner': 2.8}


def test_optimize_falls_back_to_store_brand(user, make_recipe):
    make_recipe(user, ingredients=[{'name': 'Water', 'amount': '1', 'unit': 'cup'}])
    plan_data = generate_budget_meal_plan(user, 70, THURSDAY)
    plan = db.session.get(MealPlan, plan_data['mealPlan']['id'])

    result = optimize_meal_plan(plan)
    first = result['substitutions'][0]
    assert (first['original'], first['substitute']) == ('name brand', 'store brand')
    assert result['totalSavings'] == pytest.approx(6.3)


def test_optimize_is_deterministic(user, make_recipe):
    make_recipe(user, ingredients=[{'name': 'Salmon fillet', 'amount': '1', 'unit': 'lb'}])
    first_id = generate_budget_meal_plan(user, 70, THURSDAY)['mealPlan']['id']
    second_id = generate_budget_meal_plan(user, 70, THURSDAY)['mealPlan']['id']

    first = optimize_meal_plan(db.session.get(MealPlan, first_id))
    second = optimize_meal_plan(db.session.get(MealPlan, second_id))
    assert first['substitutions'] == second['substitutions']
    assert first['totalSavings'] == second['totalSavings']


def test_optimize_never_goes_below_zero(user, make_recipe):
    recipe = make_recipe(user, ingredients=[{'name': 'Pine nuts', 'amount': '1', 'unit': 'cup'}])
    plan = MealPlan(user_id=user.id, name='Tiny', week_start_date=datetime(2026, 10, 12))
    db.session.add(plan)
    db.session.commit()
    db.session.add(PlannedMeal(meal_plan_id=plan.id, recipe_id=recipe.id, meal_type='lunch',
                               scheduled_date=datetime(2026, 10, 12), estimated_cost=0.0))
    db.session.add(PlannedMeal(meal_plan_id=plan.id, recipe_id=recipe.id, meal_type='dinner',
                               scheduled_date=datetime(2026, 10, 12), estimated_cost=0.01))
    db.session.commit()

    result = optimize_meal_plan(plan)
    assert all(m['estimatedCost'] >= 0 for m in result['optimizedMeals'])
    assert result['totalSavings'] == pytest.approx(0.01)


def test_optimize_skips_meals_without_recipe(user):
    plan = MealPlan(user_id=user.id, name='Empty slots', week_start_date=datetime(2026, 10, 12))
    db.session.add(plan)
    db.session.commit()
    db.session.add(PlannedMeal(meal_plan_id=plan.id, meal_type='lunch',
                               scheduled_date=datetime(2026, 10, 12), estimated_cost=5.0))
    db.session.commit()

    result = optimize_meal_plan(plan)
    assert result['optimizedMeals'] == []
    assert result['totalSavings'] == 0
