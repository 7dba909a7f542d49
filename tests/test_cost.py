from datetime import datetime

import pytest

from models import db, GroceryStore, IngredientPrice, MealPlan, PlannedMeal
from services import (
    convert_to_price_unit, find_cheapest_price, calculate_ingredient_cost,
    calculate_recipe_cost, cost_analytics,
)


@pytest.fixture
def stores(app):
    budget = GroceryStore(name='Budget Mart')
    fancy = GroceryStore(name='Fancy Foods')
    db.session.add_all([budget, fancy])
    db.session.commit()
    db.session.add_all([
        IngredientPrice(ingredient_name='Chicken Breast', store_id=budget.id, price=4.0, unit='LB'),
        IngredientPrice(ingredient_name='chicken breasts', store_id=fancy.id, price=7.5, unit='LB'),
        IngredientPrice(ingredient_name='Milk', store_id=budget.id, price=3.0, unit='L'),
        IngredientPrice(ingredient_name='Onion', store_id=budget.id, price=2.0, unit='KG'),
        IngredientPrice(ingredient_name='Saffron', store_id=fancy.id, price=12.0, unit='EA'),
    ])
    db.session.commit()
    return budget, fancy


def test_convert_to_price_unit():
    assert convert_to_price_unit(2, 'LB', 'LB') == 2
    assert convert_to_price_unit(1000, 'ML', 'L') == pytest.approx(1.0)
    assert convert_to_price_unit(16, 'OZ', 'LB') == pytest.approx(1.0, rel=1e-3)
    # Counted onions priced by weight use the average onion weight
    assert convert_to_price_unit(2, 'EA', 'KG', 'Onion') == pytest.approx(0.45)
    assert convert_to_price_unit(1, 'CUP', 'LB') is None


def test_cheapest_price_matches_normalized_name(stores):
    price = find_cheapest_price('boneless skinless chicken breasts')
    assert price.price == 4.0
    assert price.store.name == 'Budget Mart'
    assert find_cheapest_price('dragon fruit') is None


def test_ingredient_cost_converts_units(stores):
    entry = calculate_ingredient_cost({'name': 'Milk', 'amount': '2', 'unit': 'cups'})
    assert entry['priced'] is True
    assert entry['priceUnit'] == 'L'
    assert entry['cost'] == pytest.approx(round(2 * 0.236588 * 3.0, 2))


def test_unconvertible_unit_is_charged_one_purchase_unit(stores):
    entry = calculate_ingredient_cost({'name': 'Saffron', 'amount': '1/2', 'unit': 'tsp'})
    assert entry['cost'] == 12.0
    assert entry['quantity'] == '1/2'


def test_unpriced_ingredient_costs_nothing(stores):
    entry = calculate_ingredient_cost({'name': 'Unobtainium', 'amount': '1', 'unit': 'cup'})
    assert entry['priced'] is False
    assert entry['cost'] == 0.0


def test_recipe_cost_is_stored(stores, user, make_recipe):
    recipe = make_recipe(user, servings=4, ingredients=[
        {'name': 'chicken breast', 'amount': '2', 'unit': 'lb'},
        {'name': 'Unobtainium', 'amount': '1', 'unit': 'cup'},
    ])
    recipe_cost = calculate_recipe_cost(recipe)
    assert recipe_cost.id is not None
    assert recipe_cost.total_cost == 8.0
    assert recipe_cost.cost_per_serving == 2.0
    assert [c['priced'] for c in recipe_cost.ingredient_costs] == [True, False]


def test_cost_analytics(stores, user, make_recipe):
    cheap = make_recipe(user, title='Cheap', servings=4,
                        ingredients=[{'name': 'Chicken Breast', 'amount': '1', 'unit': 'lb'}])
    dear = make_recipe(user, title='Dear', servings=1,
                       ingredients=[{'name': 'Chicken Breast', 'amount': '2', 'unit': 'lb'}])
    calculate_recipe_cost(cheap)
    calculate_recipe_cost(dear)

    plan = MealPlan(user_id=user.id, name='Week', week_start_date=datetime(2026, 10, 12))
    db.session.add(plan)
    db.session.commit()
    db.session.add_all([
        PlannedMeal(meal_plan_id=plan.id, meal_type='lunch',
                    scheduled_date=datetime(2026, 10, 13), estimated_cost=3.5),
        PlannedMeal(meal_plan_id=plan.id, meal_type='dinner',
                    scheduled_date=datetime(2026, 9, 30), estimated_cost=9.0),
    ])
    db.session.commit()

    result = cost_analytics(user, datetime(2026, 10, 16))

    assert result['averageCostPerMeal'] == pytest.approx((1.0 + 8.0) / 2)
    assert result['monthlySpending'] == pytest.approx(3.5)
    assert [c['title'] for c in result['cheapestRecipes']] == ['Cheap', 'Dear']
    chicken = [o for o in result['savingsOpportunities'] if o['ingredient'] == 'Chicken Breast']
    assert chicken == [{
        'ingredient': 'Chicken Breast',
        'savings': 3.5,
        'cheapestStore': 'Budget Mart',
        'cheapestPrice': 4.0,
    }]
