"""
Cost Calculation Service

Functions for pricing recipe ingredients against stored grocery prices
and for the cost analytics dashboard.
"""

import logging
from collections import defaultdict

from constants import WEIGHT_TO_G, AVERAGE_WEIGHTS
from models import db, IngredientPrice, Recipe, RecipeCost, MealPlan, PlannedMeal
from .matching import convert_unit, standardize_unit, normalize_ingredient_name
from .parsing import parse_amount, float_to_fraction

logger = logging.getLogger(__name__)

COUNT_UNITS = {'EA', 'CLOVE', 'HEAD', 'CAN'}


def _get_average_weight(ingredient_name):
    """Look up average weight in grams for an ingredient by name."""
    if not ingredient_name:
        return None
    name_upper = ingredient_name.upper()
    # Check exact match first
    if name_upper in AVERAGE_WEIGHTS:
        return AVERAGE_WEIGHTS[name_upper]
    # Check if any key is contained in the name
    for key, weight in AVERAGE_WEIGHTS.items():
        if key in name_upper:
            return weight
    return None


def convert_to_price_unit(qty, from_unit, price_unit, ingredient_name=None):
    """
    Convert a recipe quantity into the unit an ingredient is priced in.

    Volume-to-volume and weight-to-weight convert directly. Counted pieces
    (EA, CLOVE, ...) convert to a weight price via the ingredient's average
    piece weight. Returns None when the units cannot be reconciled.
    """
    from_unit = (from_unit or 'EA').upper()
    price_unit = (price_unit or 'EA').upper()

    if from_unit == price_unit:
        return qty

    converted, unit = convert_unit(qty, from_unit, price_unit)
    if unit == price_unit:
        return converted

    if from_unit in COUNT_UNITS and price_unit in WEIGHT_TO_G:
        piece_weight = _get_average_weight(ingredient_name)
        if piece_weight:
            grams = qty * piece_weight
            return round(grams / WEIGHT_TO_G[price_unit], 4)

    return None


def find_cheapest_price(ingredient_name):
    """Cheapest IngredientPrice whose normalized name matches, or None."""
    target = normalize_ingredient_name(ingredient_name).lower()
    if not target:
        return None

    matches = [
        p for p in IngredientPrice.query.order_by(IngredientPrice.id).all()
        if normalize_ingredient_name(p.ingredient_name).lower() == target
    ]
    if not matches:
        return None
    return min(matches, key=lambda p: p.price)


def calculate_ingredient_cost(ingredient):
    """
    Price one recipe ingredient ({name, amount, unit}).

    Returns a breakdown dict; unpriced ingredients cost 0 with priced=False.
    When the recipe unit can't be converted to the price unit the ingredient
    is charged as one purchase unit.
    """
    name = ingredient.get('name') or ''
    amount = parse_amount(ingredient.get('amount'))
    unit = standardize_unit(ingredient.get('unit'))

    entry = {
        'name': name,
        'amount': ingredient.get('amount'),
        'unit': ingredient.get('unit'),
        'quantity': float_to_fraction(amount),
        'cost': 0.0,
        'priced': False,
        'price': None,
        'priceUnit': None,
        'store': None,
    }

    price = find_cheapest_price(name)
    if price is None:
        return entry

    qty = convert_to_price_unit(amount, unit, price.unit, name)
    cost = price.price if qty is None else qty * price.price

    entry.update({
        'cost': round(cost, 2),
        'priced': True,
        'price': round(price.price, 2),
        'priceUnit': price.unit,
        'store': price.store.name if price.store else None,
    })
    return entry


def calculate_recipe_cost(recipe):
    """Price every ingredient of a recipe and store the result as a RecipeCost row."""
    breakdown = [calculate_ingredient_cost(ing) for ing in (recipe.ingredients or [])]
    total = round(sum(item['cost'] for item in breakdown), 2)
    per_serving = round(total / recipe.servings, 2) if recipe.servings else total

    recipe_cost = RecipeCost(
        recipe_id=recipe.id,
        total_cost=total,
        cost_per_serving=per_serving,
        ingredient_costs=breakdown,
    )
    db.session.add(recipe_cost)
    db.session.commit()

    unpriced = [item['name'] for item in breakdown if not item['priced']]
    if unpriced:
        logger.info("Recipe %s costed with %d unpriced ingredients: %s",
                    recipe.id, len(unpriced), ', '.join(unpriced))
    return recipe_cost


def _latest_costs_for_user(user_id):
    """Most recent RecipeCost per recipe for one user's recipes."""
    rows = (RecipeCost.query.join(Recipe)
            .filter(Recipe.user_id == user_id)
            .order_by(RecipeCost.calculated_at.desc(), RecipeCost.id.desc())
            .all())
    latest = {}
    for row in rows:
        latest.setdefault(row.recipe_id, row)
    return list(latest.values())


def cost_analytics(user, now):
    """
    Summary numbers for the costs dashboard.

    - averageCostPerMeal: mean cost per serving over the user's latest recipe costs
    - monthlySpending: planned meal estimates scheduled this calendar month
    - cheapestRecipes: top 3 recipes by cost per serving
    - savingsOpportunities: ingredients priced at 2+ stores with the spread
    """
    costs = _latest_costs_for_user(user.id)
    if costs:
        average = round(sum(c.cost_per_serving for c in costs) / len(costs), 2)
    else:
        average = 0.0

    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if month_start.month == 12:
        next_month = month_start.replace(year=month_start.year + 1, month=1)
    else:
        next_month = month_start.replace(month=month_start.month + 1)

    monthly = (db.session.query(db.func.coalesce(db.func.sum(PlannedMeal.estimated_cost), 0.0))
               .join(MealPlan)
               .filter(MealPlan.user_id == user.id,
                       PlannedMeal.scheduled_date >= month_start,
                       PlannedMeal.scheduled_date < next_month)
               .scalar())

    cheapest = sorted(costs, key=lambda c: (c.cost_per_serving, c.recipe_id))[:3]

    by_ingredient = defaultdict(list)
    for price in IngredientPrice.query.order_by(IngredientPrice.id).all():
        key = normalize_ingredient_name(price.ingredient_name)
        by_ingredient[key].append(price)

    opportunities = []
    for name, prices in by_ingredient.items():
        stores = {p.store_id for p in prices}
        if len(stores) < 2:
            continue
        low = min(prices, key=lambda p: p.price)
        high = max(prices, key=lambda p: p.price)
        opportunities.append({
            'ingredient': name,
            'savings': round(high.price - low.price, 2),
            'cheapestStore': low.store.name if low.store else None,
            'cheapestPrice': round(low.price, 2),
        })
    opportunities.sort(key=lambda o: o['savings'], reverse=True)

    return {
        'averageCostPerMeal': average,
        'monthlySpending': round(float(monthly or 0.0), 2),
        'cheapestRecipes': [
            {
                'recipeId': c.recipe_id,
                'title': c.recipe.title,
                'costPerServing': round(c.cost_per_serving, 2),
                'totalCost': round(c.total_cost, 2),
            }
            for c in cheapest
        ],
        'savingsOpportunities': opportunities,
    }
