"""
Shopping List Service

Functions for categorizing ingredients and generating shopping lists
from recipes.
"""

import logging

from constants import CATEGORY_KEYWORDS, DEFAULT_CATEGORY
from models import db, Recipe, ShoppingList, ShoppingListItem

logger = logging.getLogger(__name__)


def categorize_ingredient(name):
    """Grocery aisle for an ingredient name; first keyword group containing a match wins."""
    name_lower = (name or '').lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name_lower for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def _amount_text(amount):
    if amount is None:
        return ''
    return str(amount)


def merge_recipe_ingredients(recipes):
    """
    Union of the recipes' ingredients keyed by lower-cased name.

    The first sighting fixes unit, category and source recipe. Later sightings
    append their amount as text: '2 cups' and '1 cup' give '2 cups + 1 cup'.
    Returns an insertion-ordered dict of key -> entry.
    """
    merged = {}
    for recipe in recipes:
        for ingredient in recipe.ingredients or []:
            name = str(ingredient.get('name') or '').strip()
            if not name:
                continue
            key = name.lower()
            amount = _amount_text(ingredient.get('amount'))

            if key in merged:
                merged[key]['amount'] = f"{merged[key]['amount']} + {amount}"
                continue

            merged[key] = {
                'name': key,
                'amount': amount,
                'unit': ingredient.get('unit') or '',
                'category': categorize_ingredient(name),
                'recipe_id': recipe.id,
            }
    return merged


def generate_shopping_list(user, recipe_ids, list_name):
    """
    Create a shopping list holding the merged ingredients of the given recipes.

    Only recipes owned by the user are read; unknown ids are ignored.
    The empty list is committed before the items are added.
    """
    shopping_list = ShoppingList(user_id=user.id, name=list_name)
    db.session.add(shopping_list)
    db.session.commit()

    recipes = []
    if recipe_ids:
        recipes = (Recipe.query
                   .filter(Recipe.user_id == user.id, Recipe.id.in_(recipe_ids))
                   .order_by(Recipe.id)
                   .all())
        # Keep the caller's ordering so first sightings follow the request
        position = {rid: i for i, rid in enumerate(recipe_ids)}
        recipes.sort(key=lambda r: position.get(r.id, len(position)))

    merged = merge_recipe_ingredients(recipes)
    for entry in merged.values():
        db.session.add(ShoppingListItem(
            shopping_list_id=shopping_list.id,
            name=entry['name'],
            amount=entry['amount'],
            unit=entry['unit'],
            category=entry['category'],
            is_checked=False,
            recipe_id=entry['recipe_id'],
        ))
    db.session.commit()

    logger.info("Generated shopping list %s from %d recipes: %d items",
                shopping_list.id, len(recipes), len(merged))
    return shopping_list
