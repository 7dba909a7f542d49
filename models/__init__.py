"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .user import User
from .recipe import Recipe, RecipeCollection, RecipeCollectionItem, CookingHistory, NutritionData
from .ingredient import IngredientSuggestion
from .shopping import ShoppingList, ShoppingListItem, PantryItem
from .mealplan import MealPlan, PlannedMeal, BudgetPreferences, SmartSubstitution
from .grocery import GroceryStore, IngredientPrice, RecipeCost
from .nutrition import UserHealthGoals, DailyNutritionLog
from .equipment import KitchenEquipment

__all__ = [
    'db',
    'User',
    'Recipe',
    'RecipeCollection',
    'RecipeCollectionItem',
    'CookingHistory',
    'NutritionData',
    'IngredientSuggestion',
    'ShoppingList',
    'ShoppingListItem',
    'PantryItem',
    'MealPlan',
    'PlannedMeal',
    'BudgetPreferences',
    'SmartSubstitution',
    'GroceryStore',
    'IngredientPrice',
    'RecipeCost',
    'UserHealthGoals',
    'DailyNutritionLog',
    'KitchenEquipment',
]
