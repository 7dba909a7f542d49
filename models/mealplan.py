"""
Meal Plan Models

Contains the MealPlan and PlannedMeal models for weekly meal planning,
plus the budget preferences and substitution rules that feed the
budget generator and the optimization pass.
"""

from .base import db, iso, money, current_time


class MealPlan(db.Model):
    """Weekly plan anchored on a Monday with a budget and the running cost."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    week_start_date = db.Column(db.DateTime, nullable=False)  # Monday 00:00
    total_budget = db.Column(db.Float)
    actual_cost = db.Column(db.Float, default=0.0)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)
    meals = db.relationship('PlannedMeal', backref='meal_plan', lazy=True,
                            cascade='all, delete-orphan', order_by='PlannedMeal.id')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'description': self.description,
            'weekStartDate': iso(self.week_start_date),
            'totalBudget': money(self.total_budget),
            'actualCost': money(self.actual_cost),
            'isActive': bool(self.is_active),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }


class PlannedMeal(db.Model):
    """A recipe scheduled into one meal slot of a plan."""
    id = db.Column(db.Integer, primary_key=True)
    meal_plan_id = db.Column(db.Integer, db.ForeignKey('meal_plan.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True, index=True)
    meal_type = db.Column(db.String(20), nullable=False)  # breakfast, lunch, dinner, snack
    scheduled_date = db.Column(db.DateTime, nullable=False)
    servings = db.Column(db.Integer, default=1)
    # Set on creation; only the optimization pass may lower it
    estimated_cost = db.Column(db.Float)
    actual_cost = db.Column(db.Float)
    is_cooked = db.Column(db.Boolean, default=False)
    rating = db.Column(db.Integer)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=current_time)
    recipe = db.relationship('Recipe')

    def to_dict(self, include_recipe=False):
        data = {
            'id': self.id,
            'mealPlanId': self.meal_plan_id,
            'recipeId': self.recipe_id,
            'mealType': self.meal_type,
            'scheduledDate': iso(self.scheduled_date),
            'servings': self.servings,
            'estimatedCost': money(self.estimated_cost),
            'actualCost': money(self.actual_cost),
            'isCooked': bool(self.is_cooked),
            'rating': self.rating,
            'notes': self.notes,
            'createdAt': iso(self.created_at),
        }
        if include_recipe:
            data['recipe'] = self.recipe.to_dict() if self.recipe else None
        return data


class BudgetPreferences(db.Model):
    """Per-user budgeting defaults (one row per user)."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    weekly_budget = db.Column(db.Float)
    monthly_budget = db.Column(db.Float)
    prioritize_cost = db.Column(db.Boolean, default=False)
    max_cost_per_serving = db.Column(db.Float)
    preferred_stores = db.Column(db.JSON, default=list)
    avoid_expensive_ingredients = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'weeklyBudget': money(self.weekly_budget),
            'monthlyBudget': money(self.monthly_budget),
            'prioritizeCost': bool(self.prioritize_cost),
            'maxCostPerServing': money(self.max_cost_per_serving),
            'preferredStores': list(self.preferred_stores or []),
            'avoidExpensiveIngredients': bool(self.avoid_expensive_ingredients),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }


class SmartSubstitution(db.Model):
    """Ingredient swap rule with the cost reduction it yields (percent)."""
    id = db.Column(db.Integer, primary_key=True)
    original_ingredient = db.Column(db.String(100), nullable=False, index=True)
    substitute_ingredient = db.Column(db.String(100), nullable=False)
    cost_savings_percent = db.Column(db.Float, nullable=False, default=0.0)
    nutritional_impact = db.Column(db.String(200))
    dietary_compatibility = db.Column(db.JSON, default=list)
    confidence_score = db.Column(db.Float, default=1.0)
    created_at = db.Column(db.DateTime, default=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'originalIngredient': self.original_ingredient,
            'substituteIngredient': self.substitute_ingredient,
            'costSavingsPercent': self.cost_savings_percent,
            'nutritionalImpact': self.nutritional_impact,
            'dietaryCompatibility': list(self.dietary_compatibility or []),
            'confidenceScore': self.confidence_score,
        }
