"""
Nutrition Models

Contains UserHealthGoals and DailyNutritionLog. Per-recipe nutrition
facts live on NutritionData in recipe.py.
"""

from .base import db, iso, current_time


class UserHealthGoals(db.Model):
    """Daily nutrition targets (one row per user)."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    daily_calories = db.Column(db.Integer)
    daily_protein = db.Column(db.Float)
    daily_carbs = db.Column(db.Float)
    daily_fat = db.Column(db.Float)
    daily_fiber = db.Column(db.Float)
    max_sodium = db.Column(db.Float)
    health_conditions = db.Column(db.JSON, default=list)
    activity_level = db.Column(db.String(20))  # sedentary, light, moderate, active, very-active
    weight_goal = db.Column(db.String(20))     # maintain, lose, gain
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'dailyCalories': self.daily_calories,
            'dailyProtein': self.daily_protein,
            'dailyCarbs': self.daily_carbs,
            'dailyFat': self.daily_fat,
            'dailyFiber': self.daily_fiber,
            'maxSodium': self.max_sodium,
            'healthConditions': list(self.health_conditions or []),
            'activityLevel': self.activity_level,
            'weightGoal': self.weight_goal,
            'updatedAt': iso(self.updated_at),
        }


class DailyNutritionLog(db.Model):
    """One eaten meal with its nutrition totals."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True)
    meal_type = db.Column(db.String(20), nullable=False)
    servings = db.Column(db.Float, nullable=False, default=1.0)
    calories = db.Column(db.Integer, nullable=False, default=0)
    protein = db.Column(db.Float, nullable=False, default=0.0)
    carbs = db.Column(db.Float, nullable=False, default=0.0)
    fat = db.Column(db.Float, nullable=False, default=0.0)
    fiber = db.Column(db.Float)
    sodium = db.Column(db.Float)
    created_at = db.Column(db.DateTime, default=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'date': iso(self.date),
            'recipeId': self.recipe_id,
            'mealType': self.meal_type,
            'servings': self.servings,
            'calories': self.calories,
            'protein': self.protein,
            'carbs': self.carbs,
            'fat': self.fat,
            'fiber': self.fiber,
            'sodium': self.sodium,
            'createdAt': iso(self.created_at),
        }
