"""
Recipe Models

Contains the Recipe model plus the resources hanging off recipes:
collections, cooking history and per-recipe nutrition.
"""

from .base import db, iso, current_time


class Recipe(db.Model):
    """Generated recipe. Only is_saved and rating change after creation."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    ingredients = db.Column(db.JSON, nullable=False, default=list)   # [{name, amount, unit}]
    instructions = db.Column(db.JSON, nullable=False, default=list)  # [{stepNumber, instruction, duration}]
    cooking_time = db.Column(db.Integer, nullable=False, default=0)  # minutes
    servings = db.Column(db.Integer, nullable=False, default=1)
    difficulty = db.Column(db.String(20), nullable=False, default='easy')
    image_url = db.Column(db.String(1000), default='')
    rating = db.Column(db.Integer, default=0)
    is_saved = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=current_time)

    nutrition = db.relationship('NutritionData', backref='recipe', uselist=False, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'description': self.description,
            'ingredients': list(self.ingredients or []),
            'instructions': list(self.instructions or []),
            'cookingTime': self.cooking_time,
            'servings': self.servings,
            'difficulty': self.difficulty,
            'imageUrl': self.image_url,
            'rating': self.rating,
            'isSaved': bool(self.is_saved),
            'createdAt': iso(self.created_at),
        }


class RecipeCollection(db.Model):
    """Named group of recipes owned by a user."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    is_default = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)
    items = db.relationship('RecipeCollectionItem', backref='collection', lazy=True, cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'description': self.description,
            'isDefault': bool(self.is_default),
            'recipeCount': len(self.items),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }


class RecipeCollectionItem(db.Model):
    """Join table linking collections to recipes."""
    __table_args__ = (db.UniqueConstraint('collection_id', 'recipe_id'),)

    id = db.Column(db.Integer, primary_key=True)
    collection_id = db.Column(db.Integer, db.ForeignKey('recipe_collection.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    added_at = db.Column(db.DateTime, default=current_time)
    recipe = db.relationship('Recipe', backref=db.backref('collection_items', cascade='all, delete-orphan'))


class CookingHistory(db.Model):
    """One entry per time a user cooked a recipe."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False)
    rating = db.Column(db.Integer)  # 1-5 stars
    notes = db.Column(db.Text)
    cooking_time = db.Column(db.Integer)  # actual minutes taken
    difficulty = db.Column(db.String(20))  # how the user found it
    would_make_again = db.Column(db.Boolean)
    cooked_at = db.Column(db.DateTime, default=current_time)
    recipe = db.relationship('Recipe', backref=db.backref('history', cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'recipeId': self.recipe_id,
            'rating': self.rating,
            'notes': self.notes,
            'cookingTime': self.cooking_time,
            'difficulty': self.difficulty,
            'wouldMakeAgain': self.would_make_again,
            'cookedAt': iso(self.cooked_at),
        }


class NutritionData(db.Model):
    """Nutrition facts for a whole recipe (all servings)."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, unique=True)
    calories = db.Column(db.Integer)
    protein = db.Column(db.Float)  # grams
    carbs = db.Column(db.Float)
    fat = db.Column(db.Float)
    fiber = db.Column(db.Float)
    sugar = db.Column(db.Float)
    sodium = db.Column(db.Float)  # mg
    cholesterol = db.Column(db.Float)
    servings = db.Column(db.Integer, nullable=False, default=1)
    calculated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'recipeId': self.recipe_id,
            'calories': self.calories,
            'protein': self.protein,
            'carbs': self.carbs,
            'fat': self.fat,
            'fiber': self.fiber,
            'sugar': self.sugar,
            'sodium': self.sodium,
            'cholesterol': self.cholesterol,
            'servings': self.servings,
            'calculatedAt': iso(self.calculated_at),
        }
