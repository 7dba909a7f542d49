"""
Ingredient Models

Contains the IngredientSuggestion model backing the ingredient
autocomplete endpoint.
"""

from .base import db


class IngredientSuggestion(db.Model):
    """Known ingredient name with a category and a popularity weight for ranking."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)
    category = db.Column(db.String(50), default='other', index=True)

    # Higher values rank first when match scores tie
    popularity = db.Column(db.Integer, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'popularity': self.popularity,
        }
