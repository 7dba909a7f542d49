"""
Grocery Models

Contains GroceryStore, IngredientPrice and RecipeCost for price
comparison and recipe costing.
"""

from .base import db, iso, money, current_time


class GroceryStore(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    chain = db.Column(db.String(100))
    location = db.Column(db.String(200))
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'chain': self.chain,
            'location': self.location,
            'isActive': bool(self.is_active),
            'createdAt': iso(self.created_at),
        }


class IngredientPrice(db.Model):
    """Price of one purchase unit of an ingredient at a store."""
    id = db.Column(db.Integer, primary_key=True)
    ingredient_name = db.Column(db.String(100), nullable=False, index=True)
    store_id = db.Column(db.Integer, db.ForeignKey('grocery_store.id', ondelete='CASCADE'), nullable=True, index=True)
    price = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(10), nullable=False, default='EA')  # standardized, see UNIT_MAPPINGS
    package_size = db.Column(db.String(100))  # "1 lb bag", "6-pack", etc.
    brand = db.Column(db.String(100))
    is_organic = db.Column(db.Boolean, default=False)
    last_updated = db.Column(db.DateTime, default=current_time, onupdate=current_time)
    store = db.relationship('GroceryStore', backref=db.backref('prices', cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'ingredientName': self.ingredient_name,
            'storeId': self.store_id,
            'storeName': self.store.name if self.store else None,
            'price': money(self.price),
            'unit': self.unit,
            'packageSize': self.package_size,
            'brand': self.brand,
            'isOrganic': bool(self.is_organic),
            'lastUpdated': iso(self.last_updated),
        }


class RecipeCost(db.Model):
    """Snapshot of a recipe's calculated cost with the per-ingredient breakdown."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    total_cost = db.Column(db.Float, nullable=False)
    cost_per_serving = db.Column(db.Float, nullable=False)
    ingredient_costs = db.Column(db.JSON, nullable=False, default=list)
    calculated_at = db.Column(db.DateTime, default=current_time)
    recipe = db.relationship('Recipe', backref=db.backref('costs', cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'recipeId': self.recipe_id,
            'recipeTitle': self.recipe.title if self.recipe else None,
            'totalCost': money(self.total_cost),
            'costPerServing': money(self.cost_per_serving),
            'ingredientCosts': list(self.ingredient_costs or []),
            'calculatedAt': iso(self.calculated_at),
        }
