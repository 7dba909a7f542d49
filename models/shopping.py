"""
Shopping Models

Contains the ShoppingList, ShoppingListItem and PantryItem models
for managing shopping lists and pantry tracking.
"""

from .base import db, iso, current_time


class ShoppingList(db.Model):
    """Named shopping list owned by a user."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    is_completed = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)
    items = db.relationship('ShoppingListItem', backref='shopping_list', lazy=True,
                            cascade='all, delete-orphan', order_by='ShoppingListItem.id')

    def to_dict(self, include_items=False):
        data = {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'isCompleted': bool(self.is_completed),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }
        if include_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data


class ShoppingListItem(db.Model):
    """Shopping list entry; amount stays free text so merged quantities read '2 cups + 1 cup'."""
    id = db.Column(db.Integer, primary_key=True)
    shopping_list_id = db.Column(db.Integer, db.ForeignKey('shopping_list.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    amount = db.Column(db.String(100), default='')
    unit = db.Column(db.String(50), default='')
    category = db.Column(db.String(50), default='other')
    is_checked = db.Column(db.Boolean, default=False)
    # Originating recipe (nullable for manually-added items)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'shoppingListId': self.shopping_list_id,
            'name': self.name,
            'amount': self.amount,
            'unit': self.unit,
            'category': self.category,
            'isChecked': bool(self.is_checked),
            'recipeId': self.recipe_id,
            'createdAt': iso(self.created_at),
        }


class PantryItem(db.Model):
    """Ingredient the user has at home, with an optional expiry date."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    amount = db.Column(db.String(100))
    unit = db.Column(db.String(50))
    category = db.Column(db.String(50), default='other')
    expiry_date = db.Column(db.DateTime, index=True)
    is_running_low = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'amount': self.amount,
            'unit': self.unit,
            'category': self.category,
            'expiryDate': iso(self.expiry_date),
            'isRunningLow': bool(self.is_running_low),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }
