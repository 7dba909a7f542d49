"""
Kitchen Equipment Model
"""

from .base import db, iso, current_time


class KitchenEquipment(db.Model):
    """Appliance the user owns (instant-pot, air-fryer, oven, ...)."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    brand = db.Column(db.String(100))
    model = db.Column(db.String(100))
    capacity = db.Column(db.String(50))
    features = db.Column(db.JSON, default=list)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'type': self.type,
            'brand': self.brand,
            'model': self.model,
            'capacity': self.capacity,
            'features': list(self.features or []),
            'isActive': bool(self.is_active),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }
