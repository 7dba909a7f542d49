"""
User Model

Contains the User model: identity, subscription tier, monthly recipe quota
counter and billing references.
"""

from constants import VALID_TIERS

from .base import db, iso, current_time


class User(db.Model):
    """Application user with subscription tier and quota counter."""
    __tablename__ = 'users'  # "user" is reserved on PostgreSQL
    __table_args__ = (
        db.CheckConstraint(
            "subscription_status IN (" + ", ".join(f"'{tier}'" for tier in sorted(VALID_TIERS)) + ")",
            name="ck_users_subscription_status",
        ),
    )

    id = db.Column(db.String(64), primary_key=True)
    email = db.Column(db.String(255), unique=True, index=True)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    profile_image_url = db.Column(db.String(500))

    # Billing provider references
    stripe_customer_id = db.Column(db.String(100))
    stripe_subscription_id = db.Column(db.String(100), index=True)

    # One of VALID_TIERS
    subscription_status = db.Column(db.String(20), nullable=False, default='free')

    # Quota counter and the moment it was last reset
    monthly_recipe_count = db.Column(db.Integer, nullable=False, default=0)
    last_reset_date = db.Column(db.DateTime, default=current_time)

    dietary_restrictions = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=current_time)
    updated_at = db.Column(db.DateTime, default=current_time, onupdate=current_time)

    recipes = db.relationship('Recipe', backref='user', lazy=True, cascade='all, delete-orphan')

    @property
    def display_name(self):
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.email

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'profileImageUrl': self.profile_image_url,
            'stripeCustomerId': self.stripe_customer_id,
            'stripeSubscriptionId': self.stripe_subscription_id,
            'subscriptionStatus': self.subscription_status,
            'monthlyRecipeCount': self.monthly_recipe_count,
            'lastResetDate': iso(self.last_reset_date),
            'dietaryRestrictions': list(self.dietary_restrictions or []),
            'createdAt': iso(self.created_at),
            'updatedAt': iso(self.updated_at),
        }
