"""
Constants Package

Re-exports lookup tables so callers can write ``from constants import X``.
"""

from .units import (
    UNIT_MAPPINGS,
    UNIT_CONVERSIONS,
    WEIGHT_TO_G,
    COMMON_FRACTIONS,
    UNICODE_FRACTIONS,
)
from .ingredients import (
    INGREDIENT_ALIASES,
    AVERAGE_WEIGHTS,
    SUGGESTED_INGREDIENTS,
    NOTE_KEYWORDS,
)
from .validation import (
    VALID_TIERS,
    VALID_DIFFICULTIES,
    VALID_MEAL_TYPES,
    VALID_ACTIVITY_LEVELS,
    VALID_WEIGHT_GOALS,
    VALID_CATEGORIES,
    MAX_LENGTHS,
)
from .categories import CATEGORY_KEYWORDS, DEFAULT_CATEGORY
from .substitutions import DEFAULT_SUBSTITUTIONS, GENERIC_SUBSTITUTION
