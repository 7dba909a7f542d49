"""
Validation Constants

Contains whitelist values for validating user input and the maximum
stored length of free-text fields.
"""

# Subscription tiers; only 'free' is quota-gated
VALID_TIERS = {'free', 'pro', 'premium'}

# Valid difficulty levels
VALID_DIFFICULTIES = {'easy', 'medium', 'hard'}

# Valid meal types for meal planning and nutrition logs
VALID_MEAL_TYPES = {'breakfast', 'lunch', 'dinner', 'snack'}

# Valid health goal values
VALID_ACTIVITY_LEVELS = {'sedentary', 'light', 'moderate', 'active', 'very-active'}
VALID_WEIGHT_GOALS = {'maintain', 'lose', 'gain'}

# Shopping list categories produced by categorize_ingredient
VALID_CATEGORIES = {'dairy', 'meat', 'produce', 'pantry', 'other'}

# Maximum field lengths
MAX_LENGTHS = {
    'ingredient_name': 200,
    'ingredients': 50,        # ingredients per generation request
    'restriction': 50,
    'restrictions': 20,
    'name': 200,
    'description': 2000,
    'notes': 2000,
    'amount': 100,
    'unit': 50,
    'category': 50,
    'search_query': 100,
}
