"""
Services Package

Business logic modules for the recipe application.
"""

from .parsing import (
    float_to_fraction,
    normalize_fractions,
    parse_amount,
    parse_ingredient,
)

from .matching import (
    convert_unit,
    standardize_unit,
    normalize_ingredient_name,
    get_ingredient_suggestions,
)

from .cost import (
    convert_to_price_unit,
    find_cheapest_price,
    calculate_ingredient_cost,
    calculate_recipe_cost,
    cost_analytics,
)

from .quota import (
    QuotaExceededError,
    months_between,
    effective_count,
    check_quota,
    record_generation,
    usage_summary,
)

from .mealplan import (
    BUDGET_SHARES,
    InvalidBudgetError,
    week_start,
    meal_target,
    filter_compatible,
    generate_budget_meal_plan,
    optimize_meal_plan,
)

from .shopping import (
    categorize_ingredient,
    merge_recipe_ingredients,
    generate_shopping_list,
)

from .recipe_generator import (
    RecipeGenerationError,
    generate_recipes,
    generate_recipe_image,
    normalize_recipe,
)

from .billing import (
    BillingError,
    BillingNotConfiguredError,
    WebhookSignatureError,
)

from .analytics import (
    cooking_analytics,
    nutrition_progress,
)

__all__ = [
    # Parsing
    'float_to_fraction',
    'normalize_fractions',
    'parse_amount',
    'parse_ingredient',
    # Matching
    'convert_unit',
    'standardize_unit',
    'normalize_ingredient_name',
    'get_ingredient_suggestions',
    # Cost
    'convert_to_price_unit',
    'find_cheapest_price',
    'calculate_ingredient_cost',
    'calculate_recipe_cost',
    'cost_analytics',
    # Quota
    'QuotaExceededError',
    'months_between',
    'effective_count',
    'check_quota',
    'record_generation',
    'usage_summary',
    # Meal plans
    'BUDGET_SHARES',
    'InvalidBudgetError',
    'week_start',
    'meal_target',
    'filter_compatible',
    'generate_budget_meal_plan',
    'optimize_meal_plan',
    # Shopping
    'categorize_ingredient',
    'merge_recipe_ingredients',
    'generate_shopping_list',
    # Recipe generation
    'RecipeGenerationError',
    'generate_recipes',
    'generate_recipe_image',
    'normalize_recipe',
    # Billing
    'BillingError',
    'BillingNotConfiguredError',
    'WebhookSignatureError',
    # Analytics
    'cooking_analytics',
    'nutrition_progress',
]
