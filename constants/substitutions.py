"""
Substitution Constants

Default ingredient swap rules used by the meal plan optimizer when no
SmartSubstitution rows exist, and seeded into that table by init_db.
"""

# (original, substitute, cost savings percent, nutritional impact, dietary compatibility)
DEFAULT_SUBSTITUTIONS = (
    ('chicken breast', 'chicken thighs', 25.0, 'Slightly higher fat', []),
    ('beef', 'ground turkey', 20.0, 'Leaner protein', []),
    ('salmon', 'canned tuna', 40.0, 'Less omega-3', []),
    ('fresh herbs', 'dried herbs', 60.0, 'Milder flavor', ['vegan', 'vegetarian', 'gluten-free']),
    ('butter', 'vegetable oil', 30.0, 'Less saturated fat', ['vegan', 'dairy-free']),
    ('parmesan', 'nutritional yeast', 35.0, 'Adds B vitamins', ['vegan', 'dairy-free']),
    ('heavy cream', 'whole milk', 45.0, 'Lower fat', ['vegetarian']),
    ('pine nuts', 'sunflower seeds', 70.0, 'Similar healthy fats', ['vegan', 'vegetarian']),
    ('fresh berries', 'frozen berries', 50.0, 'Same nutrients', ['vegan', 'vegetarian', 'gluten-free']),
    ('quinoa', 'brown rice', 55.0, 'Slightly less protein', ['vegan', 'vegetarian', 'gluten-free']),
)

# Fallback applied when no rule matches any ingredient of a recipe
GENERIC_SUBSTITUTION = ('name brand', 'store brand', 10.0)
