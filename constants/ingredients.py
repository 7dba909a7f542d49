"""
Ingredient Constants

Contains ingredient aliases, average weights used for costing count
units, and the seed list for ingredient suggestions.
"""

# Ingredient name aliases (normalized name -> canonical name)
INGREDIENT_ALIASES = {
    'sourdough': 'Sourdough Bread',
    'sourdough bread': 'Sourdough Bread',
    'white bread': 'White Bread',
    'ground beef': 'Ground Beef',
    'beef ground': 'Ground Beef',
    'minced beef': 'Ground Beef',
    'chicken breast': 'Chicken Breast',
    'breast chicken': 'Chicken Breast',
    'chicken thigh': 'Chicken Thigh',
    'green onion': 'Green Onion',
    'scallion': 'Green Onion',
    'spring onion': 'Green Onion',
    'bell pepper': 'Bell Pepper',
    'garlic clove': 'Garlic',
    'clove garlic': 'Garlic',
    'olive oil': 'Olive Oil',
    'extra virgin olive oil': 'Olive Oil',
    'vegetable oil': 'Vegetable Oil',
    'canola oil': 'Vegetable Oil',
    'heavy cream': 'Heavy Cream',
    'whipping cream': 'Heavy Cream',
    'heavy whipping cream': 'Heavy Cream',
    'parmesan cheese': 'Parmesan',
    'parmigiano reggiano': 'Parmesan',
    'cheddar cheese': 'Cheddar Cheese',
    'mozzarella cheese': 'Mozzarella',
    'kosher salt': 'Salt',
    'sea salt': 'Salt',
    'black pepper': 'Pepper',
    'ground black pepper': 'Pepper',
    'yellow onion': 'Onion',
    'white onion': 'Onion',
    'all purpose flour': 'Flour',
    'all-purpose flour': 'Flour',
    'granulated sugar': 'Sugar',
    'white sugar': 'Sugar',
    'unsalted butter': 'Butter',
    'salted butter': 'Butter',
}

# Average weight per EA (in grams) for common ingredients
# Used for cost calculation when a recipe counts pieces but the price is by weight
AVERAGE_WEIGHTS = {
    'TOMATO': 150,
    'ONION': 225,
    'GREEN ONION': 30,
    'CARROT': 70,
    'CELERY': 45,
    'POTATO': 225,
    'SWEET POTATO': 200,
    'BELL PEPPER': 150,
    'CUCUMBER': 300,
    'ZUCCHINI': 200,
    'MUSHROOM': 18,
    'GARLIC': 5,            # 1 clove
    'BROCCOLI': 600,
    'AVOCADO': 200,
    'LEMON': 85,
    'LIME': 65,
    'APPLE': 180,
    'BANANA': 120,
    'EGG': 50,
    'CHICKEN BREAST': 225,
    'CHICKEN THIGH': 115,
    'BACON': 30,            # 1 slice
    'BUTTER': 14,           # 1 tbsp
    'BREAD': 30,            # 1 slice
    'TORTILLA': 45,
}

# Seed rows for the ingredient suggestions table: (name, category, popularity)
SUGGESTED_INGREDIENTS = (
    ('Chicken Breast', 'meat', 95),
    ('Ground Beef', 'meat', 90),
    ('Eggs', 'dairy', 90),
    ('Onion', 'produce', 88),
    ('Garlic', 'produce', 88),
    ('Tomato', 'produce', 85),
    ('Rice', 'pantry', 85),
    ('Pasta', 'pantry', 82),
    ('Butter', 'dairy', 80),
    ('Milk', 'dairy', 80),
    ('Cheddar Cheese', 'dairy', 75),
    ('Potato', 'produce', 75),
    ('Carrot', 'produce', 72),
    ('Bell Pepper', 'produce', 70),
    ('Olive Oil', 'pantry', 70),
    ('Spinach', 'produce', 65),
    ('Broccoli', 'produce', 65),
    ('Salmon', 'meat', 60),
    ('Chicken Thigh', 'meat', 60),
    ('Ground Turkey', 'meat', 55),
    ('Mushroom', 'produce', 55),
    ('Black Beans', 'pantry', 50),
    ('Greek Yogurt', 'dairy', 50),
    ('Lemon', 'produce', 50),
    ('Flour', 'pantry', 45),
    ('Bread', 'pantry', 45),
    ('Tofu', 'other', 40),
    ('Quinoa', 'pantry', 35),
    ('Parmesan', 'dairy', 35),
    ('Zucchini', 'produce', 30),
)

# Keywords indicating notes to remove from ingredient text (set for O(1) lookup)
NOTE_KEYWORDS = {
    'optional', 'divided', 'or more', 'or less', 'to taste',
    'for serving', 'for garnish', 'softened', 'melted', 'chopped',
    'diced', 'minced', 'sliced', 'cubed', 'beaten', 'room temperature',
    'thawed', 'drained', 'rinsed', 'peeled', 'shredded', 'as needed',
}
