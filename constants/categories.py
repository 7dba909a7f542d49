"""
Shopping Category Constants

Keyword table for shopping list categorization. Order matters: the
first category with a keyword contained in the ingredient name wins.
"""

CATEGORY_KEYWORDS = (
    ('dairy', ('milk', 'cheese', 'yogurt', 'butter')),
    ('meat', ('chicken', 'beef', 'pork', 'fish', 'turkey')),
    ('produce', ('lettuce', 'tomato', 'onion', 'carrot', 'pepper')),
    ('pantry', ('bread', 'pasta', 'rice', 'flour')),
)

DEFAULT_CATEGORY = 'other'
