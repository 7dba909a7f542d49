"""
Ingredient Matching Service

Functions for normalizing ingredient names, standardizing units and
ranking ingredient suggestions.
"""

import re
from constants import INGREDIENT_ALIASES, UNIT_CONVERSIONS, UNIT_MAPPINGS


def convert_unit(quantity, from_unit, to_unit):
    """Convert quantity from one unit to another. Returns (quantity, unit)."""
    from_unit = from_unit.upper()
    to_unit = to_unit.upper()

    if from_unit == to_unit:
        return quantity, to_unit

    # Check if conversion is possible
    if from_unit not in UNIT_CONVERSIONS or to_unit not in UNIT_CONVERSIONS:
        return quantity, from_unit  # Can't convert, return original

    from_base, from_factor = UNIT_CONVERSIONS[from_unit]
    to_base, to_factor = UNIT_CONVERSIONS[to_unit]

    # Only convert if same base unit type (volume or weight)
    if from_base != to_base:
        return quantity, from_unit  # Different types, can't convert

    # Convert: from_unit -> base -> to_unit
    base_qty = quantity * from_factor
    new_qty = base_qty / to_factor

    return round(new_qty, 4), to_unit


def standardize_unit(unit):
    """Map free-text unit ('cups', 'Tbsp.', 'lb') to a standard code ('CUP', 'TBSP', 'LB')."""
    if not unit:
        return 'EA'
    key = str(unit).strip().lower().rstrip('.')
    if key.upper() in UNIT_CONVERSIONS:
        return key.upper()
    return UNIT_MAPPINGS.get(key, 'EA')


def normalize_ingredient_name(name):
    """Normalize ingredient name for matching."""
    # Lowercase and strip
    normalized = name.lower().strip()

    # Remove special characters (asterisks, etc.)
    normalized = re.sub(r'[*#@!]+', '', normalized)

    # Remove leading/trailing dashes, slashes, and punctuation
    normalized = normalized.strip('-/.,;: ')

    # Remove leading numbers and fractions that might be left over
    normalized = re.sub(r'^[\d\s/.-]+', '', normalized).strip()

    # Remove common descriptors (set for O(1) lookup)
    remove_words = {'fresh', 'dried', 'chopped', 'diced', 'sliced', 'minced',
                    'large', 'small', 'medium', 'whole', 'raw', 'cooked',
                    'boneless', 'skinless', 'organic', 'frozen', 'canned',
                    'a', 'an', 'the', 'of'}
    words = [w for w in normalized.split() if w not in remove_words]

    # Singularize common plurals
    singular_map = {
        'tomatoes': 'tomato',
        'potatoes': 'potato',
        'leaves': 'leaf',
        'berries': 'berry',
        'noodles': 'noodle',
    }
    words = [singular_map.get(w, w) for w in words]

    # Handle generic -s plural if not in map (preserve words that end in 's' naturally)
    no_strip_s = {'cheese', 'rice', 'grass', 'molasses', 'hummus', 'asparagus', 'couscous'}
    singularized = []
    for w in words:
        if w.endswith('s') and not w.endswith('ss') and len(w) > 3 and w not in no_strip_s:
            singularized.append(w[:-1])
        else:
            singularized.append(w)

    normalized = ' '.join(singularized)

    # Check exact aliases
    if normalized in INGREDIENT_ALIASES:
        return INGREDIENT_ALIASES[normalized]

    # Capitalize each word for display
    return ' '.join(word.capitalize() for word in normalized.split())


def get_ingredient_suggestions(query, IngredientSuggestion, limit=8):
    """
    Get ranked suggestions for a partial ingredient name.
    Returns list of (suggestion, score, match_reason) tuples.

    Scoring: exact 100, prefix 90, word overlap up to 80, substring 50.
    Ties go to the more popular ingredient, then alphabetical.
    """
    query_lower = query.strip().lower()
    if not query_lower:
        return []
    words = set(query_lower.split())

    suggestions = []
    for ing in IngredientSuggestion.query.all():
        ing_lower = ing.name.lower()
        ing_words = set(ing_lower.split())

        # Exact match = highest score
        if ing_lower == query_lower:
            suggestions.append((ing, 100, 'exact'))
            continue

        if ing_lower.startswith(query_lower):
            suggestions.append((ing, 90, 'prefix'))
            continue

        # Word overlap scoring
        common_words = words & ing_words
        if common_words:
            score = (len(common_words) / max(len(words), len(ing_words))) * 80
            suggestions.append((ing, score, 'partial'))
            continue

        if query_lower in ing_lower:
            suggestions.append((ing, 50, 'contains'))

    suggestions.sort(key=lambda x: (-x[1], -(x[0].popularity or 0), x[0].name))
    return suggestions[:limit]
