"""
Recipe Generation Service

Turns a list of available ingredients into recipe dicts using the OpenAI
chat API, and illustrates them with DALL-E. Without an API key a fixed
set of demo recipes and a stock photo are returned instead.
"""

import json
import logging

import openai
from flask import current_app

from constants import VALID_DIFFICULTIES

logger = logging.getLogger(__name__)

DEMO_IMAGE_URL = (
    "https://images.unsplash.com/photo-1546069901-ba9599a7e63c"
    "?ixlib=rb-4.0.3&auto=format&fit=crop&w=1200&h=800"
)

SYSTEM_PROMPT = "You are a professional chef that creates amazing recipes. Always respond with valid JSON format."

RECIPE_PROMPT = """
You are a professional chef and recipe creator. Given the following ingredients, create 3 unique and delicious recipes.

Ingredients available: {ingredients}{dietary_note}

Please provide 3 different recipes that use these ingredients. Each recipe should be practical, delicious, and achievable for home cooks.

Respond with a JSON object containing an array of recipes with this exact structure:
{{
  "recipes": [
    {{
      "title": "Recipe Name",
      "description": "A brief, appetizing description of the dish",
      "ingredients": [
        {{
          "name": "ingredient name",
          "amount": "quantity",
          "unit": "measurement unit"
        }}
      ],
      "instructions": [
        {{
          "stepNumber": 1,
          "instruction": "Detailed step instruction",
          "duration": 5
        }}
      ],
      "cookingTime": 30,
      "servings": 4,
      "difficulty": "easy",
      "rating": 5
    }}
  ]
}}

Guidelines:
- Use as many of the provided ingredients as possible
- Include common pantry staples (salt, pepper, oil, etc.) as needed
- Make sure instructions are clear and detailed
- Cooking time should be realistic
- Difficulty should be "easy", "medium", or "hard"
- Rating should be between 4-5 (whole numbers only)
- Each recipe should be unique and different from the others
"""

IMAGE_PROMPT = (
    "A professional food photography shot of {title}, featuring {ingredients}, "
    "beautifully plated and styled, warm lighting, appetizing, high quality, "
    "restaurant style presentation"
)


class RecipeGenerationError(Exception):
    """The provider call failed or returned something that isn't a recipe list."""


def _api_key():
    return current_app.config.get('OPENAI_API_KEY')


def openai_client_factory(api_key=None):
    api_key = _api_key() if api_key is None else api_key
    return openai.OpenAI(api_key=api_key)


def _pick(items, index, fallback):
    """items[index] if present and non-empty, otherwise fallback."""
    if index < len(items) and items[index]:
        return items[index]
    return fallback


def demo_recipes(ingredients, restrictions):
    """Three fixed recipes built from the first ingredients; used when no API key is configured."""
    first = _pick(ingredients, 0, None)
    second = _pick(ingredients, 1, None)
    third = _pick(ingredients, 2, None)
    dietary_note = f" ({', '.join(restrictions)})" if restrictions else ""
    vegan = "vegan " if "vegan" in restrictions else ""
    special = first or "Chef's"

    return [
        {
            'title': f"{first or 'Herb'} Delight Bowl{dietary_note}",
            'description': (
                f"A fresh and flavorful {vegan}bowl featuring {', '.join(ingredients[:3])} "
                "with aromatic herbs and seasonings."
            ),
            'ingredients': [
                {'name': first or "Main ingredient", 'amount': "2", 'unit': "cups"},
                {'name': second or "Secondary ingredient", 'amount': "1", 'unit': "cup"},
                {'name': third or "Fresh herbs", 'amount': "1/4", 'unit': "cup"},
                {'name': "Olive oil", 'amount': "2", 'unit': "tbsp"},
                {'name': "Salt", 'amount': "1", 'unit': "tsp"},
                {'name': "Black pepper", 'amount': "1/2", 'unit': "tsp"},
            ],
            'instructions': [
                {'stepNumber': 1, 'instruction': "Prepare all ingredients by washing and chopping as needed.", 'duration': 5},
                {'stepNumber': 2, 'instruction': "Heat olive oil in a large pan over medium heat.", 'duration': 2},
                {'stepNumber': 3, 'instruction': f"Add {first or 'main ingredient'} and cook until tender.", 'duration': 8},
                {'stepNumber': 4, 'instruction': "Season with salt, pepper, and herbs.", 'duration': 2},
                {'stepNumber': 5, 'instruction': "Serve hot in bowls and enjoy!", 'duration': 1},
            ],
            'cookingTime': 20,
            'servings': 4,
            'difficulty': "easy",
            'rating': 5,
        },
        {
            'title': f"Savory {first or 'Garden'} Stir-Fry",
            'description': (
                f"Quick and healthy stir-fry combining {' and '.join(ingredients[:2])} "
                "with vibrant vegetables."
            ),
            'ingredients': [
                {'name': first or "Protein", 'amount': "1", 'unit': "lb"},
                {'name': second or "Vegetables", 'amount': "2", 'unit': "cups"},
                {'name': "Garlic", 'amount': "3", 'unit': "cloves"},
                {'name': "Soy sauce", 'amount': "3", 'unit': "tbsp"},
                {'name': "Sesame oil", 'amount': "1", 'unit': "tbsp"},
                {'name': "Ginger", 'amount': "1", 'unit': "tsp"},
            ],
            'instructions': [
                {'stepNumber': 1, 'instruction': "Prepare ingredients by cutting into bite-sized pieces.", 'duration': 10},
                {'stepNumber': 2, 'instruction': "Heat oil in wok or large skillet over high heat.", 'duration': 2},
                {'stepNumber': 3, 'instruction': "Add garlic and ginger, stir-fry for 30 seconds.", 'duration': 1},
                {'stepNumber': 4, 'instruction': f"Add {first or 'protein'} and cook until almost done.", 'duration': 5},
                {'stepNumber': 5, 'instruction': "Add vegetables and stir-fry until crisp-tender.", 'duration': 4},
                {'stepNumber': 6, 'instruction': "Add soy sauce and sesame oil, toss to combine.", 'duration': 1},
            ],
            'cookingTime': 15,
            'servings': 3,
            'difficulty': "medium",
            'rating': 4,
        },
        {
            'title': f"Gourmet {special} Special",
            'description': (
                f"An elevated dish showcasing {', '.join(ingredients[:3])} "
                "with sophisticated flavors and presentation."
            ),
            'ingredients': [
                {'name': first or "Premium ingredient", 'amount': "1.5", 'unit': "lbs"},
                {'name': second or "Accompaniment", 'amount': "1", 'unit': "cup"},
                {'name': third or "Garnish", 'amount': "1/2", 'unit': "cup"},
                {'name': "White wine", 'amount': "1/2", 'unit': "cup"},
                {'name': "Butter", 'amount': "3", 'unit': "tbsp"},
                {'name': "Fresh thyme", 'amount': "2", 'unit': "tsp"},
            ],
            'instructions': [
                {'stepNumber': 1, 'instruction': "Preheat oven to 400°F and prepare baking dish.", 'duration': 5},
                {'stepNumber': 2, 'instruction': "Season main ingredient generously with salt and pepper.", 'duration': 3},
                {'stepNumber': 3, 'instruction': "Sear in hot pan until golden brown on all sides.", 'duration': 8},
                {'stepNumber': 4, 'instruction': "Add wine and herbs, then transfer to oven.", 'duration': 2},
                {'stepNumber': 5, 'instruction': "Roast until cooked through, about 25-30 minutes.", 'duration': 30},
                {'stepNumber': 6, 'instruction': "Rest for 5 minutes before serving with garnish.", 'duration': 5},
            ],
            'cookingTime': 45,
            'servings': 4,
            'difficulty': "hard",
            'rating': 5,
        },
    ]


def build_recipe_prompt(ingredients, restrictions):
    dietary_note = ""
    if restrictions:
        dietary_note = f"\n\nDietary restrictions to follow: {', '.join(restrictions)}"
    return RECIPE_PROMPT.format(ingredients=', '.join(ingredients), dietary_note=dietary_note)


def generate_recipes(ingredients, restrictions=None, openai_client=None):
    """
    Ask the model for three recipes using the given ingredients.

    Returns a list of recipe dicts in the wire shape (title, description,
    ingredients, instructions, cookingTime, servings, difficulty, rating).
    Raises RecipeGenerationError on any provider or format failure.
    """
    restrictions = list(restrictions or [])

    if openai_client is None:
        if not _api_key():
            logger.info("OPENAI_API_KEY not set, serving demo recipes")
            return demo_recipes(ingredients, restrictions)
        openai_client = openai_client_factory()

    try:
        response = openai_client.chat.completions.create(
            model=current_app.config.get('OPENAI_MODEL', 'gpt-4o'),
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_recipe_prompt(ingredients, restrictions)},
            ],
            response_format={"type": "json_object"},
            temperature=0.8,
        )
        result = json.loads(response.choices[0].message.content or "{}")
        if not isinstance(result, dict) or not isinstance(result.get('recipes'), list):
            raise ValueError("Invalid response format from OpenAI")
    except (openai.OpenAIError, ValueError, AttributeError, IndexError) as e:
        logger.error("Error generating recipes: %s", e)
        raise RecipeGenerationError(f"Failed to generate recipes: {e}") from e

    return result['recipes']


def generate_recipe_image(title, ingredients, openai_client=None):
    """URL of a generated food photo; the demo photo without a key, '' on failure."""
    if openai_client is None:
        if not _api_key():
            return DEMO_IMAGE_URL
        openai_client = openai_client_factory()

    prompt = IMAGE_PROMPT.format(title=title, ingredients=', '.join(ingredients[:3]))
    try:
        response = openai_client.images.generate(
            model=current_app.config.get('OPENAI_IMAGE_MODEL', 'dall-e-3'),
            prompt=prompt,
            n=1,
            size="1024x1024",
            quality="standard",
        )
        return (response.data[0].url if response.data else "") or ""
    except Exception as e:
        # Image failures never block recipe creation
        logger.error("Error generating recipe image: %s", e)
        return ""


def _as_int(value, default, low=None, high=None):
    try:
        result = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    if low is not None:
        result = max(low, result)
    if high is not None:
        result = min(high, result)
    return result


def normalize_recipe(data):
    """
    Coerce one generated recipe into the stored shape.

    Provider output is loosely typed; missing numbers fall back to defaults,
    unknown difficulties become 'medium' and malformed entries are dropped.
    """
    ingredients = []
    for item in data.get('ingredients') or []:
        if not isinstance(item, dict) or not item.get('name'):
            continue
        ingredients.append({
            'name': str(item['name']).strip(),
            'amount': str(item.get('amount') or '').strip(),
            'unit': str(item.get('unit') or '').strip(),
        })

    instructions = []
    for index, step in enumerate(data.get('instructions') or [], start=1):
        if isinstance(step, str):
            step = {'instruction': step}
        if not isinstance(step, dict) or not step.get('instruction'):
            continue
        entry = {
            'stepNumber': _as_int(step.get('stepNumber'), index),
            'instruction': str(step['instruction']).strip(),
        }
        if step.get('duration') is not None:
            entry['duration'] = _as_int(step.get('duration'), 0, low=0)
        instructions.append(entry)

    difficulty = str(data.get('difficulty') or '').lower()
    if difficulty not in VALID_DIFFICULTIES:
        difficulty = 'medium'

    return {
        'title': str(data.get('title') or 'Untitled Recipe').strip(),
        'description': str(data.get('description') or '').strip(),
        'ingredients': ingredients,
        'instructions': instructions,
        'cookingTime': _as_int(data.get('cookingTime'), 0, low=0),
        'servings': _as_int(data.get('servings'), 1, low=1),
        'difficulty': difficulty,
        'rating': _as_int(data.get('rating'), 0, low=0, high=5),
    }
