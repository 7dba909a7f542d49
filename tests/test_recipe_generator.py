import json
from types import SimpleNamespace

import openai
import pytest

from services import RecipeGenerationError, generate_recipes, generate_recipe_image, normalize_recipe
from services.recipe_generator import DEMO_IMAGE_URL, build_recipe_prompt, demo_recipes


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeImages:
    def __init__(self, url=None, error=None):
        self.url = url
        self.error = error

    def generate(self, **kwargs):
        if self.error:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(url=self.url)])


def fake_client(content=None, error=None, image_url=None, image_error=None):
    completions = FakeCompletions(content, error)
    return SimpleNamespace(
        chat=SimpleNamespace(completions=completions),
        images=FakeImages(image_url, image_error),
    )


def test_demo_recipes_without_api_key(app):
    recipes = generate_recipes(['chicken', 'rice', 'broccoli'])
    assert [r['title'] for r in recipes] == [
        'chicken Delight Bowl',
        'Savory chicken Stir-Fry',
        'Gourmet chicken Special',
    ]
    assert recipes == generate_recipes(['chicken', 'rice', 'broccoli'])


def test_demo_recipes_mention_restrictions():
    recipes = demo_recipes(['tofu'], ['vegan', 'gluten-free'])
    assert recipes[0]['title'] == 'tofu Delight Bowl (vegan, gluten-free)'
    assert 'vegan bowl' in recipes[0]['description']
    # Missing second and third ingredients fall back to placeholders
    assert recipes[0]['ingredients'][1]['name'] == 'Secondary ingredient'


def test_prompt_lists_ingredients_and_restrictions():
    prompt = build_recipe_prompt(['eggs', 'spinach'], ['vegetarian'])
    assert 'Ingredients available: eggs, spinach' in prompt
    assert 'Dietary restrictions to follow: vegetarian' in prompt
    assert '"recipes": [' in prompt


def test_generate_with_client_returns_recipes(app):
    payload = {'recipes': [{'title': 'Egg Fried Rice', 'ingredients': [], 'instructions': []}]}
    client = fake_client(content=json.dumps(payload))

    recipes = generate_recipes(['eggs', 'rice'], ['vegetarian'], openai_client=client)

    assert recipes == payload['recipes']
    call = client.chat.completions.calls[0]
    assert call['model'] == 'gpt-4o'
    assert call['response_format'] == {'type': 'json_object'}
    assert call['messages'][0]['role'] == 'system'


@pytest.mark.parametrize('content', ['not json', '{"dishes": []}', '[]'])
def test_malformed_response_raises(app, content):
    with pytest.raises(RecipeGenerationError) as excinfo:
        generate_recipes(['eggs'], openai_client=fake_client(content=content))
    assert str(excinfo.value).startswith('Failed to generate recipes:')


def test_provider_error_raises(app):
    client = fake_client(error=openai.OpenAIError('rate limited'))
    with pytest.raises(RecipeGenerationError, match='rate limited'):
        generate_recipes(['eggs'], openai_client=client)


def test_image_without_api_key_is_demo_photo(app):
    assert generate_recipe_image('Soup', ['leek']) == DEMO_IMAGE_URL


def test_image_from_client(app):
    client = fake_client(image_url='https://images.example.com/soup.png')
    assert generate_recipe_image('Soup', ['leek']) == DEMO_IMAGE_URL
    assert generate_recipe_image('Soup', ['leek'], openai_client=client) == 'https://images.example.com/soup.png'


def test_image_failure_returns_empty_string(app):
    client = fake_client(image_error=RuntimeError('content policy'))
    assert generate_recipe_image('Soup', ['leek'], openai_client=client) == ''


def test_normalize_recipe_coerces_loose_output():
    recipe = normalize_recipe({
        'title': '  Shakshuka ',
        'ingredients': [
            {'name': 'Eggs', 'amount': 4, 'unit': None},
            'stray text',
            {'amount': '1'},
        ],
        'instructions': ['Heat the pan.', {'stepNumber': '2', 'instruction': 'Crack eggs.', 'duration': '6'}],
        'cookingTime': '25',
        'servings': 0,
        'difficulty': 'Expert',
        'rating': 9,
    })
    assert recipe['title'] == 'Shakshuka'
    assert recipe['ingredients'] == [{'name': 'Eggs', 'amount': '4', 'unit': ''}]
    assert recipe['instructions'] == [
        {'stepNumber': 1, 'instruction': 'Heat the pan.'},
        {'stepNumber': 2, 'instruction': 'Crack eggs.', 'duration': 6},
    ]
    assert recipe['cookingTime'] == 25
    assert recipe['servings'] == 1
    assert recipe['difficulty'] == 'medium'
    assert recipe['rating'] == 5


def test_normalize_recipe_defaults():
    recipe = normalize_recipe({})
    assert recipe['title'] == 'Untitled Recipe'
    assert recipe['ingredients'] == []
    assert recipe['difficulty'] == 'medium'


def test_normalize_recipe_ignores_non_finite_numbers():
    recipe = normalize_recipe({
        'title': 'Soup',
        'instructions': [{'instruction': 'Simmer.', 'duration': float('inf')}],
        'cookingTime': 'inf',
        'servings': '-inf',
        'rating': 'nan',
    })
    assert recipe['cookingTime'] == 0
    assert recipe['servings'] == 1
    assert recipe['rating'] == 0
    assert recipe['instructions'] == [{'stepNumber': 1, 'instruction': 'Simmer.', 'duration': 0}]
