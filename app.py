import logging
import math
import sqlite3
import uuid
from datetime import datetime, timedelta

from flask import Flask, request, session, g, jsonify, abort
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException

from config import get_config
from constants import (
    MAX_LENGTHS, VALID_DIFFICULTIES, VALID_MEAL_TYPES, VALID_CATEGORIES,
    VALID_ACTIVITY_LEVELS, VALID_WEIGHT_GOALS,
    SUGGESTED_INGREDIENTS, DEFAULT_SUBSTITUTIONS,
)
from models import (
    db, User, Recipe, RecipeCollection, RecipeCollectionItem, CookingHistory,
    NutritionData, IngredientSuggestion, ShoppingList, ShoppingListItem,
    PantryItem, MealPlan, PlannedMeal, BudgetPreferences, SmartSubstitution,
    GroceryStore, IngredientPrice, RecipeCost, UserHealthGoals,
    DailyNutritionLog, KitchenEquipment,
)
from models.base import current_time
from services import (
    float_to_fraction, parse_ingredient, standardize_unit,
    get_ingredient_suggestions, calculate_recipe_cost, cost_analytics,
    QuotaExceededError, check_quota, record_generation, usage_summary,
    InvalidBudgetError, week_start, generate_budget_meal_plan, optimize_meal_plan,
    categorize_ingredient, generate_shopping_list,
    RecipeGenerationError, generate_recipes, generate_recipe_image, normalize_recipe,
    BillingError, BillingNotConfiguredError, WebhookSignatureError,
    cooking_analytics, nutrition_progress,
)
from services import billing
from services.analytics import logs_for_day
from utils import (
    ValidationError, sanitize_text, sanitize_multiline, sanitize_url,
    sanitize_string_list, login_required, get_owned_or_404,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(get_config())

db.init_app(app)
migrate = Migrate(app, db)


def configure_logging(flask_app):
    logging.basicConfig(
        level=flask_app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )


configure_logging(app)


# Enable SQLite foreign key enforcement so ON DELETE CASCADE / SET NULL apply
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SUBSCRIPTION_EVENTS = {
    'customer.subscription.created',
    'customer.subscription.updated',
    'customer.subscription.deleted',
}

STRIPE_NOT_CONFIGURED_MESSAGE = (
    "Payment processing is currently unavailable. "
    "Please configure Stripe keys to enable subscriptions."
)


# ============================================
# REQUEST HELPERS
# ============================================

def safe_int(value, default=1, min_val=None, max_val=None):
    """Safely parse an integer value with optional bounds."""
    try:
        result = int(value) if value else default
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def json_body():
    """The request's JSON object; a missing body reads as {}."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_text(data, key, limit='name'):
    value = sanitize_text(data.get(key), MAX_LENGTHS[limit])
    if not value:
        raise ValidationError(f"{key} is required")
    return value


def optional_text(data, key, limit='name'):
    if data.get(key) is None:
        return None
    return sanitize_text(data.get(key), MAX_LENGTHS[limit]) or None


def optional_notes(data, key):
    if data.get(key) is None:
        return None
    return sanitize_multiline(data.get(key), MAX_LENGTHS['notes']) or None


def parse_datetime(value, field):
    """ISO-8601 date or datetime to a naive local datetime."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be an ISO date")
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_number(value, field, minimum=0.0, integer=False):
    """Strict numeric field: rejects booleans, text and values below minimum."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
        if integer:
            number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    if number < minimum:
        raise ValidationError(f"{field} must be at least {minimum:g}")
    return number


def optional_number(data, key, minimum=0.0, integer=False):
    if data.get(key) is None:
        return None
    return parse_number(data[key], key, minimum, integer)


def parse_rating(value, field='rating'):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not float(value).is_integer():
        raise ValidationError(f"{field} must be a whole number from 1 to 5")
    if not 1 <= value <= 5:
        raise ValidationError(f"{field} must be a whole number from 1 to 5")
    return int(value)


def parse_bool(value, field):
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false")
    return value


def parse_choice(value, field, choices):
    choice = sanitize_text(value, 50).lower()
    if choice not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(sorted(choices))}")
    return choice


def parse_id_list(values, field):
    if not isinstance(values, list):
        raise ValidationError(f"{field} must be an array")
    ids = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must contain only integer ids")
        ids.append(value)
    return ids


def get_child_or_404(model, ident, parent_attr):
    """Fetch a row owned through its parent (list item, planned meal)."""
    obj = db.session.get(model, ident)
    if obj is None:
        abort(404, description=f"{model.__name__} not found")
    if getattr(obj, parent_attr).user_id != g.user.id:
        abort(403, description="Access denied")
    return obj


def user_payload(user):
    data = user.to_dict()
    data['usage'] = usage_summary(user, current_time())
    return data


# ============================================
# ERROR HANDLERS
# ============================================

@app.errorhandler(HTTPException)
def handle_http_error(e):
    return jsonify({'message': e.description}), e.code


@app.errorhandler(ValidationError)
def handle_validation_error(e):
    return jsonify({'message': e.message}), 400


@app.errorhandler(InvalidBudgetError)
def handle_invalid_budget(e):
    return jsonify({'message': str(e)}), 400


@app.errorhandler(QuotaExceededError)
def handle_quota_exceeded(e):
    return jsonify({'message': e.message, 'limitReached': True}), 403


@app.errorhandler(RecipeGenerationError)
def handle_generation_error(e):
    return jsonify({'message': str(e)}), 500


@app.errorhandler(BillingNotConfiguredError)
def handle_billing_not_configured(e):
    return jsonify({'message': STRIPE_NOT_CONFIGURED_MESSAGE, 'error': 'STRIPE_NOT_CONFIGURED'}), 503


@app.errorhandler(BillingError)
def handle_billing_error(e):
    return jsonify({'message': str(e)}), 400


@app.errorhandler(WebhookSignatureError)
def handle_webhook_error(e):
    logger.warning("Rejected Stripe webhook: %s", e)
    return jsonify({'message': f"Webhook Error: {e}"}), 400


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    db.session.rollback()
    return jsonify({'message': 'Internal server error'}), 500


# ============================================
# ROUTES - AUTH
# ============================================

@app.route('/api/auth/login', methods=['POST'])
def auth_login():
    data = json_body()
    email = sanitize_text(data.get('email'), 255).lower()
    if '@' not in email:
        raise ValidationError("A valid email is required")

    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(
            id=uuid.uuid4().hex,
            email=email,
            subscription_status='free',
            monthly_recipe_count=0,
            last_reset_date=current_time(),
            dietary_restrictions=[],
        )
        db.session.add(user)
        logger.info("Created user %s", user.id)

    if data.get('firstName') is not None:
        user.first_name = optional_text(data, 'firstName', 'name')
    if data.get('lastName') is not None:
        user.last_name = optional_text(data, 'lastName', 'name')
    if data.get('profileImageUrl') is not None:
        user.profile_image_url = sanitize_url(data.get('profileImageUrl')) or None
    db.session.commit()

    session['user_id'] = user.id
    return jsonify(user_payload(user))


@app.route('/api/auth/logout', methods=['POST'])
def auth_logout():
    session.pop('user_id', None)
    return jsonify({'message': 'Logged out'})


@app.route('/api/auth/user')
@login_required
def auth_user():
    return jsonify(user_payload(g.user))


@app.route('/api/user/dietary-restrictions', methods=['PUT'])
@login_required
def update_dietary_restrictions():
    data = json_body()
    g.user.dietary_restrictions = sanitize_string_list(
        data.get('restrictions'), 'restrictions',
        max_items=MAX_LENGTHS['restrictions'], max_length=MAX_LENGTHS['restriction'],
    )
    db.session.commit()
    return jsonify(user_payload(g.user))


# ============================================
# ROUTES - RECIPES
# ============================================

@app.route('/api/generate-recipes', methods=['POST'])
@login_required
def generate_recipes_route():
    user = g.user
    now = current_time()
    logger.info("Recipe generation requested by user %s", user.id)

    check_quota(user, now)

    data = json_body()
    ingredients = sanitize_string_list(
        data.get('ingredients'), 'ingredients',
        max_items=MAX_LENGTHS['ingredients'], max_length=MAX_LENGTHS['ingredient_name'],
        allow_empty=False,
    )
    if data.get('dietaryRestrictions') is not None:
        restrictions = sanitize_string_list(
            data.get('dietaryRestrictions'), 'dietaryRestrictions',
            max_items=MAX_LENGTHS['restrictions'], max_length=MAX_LENGTHS['restriction'],
        )
    else:
        restrictions = list(user.dietary_restrictions or [])

    generated = generate_recipes(ingredients, restrictions)

    recipes = []
    for raw in generated:
        if not isinstance(raw, dict):
            continue
        fields = normalize_recipe(raw)
        image_url = generate_recipe_image(
            fields['title'], [i['name'] for i in fields['ingredients']])
        recipe = Recipe(
            user_id=user.id,
            title=sanitize_text(fields['title'], 300) or 'Untitled Recipe',
            description=sanitize_multiline(fields['description'], MAX_LENGTHS['description']),
            ingredients=fields['ingredients'],
            instructions=fields['instructions'],
            cooking_time=fields['cookingTime'],
            servings=fields['servings'],
            difficulty=fields['difficulty'],
            image_url=sanitize_url(image_url),
            rating=fields['rating'],
            is_saved=False,
        )
        db.session.add(recipe)
        recipes.append(recipe)
    db.session.commit()

    record_generation(user, now)
    logger.info("Generated %d recipes for user %s", len(recipes), user.id)

    return jsonify({'recipes': [r.to_dict() for r in recipes]})


@app.route('/api/recipes')
@login_required
def recipes_list():
    query = Recipe.query.filter_by(user_id=g.user.id)
    saved = request.args.get('saved')
    if saved is not None:
        query = query.filter_by(is_saved=saved.lower() in ('1', 'true', 'yes'))
    recipes = query.order_by(Recipe.created_at.desc(), Recipe.id.desc()).all()
    return jsonify([r.to_dict() for r in recipes])


@app.route('/api/recipes/<int:id>')
@login_required
def recipe_view(id):
    recipe = get_owned_or_404(Recipe, id)
    return jsonify(recipe.to_dict())


@app.route('/api/recipes/<int:id>', methods=['DELETE'])
@login_required
def recipe_delete(id):
    recipe = get_owned_or_404(Recipe, id)
    db.session.delete(recipe)
    db.session.commit()
    return jsonify({'message': 'Recipe deleted'})


@app.route('/api/recipes/<int:id>/save', methods=['POST'])
@login_required
def recipe_save(id):
    recipe = get_owned_or_404(Recipe, id)
    data = json_body()
    recipe.is_saved = parse_bool(data.get('isSaved', True), 'isSaved')
    db.session.commit()
    return jsonify(recipe.to_dict())


@app.route('/api/recipes/<int:id>/rate', methods=['POST'])
@login_required
def recipe_rate(id):
    recipe = get_owned_or_404(Recipe, id)
    data = json_body()
    recipe.rating = parse_rating(data.get('rating'))
    db.session.commit()
    return jsonify(recipe.to_dict())


@app.route('/api/recipes/<int:id>/nutrition')
@login_required
def recipe_nutrition(id):
    recipe = get_owned_or_404(Recipe, id)
    if recipe.nutrition is None:
        abort(404, description="Nutrition data not found")
    return jsonify(recipe.nutrition.to_dict())


@app.route('/api/recipes/<int:id>/nutrition', methods=['PUT'])
@login_required
def recipe_nutrition_update(id):
    recipe = get_owned_or_404(Recipe, id)
    data = json_body()

    nutrition = recipe.nutrition
    if nutrition is None:
        nutrition = NutritionData(recipe_id=recipe.id, servings=recipe.servings or 1)
        db.session.add(nutrition)

    if data.get('calories') is not None:
        nutrition.calories = parse_number(data['calories'], 'calories', integer=True)
    for key in ('protein', 'carbs', 'fat', 'fiber', 'sugar', 'sodium', 'cholesterol'):
        if data.get(key) is not None:
            setattr(nutrition, key, parse_number(data[key], key))
    if data.get('servings') is not None:
        nutrition.servings = parse_number(data['servings'], 'servings', minimum=1, integer=True)

    db.session.commit()
    return jsonify(nutrition.to_dict())


@app.route('/api/recipes/<int:id>/cost', methods=['POST'])
@login_required
def recipe_cost_calculate(id):
    recipe = get_owned_or_404(Recipe, id)
    recipe_cost = calculate_recipe_cost(recipe)
    return jsonify(recipe_cost.to_dict()), 201


@app.route('/api/ingredients/suggestions')
@login_required
def ingredient_suggestions():
    query = sanitize_text(request.args.get('q'), MAX_LENGTHS['search_query'])
    limit = safe_int(request.args.get('limit'), default=8, min_val=1, max_val=25)
    results = get_ingredient_suggestions(query, IngredientSuggestion, limit=limit)
    return jsonify([
        dict(suggestion.to_dict(), score=round(score, 1), matchReason=reason)
        for suggestion, score, reason in results
    ])


# ============================================
# ROUTES - BILLING
# ============================================

@app.route('/api/create-subscription', methods=['POST'])
@login_required
def create_subscription():
    user = g.user
    if not billing.is_configured():
        raise BillingNotConfiguredError("Stripe is not configured")

    if user.stripe_subscription_id:
        subscription = billing.retrieve_subscription(user.stripe_subscription_id)
        return jsonify({
            'subscriptionId': subscription.get('id'),
            'clientSecret': billing.client_secret(subscription),
        })

    if not user.email:
        raise ValidationError("No user email on file")

    data = json_body()
    price_id = sanitize_text(data.get('priceId'), 100) or app.config.get('STRIPE_PRICE_PRO')
    if not price_id:
        raise ValidationError("priceId is required")

    customer = billing.create_customer(user.email, user.display_name)
    subscription = billing.create_subscription(customer['id'], price_id)

    user.stripe_customer_id = customer['id']
    user.stripe_subscription_id = subscription.get('id')
    db.session.commit()
    logger.info("Created subscription %s for user %s", user.stripe_subscription_id, user.id)

    return jsonify({
        'subscriptionId': subscription.get('id'),
        'clientSecret': billing.client_secret(subscription),
    })


@app.route('/api/stripe/webhook', methods=['POST'])
def stripe_webhook():
    event_data = billing.verify_webhook(
        request.get_data(),
        request.headers.get('Stripe-Signature'),
        app.config.get('STRIPE_WEBHOOK_SECRET'),
    )

    event_type = event_data.get('type')
    if event_type not in SUBSCRIPTION_EVENTS:
        logger.debug("Ignoring Stripe event %s", event_type)
        return jsonify({'received': True})

    subscription = (event_data.get('data') or {}).get('object') or {}
    subscription_id = subscription.get('id')
    user = None
    if subscription_id:
        user = User.query.filter_by(stripe_subscription_id=subscription_id).first()
    if user is None and subscription.get('customer'):
        user = User.query.filter_by(stripe_customer_id=subscription['customer']).first()
    if user is None:
        logger.warning("No user for Stripe subscription %s (%s)", subscription_id, event_type)
        return jsonify({'received': True})

    if event_type == 'customer.subscription.deleted':
        user.subscription_status = 'free'
        user.stripe_subscription_id = None
    else:
        user.subscription_status = billing.tier_for_subscription(subscription)
        user.stripe_subscription_id = subscription_id
    db.session.commit()
    logger.info("User %s is now on the %s tier (%s)", user.id, user.subscription_status, event_type)

    return jsonify({'received': True})


# ============================================
# ROUTES - COLLECTIONS
# ============================================

@app.route('/api/collections')
@login_required
def collections_list():
    collections = (RecipeCollection.query.filter_by(user_id=g.user.id)
                   .order_by(RecipeCollection.created_at.desc(), RecipeCollection.id.desc())
                   .all())
    return jsonify([c.to_dict() for c in collections])


@app.route('/api/collections', methods=['POST'])
@login_required
def collection_add():
    data = json_body()
    collection = RecipeCollection(
        user_id=g.user.id,
        name=require_text(data, 'name'),
        description=optional_notes(data, 'description'),
        is_default=parse_bool(data.get('isDefault', False), 'isDefault'),
    )
    db.session.add(collection)
    db.session.commit()
    return jsonify(collection.to_dict()), 201


@app.route('/api/collections/<int:id>')
@login_required
def collection_view(id):
    collection = get_owned_or_404(RecipeCollection, id)
    data = collection.to_dict()
    data['recipes'] = [item.recipe.to_dict() for item in collection.items]
    return jsonify(data)


@app.route('/api/collections/<int:id>', methods=['PUT'])
@login_required
def collection_edit(id):
    collection = get_owned_or_404(RecipeCollection, id)
    data = json_body()
    if 'name' in data:
        collection.name = require_text(data, 'name')
    if 'description' in data:
        collection.description = optional_notes(data, 'description')
    if 'isDefault' in data:
        collection.is_default = parse_bool(data['isDefault'], 'isDefault')
    db.session.commit()
    return jsonify(collection.to_dict())


@app.route('/api/collections/<int:id>', methods=['DELETE'])
@login_required
def collection_delete(id):
    collection = get_owned_or_404(RecipeCollection, id)
    db.session.delete(collection)
    db.session.commit()
    return jsonify({'message': 'Collection deleted'})


@app.route('/api/collections/<int:id>/recipes')
@login_required
def collection_recipes(id):
    collection = get_owned_or_404(RecipeCollection, id)
    items = sorted(collection.items, key=lambda item: (item.added_at, item.id))
    return jsonify([item.recipe.to_dict() for item in items])


@app.route('/api/collections/<int:id>/recipes/<int:recipe_id>', methods=['POST'])
@login_required
def collection_recipe_add(id, recipe_id):
    collection = get_owned_or_404(RecipeCollection, id)
    recipe = get_owned_or_404(Recipe, recipe_id)

    existing = RecipeCollectionItem.query.filter_by(
        collection_id=collection.id, recipe_id=recipe.id).first()
    if existing:
        return jsonify(collection.to_dict())

    db.session.add(RecipeCollectionItem(collection_id=collection.id, recipe_id=recipe.id))
    db.session.commit()
    return jsonify(collection.to_dict()), 201


@app.route('/api/collections/<int:id>/recipes/<int:recipe_id>', methods=['DELETE'])
@login_required
def collection_recipe_remove(id, recipe_id):
    collection = get_owned_or_404(RecipeCollection, id)
    item = RecipeCollectionItem.query.filter_by(
        collection_id=collection.id, recipe_id=recipe_id).first()
    if item is None:
        abort(404, description="Recipe is not in this collection")
    db.session.delete(item)
    db.session.commit()
    return jsonify(collection.to_dict())


# ============================================
# ROUTES - SHOPPING LISTS
# ============================================

@app.route('/api/shopping-lists')
@login_required
def shopping_lists():
    lists = (ShoppingList.query.filter_by(user_id=g.user.id)
             .order_by(ShoppingList.created_at.desc(), ShoppingList.id.desc())
             .all())
    return jsonify([l.to_dict() for l in lists])


@app.route('/api/shopping-lists', methods=['POST'])
@login_required
def shopping_list_add():
    data = json_body()
    shopping_list = ShoppingList(user_id=g.user.id, name=require_text(data, 'name'))
    db.session.add(shopping_list)
    db.session.commit()
    return jsonify(shopping_list.to_dict(include_items=True)), 201


@app.route('/api/shopping-lists/generate', methods=['POST'])
@login_required
def shopping_list_generate():
    data = json_body()
    recipe_ids = parse_id_list(data.get('recipeIds'), 'recipeIds')
    name = optional_text(data, 'name') or 'Shopping List'
    shopping_list = generate_shopping_list(g.user, recipe_ids, name)
    return jsonify(shopping_list.to_dict(include_items=True)), 201


@app.route('/api/shopping-lists/<int:id>')
@login_required
def shopping_list_view(id):
    shopping_list = get_owned_or_404(ShoppingList, id)
    return jsonify(shopping_list.to_dict(include_items=True))


@app.route('/api/shopping-lists/<int:id>', methods=['PUT'])
@login_required
def shopping_list_edit(id):
    shopping_list = get_owned_or_404(ShoppingList, id)
    data = json_body()
    if 'name' in data:
        shopping_list.name = require_text(data, 'name')
    if 'isCompleted' in data:
        shopping_list.is_completed = parse_bool(data['isCompleted'], 'isCompleted')
    db.session.commit()
    return jsonify(shopping_list.to_dict())


@app.route('/api/shopping-lists/<int:id>', methods=['DELETE'])
@login_required
def shopping_list_delete(id):
    shopping_list = get_owned_or_404(ShoppingList, id)
    db.session.delete(shopping_list)
    db.session.commit()
    return jsonify({'message': 'Shopping list deleted'})


@app.route('/api/shopping-lists/<int:id>/items')
@login_required
def shopping_list_items(id):
    shopping_list = get_owned_or_404(ShoppingList, id)
    return jsonify([item.to_dict() for item in shopping_list.items])


@app.route('/api/shopping-lists/<int:id>/items', methods=['POST'])
@login_required
def shopping_item_add(id):
    shopping_list = get_owned_or_404(ShoppingList, id)
    data = json_body()

    if data.get('text') is not None:
        # Free-text entry such as "2 cups flour"
        qty, unit, name = parse_ingredient(sanitize_text(data['text'], MAX_LENGTHS['ingredient_name']))
        if not name:
            raise ValidationError("text must name an ingredient")
        amount = float_to_fraction(qty)
        unit = '' if unit == 'EA' else unit.lower()
    else:
        name = require_text(data, 'name', 'ingredient_name')
        amount = optional_text(data, 'amount', 'amount') or ''
        unit = optional_text(data, 'unit', 'unit') or ''

    if data.get('category') is not None:
        category = parse_choice(data['category'], 'category', VALID_CATEGORIES)
    else:
        category = categorize_ingredient(name)

    item = ShoppingListItem(
        shopping_list_id=shopping_list.id,
        name=name,
        amount=amount,
        unit=unit,
        category=category,
        is_checked=False,
    )
    db.session.add(item)
    db.session.commit()
    return jsonify(item.to_dict()), 201


@app.route('/api/shopping-lists/items/<int:id>', methods=['PUT'])
@login_required
def shopping_item_edit(id):
    item = get_child_or_404(ShoppingListItem, id, 'shopping_list')
    data = json_body()
    if 'name' in data:
        item.name = require_text(data, 'name', 'ingredient_name')
    if 'amount' in data:
        item.amount = optional_text(data, 'amount', 'amount') or ''
    if 'unit' in data:
        item.unit = optional_text(data, 'unit', 'unit') or ''
    if 'category' in data:
        item.category = parse_choice(data['category'], 'category', VALID_CATEGORIES)
    if 'isChecked' in data:
        item.is_checked = parse_bool(data['isChecked'], 'isChecked')
    db.session.commit()
    return jsonify(item.to_dict())


@app.route('/api/shopping-lists/items/<int:id>', methods=['DELETE'])
@login_required
def shopping_item_delete(id):
    item = get_child_or_404(ShoppingListItem, id, 'shopping_list')
    db.session.delete(item)
    db.session.commit()
    return jsonify({'message': 'Item deleted'})


# ============================================
# ROUTES - PANTRY
# ============================================

def apply_pantry_fields(item, data):
    if 'name' in data:
        item.name = require_text(data, 'name', 'ingredient_name')
    if 'amount' in data:
        item.amount = optional_text(data, 'amount', 'amount')
    if 'unit' in data:
        item.unit = optional_text(data, 'unit', 'unit')
    if 'category' in data:
        item.category = optional_text(data, 'category', 'category') or 'other'
    if 'expiryDate' in data:
        expiry = data['expiryDate']
        item.expiry_date = parse_datetime(expiry, 'expiryDate') if expiry else None
    if 'isRunningLow' in data:
        item.is_running_low = parse_bool(data['isRunningLow'], 'isRunningLow')


@app.route('/api/pantry')
@login_required
def pantry_list():
    items = PantryItem.query.filter_by(user_id=g.user.id).order_by(PantryItem.name).all()
    return jsonify([item.to_dict() for item in items])


@app.route('/api/pantry', methods=['POST'])
@login_required
def pantry_add():
    data = json_body()
    item = PantryItem(user_id=g.user.id, name=require_text(data, 'name', 'ingredient_name'))
    apply_pantry_fields(item, data)
    if not item.category:
        item.category = categorize_ingredient(item.name)
    db.session.add(item)
    db.session.commit()
    return jsonify(item.to_dict()), 201


@app.route('/api/pantry/expiring')
@login_required
def pantry_expiring():
    days = safe_int(request.args.get('days'), default=7, min_val=0)
    cutoff = current_time() + timedelta(days=days)
    items = (PantryItem.query
             .filter(PantryItem.user_id == g.user.id,
                     PantryItem.expiry_date.isnot(None),
                     PantryItem.expiry_date <= cutoff)
             .order_by(PantryItem.expiry_date, PantryItem.id)
             .all())
    return jsonify([item.to_dict() for item in items])


@app.route('/api/pantry/<int:id>', methods=['PUT'])
@login_required
def pantry_edit(id):
    item = get_owned_or_404(PantryItem, id)
    apply_pantry_fields(item, json_body())
    db.session.commit()
    return jsonify(item.to_dict())


@app.route('/api/pantry/<int:id>', methods=['DELETE'])
@login_required
def pantry_delete(id):
    item = get_owned_or_404(PantryItem, id)
    db.session.delete(item)
    db.session.commit()
    return jsonify({'message': 'Pantry item deleted'})


# ============================================
# ROUTES - COOKING HISTORY
# ============================================

def apply_history_fields(entry, data):
    if data.get('rating') is not None:
        entry.rating = parse_rating(data['rating'])
    if 'notes' in data:
        entry.notes = optional_notes(data, 'notes')
    if data.get('cookingTime') is not None:
        entry.cooking_time = parse_number(data['cookingTime'], 'cookingTime', integer=True)
    if data.get('difficulty') is not None:
        entry.difficulty = parse_choice(data['difficulty'], 'difficulty', VALID_DIFFICULTIES)
    if data.get('wouldMakeAgain') is not None:
        entry.would_make_again = parse_bool(data['wouldMakeAgain'], 'wouldMakeAgain')
    if data.get('cookedAt') is not None:
        entry.cooked_at = parse_datetime(data['cookedAt'], 'cookedAt')


@app.route('/api/cooking-history')
@login_required
def cooking_history():
    entries = (CookingHistory.query.filter_by(user_id=g.user.id)
               .order_by(CookingHistory.cooked_at.desc(), CookingHistory.id.desc())
               .all())
    return jsonify([e.to_dict() for e in entries])


@app.route('/api/cooking-history', methods=['POST'])
@login_required
def cooking_history_add():
    data = json_body()
    if data.get('recipeId') is None:
        raise ValidationError("recipeId is required")
    recipe = get_owned_or_404(Recipe, parse_number(data['recipeId'], 'recipeId', integer=True))

    entry = CookingHistory(user_id=g.user.id, recipe_id=recipe.id, cooked_at=current_time())
    apply_history_fields(entry, data)
    db.session.add(entry)
    db.session.commit()
    return jsonify(entry.to_dict()), 201


@app.route('/api/cooking-history/<int:id>', methods=['PUT'])
@login_required
def cooking_history_edit(id):
    entry = get_owned_or_404(CookingHistory, id)
    apply_history_fields(entry, json_body())
    db.session.commit()
    return jsonify(entry.to_dict())


@app.route('/api/analytics')
@login_required
def analytics():
    return jsonify(cooking_analytics(g.user))


# ============================================
# ROUTES - MEAL PLANS
# ============================================

@app.route('/api/meal-plans')
@login_required
def meal_plans():
    plans = (MealPlan.query.filter_by(user_id=g.user.id)
             .order_by(MealPlan.week_start_date.desc(), MealPlan.id.desc())
             .all())
    return jsonify([p.to_dict() for p in plans])


@app.route('/api/meal-plans', methods=['POST'])
@login_required
def meal_plan_add():
    data = json_body()
    if not data.get('weekStartDate'):
        raise ValidationError("weekStartDate is required")
    plan = MealPlan(
        user_id=g.user.id,
        name=require_text(data, 'name'),
        description=optional_notes(data, 'description'),
        week_start_date=week_start(parse_datetime(data['weekStartDate'], 'weekStartDate')),
        total_budget=optional_number(data, 'totalBudget'),
        actual_cost=0.0,
        is_active=parse_bool(data.get('isActive', True), 'isActive'),
    )
    db.session.add(plan)
    db.session.commit()
    return jsonify(plan.to_dict()), 201


@app.route('/api/meal-plans/<int:id>')
@login_required
def meal_plan_view(id):
    plan = get_owned_or_404(MealPlan, id)
    data = plan.to_dict()
    data['meals'] = [m.to_dict(include_recipe=True) for m in plan.meals]
    return jsonify(data)


@app.route('/api/meal-plans/<int:id>', methods=['PUT'])
@login_required
def meal_plan_edit(id):
    plan = get_owned_or_404(MealPlan, id)
    data = json_body()
    if 'name' in data:
        plan.name = require_text(data, 'name')
    if 'description' in data:
        plan.description = optional_notes(data, 'description')
    if 'weekStartDate' in data:
        plan.week_start_date = week_start(parse_datetime(data['weekStartDate'], 'weekStartDate'))
    if 'totalBudget' in data:
        plan.total_budget = optional_number(data, 'totalBudget')
    if 'isActive' in data:
        plan.is_active = parse_bool(data['isActive'], 'isActive')
    db.session.commit()
    return jsonify(plan.to_dict())


@app.route('/api/meal-plans/<int:id>', methods=['DELETE'])
@login_required
def meal_plan_delete(id):
    plan = get_owned_or_404(MealPlan, id)
    db.session.delete(plan)
    db.session.commit()
    return jsonify({'message': 'Meal plan deleted'})


@app.route('/api/meal-plans/<int:id>/meals')
@login_required
def planned_meals(id):
    plan = get_owned_or_404(MealPlan, id)
    return jsonify([m.to_dict(include_recipe=True) for m in plan.meals])


@app.route('/api/meal-plans/<int:id>/meals', methods=['POST'])
@login_required
def planned_meal_add(id):
    plan = get_owned_or_404(MealPlan, id)
    data = json_body()

    recipe_id = None
    if data.get('recipeId') is not None:
        recipe_id = get_owned_or_404(Recipe, parse_number(data['recipeId'], 'recipeId', integer=True)).id
    if not data.get('scheduledDate'):
        raise ValidationError("scheduledDate is required")

    meal = PlannedMeal(
        meal_plan_id=plan.id,
        recipe_id=recipe_id,
        meal_type=parse_choice(data.get('mealType'), 'mealType', VALID_MEAL_TYPES),
        scheduled_date=parse_datetime(data['scheduledDate'], 'scheduledDate'),
        servings=optional_number(data, 'servings', minimum=1, integer=True) or 1,
        estimated_cost=optional_number(data, 'estimatedCost') or 0.0,
        notes=optional_notes(data, 'notes'),
    )
    db.session.add(meal)
    db.session.commit()
    return jsonify(meal.to_dict(include_recipe=True)), 201


@app.route('/api/planned-meals/<int:id>', methods=['PUT'])
@login_required
def planned_meal_edit(id):
    meal = get_child_or_404(PlannedMeal, id, 'meal_plan')
    data = json_body()
    if 'estimatedCost' in data:
        raise ValidationError("estimatedCost cannot be changed after planning")
    if 'isCooked' in data:
        meal.is_cooked = parse_bool(data['isCooked'], 'isCooked')
    if data.get('rating') is not None:
        meal.rating = parse_rating(data['rating'])
    if 'actualCost' in data:
        meal.actual_cost = optional_number(data, 'actualCost')
    if 'notes' in data:
        meal.notes = optional_notes(data, 'notes')
    db.session.commit()
    return jsonify(meal.to_dict())


@app.route('/api/generate-budget-meal-plan', methods=['POST'])
@login_required
def budget_meal_plan_generate():
    data = json_body()
    restrictions = None
    if data.get('dietaryRestrictions') is not None:
        restrictions = sanitize_string_list(
            data['dietaryRestrictions'], 'dietaryRestrictions',
            max_items=MAX_LENGTHS['restrictions'], max_length=MAX_LENGTHS['restriction'],
        )
    result = generate_budget_meal_plan(
        g.user,
        data.get('weeklyBudget'),
        current_time(),
        restrictions=restrictions,
        name=optional_text(data, 'name'),
    )
    return jsonify(result), 201


@app.route('/api/meal-plans/<int:id>/optimize', methods=['POST'])
@login_required
def meal_plan_optimize(id):
    plan = get_owned_or_404(MealPlan, id)
    return jsonify(optimize_meal_plan(plan))


@app.route('/api/budget-preferences')
@login_required
def budget_preferences():
    prefs = BudgetPreferences.query.filter_by(user_id=g.user.id).first()
    return jsonify(prefs.to_dict() if prefs else None)


@app.route('/api/budget-preferences', methods=['POST'])
@login_required
def budget_preferences_save():
    data = json_body()
    prefs = BudgetPreferences.query.filter_by(user_id=g.user.id).first()
    created = prefs is None
    if created:
        prefs = BudgetPreferences(user_id=g.user.id)
        db.session.add(prefs)

    if 'weeklyBudget' in data:
        prefs.weekly_budget = optional_number(data, 'weeklyBudget')
    if 'monthlyBudget' in data:
        prefs.monthly_budget = optional_number(data, 'monthlyBudget')
    if 'maxCostPerServing' in data:
        prefs.max_cost_per_serving = optional_number(data, 'maxCostPerServing')
    if 'prioritizeCost' in data:
        prefs.prioritize_cost = parse_bool(data['prioritizeCost'], 'prioritizeCost')
    if 'avoidExpensiveIngredients' in data:
        prefs.avoid_expensive_ingredients = parse_bool(
            data['avoidExpensiveIngredients'], 'avoidExpensiveIngredients')
    if 'preferredStores' in data:
        prefs.preferred_stores = sanitize_string_list(data['preferredStores'], 'preferredStores')

    db.session.commit()
    return jsonify(prefs.to_dict()), 201 if created else 200


# ============================================
# ROUTES - SUBSTITUTIONS
# ============================================

@app.route('/api/substitutions/<ingredient>')
@login_required
def substitutions(ingredient):
    term = sanitize_text(ingredient, MAX_LENGTHS['ingredient_name']).lower()
    wanted = {
        r.strip().lower()
        for r in request.args.get('dietaryRestrictions', '').split(',')
        if r.strip()
    }

    rules = (SmartSubstitution.query
             .order_by(SmartSubstitution.confidence_score.desc(),
                       SmartSubstitution.cost_savings_percent.desc(),
                       SmartSubstitution.id)
             .all())
    matches = []
    for rule in rules:
        if term not in rule.original_ingredient.lower():
            continue
        compatible = {c.lower() for c in (rule.dietary_compatibility or [])}
        if wanted <= compatible:
            matches.append(rule)
    return jsonify([rule.to_dict() for rule in matches])


# ============================================
# ROUTES - KITCHEN EQUIPMENT
# ============================================

def apply_equipment_fields(equipment, data):
    if 'name' in data:
        equipment.name = require_text(data, 'name')
    if 'type' in data:
        equipment.type = require_text(data, 'type', 'category')
    for key, limit in (('brand', 'category'), ('model', 'category'), ('capacity', 'category')):
        if key in data:
            setattr(equipment, key, optional_text(data, key, limit))
    if 'features' in data:
        equipment.features = sanitize_string_list(data['features'], 'features')
    if 'isActive' in data:
        equipment.is_active = parse_bool(data['isActive'], 'isActive')


@app.route('/api/equipment')
@login_required
def equipment_list():
    equipment = (KitchenEquipment.query.filter_by(user_id=g.user.id)
                 .order_by(KitchenEquipment.name)
                 .all())
    return jsonify([e.to_dict() for e in equipment])


@app.route('/api/equipment', methods=['POST'])
@login_required
def equipment_add():
    data = json_body()
    equipment = KitchenEquipment(
        user_id=g.user.id,
        name=require_text(data, 'name'),
        type=require_text(data, 'type', 'category'),
    )
    apply_equipment_fields(equipment, data)
    db.session.add(equipment)
    db.session.commit()
    return jsonify(equipment.to_dict()), 201


@app.route('/api/equipment/<int:id>')
@login_required
def equipment_view(id):
    return jsonify(get_owned_or_404(KitchenEquipment, id).to_dict())


@app.route('/api/equipment/<int:id>', methods=['PUT'])
@login_required
def equipment_edit(id):
    equipment = get_owned_or_404(KitchenEquipment, id)
    apply_equipment_fields(equipment, json_body())
    db.session.commit()
    return jsonify(equipment.to_dict())


@app.route('/api/equipment/<int:id>', methods=['DELETE'])
@login_required
def equipment_delete(id):
    equipment = get_owned_or_404(KitchenEquipment, id)
    db.session.delete(equipment)
    db.session.commit()
    return jsonify({'message': 'Equipment deleted'})


# ============================================
# ROUTES - COSTS
# ============================================

@app.route('/api/grocery-stores')
@login_required
def grocery_stores():
    stores = GroceryStore.query.filter_by(is_active=True).order_by(GroceryStore.name).all()
    return jsonify([s.to_dict() for s in stores])


@app.route('/api/grocery-stores', methods=['POST'])
@login_required
def grocery_store_add():
    data = json_body()
    store = GroceryStore(
        name=require_text(data, 'name'),
        chain=optional_text(data, 'chain'),
        location=optional_text(data, 'location'),
        is_active=parse_bool(data.get('isActive', True), 'isActive'),
    )
    db.session.add(store)
    db.session.commit()
    return jsonify(store.to_dict()), 201


@app.route('/api/ingredient-prices')
@login_required
def ingredient_prices():
    query = IngredientPrice.query
    ingredient = sanitize_text(request.args.get('ingredient'), MAX_LENGTHS['ingredient_name'])
    if ingredient:
        query = query.filter(IngredientPrice.ingredient_name.ilike(f"%{ingredient}%"))
    prices = query.order_by(IngredientPrice.ingredient_name, IngredientPrice.price).all()
    return jsonify([p.to_dict() for p in prices])


@app.route('/api/ingredient-prices', methods=['POST'])
@login_required
def ingredient_price_add():
    data = json_body()
    store_id = None
    if data.get('storeId') is not None:
        store_id = parse_number(data['storeId'], 'storeId', integer=True)
        if db.session.get(GroceryStore, store_id) is None:
            abort(404, description="GroceryStore not found")
    if data.get('price') is None:
        raise ValidationError("price is required")

    price = IngredientPrice(
        ingredient_name=require_text(data, 'ingredientName', 'ingredient_name'),
        store_id=store_id,
        price=parse_number(data['price'], 'price'),
        unit=standardize_unit(data.get('unit')),
        package_size=optional_text(data, 'packageSize', 'amount'),
        brand=optional_text(data, 'brand', 'category'),
        is_organic=parse_bool(data.get('isOrganic', False), 'isOrganic'),
    )
    db.session.add(price)
    db.session.commit()
    return jsonify(price.to_dict()), 201


@app.route('/api/recipe-costs')
@login_required
def recipe_costs():
    costs = (RecipeCost.query.join(Recipe)
             .filter(Recipe.user_id == g.user.id)
             .order_by(RecipeCost.calculated_at.desc(), RecipeCost.id.desc())
             .all())
    return jsonify([c.to_dict() for c in costs])


@app.route('/api/cost-analytics')
@login_required
def cost_analytics_view():
    return jsonify(cost_analytics(g.user, current_time()))


# ============================================
# ROUTES - NUTRITION
# ============================================

@app.route('/api/health-goals')
@login_required
def health_goals():
    goals = UserHealthGoals.query.filter_by(user_id=g.user.id).first()
    return jsonify(goals.to_dict() if goals else None)


@app.route('/api/health-goals', methods=['PUT'])
@login_required
def health_goals_save():
    data = json_body()
    goals = UserHealthGoals.query.filter_by(user_id=g.user.id).first()
    if goals is None:
        goals = UserHealthGoals(user_id=g.user.id)
        db.session.add(goals)

    if 'dailyCalories' in data:
        goals.daily_calories = optional_number(data, 'dailyCalories', integer=True)
    for key, column in (('dailyProtein', 'daily_protein'), ('dailyCarbs', 'daily_carbs'),
                        ('dailyFat', 'daily_fat'), ('dailyFiber', 'daily_fiber'),
                        ('maxSodium', 'max_sodium')):
        if key in data:
            setattr(goals, column, optional_number(data, key))
    if 'healthConditions' in data:
        goals.health_conditions = sanitize_string_list(data['healthConditions'], 'healthConditions')
    if data.get('activityLevel') is not None:
        goals.activity_level = parse_choice(data['activityLevel'], 'activityLevel', VALID_ACTIVITY_LEVELS)
    if data.get('weightGoal') is not None:
        goals.weight_goal = parse_choice(data['weightGoal'], 'weightGoal', VALID_WEIGHT_GOALS)

    db.session.commit()
    return jsonify(goals.to_dict())


@app.route('/api/nutrition-logs')
@login_required
def nutrition_logs():
    day = request.args.get('date')
    if day:
        logs = logs_for_day(g.user, parse_datetime(day, 'date'))
    else:
        logs = (DailyNutritionLog.query.filter_by(user_id=g.user.id)
                .order_by(DailyNutritionLog.date.desc(), DailyNutritionLog.id.desc())
                .all())
    return jsonify([log.to_dict() for log in logs])


@app.route('/api/nutrition-logs', methods=['POST'])
@login_required
def nutrition_log_add():
    data = json_body()
    servings = optional_number(data, 'servings') or 1.0
    log = DailyNutritionLog(
        user_id=g.user.id,
        date=parse_datetime(data['date'], 'date') if data.get('date') else current_time(),
        meal_type=parse_choice(data.get('mealType'), 'mealType', VALID_MEAL_TYPES),
        servings=servings,
    )

    nutrition = None
    if data.get('recipeId') is not None:
        recipe = get_owned_or_404(Recipe, parse_number(data['recipeId'], 'recipeId', integer=True))
        log.recipe_id = recipe.id
        nutrition = recipe.nutrition

    if data.get('calories') is None and nutrition is not None:
        # Scale the whole-recipe facts to the servings eaten
        scale = servings / (nutrition.servings or 1)
        log.calories = int(round((nutrition.calories or 0) * scale))
        for key in ('protein', 'carbs', 'fat', 'fiber', 'sodium'):
            value = getattr(nutrition, key)
            setattr(log, key, round(value * scale, 1) if value is not None else None)
    else:
        log.calories = optional_number(data, 'calories', integer=True) or 0
        for key in ('protein', 'carbs', 'fat'):
            setattr(log, key, optional_number(data, key) or 0.0)
        for key in ('fiber', 'sodium'):
            setattr(log, key, optional_number(data, key))
    if log.protein is None:
        log.protein = 0.0
    if log.carbs is None:
        log.carbs = 0.0
    if log.fat is None:
        log.fat = 0.0

    db.session.add(log)
    db.session.commit()
    return jsonify(log.to_dict()), 201


@app.route('/api/nutrition-progress')
@login_required
def nutrition_progress_view():
    day = request.args.get('date')
    day = parse_datetime(day, 'date') if day else current_time()
    return jsonify(nutrition_progress(g.user, day))


# ============================================
# INITIALIZE DATABASE
# ============================================

def seed_reference_data():
    """Fill the suggestion and substitution tables when they are empty."""
    if IngredientSuggestion.query.count() == 0:
        for name, category, popularity in SUGGESTED_INGREDIENTS:
            db.session.add(IngredientSuggestion(name=name, category=category, popularity=popularity))
        logger.info("Seeded %d ingredient suggestions", len(SUGGESTED_INGREDIENTS))

    if SmartSubstitution.query.count() == 0:
        for original, substitute, percent, impact, compatibility in DEFAULT_SUBSTITUTIONS:
            db.session.add(SmartSubstitution(
                original_ingredient=original,
                substitute_ingredient=substitute,
                cost_savings_percent=percent,
                nutritional_impact=impact,
                dietary_compatibility=list(compatibility),
            ))
        logger.info("Seeded %d smart substitutions", len(DEFAULT_SUBSTITUTIONS))

    db.session.commit()


def init_db():
    with app.app_context():
        db.create_all()
        seed_reference_data()


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
