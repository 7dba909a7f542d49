import os

os.environ['FLASK_ENV'] = 'testing'

import pytest  # noqa: E402

from app import app as flask_app, seed_reference_data  # noqa: E402
from models import db, User, Recipe  # noqa: E402

TEST_EMAIL = 'cook@example.com'


@pytest.fixture
def app():
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        seed_reference_data()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    response = client.post('/api/auth/login', json={'email': TEST_EMAIL, 'firstName': 'Sam'})
    assert response.status_code == 200
    return client


@pytest.fixture
def user(auth_client):
    """The user logged in on auth_client."""
    return User.query.filter_by(email=TEST_EMAIL).one()


@pytest.fixture
def make_recipe(app):
    def _make(owner, title='Tomato Pasta', ingredients=None, servings=4):
        recipe = Recipe(
            user_id=owner.id,
            title=title,
            description='',
            ingredients=ingredients if ingredients is not None else [
                {'name': 'Tomato', 'amount': '2', 'unit': 'cups'},
                {'name': 'Pasta', 'amount': '1', 'unit': 'lb'},
            ],
            instructions=[{'stepNumber': 1, 'instruction': 'Cook.'}],
            cooking_time=20,
            servings=servings,
            difficulty='easy',
        )
        db.session.add(recipe)
        db.session.commit()
        return recipe

    return _make


@pytest.fixture
def make_user(app):
    def _make(email='other@example.com', tier='free', **fields):
        user = User(id=email.split('@')[0], email=email, subscription_status=tier, **fields)
        db.session.add(user)
        db.session.commit()
        return user

    return _make
