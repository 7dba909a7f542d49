"""
Session Authentication

Resolves the logged-in user from the Flask session and enforces
ownership of per-user rows.
"""

import functools

from flask import abort, g, jsonify, session

from models import db, User


def current_user():
    """User for the session, or None (stale ids are dropped from the session)."""
    user_id = session.get('user_id')
    if not user_id:
        return None
    user = db.session.get(User, user_id)
    if user is None:
        session.pop('user_id', None)
    return user


def login_required(route):
    """Reject the request with 401 unless a user is logged in; sets g.user."""
    @functools.wraps(route)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return jsonify({'message': 'Unauthorized'}), 401
        g.user = user
        return route(*args, **kwargs)

    return wrapper


def get_owned_or_404(model, ident, owner_attr='user_id'):
    """Fetch a row by primary key; 404 if missing, 403 if it belongs to someone else."""
    obj = db.session.get(model, ident)
    if obj is None:
        abort(404, description=f"{model.__name__} not found")
    if getattr(obj, owner_attr) != g.user.id:
        abort(403, description="Access denied")
    return obj
