"""
Database Base Module

Creates the SQLAlchemy database instance that all models inherit from.
This is separate to avoid circular imports.
"""

from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

# Create the SQLAlchemy instance
# This will be initialized with the Flask app in app.py
db = SQLAlchemy()


def iso(value):
    """Serialize a datetime for JSON output (None passes through)."""
    return value.isoformat() if value else None


def money(value):
    """Round a stored float amount to cents for JSON output."""
    if value is None:
        return None
    return round(float(value), 2)


def current_time():
    """Wall-clock time used for timestamps and quota rollover."""
    return datetime.now()
