# Utility modules for Recipe App
from .sanitizer import (
    ValidationError, sanitize_text, sanitize_multiline,
    sanitize_url, sanitize_string_list
)
from .auth import current_user, login_required, get_owned_or_404
