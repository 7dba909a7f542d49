"""
Input Sanitization Module

Cleans user input before it is stored. Output is JSON consumed by a
client that escapes on render, so text is normalized rather than
HTML-escaped.
"""

import re
from urllib.parse import urlparse

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')


class ValidationError(ValueError):
    """Request data failed validation; the message is safe to show to the client."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


def sanitize_text(text, max_length=10000):
    """
    Normalize a single-line text value.

    Strips control characters, collapses runs of whitespace and truncates
    to max_length. None becomes ''.
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = CONTROL_CHARS.sub('', text)
    text = re.sub(r'\s+', ' ', text).strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_multiline(text, max_length=10000):
    """
    Normalize free text such as notes or descriptions.

    Preserves newlines but strips other control characters.
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = CONTROL_CHARS.sub('', text.replace('\r\n', '\n'))
    text = text.strip()

    if len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_url(url):
    """
    Sanitize a URL by rejecting dangerous schemes.

    Prevents javascript:, data:, vbscript:, and other dangerous URL schemes
    that could execute code when used in href or src attributes.

    Args:
        url: The URL to validate (can be None)

    Returns:
        The URL if safe, empty string if unsafe or invalid
    """
    if not url or not isinstance(url, str):
        return ''

    url = url.strip()

    dangerous_schemes = {
        'javascript', 'data', 'vbscript', 'file',
        'blob', 'about', 'chrome', 'moz-extension'
    }

    try:
        parsed = urlparse(url)
    except ValueError:
        return ''

    # Only allow http and https
    if parsed.scheme.lower() not in ('http', 'https'):
        return ''

    # Additional check for encoded javascript:
    url_lower = url.lower()
    for dangerous in dangerous_schemes:
        if dangerous + ':' in url_lower:
            return ''
        if dangerous.replace('a', '%61') in url_lower:
            return ''

    return url


def sanitize_string_list(values, field, max_items=50, max_length=200, allow_empty=True):
    """
    Validate a JSON list of strings and return the cleaned, non-blank entries.

    Raises ValidationError if values is not a list, holds a non-string, or
    (when allow_empty is False) has no usable entries.
    """
    if not isinstance(values, list):
        raise ValidationError(f"{field} must be an array")
    if len(values) > max_items:
        raise ValidationError(f"{field} may contain at most {max_items} entries")

    cleaned = []
    for value in values:
        if not isinstance(value, str):
            raise ValidationError(f"{field} must contain only strings")
        value = sanitize_text(value, max_length)
        if value:
            cleaned.append(value)

    if not cleaned and not allow_empty:
        raise ValidationError(f"{field} must contain at least one entry")
    return cleaned
