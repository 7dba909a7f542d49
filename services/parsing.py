"""
Parsing Service

Functions for parsing ingredient amounts and free-text ingredient lines.
Recipe ingredients keep their amount as text ("1 1/2", "½", "2-3"); these
helpers turn that text into numbers when a calculation needs one.
"""

import re
from constants import UNIT_MAPPINGS, NOTE_KEYWORDS, UNICODE_FRACTIONS, COMMON_FRACTIONS


def float_to_fraction(value):
    """Convert float to fraction string for display."""
    if value is None or value == 0:
        return '0'
    # Check if it's a whole number
    if value == int(value):
        return str(int(value))
    # Split into whole and decimal parts
    whole = int(value)
    decimal = value - whole
    # Check common fractions (with tolerance)
    for dec, frac in COMMON_FRACTIONS.items():
        if abs(decimal - dec) < 0.02:
            if whole > 0:
                return f"{whole} {frac}"
            return frac
    # Fall back to decimal
    return f"{value:.2f}".rstrip('0').rstrip('.')


def normalize_fractions(text):
    """Replace Unicode fraction characters with decimal equivalents."""
    # Normalize all whitespace (including non-breaking spaces) to regular spaces
    text = re.sub(r'[\s\u00a0\u2000-\u200b]+', ' ', text)

    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            # Mixed fraction like "1½" or "1 ½"
            pattern = r'(\d+)\s*' + re.escape(char)
            match = re.search(pattern, text)
            if match:
                whole = float(match.group(1))
                text = re.sub(pattern, str(whole + value), text)
            else:
                text = text.replace(char, str(value))
    return text


def _parse_fraction_str(s):
    """Convert fraction string to float. Handles: 1, 1.5, 1/2, 1 1/2, ½, 1½. None if unparseable."""
    s = normalize_fractions(s.strip())

    # Mixed fraction like "1 1/2"
    mixed_match = re.match(r'^(\d+)\s+(\d+)\s*/\s*(\d+)$', s)
    if mixed_match:
        whole = float(mixed_match.group(1))
        num = float(mixed_match.group(2))
        denom = float(mixed_match.group(3))
        return whole + (num / denom) if denom else None

    # Simple fraction like "1/2"
    frac_match = re.match(r'^(\d+)\s*/\s*(\d+)$', s)
    if frac_match:
        num = float(frac_match.group(1))
        denom = float(frac_match.group(2))
        return num / denom if denom else None

    try:
        return float(s)
    except ValueError:
        return None


def parse_amount(value, default=1.0):
    """
    Parse an ingredient amount into a positive float.

    Accepts numbers and text such as '2', '0.5', '1/4', '1 1/2', '1½'.
    Ranges ('2-3') and amounts with trailing words ('2 large') use the
    leading number. Anything unparseable or non-positive gives ``default``.
    """
    if value is None or value == '':
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if value > 0 else default

    text = normalize_fractions(str(value)).strip()
    # Leading quantity: mixed fraction, simple fraction, then plain number
    match = re.match(r'^(\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+\.?\d*|\.\d+)', text)
    if not match:
        return default

    result = _parse_fraction_str(match.group(1))
    if result is None or result <= 0:
        return default
    return result


def parse_ingredient(text):
    """Parse ingredient text like '2 cups flour' into (quantity, unit, name)."""
    text = text.strip()
    if not text:
        return None, None, None

    # Normalize Unicode fractions first (e.g., ½ -> 0.5, 1½ -> 1.5)
    text = normalize_fractions(text)

    # Remove bracketed content
    text = re.sub(r'\s*\([^)]*\)?', '', text)
    text = re.sub(r'\s*\[[^\]]*\]?', '', text)

    # Only remove comma content if it's a note, keep "boneless, skinless"
    comma_match = re.search(r',\s*(.*)$', text)
    if comma_match:
        after_comma = comma_match.group(1).lower()
        if any(keyword in after_comma for keyword in NOTE_KEYWORDS):
            text = re.sub(r',.*$', '', text)

    # Mixed fractions first, then simple fractions, then numbers
    qty_pattern = r'^(\d+\s+\d+\s*/\s*\d+|\d+\s*/\s*\d+|\d+\.?\d*)\s*'
    qty_match = re.match(qty_pattern, text)

    quantity = 1.0
    if qty_match:
        text = text[qty_match.end():].strip()
        quantity = _parse_fraction_str(qty_match.group(1)) or 1.0

    unit = 'EA'
    words = text.split()
    if words:
        first_word = words[0].lower().rstrip('.')
        if first_word in UNIT_MAPPINGS:
            unit = UNIT_MAPPINGS[first_word]
            text = ' '.join(words[1:])

    name = ' '.join(word.capitalize() for word in text.split())

    return quantity, unit, name
