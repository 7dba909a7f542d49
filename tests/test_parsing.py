import pytest

from services import (
    float_to_fraction, parse_amount, parse_ingredient, standardize_unit,
    normalize_ingredient_name,
)
from utils import ValidationError, sanitize_text, sanitize_url, sanitize_string_list


@pytest.mark.parametrize('value,expected', [
    ('2', 2.0),
    ('1/4', 0.25),
    ('1 1/2', 1.5),
    ('½', 0.5),
    ('1½', 1.5),
    ('2-3', 2.0),
    ('2 large', 2.0),
    (3, 3.0),
    ('a pinch', 1.0),
    ('0', 1.0),
    (None, 1.0),
])
def test_parse_amount(value, expected):
    assert parse_amount(value) == pytest.approx(expected)


@pytest.mark.parametrize('value,expected', [
    (2.0, '2'),
    (0.5, '1/2'),
    (1.25, '1 1/4'),
    (0.33, '1/3'),
    (1.1, '1.1'),
])
def test_float_to_fraction(value, expected):
    assert float_to_fraction(value) == expected


def test_parse_ingredient_line():
    assert parse_ingredient('1 1/2 cups all-purpose flour (sifted)') == (1.5, 'CUP', 'All-purpose Flour')
    assert parse_ingredient('3 cloves garlic, minced') == (3.0, 'CLOVE', 'Garlic')
    assert parse_ingredient('salt') == (1.0, 'EA', 'Salt')
    assert parse_ingredient('   ') == (None, None, None)


@pytest.mark.parametrize('unit,expected', [
    ('cups', 'CUP'), ('Tbsp.', 'TBSP'), ('LB', 'LB'), ('each', 'EA'), (None, 'EA'), ('handful', 'EA'),
])
def test_standardize_unit(unit, expected):
    assert standardize_unit(unit) == expected


def test_normalize_ingredient_name():
    assert normalize_ingredient_name('2 Fresh Tomatoes') == 'Tomato'
    assert normalize_ingredient_name('scallions') == 'Green Onion'
    assert normalize_ingredient_name('Cheese') == 'Cheese'


def test_sanitize_text():
    assert sanitize_text('  spicy\x00   tuna\n roll ') == 'spicy tuna roll'
    assert sanitize_text(None) == ''
    assert sanitize_text('abcdef', max_length=3) == 'abc'


@pytest.mark.parametrize('url,expected', [
    ('https://images.example.com/a.png', 'https://images.example.com/a.png'),
    ('javascript:alert(1)', ''),
    ('data:image/png;base64,AAAA', ''),
    ('ftp://example.com/a.png', ''),
    (None, ''),
])
def test_sanitize_url(url, expected):
    assert sanitize_url(url) == expected


def test_sanitize_string_list():
    assert sanitize_string_list([' a ', '', 'b'], 'tags') == ['a', 'b']
    with pytest.raises(ValidationError, match='must be an array'):
        sanitize_string_list('a', 'tags')
    with pytest.raises(ValidationError, match='at least one'):
        sanitize_string_list(['  '], 'tags', allow_empty=False)
    with pytest.raises(ValidationError, match='at most'):
        sanitize_string_list(['x'] * 3, 'tags', max_items=2)
