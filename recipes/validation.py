"""Stateless input checks shared by the recipe and account services."""

from __future__ import annotations

import re
from typing import Optional

from .models import RecipeInput

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_EMAIL_RE = re.compile(r".+@.+\..+")
MIN_PASSWORD_LENGTH = 8


def validate_integer(value: Optional[str]) -> Optional[int]:
    """Return ``value`` as an int, or ``None`` if it is not a 32-bit integer literal."""

    if value is None or not _INTEGER_RE.fullmatch(value):
        return None
    # No 32-bit value has more than ten significant digits.
    if len(value.lstrip("+-").lstrip("0")) > 10:
        return None
    number = int(value)
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number


def validate_recipe_input(recipe: RecipeInput) -> bool:
    """Check that every text field is non-blank and both lists are non-empty."""

    for text in (recipe.name, recipe.category, recipe.description):
        if _is_blank(text):
            return False

    if not recipe.ingredients:
        return False

    if not recipe.directions:
        return False

    return True


def validate_search_parameters(category: Optional[str], name: Optional[str]) -> bool:
    """Exactly one of ``category`` and ``name`` must be supplied."""

    return (category is None) != (name is None)


def validate_email(email: Optional[str]) -> bool:
    if _is_blank(email):
        return False
    return _EMAIL_RE.fullmatch(email) is not None


def validate_password(password: Optional[str]) -> bool:
    if _is_blank(password):
        return False
    return len(password) >= MIN_PASSWORD_LENGTH


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


__all__ = [
    "validate_integer",
    "validate_recipe_input",
    "validate_search_parameters",
    "validate_email",
    "validate_password",
]
