from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional

from .errors import BadInput


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: Optional[int]
    author: str
    name: str
    category: str
    date: datetime
    description: str
    ingredients: List[str] = field(default_factory=list)
    directions: List[str] = field(default_factory=list)

    def to_json(self) -> dict:
        """Public representation; ``id`` and ``author`` are never exposed."""

        return {
            "name": self.name,
            "category": self.category,
            "date": self.date.isoformat(),
            "description": self.description,
            "ingredients": list(self.ingredients),
            "directions": list(self.directions),
        }


@dataclass
class RecipeInput:
    """Recipe fields as supplied by a caller. Absent fields are ``None``."""

    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    ingredients: Optional[List[str]] = None
    directions: Optional[List[str]] = None

    @classmethod
    def from_json(cls, data: Any) -> "RecipeInput":
        """Build an input from a decoded JSON body.

        Server-managed keys such as ``id``, ``author`` and ``date`` are ignored.
        Raises :class:`BadInput` when the body is not an object or a field has
        the wrong type.
        """

        if not isinstance(data, Mapping):
            raise BadInput("Recipe payload must be a JSON object.")

        return cls(
            name=_optional_str(data, "name"),
            category=_optional_str(data, "category"),
            description=_optional_str(data, "description"),
            ingredients=_optional_str_list(data, "ingredients"),
            directions=_optional_str_list(data, "directions"),
        )


@dataclass
class User:
    """Registered account. ``password`` holds the hash, never the plain text."""

    email: str
    password: str
    role: str = "ROLE_USER"


def _optional_str(data: Mapping, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise BadInput(f"Field '{key}' must be a string.")


def _optional_str_list(data: Mapping, key: str) -> Optional[List[str]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise BadInput(f"Field '{key}' must be a list of strings.")
    return list(value)


__all__ = ["Recipe", "RecipeInput", "User"]
