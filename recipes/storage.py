from __future__ import annotations

from typing import Iterable, Protocol

from .models import Recipe, User


class RecipeRepository(Protocol):
    """Protocol describing the persistence required by :class:`RecipeService`."""

    def add_recipe(self, recipe: Recipe) -> Recipe:
        """Persist a new recipe and return it with its assigned integer id."""

    def get_recipe(self, recipe_id: int) -> Recipe:
        """Return a single recipe or raise :class:`KeyError` if missing."""

    def update_recipe(self, recipe: Recipe) -> Recipe:
        """Replace the stored recipe that has ``recipe.id``."""

    def delete_recipe(self, recipe_id: int) -> None:
        """Remove a recipe or raise :class:`KeyError` if missing."""

    def find_by_category(self, category: str) -> Iterable[Recipe]:
        """Return recipes whose category equals ``category``, ignoring case."""

    def find_by_name(self, name: str) -> Iterable[Recipe]:
        """Return recipes whose name contains ``name``, ignoring case."""


class UserRepository(Protocol):
    """Credential store used for registration and authentication."""

    def get_user(self, email: str) -> User:
        """Return a user or raise :class:`KeyError` if missing."""

    def add_user(self, user: User) -> None:
        """Persist a new user."""

    def user_exists(self, email: str) -> bool:
        """Return whether ``email`` is already registered."""


__all__ = ["RecipeRepository", "UserRepository"]
