from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipes import create_app
from recipes.models import Recipe, User


class InMemoryRecipeStorage:
    """Simple storage backend used for tests."""

    def __init__(self) -> None:
        self._recipes: dict[int, Recipe] = {}
        self._next_id = 1
        self.writes = 0

    def add_recipe(self, recipe: Recipe) -> Recipe:
        stored = replace(recipe, id=self._next_id)
        self._recipes[stored.id] = stored
        self._next_id += 1
        self.writes += 1
        return stored

    def get_recipe(self, recipe_id: int) -> Recipe:
        return self._recipes[recipe_id]

    def update_recipe(self, recipe: Recipe) -> Recipe:
        if recipe.id not in self._recipes:
            raise KeyError(recipe.id)
        self._recipes[recipe.id] = recipe
        self.writes += 1
        return recipe

    def delete_recipe(self, recipe_id: int) -> None:
        del self._recipes[recipe_id]
        self.writes += 1

    def find_by_category(self, category: str):
        return [r for r in self._recipes.values() if r.category.lower() == category.lower()]

    def find_by_name(self, name: str):
        return [r for r in self._recipes.values() if name.lower() in r.name.lower()]


class InMemoryUserStorage:
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def get_user(self, email: str) -> User:
        return self._users[email]

    def add_user(self, user: User) -> None:
        self._users[user.email] = user

    def user_exists(self, email: str) -> bool:
        return email in self._users


@pytest.fixture
def recipe_storage() -> InMemoryRecipeStorage:
    return InMemoryRecipeStorage()


@pytest.fixture
def user_storage() -> InMemoryUserStorage:
    return InMemoryUserStorage()


@pytest.fixture
def client(recipe_storage, user_storage):
    app = create_app(storage=recipe_storage, users=user_storage)
    app.config.update(TESTING=True)
    return app.test_client()
