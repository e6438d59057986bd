from __future__ import annotations

import logging
from datetime import datetime
from operator import attrgetter
from typing import Callable, Iterable, List, Optional

from .errors import BadInput, Forbidden, NotFound
from .models import Recipe, RecipeInput
from .storage import RecipeRepository
from .validation import validate_integer, validate_recipe_input, validate_search_parameters

logger = logging.getLogger(__name__)


class RecipeService:
    """Business rules for creating, changing and finding recipes.

    Parameters
    ----------
    repository:
        Store the recipes are read from and written to.
    clock:
        Returns the timestamp stamped on created and updated recipes.
    """

    def __init__(
        self,
        repository: RecipeRepository,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repository = repository
        self._clock = clock

    def add_recipe(self, author: str, recipe_input: RecipeInput) -> int:
        """Validate and store a new recipe, returning its id."""

        if not validate_recipe_input(recipe_input):
            logger.debug("Rejected new recipe from %s: invalid input", author)
            raise BadInput("Recipe input is incomplete.")

        recipe = self._build_recipe(None, author, recipe_input)
        stored = self._repository.add_recipe(recipe)
        logger.info("Recipe %s created by %s", stored.id, author)
        return stored.id

    def get_recipe(self, recipe_id: str) -> Recipe:
        return self._find(self._parse_id(recipe_id))

    def delete_recipe(self, author: str, recipe_id: str) -> None:
        numeric_id = self._parse_id(recipe_id)
        recipe = self._find(numeric_id)
        self._check_owner(author, recipe)

        try:
            self._repository.delete_recipe(numeric_id)
        except KeyError:
            raise NotFound(f"Recipe {numeric_id} does not exist.") from None
        logger.info("Recipe %s deleted by %s", numeric_id, author)

    def update_recipe(self, author: str, recipe_id: str, recipe_input: RecipeInput) -> None:
        """Replace a recipe owned by ``author``.

        Both the id and the payload are checked before the store is consulted,
        so an invalid payload reports :class:`BadInput` even for unknown ids.
        """

        numeric_id = validate_integer(recipe_id)
        if numeric_id is None or not validate_recipe_input(recipe_input):
            logger.debug("Rejected update of recipe %r by %s: invalid input", recipe_id, author)
            raise BadInput("Recipe id or input is invalid.")

        existing = self._find(numeric_id)
        self._check_owner(author, existing)

        self._repository.update_recipe(self._build_recipe(numeric_id, author, recipe_input))
        logger.info("Recipe %s updated by %s", numeric_id, author)

    def search_recipes(
        self, category: Optional[str] = None, name: Optional[str] = None
    ) -> List[Recipe]:
        """Find recipes by exact category or by name fragment, newest first.

        Exactly one of ``category`` and ``name`` must be given. An empty string
        passes that check but matches nothing.
        """

        if not validate_search_parameters(category, name):
            raise BadInput("Search by exactly one of 'category' or 'name'.")

        if category:
            return _newest_first(self._repository.find_by_category(category))

        if name:
            return _newest_first(self._repository.find_by_name(name))

        return []

    def _parse_id(self, recipe_id: str) -> int:
        numeric_id = validate_integer(recipe_id)
        if numeric_id is None:
            raise BadInput(f"Recipe id {recipe_id!r} is not a number.")
        return numeric_id

    def _find(self, recipe_id: int) -> Recipe:
        try:
            return self._repository.get_recipe(recipe_id)
        except KeyError:
            raise NotFound(f"Recipe {recipe_id} does not exist.") from None

    def _check_owner(self, author: str, recipe: Recipe) -> None:
        if author != recipe.author:
            logger.info("%s is not the author of recipe %s", author, recipe.id)
            raise Forbidden(f"Recipe {recipe.id} belongs to another user.")

    def _build_recipe(
        self, recipe_id: Optional[int], author: str, recipe_input: RecipeInput
    ) -> Recipe:
        return Recipe(
            id=recipe_id,
            author=author,
            name=recipe_input.name,
            category=recipe_input.category,
            date=self._clock(),
            description=recipe_input.description,
            ingredients=list(recipe_input.ingredients),
            directions=list(recipe_input.directions),
        )


def _newest_first(recipes: Iterable[Recipe]) -> List[Recipe]:
    ordered = sorted(recipes, key=attrgetter("date"))
    ordered.reverse()
    return ordered


__all__ = ["RecipeService"]
