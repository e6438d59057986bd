from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .models import Recipe, User
from .storage import RecipeRepository, UserRepository


RECIPE_COUNTER = "recipe_id"


def _next_id(transaction: firestore.Transaction, counter_ref: firestore.DocumentReference) -> int:
    snapshot = counter_ref.get(transaction=transaction)
    current = (snapshot.to_dict() or {}).get("value", 0) if snapshot.exists else 0
    next_id = current + 1
    transaction.set(counter_ref, {"value": next_id})
    return next_id


_allocate_id = firestore.transactional(_next_id)


class FirestoreRecipeStorage(RecipeRepository):
    """Recipe storage backed by a Firestore collection.

    Documents are keyed by the decimal recipe id. Ids come from a counter
    document updated inside a transaction, so they are unique and increasing.
    """

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "recipes",
        counters_collection: str = "counters",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)
        self._counter_ref = self._firestore_client.collection(counters_collection).document(
            RECIPE_COUNTER
        )

    @classmethod
    def from_env(cls) -> "FirestoreRecipeStorage":
        """Build a storage instance from environment variables."""

        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("RECIPES_COLLECTION", "recipes")
        counters_collection = os.environ.get("COUNTERS_COLLECTION", "counters")
        return cls(
            project=project,
            collection_name=collection_name,
            counters_collection=counters_collection,
        )

    def add_recipe(self, recipe: Recipe) -> Recipe:
        transaction = self._firestore_client.transaction()
        recipe_id = _allocate_id(transaction, self._counter_ref)

        stored = Recipe(
            id=recipe_id,
            author=recipe.author,
            name=recipe.name,
            category=recipe.category,
            date=recipe.date,
            description=recipe.description,
            ingredients=list(recipe.ingredients),
            directions=list(recipe.directions),
        )
        self._collection.document(str(recipe_id)).set(self._recipe_to_doc(stored))
        return stored

    def get_recipe(self, recipe_id: int) -> Recipe:
        snapshot = self._collection.document(str(recipe_id)).get()

        if not snapshot.exists:
            raise KeyError(f"Recipe '{recipe_id}' does not exist.")

        return self._doc_to_recipe(snapshot.id, snapshot.to_dict() or {})

    def update_recipe(self, recipe: Recipe) -> Recipe:
        doc_ref = self._collection.document(str(recipe.id))
        if not doc_ref.get().exists:
            raise KeyError(f"Recipe '{recipe.id}' does not exist.")

        doc_ref.set(self._recipe_to_doc(recipe))
        return recipe

    def delete_recipe(self, recipe_id: int) -> None:
        doc_ref = self._collection.document(str(recipe_id))

        if not doc_ref.get().exists:
            raise KeyError(f"Recipe '{recipe_id}' does not exist.")

        doc_ref.delete()

    def find_by_category(self, category: str) -> Iterable[Recipe]:
        query = self._collection.where(filter=FieldFilter("category_lower", "==", category.lower()))
        return [self._doc_to_recipe(doc.id, doc.to_dict() or {}) for doc in query.stream()]

    def find_by_name(self, name: str) -> Iterable[Recipe]:
        # Firestore has no substring operator; filter the lowered names locally.
        needle = name.lower()
        matches: List[Recipe] = []
        for doc in self._collection.stream():
            data = doc.to_dict() or {}
            if needle in data.get("name_lower", ""):
                matches.append(self._doc_to_recipe(doc.id, data))
        return matches

    def _recipe_to_doc(self, recipe: Recipe) -> dict:
        return {
            "author": recipe.author,
            "name": recipe.name,
            "name_lower": recipe.name.lower(),
            "category": recipe.category,
            "category_lower": recipe.category.lower(),
            "date": recipe.date,
            "description": recipe.description,
            "ingredients": list(recipe.ingredients),
            "directions": list(recipe.directions),
        }

    def _doc_to_recipe(self, doc_id: str, data: dict) -> Recipe:
        date = data.get("date")
        if not isinstance(date, datetime):
            date = datetime.min.replace(tzinfo=timezone.utc)

        return Recipe(
            id=int(doc_id),
            author=data.get("author", ""),
            name=data.get("name", ""),
            category=data.get("category", ""),
            date=date,
            description=data.get("description", ""),
            ingredients=list(data.get("ingredients") or []),
            directions=list(data.get("directions") or []),
        )


class FirestoreUserStorage(UserRepository):
    """Credential store keeping one document per email address."""

    def __init__(
        self,
        *,
        project: Optional[str] = None,
        collection_name: str = "users",
        client: Optional[firestore.Client] = None,
    ) -> None:
        self._firestore_client = client or firestore.Client(project=project)
        self._collection = self._firestore_client.collection(collection_name)

    @classmethod
    def from_env(cls) -> "FirestoreUserStorage":
        project = os.environ.get("GCP_PROJECT")
        collection_name = os.environ.get("USERS_COLLECTION", "users")
        return cls(project=project, collection_name=collection_name)

    def get_user(self, email: str) -> User:
        snapshot = self._collection.document(email).get()

        if not snapshot.exists:
            raise KeyError(f"User '{email}' does not exist.")

        data = snapshot.to_dict() or {}
        return User(email=snapshot.id, password=data.get("password", ""), role=data.get("role", ""))

    def add_user(self, user: User) -> None:
        self._collection.document(user.email).set({"password": user.password, "role": user.role})

    def user_exists(self, email: str) -> bool:
        return self._collection.document(email).get().exists


__all__ = ["FirestoreRecipeStorage", "FirestoreUserStorage"]
