import logging
from typing import Optional

from flask import Flask, abort, jsonify, request

from .accounts import AccountService
from .errors import BadInput, RecipeError
from .models import Recipe, RecipeInput
from .service import RecipeService
from .storage import RecipeRepository, UserRepository

try:
    from .gcp_storage import FirestoreRecipeStorage, FirestoreUserStorage
except ImportError:  # pragma: no cover - allows running tests without optional deps
    FirestoreRecipeStorage = None  # type: ignore[assignment]
    FirestoreUserStorage = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def create_app(
    storage: Optional[RecipeRepository] = None,
    users: Optional[UserRepository] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    storage:
        Optional recipe repository. When ``None`` the application will use
        :class:`FirestoreRecipeStorage` configured through environment variables.
    users:
        Optional credential store. When ``None`` the application will use
        :class:`FirestoreUserStorage` configured through environment variables.
    """

    app = Flask(__name__)

    if storage is None or users is None:
        if FirestoreRecipeStorage is None:
            raise RuntimeError(
                "google-cloud-firestore is not installed. Install optional dependencies "
                "or pass explicit storage backends to create_app."
            )
        storage = storage or FirestoreRecipeStorage.from_env()
        users = users or FirestoreUserStorage.from_env()

    app.config["RECIPE_SERVICE"] = RecipeService(storage)
    app.config["ACCOUNT_SERVICE"] = AccountService(users)

    @app.errorhandler(RecipeError)
    def handle_recipe_error(exc: RecipeError):
        logger.debug("Request to %s failed: %s", request.path, exc)
        return jsonify(error=str(exc)), exc.status_code

    @app.post("/api/register")
    def register():
        accounts: AccountService = app.config["ACCOUNT_SERVICE"]
        body = _json_body()
        accounts.register(_string_field(body, "email"), _string_field(body, "password"))
        return "", 200

    @app.post("/api/recipe/new")
    def add_recipe():
        author = _authenticated_user()
        recipes: RecipeService = app.config["RECIPE_SERVICE"]

        recipe_id = recipes.add_recipe(author, RecipeInput.from_json(request.get_json(silent=True)))
        return jsonify(id=recipe_id)

    @app.get("/api/recipe/search")
    def search_recipes():
        _authenticated_user()
        recipes: RecipeService = app.config["RECIPE_SERVICE"]

        found = recipes.search_recipes(
            category=request.args.get("category"),
            name=request.args.get("name"),
        )
        return jsonify([recipe.to_json() for recipe in found])

    @app.get("/api/recipe/<recipe_id>")
    def get_recipe(recipe_id: str):
        _authenticated_user()
        recipes: RecipeService = app.config["RECIPE_SERVICE"]

        return jsonify(recipes.get_recipe(recipe_id).to_json())

    @app.delete("/api/recipe/<recipe_id>")
    def delete_recipe(recipe_id: str):
        author = _authenticated_user()
        recipes: RecipeService = app.config["RECIPE_SERVICE"]

        recipes.delete_recipe(author, recipe_id)
        return "", 204

    @app.put("/api/recipe/<recipe_id>")
    def update_recipe(recipe_id: str):
        author = _authenticated_user()
        recipes: RecipeService = app.config["RECIPE_SERVICE"]

        recipe_input = RecipeInput.from_json(request.get_json(silent=True))
        recipes.update_recipe(author, recipe_id, recipe_input)
        return "", 204

    def _authenticated_user() -> str:
        accounts: AccountService = app.config["ACCOUNT_SERVICE"]
        auth = request.authorization

        if auth is None or auth.type != "basic":
            abort(_unauthorized())

        email = accounts.authenticate(auth.username, auth.password)
        if email is None:
            logger.info("Rejected credentials for %s", auth.username)
            abort(_unauthorized())
        return email

    return app


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise BadInput("Request body must be a JSON object.")
    return body


def _unauthorized():
    response = jsonify(error="Authentication required.")
    response.status_code = 401
    response.headers["WWW-Authenticate"] = 'Basic realm="recipes"'
    return response


def _string_field(body: dict, key: str) -> Optional[str]:
    value = body.get(key)
    return value if isinstance(value, str) else None


__all__ = ["create_app", "Recipe"]
