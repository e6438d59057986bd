class RecipeError(Exception):
    """Base class for request outcomes that map onto an HTTP status."""

    status_code = 500


class BadInput(RecipeError):
    status_code = 400


class NotFound(RecipeError):
    status_code = 404


class Forbidden(RecipeError):
    status_code = 403


__all__ = ["RecipeError", "BadInput", "NotFound", "Forbidden"]
