"""
Error taxonomy shared by the service modules.
Routes never build HTTP errors themselves; main.py maps these to responses.
"""


class BlogError(Exception):
    status_code = 500

    def __init__(self, message: str = None):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(BlogError):
    """Malformed, missing or oversized input."""
    status_code = 400


class ReferentialError(ValidationError):
    """Input references rows that do not exist (e.g. unknown tag ids)."""


class UnauthenticatedError(BlogError):
    status_code = 401


class ForbiddenError(BlogError):
    status_code = 403


class NotFoundError(BlogError):
    status_code = 404


class ConflictError(BlogError):
    status_code = 409


class StoreError(BlogError):
    """Persistence failure not otherwise classified."""
    status_code = 500
