"""
core/errors.py -- Domain exception taxonomy for the catalogue.

Stores and the authenticator raise these; api/main.py owns the single
exception handler that turns them into {"message", "code"} JSON bodies.
Every subclass pins its HTTP status and machine-readable code so route
handlers never pick status codes by hand.

Layer rule: core/ is the kernel. No imports from api/, auth/, or catalogue/.
"""


class CatalogueError(Exception):
    """Base class for every error the API reports to a client."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogueError):
    status_code = 400
    code = "validation_error"
    default_message = "Request validation failed."


class ConflictError(CatalogueError):
    """A unique key (e.g. user email) already exists."""

    status_code = 400
    code = "conflict"
    default_message = "Resource already exists."


class AuthError(CatalogueError):
    """Bad email/password pair on login.

    Reported as 400 rather than 401: the client is not presenting a
    credential for an authenticated route, it is submitting a bad form.
    """

    status_code = 400
    code = "bad_credentials"
    default_message = "Invalid email or password."


class Unauthenticated(CatalogueError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required."


class Forbidden(CatalogueError):
    status_code = 403
    code = "forbidden"
    default_message = "Admin access required."


class NotFoundError(CatalogueError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class InternalError(CatalogueError):
    pass
