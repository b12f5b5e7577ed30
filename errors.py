# errors.py
"""Error taxonomy shared by services and routes.

Every error maps to one HTTP status; ``main.py`` renders them into the
``{"status", "message", "error"}`` envelope.
"""
from typing import Any, Iterable, List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__(f"Bad request: {'/'.join(self.errors)}")


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class CapacityError(AppError):
    status_code = 400
    default_message = "Package is sold out"


class NoChangeError(AppError):
    status_code = 400
    default_message = "No valid changes detected"


class InsertError(AppError):
    status_code = 500
    default_message = "Insert failed"


class UpdateError(NotFoundError):
    default_message = "Update failed"


class InternalError(AppError):
    status_code = 500
