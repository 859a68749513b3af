# File: /gridbase/core/exceptions.py | Version: 1.0 | Title: Domain error taxonomy
"""
Errors raised by the crud and query layers.

Each class carries the HTTP status and the stable error code the API reports,
so routers never translate them by hand; ``register_domain_handlers`` in
``gridbase.core.error_handlers`` turns them into JSON responses.
"""
from __future__ import annotations


class GridError(Exception):
    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(GridError):
    status_code = 404
    code = "NOT_FOUND"


class Forbidden(GridError):
    status_code = 403
    code = "FORBIDDEN"


class InvalidReference(GridError):
    """A filter, sort, cell or view names a field/view outside the table."""

    code = "INVALID_REFERENCE"


class InvalidOperator(GridError):
    """Unknown operator, or an operator used without its required value."""

    code = "INVALID_OPERATOR"


class LastViewDeletion(GridError):
    code = "LAST_VIEW_DELETION"


class InvalidCursor(GridError):
    code = "INVALID_CURSOR"


class InvalidViewUpdate(GridError):
    code = "INVALID_VIEW_UPDATE"


class BulkInsertError(GridError):
    status_code = 500
    code = "BULK_INSERT_FAILED"

    def __init__(self, message: str, *, committed: int):
        super().__init__(message)
        self.committed = committed


class Conflict(GridError):
    status_code = 409
    code = "CONFLICT"
