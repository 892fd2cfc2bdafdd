"""
Taskboard-specific exception types for better error handling

Every error carries the HTTP status the API layer renders it with.
"""


class TaskboardError(Exception):
    """Base exception for all Taskboard errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    """Malformed or missing required field"""
    status_code = 400


class UnauthorizedError(TaskboardError):
    """Missing, invalid or expired credentials"""
    status_code = 401


class ForbiddenError(TaskboardError):
    """Authenticated, but the caller's role or relationship is insufficient"""
    status_code = 403


class NotFoundError(TaskboardError):
    """Referenced entity does not exist"""
    status_code = 404


class ConflictError(TaskboardError):
    """Duplicate value for a unique field"""
    status_code = 409


class StoreError(TaskboardError):
    """Document store failure"""
    status_code = 500
