class ServiceError(ValueError):
    """Base class for errors raised by the service layer"""

    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    """Missing or invalid input"""

    status_code = 400


class ConflictError(ServiceError):
    """Duplicate slug, or delete blocked by dependent rows"""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class SyncError(ServiceError):
    """Projection failure (main menu / popular products). Logged, never returned to the caller."""

    status_code = 500


class AuthenticationError(ServiceError):
    """Bad credentials or a deactivated account"""

    status_code = 401
