"""Custom exceptions for the application."""


class BaseAPIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = None,
        details: dict = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseAPIException):
    """Malformed input, e.g. a password below the minimum length."""

    def __init__(self, message: str = "Validation failed", details: dict = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details
        )


class AlreadyExistsError(BaseAPIException):
    """Email collision on register, profile update or bootstrap."""

    def __init__(self, message: str = "User already exists", details: dict = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="ALREADY_EXISTS",
            details=details
        )


class InvalidCredentialsError(BaseAPIException):
    """Wrong email or wrong password.

    The message never says which of the two was wrong.
    """

    def __init__(self, message: str = "Invalid email or password", details: dict = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="INVALID_CREDENTIALS",
            details=details
        )


class UnauthenticatedError(BaseAPIException):
    """No valid session where one is required."""

    def __init__(self, message: str = "Authentication required", details: dict = None):
        super().__init__(
            message=message,
            status_code=401,
            error_code="UNAUTHENTICATED",
            details=details
        )


class ForbiddenError(BaseAPIException):
    """Valid session with insufficient role."""

    def __init__(self, message: str = "Insufficient permissions", details: dict = None):
        super().__init__(
            message=message,
            status_code=403,
            error_code="FORBIDDEN",
            details=details
        )


class NotFoundError(BaseAPIException):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details
        )


class StorageUnavailableError(BaseAPIException):
    """User directory unreachable or failing."""

    def __init__(self, message: str = "Service temporarily unavailable", details: dict = None):
        super().__init__(
            message=message,
            status_code=503,
            error_code="STORAGE_UNAVAILABLE",
            details=details
        )
