"""Error taxonomy shared by the stores and the HTTP boundary"""


class DaylogError(Exception):
    """Base class for all expected failures.

    ``public_message`` is what the boundary layer may show to the caller;
    subclasses that wrap internal failures keep it generic.
    """

    status_code: int = 500
    error_code: str = "DAYLOG_ERROR"

    def __init__(self, message: str = "", public_message: str = None):
        super().__init__(message)
        self.message = message
        self.public_message = public_message if public_message is not None else message


class ValidationError(DaylogError):
    """Malformed input. The message names the offending field."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}", public_message=message)
        self.field = field


class ConflictError(DaylogError):
    status_code = 409
    error_code = "CONFLICT"


class AuthError(DaylogError):
    """Bad credentials. Never says whether the username or the password was wrong."""

    status_code = 401
    error_code = "INVALID_CREDENTIALS"

    def __init__(self):
        super().__init__("Invalid credentials")


class AuthRequiredError(DaylogError):
    status_code = 401
    error_code = "AUTH_REQUIRED"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class NotFoundError(DaylogError):
    status_code = 404
    error_code = "NOT_FOUND"


class StorageError(DaylogError):
    """Persistence failure. The caller only ever sees a generic message."""

    status_code = 500
    error_code = "STORAGE_ERROR"

    def __init__(self, message: str):
        super().__init__(message, public_message="Internal server error")
