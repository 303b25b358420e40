"""
Authentication and registration exceptions.

Raised by the services and the repository; the API layer maps each type to
an HTTP status in ``api.exception_handlers``. ``message`` is shown to the
client verbatim, so it must never carry internals.
"""


class AuthError(Exception):
    """Base exception for all user-facing auth errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class MissingFieldError(AuthError):
    """Raised when a required request-body field is absent or null."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing '{field}' in request body")


class InvalidFieldError(AuthError):
    """Raised when a request-body field is present but has the wrong type."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Invalid '{field}' in request body")


class PasswordPolicyError(AuthError):
    """Raised when a password breaks one of the policy rules."""


class UserNameTakenError(AuthError):
    def __init__(self, user_name: str = ""):
        self.user_name = user_name
        super().__init__("username taken")


class InvalidCredentialsError(AuthError):
    """Raised for an unknown user name or a wrong password.

    Both causes share one message so a caller cannot tell which it was.
    """

    def __init__(self):
        super().__init__("Invalid username or password")


class UserNotFoundError(AuthError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User doesn't exist")


class MissingTokenError(AuthError):
    def __init__(self):
        super().__init__("Missing bearer token")


class InvalidTokenError(AuthError):
    """Raised when a JWT is invalid, expired, or names an unknown user."""

    def __init__(self, message: str = "Unauthorized request"):
        super().__init__(message)


class BackendError(AuthError):
    """Raised when the store or the signer fails unexpectedly."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
