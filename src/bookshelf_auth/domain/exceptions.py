from .constants import Message


class AuthError(Exception):
    """Base class for every error raised by bookshelf_auth."""
    pass


class AuthenticationError(AuthError):
    """Raised when authentication fails."""
    pass


class AuthorizationError(AuthError):
    """Raised when user lacks required roles."""
    pass


class MalformedHeaderError(AuthenticationError):
    """Raised when the Authorization header is not `Bearer <token>`."""

    def __init__(self, message: str = Message.MALFORMED_HEADER.value) -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed or invalid."""
    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when token structure or claims cannot be read."""
    pass


class InvalidSignatureError(InvalidTokenError):
    """Raised when token signature does not match the configured secret."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when token has expired."""
    pass


class PrincipalNotFoundError(AuthenticationError):
    """Raised when no principal matches the token subject or login uuid."""

    def __init__(self, message: str = Message.PRINCIPAL_NOT_FOUND.value) -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when a password does not match the stored hash."""

    def __init__(self, message: str = Message.WRONG_PASSWORD.value) -> None:
        super().__init__(message)


class InsufficientRoleError(AuthorizationError):
    """Raised when a principal lacks a required role."""

    def __init__(self, message: str = Message.ACCESS_DENIED.value) -> None:
        super().__init__(message)


class ValidationError(AuthError):
    """Raised when required input fields are missing."""

    def __init__(self, message: str = Message.MISSING_CREDENTIALS.value) -> None:
        super().__init__(message)


class DuplicateIdentifierError(AuthError):
    """Raised when an external id is already taken."""

    def __init__(self, message: str = Message.DUPLICATE_UUID.value) -> None:
        super().__init__(message)


class NotFoundError(AuthError):
    """Raised when a looked-up resource does not exist (HTTP 404)."""

    def __init__(self, message: str = Message.PRINCIPAL_NOT_FOUND.value) -> None:
        super().__init__(message)


class AuthenticationRequiredError(AuthenticationError):
    """Raised when a protected resource is reached with no credential at all."""

    def __init__(self, message: str = Message.AUTHENTICATION_REQUIRED.value) -> None:
        super().__init__(message)
