"""
bookshelf_auth

Stateless JWT authentication and role-based authorization for the
books/authors REST API. Clean-architecture core with FastAPI and
Strawberry integrations.
"""

__version__ = "0.1.0"

from .domain.entities import AuthenticationResult, IssuedToken, Principal, TokenClaims
from .domain.constants import DEFAULT_ROLE, Message, ROLE_ADMIN, ROLE_USER
from .domain.exceptions import (
    AuthError,
    AuthenticationError,
    AuthenticationRequiredError,
    AuthorizationError,
    DuplicateIdentifierError,
    InsufficientRoleError,
    InvalidCredentialsError,
    InvalidSignatureError,
    InvalidTokenError,
    MalformedHeaderError,
    MalformedTokenError,
    NotFoundError,
    PrincipalNotFoundError,
    TokenExpiredError,
    ValidationError,
)
from .domain.value_objects import AccessRequirement, normalize_roles, require_roles
from .domain.ports import (
    Clock,
    CredentialVerifier,
    PrincipalStore,
    SystemClock,
    TokenCodec,
    WritablePrincipalStore,
)

from .application.use_cases.authenticate import AuthenticateRequestUseCase, extract_bearer_token
from .application.use_cases.authorize import AccessGate
from .application.use_cases.issue_token import IssueTokenUseCase
from .application.use_cases.login import LoginUseCase
from .application.use_cases.register import RegisterPrincipalUseCase

from .adapters.jwt.codec import HS256TokenCodec
from .adapters.security.bcrypt_hasher import BcryptCredentialVerifier
from .adapters.stores.memory import InMemoryPrincipalStore
from .adapters.stores.json_file import JsonFilePrincipalStore

from .config import AuthSettings, settings_from_env

__all__ = [
    "__version__",
    # domain core
    "Principal",
    "TokenClaims",
    "AuthenticationResult",
    "IssuedToken",
    "AccessRequirement",
    "normalize_roles",
    "require_roles",
    "DEFAULT_ROLE",
    "ROLE_USER",
    "ROLE_ADMIN",
    "Message",
    # ports
    "TokenCodec",
    "PrincipalStore",
    "WritablePrincipalStore",
    "CredentialVerifier",
    "Clock",
    "SystemClock",
    # exceptions
    "AuthError",
    "AuthenticationError",
    "AuthenticationRequiredError",
    "AuthorizationError",
    "MalformedHeaderError",
    "InvalidTokenError",
    "MalformedTokenError",
    "InvalidSignatureError",
    "TokenExpiredError",
    "PrincipalNotFoundError",
    "InvalidCredentialsError",
    "InsufficientRoleError",
    "ValidationError",
    "DuplicateIdentifierError",
    "NotFoundError",
    # use cases
    "AuthenticateRequestUseCase",
    "extract_bearer_token",
    "AccessGate",
    "IssueTokenUseCase",
    "LoginUseCase",
    "RegisterPrincipalUseCase",
    # adapters
    "HS256TokenCodec",
    "BcryptCredentialVerifier",
    "InMemoryPrincipalStore",
    "JsonFilePrincipalStore",
    # config
    "AuthSettings",
    "settings_from_env",
]
