from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

import structlog

from ...domain.constants import Message
from ...domain.entities import AuthenticationResult
from ...domain.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    MalformedHeaderError,
    PrincipalNotFoundError,
    TokenExpiredError,
)
from ...domain.ports import PrincipalStore, TokenCodec

logger = structlog.get_logger(__name__)

_BEARER_RE = re.compile(r"Bearer\s+(.+)", re.IGNORECASE)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an `Authorization: Bearer <token>` header value.

    Raises:
        MalformedHeaderError
    """
    match = _BEARER_RE.search(authorization or "")
    if not match or not match.group(1).strip():
        raise MalformedHeaderError()
    return match.group(1).strip()


@dataclass(slots=True)
class AuthenticateRequestUseCase:
    """
    Application use case:
    - Decide whether a request carries a credential at all (`supports`)
    - Decode the bearer token via TokenCodec port
    - Re-resolve the principal from the store

    Framework-agnostic. Nothing is written during authentication; the roles
    used for later authorization are the store's current ones, not the
    snapshot embedded in the token.
    """

    token_codec: TokenCodec
    principal_store: PrincipalStore

    def supports(self, authorization: Optional[str]) -> bool:
        """True iff a credential-bearing header was sent (even an empty one)."""
        return authorization is not None

    def execute(self, authorization: Optional[str]) -> AuthenticationResult:
        """
        Authenticate an Authorization header value.

        Raises:
            MalformedHeaderError
            TokenExpiredError
            InvalidTokenError
            PrincipalNotFoundError
            AuthenticationError
        """
        try:
            token = extract_bearer_token(authorization)
        except MalformedHeaderError:
            logger.info("authentication_failed", reason="malformed_header")
            raise

        try:
            claims = self.token_codec.decode(token)
        except TokenExpiredError as exc:
            logger.info("authentication_failed", reason="expired")
            raise TokenExpiredError(Message.TOKEN_EXPIRED.value) from exc
        except InvalidTokenError as exc:
            logger.info("authentication_failed", reason=type(exc).__name__)
            raise type(exc)(f"{Message.INVALID_TOKEN_PREFIX.value}: {exc}") from exc
        except Exception as exc:
            # Wrap unexpected errors in a generic AuthenticationError
            logger.warning("authentication_failed", reason="unexpected", error=str(exc))
            raise AuthenticationError(f"{Message.INVALID_TOKEN_PREFIX.value}: {exc}") from exc

        principal = self.principal_store.find_by_external_id(claims.subject)
        if principal is None:
            logger.info("authentication_failed", reason="principal_not_found")
            raise PrincipalNotFoundError()

        logger.debug("authenticated", principal_id=principal.id)
        return AuthenticationResult(principal=principal, claims=claims)
