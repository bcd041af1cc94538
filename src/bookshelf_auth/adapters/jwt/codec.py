from typing import Optional

import jwt
from jwt.exceptions import (
    DecodeError,
    InvalidSignatureError as JWTInvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
)

from ...domain.constants import DEFAULT_TOKEN_TTL_SECONDS, TOKEN_ALGORITHM
from ...domain.entities import Principal, TokenClaims
from ...domain.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from ...domain.ports import Clock, SystemClock, TokenCodec


class HS256TokenCodec(TokenCodec):
    """
    Adapter implementing TokenCodec port using PyJWT and a shared HMAC secret.

    Infrastructure layer:
    - Knows about JWT structure, signing and verification.
    - Owns the secret; it is injected once and never changes.

    Expiry is checked here against the injected clock rather than by PyJWT,
    so that tests can pin "now". The check is inclusive (`now >= exp`), the
    same boundary PyJWT applies by default.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Optional[Clock] = None,
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be a positive integer")

        self._secret = secret
        self._ttl = ttl_seconds
        self._clock = clock or SystemClock()

    @property
    def expires_in(self) -> int:
        return self._ttl

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def encode(self, principal: Principal, ttl_seconds: Optional[int] = None) -> str:
        ttl = self._ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError("ttl_seconds must be a positive integer")

        claims = TokenClaims.for_principal(
            principal,
            issued_at=self._clock.now(),
            ttl_seconds=ttl,
        )
        return jwt.encode(claims.to_payload(), self._secret, algorithm=TOKEN_ALGORITHM)

    def decode(self, token: str) -> TokenClaims:
        """
        Decode and validate JWT token.

        Returns:
            TokenClaims

        Raises:
            MalformedTokenError
            InvalidSignatureError
            TokenExpiredError
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except JWTInvalidSignatureError as exc:
            raise InvalidSignatureError(f"Signature verification failed: {exc}") from exc
        except (DecodeError, JWTInvalidTokenError) as exc:
            raise MalformedTokenError(f"Malformed token: {exc}") from exc

        claims = TokenClaims.from_mapping(payload)

        if claims.is_expired(self._clock.now()):
            raise TokenExpiredError("Token has expired")

        return claims
