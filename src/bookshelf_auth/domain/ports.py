from __future__ import annotations

import time
from typing import Optional, Protocol

from .entities import Principal, TokenClaims


class TokenCodec(Protocol):
    """
    Port for issuing and reading signed bearer tokens.

    Implementations live in the adapters layer (e.g. the PyJWT HS256 codec).
    """

    @property
    def expires_in(self) -> int:
        """Default token lifetime in seconds."""
        ...

    def encode(self, principal: Principal, ttl_seconds: Optional[int] = None) -> str:
        """Sign a claim set for `principal`."""
        ...

    def decode(self, token: str) -> TokenClaims:
        """
        Decode and verify the given token.

        Should:
          - verify signature
          - check expiry and required claims
        Raises:
          - MalformedTokenError
          - InvalidSignatureError
          - TokenExpiredError
        """
        ...


class PrincipalStore(Protocol):
    """Read side of principal persistence, all the authenticator needs."""

    def find_by_external_id(self, external_id: str) -> Optional[Principal]:
        ...

    def find_by_id(self, principal_id: int) -> Optional[Principal]:
        ...


class WritablePrincipalStore(PrincipalStore, Protocol):
    """Principal persistence used by issuance and registration."""

    def save(self, principal: Principal) -> Principal:
        """
        Persist `principal` and return the stored version.

        Assigns `id` on first save. Raises DuplicateIdentifierError when a
        new principal reuses an existing external id.
        """
        ...


class CredentialVerifier(Protocol):
    """Password hashing capability (bcrypt-class, salted)."""

    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        ...


class Clock(Protocol):
    def now(self) -> int:
        """Current Unix time in whole seconds."""
        ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())
