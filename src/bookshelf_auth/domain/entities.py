from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .exceptions import MalformedTokenError
from .value_objects import normalize_roles


@dataclass(frozen=True, slots=True)
class Principal:
    """
    An authenticatable identity (a user of the books/authors API).

    `external_id` is the stable subject written into tokens; `id` is assigned
    by the store on first save and never changes afterwards.
    """
    external_id: str
    credential_hash: str = ""
    roles: FrozenSet[str] = field(default_factory=frozenset)
    id: Optional[int] = None
    last_issued_token: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", normalize_roles(self.roles))

    def __repr__(self) -> str:
        # credential_hash and last_issued_token stay out of reprs and logs
        return (
            f"Principal(id={self.id!r}, external_id={self.external_id!r}, "
            f"roles={self.sorted_roles!r})"
        )

    @property
    def sorted_roles(self) -> List[str]:
        return sorted(self.roles)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def with_roles(self, roles: Iterable[str]) -> "Principal":
        return replace(self, roles=normalize_roles(roles))

    def with_id(self, principal_id: int) -> "Principal":
        return replace(self, id=principal_id)

    def with_last_issued_token(self, token: str) -> "Principal":
        return replace(self, last_issued_token=token)


def _require(claims: Mapping[str, Any], name: str, kind: type | Tuple[type, ...]) -> Any:
    if name not in claims:
        raise MalformedTokenError(f"Missing required claim: {name}")
    value = claims[name]
    # bool is an int subclass; a boolean is never a valid timestamp or id
    if isinstance(value, bool) or not isinstance(value, kind):
        raise MalformedTokenError(f"Invalid type for claim: {name}")
    return value


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Strongly-typed view of the claims carried by a bearer token.

    Wire layout: {"iat": int, "exp": int, "uuid": str, "id": int, "roles": [str, ...]}
    """
    issued_at: int
    expires_at: int
    subject: str
    principal_id: int
    roles: Tuple[str, ...] = ()

    @classmethod
    def for_principal(cls, principal: Principal, *, issued_at: int, ttl_seconds: int) -> "TokenClaims":
        if not principal.external_id:
            raise ValueError("Principal has no external_id")
        if principal.id is None:
            raise ValueError("Principal has no id; save it before issuing a token")
        return cls(
            issued_at=issued_at,
            expires_at=issued_at + ttl_seconds,
            subject=principal.external_id,
            principal_id=principal.id,
            roles=tuple(principal.sorted_roles),
        )

    @classmethod
    def from_mapping(cls, claims: Mapping[str, Any]) -> "TokenClaims":
        """
        Validate a decoded claim bag.

        Raises:
            MalformedTokenError if a required claim is absent or mistyped.
        """
        roles = _require(claims, "roles", list)
        if not all(isinstance(r, str) for r in roles):
            raise MalformedTokenError("Invalid type for claim: roles")

        return cls(
            issued_at=_require(claims, "iat", int),
            expires_at=_require(claims, "exp", int),
            subject=_require(claims, "uuid", str),
            principal_id=_require(claims, "id", int),
            roles=tuple(roles),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "iat": self.issued_at,
            "exp": self.expires_at,
            "uuid": self.subject,
            "id": self.principal_id,
            "roles": list(self.roles),
        }

    def is_expired(self, now: int) -> bool:
        # Inclusive: a token is no longer valid once `now` reaches `exp`.
        return now >= self.expires_at


@dataclass(slots=True)
class AuthenticationResult:
    """
    Outcome of a successful authentication: the freshly resolved principal
    plus the claims it was authenticated with.

    Roles for authorization come from `principal`, never from `claims`.
    """
    principal: Principal
    claims: TokenClaims

    @property
    def external_id(self) -> str:
        return self.principal.external_id

    @property
    def principal_id(self) -> Optional[int]:
        return self.principal.id

    @property
    def roles(self) -> FrozenSet[str]:
        return self.principal.roles


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """A freshly issued token and the principal it was persisted on."""
    token: str
    expires_in: int
    principal: Principal
