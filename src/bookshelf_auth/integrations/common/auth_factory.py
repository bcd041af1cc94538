from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from ...adapters.jwt.codec import HS256TokenCodec
from ...adapters.security.bcrypt_hasher import BcryptCredentialVerifier
from ...application.use_cases.authenticate import AuthenticateRequestUseCase
from ...application.use_cases.authorize import AccessGate
from ...application.use_cases.issue_token import IssueTokenUseCase
from ...application.use_cases.login import LoginUseCase
from ...application.use_cases.register import RegisterPrincipalUseCase
from ...config import AuthSettings
from ...domain.entities import AuthenticationResult, IssuedToken, Principal
from ...domain.ports import Clock, CredentialVerifier, TokenCodec, WritablePrincipalStore
from ...domain.value_objects import AccessRequirement


@dataclass(slots=True)
class AuthDependencies:
    """
    Framework-agnostic auth facade.

    Integrations (FastAPI, Strawberry, the CLI) adapt this to their own
    dependency / decorator systems.
    """

    auth_use_case: AuthenticateRequestUseCase
    access_gate: AccessGate
    issue_use_case: IssueTokenUseCase
    login_use_case: LoginUseCase
    register_use_case: RegisterPrincipalUseCase
    credential_verifier: CredentialVerifier

    # --- Core operations --------------------------------------------------

    def supports(self, authorization: Optional[str]) -> bool:
        return self.auth_use_case.supports(authorization)

    def authenticate(self, authorization: Optional[str]) -> AuthenticationResult:
        """Authorization header -> AuthenticationResult (or raise auth exceptions)."""
        return self.auth_use_case.execute(authorization)

    def authorize(
            self,
            principal: Principal,
            requirements: Iterable[AccessRequirement],
    ) -> Principal:
        """Check requirements on an already authenticated principal."""
        return self.access_gate.execute(principal, requirements)

    def is_granted(self, principal: Principal, required_role: str) -> bool:
        return self.access_gate.is_granted(principal, required_role)

    def hash_credential(self, plaintext: str) -> str:
        return self.credential_verifier.hash(plaintext)

    def issue(self, principal: Principal) -> IssuedToken:
        return self.issue_use_case.execute(principal)

    def login(self, data: Optional[Mapping[str, Any]]) -> IssuedToken:
        return self.login_use_case.execute(data)

    def register(self, data: Optional[Mapping[str, Any]]) -> IssuedToken:
        return self.register_use_case.execute(data)

    # --- Convenience helper to build requirements -------------------------

    def require_roles(
            self,
            *,
            any_of: Sequence[str] = (),
            all_of: Sequence[str] = (),
    ) -> AccessRequirement:
        return AccessRequirement(any_of=any_of, all_of=all_of)


def create_auth_dependencies(
        *,
        settings: AuthSettings,
        principal_store: WritablePrincipalStore,
        credential_verifier: CredentialVerifier | None = None,
        token_codec: TokenCodec | None = None,
        clock: Clock | None = None,
) -> AuthDependencies:
    """
    High-level factory: settings + store -> AuthDependencies.

    - builds an HS256TokenCodec from the configured secret and TTL
    - builds a bcrypt CredentialVerifier unless one is supplied
    - wires the authenticate / authorize / issue / login / register use cases
    """
    codec: TokenCodec = token_codec or HS256TokenCodec(
        secret=settings.app_secret,
        ttl_seconds=settings.token_ttl_seconds,
        clock=clock,
    )
    verifier: CredentialVerifier = credential_verifier or BcryptCredentialVerifier(
        rounds=settings.bcrypt_rounds,
    )

    issue_uc = IssueTokenUseCase(token_codec=codec, principal_store=principal_store)

    return AuthDependencies(
        auth_use_case=AuthenticateRequestUseCase(
            token_codec=codec,
            principal_store=principal_store,
        ),
        access_gate=AccessGate(),
        issue_use_case=issue_uc,
        login_use_case=LoginUseCase(
            principal_store=principal_store,
            credential_verifier=verifier,
            issue_token=issue_uc,
        ),
        register_use_case=RegisterPrincipalUseCase(
            principal_store=principal_store,
            credential_verifier=verifier,
            issue_token=issue_uc,
        ),
        credential_verifier=verifier,
    )
