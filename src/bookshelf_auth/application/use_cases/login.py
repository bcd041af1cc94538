from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import structlog

from ...domain.entities import IssuedToken
from ...domain.exceptions import (
    InvalidCredentialsError,
    PrincipalNotFoundError,
    ValidationError,
)
from ...domain.ports import CredentialVerifier, PrincipalStore
from .issue_token import IssueTokenUseCase

logger = structlog.get_logger(__name__)


def read_credentials(data: Optional[Mapping[str, Any]]) -> tuple[str, str]:
    """
    Pull `uuid` and `password` out of a request body.

    Raises:
        ValidationError if either is absent, not a string, or blank.
    """
    if not isinstance(data, Mapping):
        raise ValidationError()

    uuid = data.get("uuid")
    password = data.get("password")
    if not isinstance(uuid, str) or not isinstance(password, str):
        raise ValidationError()
    if not uuid.strip() or not password.strip():
        raise ValidationError()
    return uuid, password


@dataclass(slots=True)
class LoginUseCase:
    principal_store: PrincipalStore
    credential_verifier: CredentialVerifier
    issue_token: IssueTokenUseCase

    def execute(self, data: Optional[Mapping[str, Any]]) -> IssuedToken:
        """
        Raises:
            ValidationError
            PrincipalNotFoundError
            InvalidCredentialsError
        """
        uuid, password = read_credentials(data)

        principal = self.principal_store.find_by_external_id(uuid)
        if principal is None:
            logger.info("login_failed", reason="principal_not_found")
            raise PrincipalNotFoundError()

        if not self.credential_verifier.verify(password, principal.credential_hash):
            logger.info("login_failed", reason="wrong_password", principal_id=principal.id)
            raise InvalidCredentialsError()

        return self.issue_token.execute(principal)
