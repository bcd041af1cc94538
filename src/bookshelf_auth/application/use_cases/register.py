from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import structlog

from ...domain.entities import IssuedToken, Principal
from ...domain.exceptions import DuplicateIdentifierError
from ...domain.ports import CredentialVerifier, WritablePrincipalStore
from .issue_token import IssueTokenUseCase
from .login import read_credentials

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class RegisterPrincipalUseCase:
    """
    Create a principal from `{"uuid", "password", "roles"?}` and issue its
    first token.

    Access control (ROLE_ADMIN) is the caller's job; this use case only
    validates input, rejects duplicates and persists.
    """

    principal_store: WritablePrincipalStore
    credential_verifier: CredentialVerifier
    issue_token: IssueTokenUseCase

    def execute(self, data: Optional[Mapping[str, Any]]) -> IssuedToken:
        """
        Raises:
            ValidationError
            DuplicateIdentifierError
        """
        uuid, password = read_credentials(data)

        if self.principal_store.find_by_external_id(uuid) is not None:
            logger.info("registration_rejected", reason="duplicate_uuid")
            raise DuplicateIdentifierError()

        roles = data.get("roles")
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            roles = []

        principal = self.principal_store.save(
            Principal(
                external_id=uuid,
                credential_hash=self.credential_verifier.hash(password),
                roles=roles,
            )
        )
        logger.info("principal_registered", principal_id=principal.id, roles=principal.sorted_roles)

        return self.issue_token.execute(principal)
