from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog

from ...domain.entities import IssuedToken, Principal
from ...domain.ports import TokenCodec, WritablePrincipalStore

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class IssueTokenUseCase:
    """
    Encode a token for a principal and persist it as `last_issued_token`
    before handing it back. The stored copy is for observability only;
    validation never looks at it.

    The principal is re-read by id first, so only `last_issued_token`
    changes and roles updated since the caller's read are kept.
    """

    token_codec: TokenCodec
    principal_store: WritablePrincipalStore

    def execute(self, principal: Principal, ttl_seconds: Optional[int] = None) -> IssuedToken:
        if principal.id is not None:
            principal = self.principal_store.find_by_id(principal.id) or principal

        token = self.token_codec.encode(principal, ttl_seconds)
        saved = self.principal_store.save(principal.with_last_issued_token(token))

        expires_in = self.token_codec.expires_in if ttl_seconds is None else ttl_seconds
        logger.info("token_issued", principal_id=saved.id, expires_in=expires_in)
        return IssuedToken(token=token, expires_in=expires_in, principal=saved)
