from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import structlog

from ...domain.entities import Principal
from ...domain.exceptions import InsufficientRoleError
from ...domain.value_objects import AccessRequirement

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class AccessGate:
    """
    Application use case for role-based authorization.

    No hierarchy: ROLE_ADMIN does not imply anything. Every principal holds
    ROLE_USER only because role sets are normalized that way at construction.
    """

    def is_granted(self, principal: Principal, required_role: str) -> bool:
        return required_role in principal.roles

    def _check_requirement(self, principal: Principal, requirement: AccessRequirement) -> None:
        any_of = list(requirement.any_of)
        all_of = list(requirement.all_of)

        if any_of and not any(self.is_granted(principal, r) for r in any_of):
            logger.info("access_denied", principal_id=principal.id, any_of=any_of)
            raise InsufficientRoleError()

        if all_of and not all(self.is_granted(principal, r) for r in all_of):
            logger.info("access_denied", principal_id=principal.id, all_of=all_of)
            raise InsufficientRoleError()

    def execute(
            self,
            principal: Principal,
            requirements: Iterable[AccessRequirement],
    ) -> Principal:
        """
        Raises:
            InsufficientRoleError if any of the requirements are not satisfied.

        Returns:
            The same Principal if authorization succeeds (for chaining).
        """
        for requirement in requirements:
            self._check_requirement(principal, requirement)

        return principal
