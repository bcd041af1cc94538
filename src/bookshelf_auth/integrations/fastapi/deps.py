from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from .security import bearer_scheme, read_authorization_header
from ..common.auth_factory import AuthDependencies
from ...domain.entities import AuthenticationResult
from ...domain.exceptions import AuthenticationError, AuthenticationRequiredError


@dataclass(slots=True)
class FastAPIAuthorization:
    """
    FastAPI integration for bookshelf_auth, built on top of the
    framework-agnostic AuthDependencies facade.

    Dependencies raise domain errors; `install_error_handlers` turns them
    into `{"error": ...}` responses (401 / 403).
    """

    auth: AuthDependencies

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_current_principal(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> AuthenticationResult:
        """Dependency: Require authentication."""
        authorization = read_authorization_header(request, credentials)
        if not self.auth.supports(authorization):
            raise AuthenticationRequiredError()
        return self.auth.authenticate(authorization)

    async def get_offered_principal(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> AuthenticationResult | None:
        """
        Dependency: authenticate only if a credential was offered.

        No header -> None (the handler decides). A header that fails
        authentication is still rejected with 401.
        """
        authorization = read_authorization_header(request, credentials)
        if not self.auth.supports(authorization):
            return None
        return self.auth.authenticate(authorization)

    async def get_optional_principal(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> AuthenticationResult | None:
        """Dependency: Optional authentication, bad credentials count as anonymous."""
        authorization = read_authorization_header(request, credentials)
        if not self.auth.supports(authorization):
            return None

        try:
            return self.auth.authenticate(authorization)
        except AuthenticationError:
            return None

    # ------------------------------------------------------------------ #
    # Authorization dependency factory
    # ------------------------------------------------------------------ #

    def require_roles(self, *roles: str, any_of: bool = True) -> Callable:
        """
        Dependency factory: require any (default) or all of the given roles.
        """
        requirement = (
            self.auth.require_roles(any_of=roles)
            if any_of
            else self.auth.require_roles(all_of=roles)
        )

        async def dependency(
                result: AuthenticationResult = Depends(self.get_current_principal),
        ) -> AuthenticationResult:
            self.auth.authorize(result.principal, [requirement])
            return result

        return dependency
