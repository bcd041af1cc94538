from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Type

from graphql import GraphQLError
from starlette.requests import Request
from strawberry.permission import BasePermission
from strawberry.types import Info

from ...config import AuthSettings
from ...domain.constants import Message
from ...domain.entities import AuthenticationResult
from ...domain.exceptions import AuthenticationError, AuthenticationRequiredError, AuthorizationError
from ...domain.ports import WritablePrincipalStore
from ..common.auth_factory import AuthDependencies, create_auth_dependencies


# --------------------------------------------------------------------- #
# Context type used by Strawberry
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryAuthContext:
    """
    Default context type for Strawberry GraphQL.

    You can use this directly, or extend it in your app by adding more fields.
    """
    request: Request
    user: Optional[AuthenticationResult] = None
    extra: Any = None  # host app can put repositories, services, etc. here


# --------------------------------------------------------------------- #
# Main integration: StrawberryAuth
# --------------------------------------------------------------------- #

@dataclass(slots=True)
class StrawberryAuth:
    """
    Strawberry GraphQL integration for bookshelf_auth.

    Built on top of the framework-agnostic `AuthDependencies` facade.

    Responsibilities:
      - provide a `context_getter` for Strawberry's GraphQLRouter
      - provide permission classes you can attach to fields/mutations
    """

    auth: AuthDependencies

    # ----------------------------------------------------------------- #
    # Context getter
    # ----------------------------------------------------------------- #

    def make_context_getter(
        self,
        *,
        optional: bool = True,
        extra_factory: Optional[Callable[[Request, Optional[AuthenticationResult]], Any]] = None,
    ):
        """
        Build an async function compatible with:

            strawberry.fastapi.GraphQLRouter(context_getter=...)

        Args:
            optional:
                - True:   auth errors become `user=None` in context
                - False:  auth errors become GraphQL errors
            extra_factory:
                - Optional callable: (request, user) -> Any, stored on context.extra
        """

        def _context(request: Request, user: Optional[AuthenticationResult]) -> StrawberryAuthContext:
            extra = extra_factory(request, user) if extra_factory else None
            return StrawberryAuthContext(request=request, user=user, extra=extra)

        async def _context_getter(request: Request) -> StrawberryAuthContext:
            authorization = request.headers.get("Authorization")

            try:
                if not self.auth.supports(authorization):
                    raise AuthenticationRequiredError()
                user = self.auth.authenticate(authorization)
            except AuthenticationError as exc:
                if optional:
                    return _context(request, None)
                raise GraphQLError(str(exc)) from exc

            return _context(request, user)

        return _context_getter

    # ----------------------------------------------------------------- #
    # Permission helpers
    # ----------------------------------------------------------------- #

    def require_authenticated(self) -> Type[BasePermission]:
        """
        Permission: user must be authenticated (context.user is not None).
        """

        class _RequireAuthenticated(BasePermission):
            message = Message.AUTHENTICATION_REQUIRED.value

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryAuthContext = info.context
                return ctx.user is not None

        return _RequireAuthenticated

    def require_roles(self, roles: Iterable[str]) -> Type[BasePermission]:
        """
        Permission: user must have ANY of the given roles.

        Example:

            RequireAdmin = strawberry_auth.require_roles(["ROLE_ADMIN"])

            @strawberry.mutation(permission_classes=[RequireAdmin])
            def delete_book(self, info: Info, book_id: int) -> bool:
                ...
        """
        auth = self.auth
        roles_list = list(roles)

        class _RequireRoles(BasePermission):
            message = Message.ACCESS_DENIED.value

            def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
                ctx: StrawberryAuthContext = info.context
                if not ctx.user:
                    self.message = Message.AUTHENTICATION_REQUIRED.value
                    return False

                requirement = auth.require_roles(any_of=roles_list)
                try:
                    auth.authorize(ctx.user.principal, [requirement])
                    return True
                except AuthorizationError as exc:
                    self.message = str(exc)
                    return False

        return _RequireRoles


# --------------------------------------------------------------------- #
# High-level helper
# --------------------------------------------------------------------- #

def create_strawberry_auth(
    *,
    settings: AuthSettings,
    principal_store: WritablePrincipalStore,
) -> StrawberryAuth:
    """
    Convenience helper:

        strawberry_auth = create_strawberry_auth(
            settings=settings_from_env(),
            principal_store=store,
        )
    """
    auth_deps: AuthDependencies = create_auth_dependencies(
        settings=settings,
        principal_store=principal_store,
    )
    return StrawberryAuth(auth=auth_deps)
