from __future__ import annotations

import json
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from .deps import FastAPIAuthorization
from ...domain.constants import Message, ROLE_ADMIN, ROLE_USER
from ...domain.entities import AuthenticationResult, IssuedToken, Principal
from ...domain.exceptions import InsufficientRoleError, NotFoundError
from ...domain.ports import PrincipalStore

logger = structlog.get_logger(__name__)


async def _read_json(request: Request) -> Optional[Any]:
    # an unreadable body is treated like a missing one -> 400 from the use case
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _principal_body(principal: Principal) -> dict[str, Any]:
    return {
        "id": principal.id,
        "uuid": principal.external_id,
        "roles": principal.sorted_roles,
    }


def _token_body(message: Message, issued: IssuedToken) -> dict[str, Any]:
    return {
        "message": message.value,
        "token": issued.token,
        "expiresIn": issued.expires_in,
    }


def create_user_router(
        fastapi_auth: FastAPIAuthorization,
        principal_store: PrincipalStore,
) -> APIRouter:
    """
    Build the `/api/user` router: login, register, me, lookup by id.
    """
    router = APIRouter(prefix="/api/user", tags=["Utilisateur"])
    auth = fastapi_auth.auth

    @router.post("/register", status_code=status.HTTP_201_CREATED)
    async def register(
            request: Request,
            current: AuthenticationResult | None = Depends(fastapi_auth.get_offered_principal),
    ) -> JSONResponse:
        # checked before the body is even read
        if current is None or not auth.is_granted(current.principal, ROLE_ADMIN):
            logger.info(
                "access_denied",
                route="register",
                principal_id=current.principal_id if current else None,
            )
            raise InsufficientRoleError()

        issued = auth.register(await _read_json(request))
        return JSONResponse(
            _token_body(Message.PRINCIPAL_CREATED, issued),
            status_code=status.HTTP_201_CREATED,
        )

    @router.post("/login")
    async def login(request: Request) -> JSONResponse:
        issued = auth.login(await _read_json(request))
        return JSONResponse(_token_body(Message.LOGIN_SUCCEEDED, issued))

    @router.get("/me")
    async def me(
            current: AuthenticationResult = Depends(fastapi_auth.require_roles(ROLE_USER)),
    ) -> dict[str, Any]:
        return _principal_body(current.principal)

    @router.get("/{user_id}")
    async def get_user_by_id(
            user_id: int,
            current: AuthenticationResult = Depends(fastapi_auth.require_roles(ROLE_ADMIN)),
    ) -> dict[str, Any]:
        principal = principal_store.find_by_id(user_id)
        if principal is None:
            raise NotFoundError()
        return _principal_body(principal)

    return router
