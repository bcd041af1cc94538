from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .deps import FastAPIAuthorization
from .errors import install_error_handlers
from .routes import create_user_router
from ..common.auth_factory import AuthDependencies, create_auth_dependencies
from ...adapters.stores.json_file import JsonFilePrincipalStore
from ...adapters.stores.memory import InMemoryPrincipalStore
from ...config import AuthSettings, settings_from_env
from ...domain.ports import Clock, CredentialVerifier, WritablePrincipalStore
from ...logging_config import setup_logging


def create_app(
    settings: Optional[AuthSettings] = None,
    *,
    principal_store: Optional[WritablePrincipalStore] = None,
    credential_verifier: Optional[CredentialVerifier] = None,
    clock: Optional[Clock] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Application factory.

    Settings default to the environment. The store defaults to a JSON file
    when `store_path` is configured, otherwise to an in-memory store.
    """
    settings = settings or settings_from_env()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)

    if principal_store is None:
        principal_store = (
            JsonFilePrincipalStore(settings.store_path)
            if settings.store_path
            else InMemoryPrincipalStore()
        )

    auth: AuthDependencies = create_auth_dependencies(
        settings=settings,
        principal_store=principal_store,
        credential_verifier=credential_verifier,
        clock=clock,
    )
    fastapi_auth = FastAPIAuthorization(auth=auth)

    app = FastAPI(title="Bookshelf API")
    app.state.auth = auth
    app.state.fastapi_auth = fastapi_auth
    app.state.principal_store = principal_store

    install_error_handlers(app)
    app.include_router(create_user_router(fastapi_auth, principal_store))
    return app
