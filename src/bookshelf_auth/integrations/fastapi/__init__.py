from __future__ import annotations

from .app import create_app
from .deps import FastAPIAuthorization
from .errors import error_response, install_error_handlers
from .routes import create_user_router
from .security import bearer_scheme, read_authorization_header

__all__ = [
    "FastAPIAuthorization",
    "bearer_scheme",
    "create_app",
    "create_user_router",
    "error_response",
    "install_error_handlers",
    "read_authorization_header",
]
