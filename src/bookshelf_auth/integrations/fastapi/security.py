from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Expose this so apps can plug it into dependencies if they want OpenAPI security
bearer_scheme = HTTPBearer(auto_error=False)


def read_authorization_header(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """
    Return the raw Authorization header value, or None when absent.

    The raw value is preferred over HTTPBearer's parsed credentials because
    the authenticator has to tell "no header" from "header in the wrong
    shape"; HTTPBearer collapses both into None.
    """
    header = request.headers.get("Authorization")
    if header is not None:
        return header

    if credentials is not None:
        return f"{credentials.scheme} {credentials.credentials}"

    return None
