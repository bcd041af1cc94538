from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .domain.constants import DEFAULT_TOKEN_TTL_SECONDS


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Token signing + wiring settings.

    Host code decides how to construct this (env, config file, etc.).
    """
    app_secret: str
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    bcrypt_rounds: int = 12

    log_level: str = "INFO"
    log_format: str = "json"

    # JSON file backing the CLI's principal store
    store_path: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"AuthSettings(app_secret='***', token_ttl_seconds={self.token_ttl_seconds}, "
            f"bcrypt_rounds={self.bcrypt_rounds}, log_level={self.log_level!r}, "
            f"log_format={self.log_format!r}, store_path={self.store_path!r})"
        )


def settings_from_env() -> AuthSettings:
    def _positive_int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            raise RuntimeError(f"{key} must be an integer, got {raw!r}") from None
        if value <= 0:
            raise RuntimeError(f"{key} must be positive, got {value}")
        return value

    app_secret = os.getenv("APP_SECRET")
    if not app_secret:
        raise RuntimeError("Missing auth settings: APP_SECRET")

    return AuthSettings(
        app_secret=app_secret,
        token_ttl_seconds=_positive_int("JWT_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS),
        bcrypt_rounds=_positive_int("BCRYPT_ROUNDS", 12),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        log_format=(os.getenv("LOG_FORMAT") or "json").strip().lower(),
        store_path=os.getenv("PRINCIPAL_STORE_PATH") or None,
    )
