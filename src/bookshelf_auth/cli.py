# src/bookshelf_auth/cli.py

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

import structlog

from .adapters.stores.json_file import JsonFilePrincipalStore
from .config import settings_from_env
from .domain.constants import ASSIGNABLE_ROLES, ROLE_USER
from .domain.entities import Principal
from .domain.exceptions import AuthError
from .integrations.common.auth_factory import create_auth_dependencies
from .logging_config import setup_logging

logger = structlog.get_logger(__name__)

DEFAULT_STORE_PATH = "var/users.json"


class CommandError(Exception):
    """A user-facing CLI failure; printed as `{"ok": false, "error": ...}`."""


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bookshelf-auth",
        description="Bookshelf API authentication tooling",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser(
        "generate-token",
        help="Issue a JWT for a user, optionally creating the user first",
    )
    gen.add_argument("uuid", nargs="?", help="External identifier of the user")
    gen.add_argument(
        "password",
        nargs="?",
        help="Password (required only when the user is created)",
    )
    gen.add_argument(
        "--create",
        "-c",
        action="store_true",
        help="Create the user if it does not exist.",
    )
    gen.add_argument(
        "--role",
        "-r",
        default=ROLE_USER,
        help=f"Role given to a created user ({' or '.join(ASSIGNABLE_ROLES)}).",
    )
    gen.add_argument(
        "--store",
        help="JSON principal store path "
             f"(default: env PRINCIPAL_STORE_PATH, then {DEFAULT_STORE_PATH}).",
    )

    return parser.parse_args(args=argv)


def generate_token(args: argparse.Namespace) -> dict[str, Any]:
    if args.role not in ASSIGNABLE_ROLES:
        raise CommandError(f"role must be one of {', '.join(ASSIGNABLE_ROLES)}")
    if not args.uuid:
        raise CommandError("uuid is required")

    settings = settings_from_env()
    setup_logging(settings.log_level, settings.log_format)

    store = JsonFilePrincipalStore(args.store or settings.store_path or DEFAULT_STORE_PATH)
    auth = create_auth_dependencies(settings=settings, principal_store=store)

    principal = store.find_by_external_id(args.uuid)
    created = False

    if principal is None:
        if not args.create:
            raise CommandError(
                f"user {args.uuid!r} does not exist; pass --create to create it"
            )
        if not args.password:
            raise CommandError("password is required to create a user")

        principal = store.save(
            Principal(
                external_id=args.uuid,
                credential_hash=auth.hash_credential(args.password),
                roles=[args.role],
            )
        )
        created = True
        logger.info("principal_registered", principal_id=principal.id, source="cli")

    issued = auth.issue(principal)

    return {
        "created": created,
        "uuid": issued.principal.external_id,
        "id": issued.principal.id,
        "roles": issued.principal.sorted_roles,
        "expiresIn": issued.expires_in,
        "token": issued.token,
        "usage": f"Authorization: Bearer {issued.token}",
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        if args.command == "generate-token":
            summary = generate_token(args)
        else:  # pragma: no cover - argparse enforces the choices
            raise CommandError(f"unknown command {args.command!r}")
    except (CommandError, AuthError, RuntimeError) as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
        return 1

    json.dump({"ok": True, **summary}, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
