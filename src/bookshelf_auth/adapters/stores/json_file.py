"""
Principal store persisted to a single JSON file.

Used by the command-line token generator, where no database is around.
Writes go to a temp file that is then atomically moved into place.

Every lookup re-reads the file, so separate instances (and processes)
see each other's completed writes. The lock only serializes
read-modify-write within one process: two processes saving at the same
moment can lose one of the writes. Use one writer per file, or a real
database for the server.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from ...domain.entities import Principal
from ...domain.exceptions import DuplicateIdentifierError
from ...domain.ports import WritablePrincipalStore

logger = structlog.get_logger(__name__)


def _to_record(principal: Principal) -> Dict[str, Any]:
    return {
        "id": principal.id,
        "uuid": principal.external_id,
        "password": principal.credential_hash,
        "roles": principal.sorted_roles,
        "jwt_token": principal.last_issued_token,
    }


def _from_record(record: Dict[str, Any]) -> Principal:
    return Principal(
        id=record["id"],
        external_id=record["uuid"],
        credential_hash=record.get("password") or "",
        roles=record.get("roles") or (),
        last_issued_token=record.get("jwt_token"),
    )


class JsonFilePrincipalStore(WritablePrincipalStore):

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # file io
    # ------------------------------------------------------------------ #

    def _load(self) -> List[Principal]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        return [_from_record(r) for r in data.get("users", [])]

    def _dump(self, principals: List[Principal]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"users": [_to_record(p) for p in sorted(principals, key=lambda p: p.id or 0)]}

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".users-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    # ------------------------------------------------------------------ #
    # port implementation
    # ------------------------------------------------------------------ #

    def find_by_external_id(self, external_id: str) -> Optional[Principal]:
        with self._lock:
            return next((p for p in self._load() if p.external_id == external_id), None)

    def find_by_id(self, principal_id: int) -> Optional[Principal]:
        with self._lock:
            return next((p for p in self._load() if p.id == principal_id), None)

    def save(self, principal: Principal) -> Principal:
        with self._lock:
            principals = self._load()
            clash = next((p for p in principals if p.external_id == principal.external_id), None)

            if principal.id is None:
                if clash is not None:
                    raise DuplicateIdentifierError()
                next_id = max((p.id or 0 for p in principals), default=0) + 1
                principal = principal.with_id(next_id)
            elif clash is not None and clash.id != principal.id:
                raise DuplicateIdentifierError()

            principals = [p for p in principals if p.id != principal.id]
            principals.append(principal)
            self._dump(principals)

            logger.debug("principal_saved", principal_id=principal.id, path=str(self.path))
            return principal
