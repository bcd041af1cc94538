from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

import structlog

from ...domain.entities import Principal
from ...domain.exceptions import DuplicateIdentifierError
from ...domain.ports import WritablePrincipalStore

logger = structlog.get_logger(__name__)


class InMemoryPrincipalStore(WritablePrincipalStore):
    """
    Process-local principal store.

    Principals are immutable, so handing out the stored instance is safe;
    the lock only serializes id assignment and the uniqueness check.
    """

    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[int, Principal] = {}
        self._ids_by_external: Dict[str, int] = {}
        self._next_id = 1

        for principal in principals:
            self.save(principal)

    def find_by_external_id(self, external_id: str) -> Optional[Principal]:
        with self._lock:
            principal_id = self._ids_by_external.get(external_id)
            return self._by_id.get(principal_id) if principal_id is not None else None

    def find_by_id(self, principal_id: int) -> Optional[Principal]:
        with self._lock:
            return self._by_id.get(principal_id)

    def save(self, principal: Principal) -> Principal:
        with self._lock:
            existing_id = self._ids_by_external.get(principal.external_id)

            if principal.id is None:
                if existing_id is not None:
                    raise DuplicateIdentifierError()
                principal = principal.with_id(self._next_id)
                self._next_id += 1
                logger.debug("principal_created", principal_id=principal.id)
            elif existing_id is not None and existing_id != principal.id:
                raise DuplicateIdentifierError()
            else:
                self._next_id = max(self._next_id, principal.id + 1)
                previous = self._by_id.get(principal.id)
                if previous is not None and previous.external_id != principal.external_id:
                    del self._ids_by_external[previous.external_id]

            self._by_id[principal.id] = principal
            self._ids_by_external[principal.external_id] = principal.id
            return principal

    def all(self) -> List[Principal]:
        with self._lock:
            return sorted(self._by_id.values(), key=lambda p: p.id or 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
