# src/bookshelf_auth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Tuple

from .constants import DEFAULT_ROLE


def _normalize(values: Iterable[str]) -> Tuple[str, ...]:
    """
    Normalize an iterable of strings into a tuple.
    If a plain string is passed, treat it as a single-element collection.
    """
    if isinstance(values, str):
        return (values,)
    return tuple(values)


def normalize_roles(roles: Iterable[str] | None) -> FrozenSet[str]:
    """
    Collapse duplicates and union in the default role.

    Ordering is irrelevant; callers that need a stable order should sort.
    """
    return frozenset(_normalize(roles or ())) | {DEFAULT_ROLE}


# --- Access value objects --------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccessRequirement:
    """
    Declarative description of a role requirement.

    - any_of:   at least one of these roles must be present (OR)
    - all_of:   all of these roles must be present (AND)

    Both may be combined. An empty requirement is always satisfied.
    """

    any_of: Tuple[str, ...] = ()
    all_of: Tuple[str, ...] = ()

    def __init__(
            self,
            any_of: Iterable[str] | None = None,
            all_of: Iterable[str] | None = None,
    ) -> None:
        object.__setattr__(self, "any_of", _normalize(any_of or ()))
        object.__setattr__(self, "all_of", _normalize(all_of or ()))


def require_roles(*roles: str, any_of: bool = True) -> AccessRequirement:
    if any_of:
        return AccessRequirement(any_of=roles)
    return AccessRequirement(all_of=roles)
