"""Typed pointers between resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enums import ResourceKind


@dataclass(frozen=True, slots=True, kw_only=True)
class Reference:
    """Reference to another resource, either by caller key or by store id.

    A reference is *resolved* once it carries the store ``id``. Unresolved
    references carry the caller-facing ``key`` that resolution looks up.
    """

    type_id: ResourceKind
    id: str | None = None
    key: str | None = None

    @classmethod
    def of_key(cls, type_id: ResourceKind, key: str) -> Reference:
        return cls(type_id=type_id, key=key)

    @classmethod
    def of_id(cls, type_id: ResourceKind, id_: str, *, key: str | None = None) -> Reference:
        return cls(type_id=type_id, id=id_, key=key)

    @property
    def is_resolved(self) -> bool:
        return self.id is not None

    def resolved(self, id_: str) -> Reference:
        """Return a copy of this reference pointing at ``id_``."""
        return Reference(type_id=self.type_id, id=id_, key=self.key)
