"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .references import Reference

type LocalizedString = dict[str, str]
type JsonValue = object


@dataclass(frozen=True, slots=True, kw_only=True)
class CustomFields:
    """Extensible metadata: a custom type reference plus its field values."""

    type: Reference
    fields: dict[str, JsonValue] = field(default_factory=dict[str, object])


@dataclass(frozen=True, slots=True, kw_only=True)
class Asset:
    """Keyed, ordered media entry attached to a category."""

    key: str
    name: LocalizedString
    sources: tuple[str, ...] = ()
