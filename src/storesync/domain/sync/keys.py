"""Extract lookup keys from unresolved references."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .errors import InvalidReferenceKeyError

if TYPE_CHECKING:
    from storesync.domain.model import Reference

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

BLANK_KEY = "Key is blank (null/empty) on the reference."
UUID_KEY_NOT_ALLOWED = (
    "Found a UUID as the reference key. Expecting a key without a UUID value. "
    "If you want to allow UUID values for reference keys, please enable the "
    "allow_uuid_keys sync option."
)


def is_uuid(value: str) -> bool:
    return UUID_PATTERN.match(value) is not None


def key_from_reference(reference: Reference, *, allow_uuid_keys: bool) -> str:
    """Return the key to look up for ``reference``.

    Rejects blank keys, and UUID-shaped keys unless ``allow_uuid_keys`` is
    set: those usually mean a store id was passed where a key was expected.
    """

    key = (reference.key or "").strip()
    if not key:
        raise InvalidReferenceKeyError(BLANK_KEY)
    if not allow_uuid_keys and is_uuid(key):
        raise InvalidReferenceKeyError(UUID_KEY_NOT_ALLOWED)
    return key
