"""Errors raised while synchronising one draft.

Everything deriving from ``SyncError`` is scoped to a single draft and is
caught at the orchestrator boundary. ``UnsupportedResourceTypeError`` is a
configuration error and is allowed to escape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from storesync.config.errors import ConfigurationError

if TYPE_CHECKING:
    from storesync.domain.model import ResourceKind


class SyncError(Exception):
    """Base class for per-draft sync failures."""


class MissingExternalKeyError(SyncError):
    """Raised when a draft has no usable external key."""


class InvalidReferenceKeyError(SyncError):
    """Raised when a reference carries a key that cannot be looked up."""


@dataclass(frozen=True, slots=True)
class ReferenceFailure:
    """One reference field that could not be resolved."""

    field: str
    key: str | None
    reason: str

    def describe(self) -> str:
        return f"{self.field} '{self.key}': {self.reason}"


class ReferenceResolutionError(SyncError):
    """Aggregated reference failures of one draft."""

    def __init__(self, draft_key: str | None, failures: tuple[ReferenceFailure, ...]) -> None:
        self.draft_key = draft_key
        self.failures = failures
        super().__init__("; ".join(failure.describe() for failure in failures))

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(failure.field for failure in self.failures)


class StageError(SyncError):
    """Failure of a store call, carrying the store error as ``cause``."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class FetchError(StageError):
    """Raised when the existing record could not be fetched."""


class CreateError(StageError):
    """Raised when the store rejected a create."""


class UpdateError(StageError):
    """Raised when the store rejected an update."""


class UnsupportedResourceTypeError(ConfigurationError):
    """Raised when no custom-field action builder exists for a record type."""

    def __init__(self, resource: str, kind: ResourceKind | None = None) -> None:
        super().__init__(f"Update actions for resource: '{resource}' is not implemented.")
        self.resource = resource
        self.kind = kind
