"""Counters and messages accumulated by one sync run."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from storesync.domain.model import ResourceKind

if TYPE_CHECKING:
    from storesync.config.sync import SyncOptions

_PLURALS = {
    ResourceKind.CATEGORY: "categories",
    ResourceKind.INVENTORY_ENTRY: "inventory entries",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncStatistics:
    """Immutable outcome of a finished sync run."""

    kind: ResourceKind
    processed: int = 0
    created: int = 0
    updated: int = 0
    up_to_date: int = 0
    failed: int = 0
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    processing_time_seconds: float = 0.0

    @property
    def report_message(self) -> str:
        noun = _PLURALS.get(self.kind, f"{self.kind.label}s")
        return (
            f"Summary: {self.processed} {noun} were processed in total "
            f"({self.created} created, {self.updated} updated, "
            f"{self.up_to_date} up to date and {self.failed} failed to sync)."
        )


@dataclass(slots=True)
class SyncStatisticsCollector:
    """Mutable accumulator owned by one orchestrator invocation."""

    kind: ResourceKind
    created: int = 0
    updated: int = 0
    up_to_date: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list[str])
    warnings: list[str] = field(default_factory=list[str])
    _started_at: float = field(default_factory=time.perf_counter)

    @property
    def processed(self) -> int:
        return self.created + self.updated + self.up_to_date + self.failed

    def record_created(self) -> None:
        self.created += 1

    def record_updated(self) -> None:
        self.updated += 1

    def record_up_to_date(self) -> None:
        self.up_to_date += 1

    def record_failed(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    def record_warning(self, message: str) -> None:
        self.warnings.append(message)

    def build(self) -> SyncStatistics:
        return SyncStatistics(
            kind=self.kind,
            processed=self.processed,
            created=self.created,
            updated=self.updated,
            up_to_date=self.up_to_date,
            failed=self.failed,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            processing_time_seconds=time.perf_counter() - self._started_at,
        )


class SyncReporter:
    """Routes run messages to the log, the caller callbacks and the statistics."""

    def __init__(self, options: SyncOptions, statistics: SyncStatisticsCollector) -> None:
        self._options = options
        self._statistics = statistics

    def fail(self, message: str, cause: BaseException | None = None) -> None:
        """Report a draft that ended in the failed state."""
        self._statistics.record_failed(message)
        self._options.apply_error_callback(message, cause)

    def error(self, message: str, cause: BaseException | None = None) -> None:
        """Report an error that does not fail the draft."""
        self._statistics.errors.append(message)
        self._options.apply_error_callback(message, cause)

    def warn(self, message: str) -> None:
        self._statistics.record_warning(message)
        self._options.apply_warning_callback(message)
