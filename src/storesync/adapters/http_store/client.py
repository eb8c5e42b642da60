"""Record store backed by the store's HTTP/JSON API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Unpack
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from storesync.adapters.http_resilience import ResilientClient
from storesync.config.store import StoreConfig, get_store_config
from storesync.domain.model import ResourceKind
from storesync.domain.ports import KeyPredicate, StoreError

from .schema import KeyedPayload, PagedQueryPayload, StoreBaseModel
from .translator import (
    key_field,
    parse_record,
    record_kind,
    resource_path,
    serialize_action,
    serialize_draft,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from storesync.adapters.http_resilience import RequestOptions
    from storesync.config.http_resilience import ResilienceConfig
    from storesync.domain.model import Draft, Record, UpdateAction
    from storesync.domain.ports import RecordStore

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class StoreAPIError(StoreError):
    """Raised when the store answers with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def where_key_in(kind: ResourceKind, predicate: KeyPredicate) -> str:
    keys = ", ".join(_quote(key) for key in predicate.sorted_keys())
    return f"{key_field(kind)} in ({keys})"


@dataclass(slots=True)
class HttpRecordStore:
    """Async ``RecordStore`` speaking the store's JSON API.

    The underlying client is created on first use and bound to the running
    event loop; close the store (or use it as an async context manager)
    before that loop ends.
    """

    config: StoreConfig = field(default_factory=get_store_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False, repr=False)

    async def __aenter__(self) -> HttpRecordStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def lookup_id_by_key(self, kind: ResourceKind, key: str) -> str | None:
        if kind is ResourceKind.INVENTORY_ENTRY:
            record = await self.get_by_key(kind, key)
            return record.id if record is not None else None
        payload = await self._get_by_key_payload(kind, key)
        if payload is None:
            return None
        return self._validate(KeyedPayload, payload).id

    async def get_by_key(self, kind: ResourceKind, key: str) -> Record | None:
        if kind is ResourceKind.INVENTORY_ENTRY:
            records = await self.query_page(kind, KeyPredicate.of([key]), offset=0, limit=1)
            return records[0] if records else None
        payload = await self._get_by_key_payload(kind, key)
        if payload is None:
            return None
        return self._parse_record(kind, payload)

    async def query_page(
        self,
        kind: ResourceKind,
        predicate: KeyPredicate,
        *,
        offset: int,
        limit: int,
    ) -> list[Record]:
        params = httpx.QueryParams(
            {"where": where_key_in(kind, predicate), "limit": limit, "offset": offset}
        )
        payload = await self._request("GET", resource_path(kind), params=params)
        page = self._validate(PagedQueryPayload, payload)
        return [self._parse_record(kind, result) for result in page.results]

    async def create(self, kind: ResourceKind, draft: Draft) -> Record:
        payload = await self._request("POST", resource_path(kind), json=serialize_draft(draft))
        return self._parse_record(kind, payload)

    async def update(self, record: Record, actions: Sequence[UpdateAction]) -> Record:
        kind = record_kind(record)
        body = {
            "version": record.version,
            "actions": [serialize_action(action) for action in actions],
        }
        payload = await self._request("POST", f"{resource_path(kind)}/{record.id}", json=body)
        return self._parse_record(kind, payload)

    async def _get_by_key_payload(self, kind: ResourceKind, key: str) -> object | None:
        url = f"{resource_path(kind)}/key={quote(key, safe='')}"
        try:
            return await self._request("GET", url)
        except StoreAPIError as exc:
            if exc.status_code == httpx.codes.NOT_FOUND:
                return None
            raise

    async def _request(self, method: str, url: str, **kwargs: Unpack[RequestOptions]) -> object:
        client = self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"{method} {url} failed: {exc}") from exc

        if response.is_error:
            message = f"{method} {url} returned {response.status_code}: {response.text[:200]}"
            if response.status_code != httpx.codes.NOT_FOUND:
                log.warning(message)
            raise StoreAPIError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise StoreError(f"{method} {url} returned invalid JSON") from exc

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client

    @staticmethod
    def _validate[M: StoreBaseModel](model: type[M], payload: object) -> M:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise StoreError(f"Unexpected store payload: {exc}") from exc

    @staticmethod
    def _parse_record(kind: ResourceKind, payload: object) -> Record:
        if not isinstance(payload, dict):
            raise StoreError(f"Unexpected {kind.label} payload: {type(payload).__name__}")
        try:
            return parse_record(kind, payload)
        except ValidationError as exc:
            raise StoreError(f"Unexpected {kind.label} payload: {exc}") from exc


if TYPE_CHECKING:
    _store_check: RecordStore = HttpRecordStore()
