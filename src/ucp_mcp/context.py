# src/ucp_mcp/context.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

import httpx

from .capabilities import CapabilityAggregator
from .config import Settings
from .index import SchemaIndex
from .store import DocumentStore
from .validation import ValidationEngine


@dataclass
class ServerContext:
    """Everything a tool or resource handler needs; built once per server."""
    settings: Settings
    store: DocumentStore
    index: SchemaIndex
    engine: ValidationEngine
    capabilities: CapabilityAggregator
    http: httpx.Client

    def close(self) -> None:
        self.http.close()


def build_context(
    settings: Settings,
    *,
    cache: Optional[MutableMapping[str, Any]] = None,
    http_client: Optional[httpx.Client] = None,
) -> ServerContext:
    store = DocumentStore(settings.schema_dir, settings.spec_dir, settings.source_dir, cache=cache)
    index = SchemaIndex(settings.schema_dir)
    http = http_client or httpx.Client(
        timeout=settings.http_timeout_seconds,
        follow_redirects=True,
        headers={"Accept": "application/json"},
    )
    return ServerContext(
        settings=settings,
        store=store,
        index=index,
        engine=ValidationEngine(store),
        capabilities=CapabilityAggregator(index, store),
        http=http,
    )
