import json
from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest

from ucp_mcp.config import Settings
from ucp_mcp.context import ServerContext, build_context
from ucp_mcp.server import build_server

PROFILE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "UCP Discovery Profile",
    "type": "object",
    "required": ["ucp"],
    "properties": {
        "ucp": {
            "type": "object",
            "required": ["version", "capabilities"],
            "properties": {
                "version": {"type": "string"},
                "capabilities": {"type": "array", "items": {"type": "string"}},
            },
        }
    },
}

SCHEMAS = {
    "ucp.json": {"title": "UCP", "description": "Protocol envelope", "type": "object"},
    "capability.json": {"title": "Capability", "type": "object", "properties": {"name": {"type": "string"}}},
    "shopping/checkout.json": {
        "title": "Checkout",
        "type": "object",
        "required": ["line_items", "currency"],
        "properties": {
            "line_items": {"type": "array", "items": {"$ref": "types/line_item.json"}},
            "currency": {"type": "string"},
        },
    },
    "shopping/checkout_resp.json": {"title": "Checkout Response", "type": "object"},
    "shopping/order.json": {"type": "object"},
    "shopping/payment_data.json": {"type": "object"},
    "shopping/fulfillment.json": {"type": "object"},
    "shopping/discount.json": {"type": "object"},
    "shopping/buyer_consent.json": {"type": "object"},
    "shopping/types/line_item.json": {
        "title": "Line Item",
        "type": "object",
        "required": ["id", "quantity"],
        "properties": {"id": {"type": "string"}, "quantity": {"type": "integer", "minimum": 1}},
    },
    "types/event.json": {
        "type": "object",
        "properties": {
            "at": {"type": "string", "format": "date-time"},
            "contact": {"type": "string", "format": "email"},
        },
    },
    "bundle/index.json": {"title": "Bundle", "type": "object"},
}


def _write(path: Path, doc) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc), encoding="utf-8")


@pytest.fixture
def spec_tree(tmp_path) -> Path:
    spec = tmp_path / "spec"
    for rel, doc in SCHEMAS.items():
        _write(spec / "schemas" / rel, doc)
    (spec / "schemas" / "broken.json").write_text("{ not json", encoding="utf-8")

    _write(spec / "services" / "shopping" / "rest.openapi.json", {"openapi": "3.1.0", "info": {"title": "UCP REST"}})
    _write(spec / "services" / "shopping" / "mcp.openrpc.json", {"openrpc": "1.3.2", "info": {"title": "UCP MCP"}})
    _write(spec / "discovery" / "profile_schema.json", PROFILE_SCHEMA)
    _write(tmp_path / "source" / "schemas" / "discovery" / "profile_schema.json", PROFILE_SCHEMA)
    return tmp_path


@pytest.fixture
def settings(spec_tree) -> Settings:
    return Settings(
        spec_dir=spec_tree / "spec",
        schema_dir=spec_tree / "spec" / "schemas",
        source_dir=spec_tree / "source",
        http_timeout_seconds=2.0,
    )


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected outbound request: {request.url}")


@pytest.fixture
def make_ctx(settings) -> Callable[..., ServerContext]:
    built = []

    def factory(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> ServerContext:
        client = httpx.Client(transport=httpx.MockTransport(handler or _unreachable))
        ctx = build_context(settings, http_client=client)
        built.append(ctx)
        return ctx

    yield factory
    for ctx in built:
        ctx.close()


@pytest.fixture
def ctx(make_ctx) -> ServerContext:
    return make_ctx()


@pytest.fixture
def server(ctx):
    return build_server(ctx)


def result_json(result):
    """Decode the JSON text content of a successful tool result."""
    assert result["isError"] is False, result
    return json.loads(result["content"][0]["text"])


def result_text(result) -> str:
    return result["content"][0]["text"]
