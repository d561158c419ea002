# src/ucp_mcp/resources.py
from __future__ import annotations

import json
from typing import Any, Dict, List

from .context import ServerContext
from .mcp import ResourceNotFound
from .store import DISCOVERY_PROFILE_SPEC, OPENAPI_SPEC, OPENRPC_SPEC

SCHEME = "ucp"
SCHEMA_URI_PREFIX = f"{SCHEME}://schema/"
MIME_JSON = "application/json"

# uri -> (document path, display name, description)
SPEC_RESOURCES: Dict[str, tuple] = {
    f"{SCHEME}://spec/rest-openapi": (
        OPENAPI_SPEC,
        "UCP REST OpenAPI Spec",
        "OpenAPI 3.1 specification for UCP Shopping REST API",
    ),
    f"{SCHEME}://spec/mcp-openrpc": (
        OPENRPC_SPEC,
        "UCP MCP OpenRPC Spec",
        "OpenRPC specification for UCP Shopping MCP interface",
    ),
    f"{SCHEME}://spec/discovery-profile": (
        DISCOVERY_PROFILE_SPEC,
        "UCP Discovery Profile Schema",
        "JSON Schema for merchant discovery profile",
    ),
}


class ResourceCatalog:
    """URI-addressed, read-only view over the same documents the tools serve."""

    def __init__(self, ctx: ServerContext) -> None:
        self._ctx = ctx

    def list_resources(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = [
            {"uri": uri, "name": name, "description": description, "mimeType": MIME_JSON}
            for uri, (_path, name, description) in SPEC_RESOURCES.items()
        ]
        # Listing is capped; reading by URI is not.
        for entry in self._ctx.index.list_all()[: self._ctx.settings.resource_list_limit]:
            out.append({
                "uri": f"{SCHEMA_URI_PREFIX}{entry.name}",
                "name": entry.title or entry.name,
                "description": entry.description or f"UCP schema: {entry.name}",
                "mimeType": MIME_JSON,
            })
        return out

    def read(self, uri: str) -> List[Dict[str, Any]]:
        """Contents for `uri`. Raises ResourceNotFound for anything unknown or missing."""
        if uri in SPEC_RESOURCES:
            doc = self._ctx.store.resolve(SPEC_RESOURCES[uri][0])
        elif uri.startswith(SCHEMA_URI_PREFIX) and len(uri) > len(SCHEMA_URI_PREFIX):
            doc = self._ctx.store.resolve(uri[len(SCHEMA_URI_PREFIX):])
        else:
            raise ResourceNotFound(uri)

        if doc is None:
            raise ResourceNotFound(uri)
        return [{"uri": uri, "mimeType": MIME_JSON, "text": json.dumps(doc, indent=2, ensure_ascii=False)}]
