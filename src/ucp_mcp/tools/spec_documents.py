# src/ucp_mcp/tools/spec_documents.py
from __future__ import annotations

from typing import Any, Dict

from ..context import ServerContext
from ..mcp import error_result, json_result


def make_handler(ctx: ServerContext, path: str):
    """Handler returning one fixed document from the spec tree."""
    def handler(_args: Dict[str, Any]) -> Dict[str, Any]:
        doc = ctx.store.resolve(path)
        if doc is None:
            return error_result(f"Spec document '{path}' not found")
        return json_result(doc)
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {}
}
