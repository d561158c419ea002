# src/ucp_mcp/tools/list_schemas.py
from __future__ import annotations

from typing import Any, Dict

from ..context import ServerContext
from ..mcp import json_result


def make_handler(ctx: ServerContext):
    def handler(args: Dict[str, Any]) -> Dict[str, Any]:
        entries = ctx.index.filter(args.get("category"))
        return json_result([e.to_dict() for e in entries])
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "category": {
            "type": "string",
            "description": "Filter by category (e.g., 'shopping', 'types', 'discovery')",
        }
    }
}
