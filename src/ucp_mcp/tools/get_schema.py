# src/ucp_mcp/tools/get_schema.py
from __future__ import annotations

from typing import Any, Dict

from ..context import ServerContext
from ..mcp import error_result, json_result


def make_handler(ctx: ServerContext):
    def handler(args: Dict[str, Any]) -> Dict[str, Any]:
        name: str = args["name"]
        schema = ctx.store.resolve(name)
        if schema is None:
            return error_result(f"Schema '{name}' not found. Use list_schemas to see available schemas.")
        return json_result(schema)
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {
            "type": "string",
            "description": "Schema name (e.g., 'shopping/checkout_resp', 'ucp', 'shopping/types/line_item_resp')",
        }
    }
}
