# src/ucp_mcp/tools/list_capabilities.py
from __future__ import annotations

from typing import Any, Dict

from ..context import ServerContext
from ..mcp import json_result


def make_handler(ctx: ServerContext):
    def handler(_args: Dict[str, Any]) -> Dict[str, Any]:
        return json_result(ctx.capabilities.list_capabilities())
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {}
}
