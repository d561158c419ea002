# src/ucp_mcp/tools/validate_json.py
from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import ServerContext
from ..mcp import json_result
from ..util.logging import log_kv

logger = logging.getLogger("ucp_mcp.tools.validate_json")


def make_handler(ctx: ServerContext):
    def handler(args: Dict[str, Any]) -> Dict[str, Any]:
        schema_name: str = args["schema_name"]
        result = ctx.engine.validate(schema_name, args["data"])
        log_kv(logger, logging.DEBUG, "validate_json", schema=schema_name, valid=result.valid,
               errors=len(result.errors or []))
        # A failed validation is a normal answer, not a flagged result.
        return json_result(result.to_dict())
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["schema_name", "data"],
    "properties": {
        "schema_name": {"type": "string", "description": "Name of the schema to validate against"},
        "data": {"description": "JSON data to validate"}
    }
}
