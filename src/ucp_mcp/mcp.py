# src/ucp_mcp/mcp.py
from __future__ import annotations

import json
import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TextIO

from jsonschema import Draft202012Validator

logger = logging.getLogger("ucp_mcp.mcp")

DEFAULT_PROTOCOL_VERSION = "2025-06-18"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002


class ResourceNotFound(Exception):
    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri


@dataclass
class ToolSpec:
    name: str
    title: str
    description: str
    input_schema: Dict[str, Any]
    handler: Callable[[Dict[str, Any]], Dict[str, Any]]


def json_result(payload: Any) -> Dict[str, Any]:
    """Successful tool result: pretty JSON text plus structuredContent for object payloads."""
    out: Dict[str, Any] = {
        "content": [{"type": "text", "text": json.dumps(payload, indent=2, ensure_ascii=False)}],
        "isError": False,
    }
    if isinstance(payload, dict):
        out["structuredContent"] = payload
    return out


def error_result(message: str) -> Dict[str, Any]:
    """Flagged tool result: shaped like success so clients render it uniformly."""
    return {"content": [{"type": "text", "text": message}], "isError": True}


class MCPServer:
    """
    Minimal MCP over JSON-RPC via stdio (one JSON object per line):
    - initialize / notifications/* / ping / shutdown / exit
    - tools/list, tools/call
    - resources/list, resources/read

    tools/call and resources/read run on a worker pool so one slow call
    (merchant discovery) doesn't hold up the rest; replies may arrive out of
    order and are matched by id.
    """

    def __init__(self, server_name: str = "ucp-mcp", server_version: str = "0.0.0", max_workers: int = 4) -> None:
        self._tools: Dict[str, ToolSpec] = {}
        self._validators: Dict[str, Draft202012Validator] = {}
        self._server_name = server_name
        self._server_version = server_version
        self._max_workers = max_workers
        self._list_resources: Optional[Callable[[], List[Dict[str, Any]]]] = None
        self._read_resource: Optional[Callable[[str], List[Dict[str, Any]]]] = None
        self._out: TextIO = sys.stdout
        self._out_lock = threading.Lock()

    def register(self, spec: ToolSpec) -> None:
        Draft202012Validator.check_schema(spec.input_schema)
        self._tools[spec.name] = spec
        self._validators[spec.name] = Draft202012Validator(spec.input_schema)

    def register_resources(
        self,
        list_fn: Callable[[], List[Dict[str, Any]]],
        read_fn: Callable[[str], List[Dict[str, Any]]],
    ) -> None:
        self._list_resources = list_fn
        self._read_resource = read_fn

    @property
    def capabilities(self) -> Dict[str, Any]:
        # Advertise only the features we actually implement.
        caps: Dict[str, Any] = {"tools": {}}
        if self._read_resource is not None:
            caps["resources"] = {}
        return caps

    def tool_names(self) -> List[str]:
        return list(self._tools.keys())

    # ---- low-level io ----
    def _send(self, obj: Dict[str, Any]) -> None:
        line = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
        with self._out_lock:
            self._out.write(line + "\n")
            self._out.flush()

    @staticmethod
    def _result(id_val: Any, result: Any) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "id": id_val, "result": result}

    @staticmethod
    def _error(id_val: Any, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": id_val,
            "error": {"code": code, "message": message, "data": data or {}},
        }

    # ---- protocol handlers ----
    def _handle_initialize(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        params = msg.get("params") or {}
        result = {
            "protocolVersion": params.get("protocolVersion") or DEFAULT_PROTOCOL_VERSION,
            "serverInfo": {"name": self._server_name, "version": self._server_version},
            "capabilities": self.capabilities,
        }
        return self._result(msg.get("id"), result)

    def _handle_tools_list(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        result = {
            "tools": [
                {
                    "name": t.name,
                    "title": t.title,
                    "description": t.description,
                    "inputSchema": t.input_schema,
                }
                for t in self._tools.values()
            ]
        }
        return self._result(msg.get("id"), result)

    def call_tool(self, name: Optional[str], args: Dict[str, Any]) -> Dict[str, Any]:
        """Run a tool and return its result object. Every failure comes back flagged, never raised."""
        if not name or name not in self._tools:
            return error_result(f"Unknown tool: {name}")

        errors = list(self._validators[name].iter_errors(args))
        if errors:
            detail = "; ".join(e.message for e in errors)
            return error_result(f"Invalid arguments for {name}: {detail}")

        try:
            return self._tools[name].handler(args)
        except Exception as ex:  # noqa: BLE001
            logger.exception("tool %s failed", name)
            return error_result(f"{name} failed: {ex}")

    def _handle_tools_call(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        params = msg.get("params") or {}
        args = params.get("arguments") or {}
        if not isinstance(args, dict):
            return self._error(msg.get("id"), INVALID_PARAMS, "Invalid params", {"detail": "arguments must be an object"})
        return self._result(msg.get("id"), self.call_tool(params.get("name"), args))

    def _handle_resources_list(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        resources = self._list_resources() if self._list_resources else []
        return self._result(msg.get("id"), {"resources": resources})

    def _handle_resources_read(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        uri = (msg.get("params") or {}).get("uri")
        if not isinstance(uri, str) or self._read_resource is None:
            return self._error(msg.get("id"), INVALID_PARAMS, "Invalid params", {"detail": "uri must be a string"})
        try:
            contents = self._read_resource(uri)
        except ResourceNotFound as e:
            return self._error(msg.get("id"), RESOURCE_NOT_FOUND, str(e), {"uri": uri})
        return self._result(msg.get("id"), {"contents": contents})

    def dispatch(self, msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle one decoded message; returns the reply, or None for notifications."""
        method = msg.get("method")
        if method == "initialize":
            return self._handle_initialize(msg)
        if isinstance(method, str) and method.startswith("notifications/"):
            return None
        if method in ("ping", "shutdown"):
            return self._result(msg.get("id"), {} if method == "ping" else None)
        if method == "tools/list":
            return self._handle_tools_list(msg)
        if method == "tools/call":
            return self._handle_tools_call(msg)
        if method == "resources/list":
            return self._handle_resources_list(msg)
        if method == "resources/read":
            return self._handle_resources_read(msg)
        if "id" not in msg:
            return None
        return self._error(msg.get("id"), METHOD_NOT_FOUND, f"Unknown method: {method}")

    def _dispatch_and_send(self, msg: Dict[str, Any]) -> None:
        try:
            reply = self.dispatch(msg)
        except Exception as ex:  # noqa: BLE001
            logger.exception("unhandled error for method=%s", msg.get("method"))
            reply = self._error(msg.get("id"), INTERNAL_ERROR, str(ex))
        if reply is not None:
            self._send(reply)

    # ---- main loop ----
    def run_stdio(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._out = stdout or sys.stdout
        logger.info("%s %s ready on stdio", self._server_name, self._server_version)
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="mcp") as pool:
            for line in stdin or sys.stdin:
                line = line.strip()
                if not line:
                    continue
                try:
                    msg = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning("dropping malformed JSON-RPC line: %.200s", line)
                    self._send(self._error(None, PARSE_ERROR, "Parse error"))
                    continue
                if not isinstance(msg, dict):
                    self._send(self._error(None, PARSE_ERROR, "Parse error"))
                    continue

                method = msg.get("method")
                if method == "exit":
                    # polite no-op; caller controls process lifetime
                    break
                if method in ("tools/call", "resources/read"):
                    pool.submit(self._dispatch_and_send, msg)
                else:
                    self._dispatch_and_send(msg)
        logger.info("%s stopped", self._server_name)
