# src/ucp_mcp/server.py
from __future__ import annotations

import argparse
import logging
from importlib.metadata import version as pkg_version, PackageNotFoundError
from typing import List, Optional

from .config import Settings
from .context import ServerContext, build_context
from .mcp import MCPServer, ToolSpec
from .resources import ResourceCatalog
from .store import DISCOVERY_PROFILE_SPEC, OPENAPI_SPEC, OPENRPC_SPEC
from .tools import discover_merchant as t_discover
from .tools import generate_checkout_request as t_checkout
from .tools import get_schema as t_get
from .tools import list_capabilities as t_caps
from .tools import list_schemas as t_list
from .tools import spec_documents as t_spec
from .tools import validate_json as t_validate
from .util.logging import log_kv, setup_logging

logger = logging.getLogger("ucp_mcp.server")

SERVER_NAME = "ucp-mcp"


def build_server(ctx: ServerContext) -> MCPServer:
    try:
        ver = pkg_version(SERVER_NAME)
    except PackageNotFoundError:
        ver = "0.0.0"

    srv = MCPServer(server_name=SERVER_NAME, server_version=ver, max_workers=ctx.settings.max_workers)

    # Register tools
    srv.register(ToolSpec(
        name="list_schemas",
        title="List Schemas",
        description="List all available UCP schemas with their titles and descriptions",
        input_schema=t_list.INPUT_SCHEMA,
        handler=t_list.make_handler(ctx),
    ))
    srv.register(ToolSpec(
        name="get_schema",
        title="Get Schema",
        description="Get a specific UCP schema by name. Returns the full JSON Schema definition.",
        input_schema=t_get.INPUT_SCHEMA,
        handler=t_get.make_handler(ctx),
    ))
    srv.register(ToolSpec(
        name="validate_json",
        title="Validate JSON",
        description="Validate a JSON object against a UCP schema",
        input_schema=t_validate.INPUT_SCHEMA,
        handler=t_validate.make_handler(ctx),
    ))
    srv.register(ToolSpec(
        name="get_openapi_spec",
        title="Get OpenAPI Spec",
        description="Get the UCP Shopping REST API OpenAPI 3.1 specification",
        input_schema=t_spec.INPUT_SCHEMA,
        handler=t_spec.make_handler(ctx, OPENAPI_SPEC),
    ))
    srv.register(ToolSpec(
        name="get_openrpc_spec",
        title="Get OpenRPC Spec",
        description="Get the UCP Shopping MCP/JSON-RPC OpenRPC specification",
        input_schema=t_spec.INPUT_SCHEMA,
        handler=t_spec.make_handler(ctx, OPENRPC_SPEC),
    ))
    srv.register(ToolSpec(
        name="list_capabilities",
        title="List Capabilities",
        description="List all UCP capabilities (Checkout, Order, Payment, Fulfillment) and extensions",
        input_schema=t_caps.INPUT_SCHEMA,
        handler=t_caps.make_handler(ctx),
    ))
    srv.register(ToolSpec(
        name="get_discovery_profile_schema",
        title="Get Discovery Profile Schema",
        description="Get the UCP discovery profile schema (/.well-known/ucp format)",
        input_schema=t_spec.INPUT_SCHEMA,
        handler=t_spec.make_handler(ctx, DISCOVERY_PROFILE_SPEC),
    ))
    srv.register(ToolSpec(
        name="discover_merchant",
        title="Discover Merchant",
        description="Discover UCP capabilities from a merchant's well-known URL. Fetches and parses /.well-known/ucp",
        input_schema=t_discover.INPUT_SCHEMA,
        handler=t_discover.make_handler(ctx),
    ))
    srv.register(ToolSpec(
        name="generate_checkout_request",
        title="Generate Checkout Request",
        description="Generate a sample checkout create request based on the schema",
        input_schema=t_checkout.INPUT_SCHEMA,
        handler=t_checkout.make_handler(ctx),
    ))

    catalog = ResourceCatalog(ctx)
    srv.register_resources(catalog.list_resources, catalog.read)
    return srv


def check_roots(cfg: Settings) -> List[str]:
    """Log the resolved document roots; returns the ones that do not exist."""
    roots = {"spec": cfg.spec_dir, "schemas": cfg.schema_dir, "source": cfg.source_dir}
    log_kv(logger, logging.INFO, "document roots", **{k: str(v) for k, v in roots.items()})
    # source is an optional fallback location
    missing = [k for k in ("spec", "schemas") if not roots[k].is_dir()]
    for k in missing:
        logger.warning("%s directory does not exist: %s (set UCP_SPEC_DIR or UCP_SCHEMA_DIR)", k, roots[k])
    return missing


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="UCP schema MCP stdio server")
    parser.add_argument("--stdio", action="store_true", help="Run over stdio (default)")
    parser.parse_args(argv)

    cfg = Settings.from_env()
    setup_logging(cfg.log_level, cfg.log_format)
    check_roots(cfg)

    ctx = build_context(cfg)
    try:
        build_server(ctx).run_stdio()
    finally:
        ctx.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
