# src/ucp_mcp/tools/discover_merchant.py
from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from ..context import ServerContext
from ..mcp import error_result, json_result
from ..store import DISCOVERY_PROFILE_SCHEMA
from ..util.logging import log_kv

logger = logging.getLogger("ucp_mcp.tools.discover_merchant")

WELL_KNOWN_PATH = "/.well-known/ucp"


class InvalidMerchantURL(ValueError):
    pass


def well_known_url(merchant_url: str) -> httpx.URL:
    """
    /.well-known/ucp resolved against the merchant base URL; any path on the
    base is replaced.
    """
    try:
        base = httpx.URL(merchant_url.strip())
    except httpx.InvalidURL as e:
        raise InvalidMerchantURL(f"invalid merchant URL {merchant_url!r}: {e}") from e
    if base.scheme not in ("http", "https") or not base.host:
        raise InvalidMerchantURL(f"invalid merchant URL {merchant_url!r}: expected an absolute http(s) URL")
    return base.join(WELL_KNOWN_PATH)


def discover(ctx: ServerContext, merchant_url: str) -> Dict[str, Any]:
    try:
        url = well_known_url(merchant_url)
        log_kv(logger, logging.INFO, "discovering merchant", url=str(url))
        resp = ctx.http.get(url)
        if not resp.is_success:
            log_kv(logger, logging.INFO, "discovery failed", url=str(url), status=resp.status_code)
            return error_result(f"Failed to discover merchant: HTTP {resp.status_code}")
        profile = resp.json()
    except (InvalidMerchantURL, httpx.HTTPError, ValueError) as e:
        # ValueError covers JSON decode failures of the body.
        logger.info("discovery failed for %s: %s", merchant_url, e)
        return error_result(f"Discovery failed: {e}")

    validation = ctx.engine.validate(DISCOVERY_PROFILE_SCHEMA, profile)
    return json_result({"profile": profile, "validation": validation.to_dict()})


def make_handler(ctx: ServerContext):
    def handler(args: Dict[str, Any]) -> Dict[str, Any]:
        return discover(ctx, args["merchant_url"])
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["merchant_url"],
    "properties": {
        "merchant_url": {
            "type": "string",
            "description": "Base URL of the merchant (e.g., 'https://shop.example.com')",
        }
    }
}
