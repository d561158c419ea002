# src/ucp_mcp/tools/generate_checkout_request.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..context import ServerContext
from ..mcp import json_result

UCP_VERSION = "2026-01-11"
CHECKOUT_CAPABILITY = "dev.ucp.shopping.checkout"
DEFAULT_CURRENCY = "USD"

PLACEHOLDER_ITEM = {"name": "Sample Product", "quantity": 1, "price_cents": 1999}


def _line_item(idx: int, item: Dict[str, Any], currency: str) -> Dict[str, Any]:
    # Fields are copied through as given; missing ones come out as null.
    return {
        "id": f"item_{idx}",
        "name": item.get("name"),
        "quantity": item.get("quantity"),
        "unit_price": {
            "amount_cents": item.get("price_cents"),
            "currency": currency,
        },
    }


def build_checkout_request(items: Optional[List[Dict[str, Any]]] = None, currency: str = DEFAULT_CURRENCY) -> Dict[str, Any]:
    """
    Sample checkout create request. Not validated against any schema.

    Items are numbered item_1..item_n in the order given; with no items a
    single placeholder line item is emitted.
    """
    items = items or [PLACEHOLDER_ITEM]
    return {
        "ucp": {
            "version": UCP_VERSION,
            "capabilities": [CHECKOUT_CAPABILITY],
        },
        "line_items": [_line_item(i, item, currency) for i, item in enumerate(items, start=1)],
        "currency": currency,
    }


def make_handler(_ctx: ServerContext):
    def handler(args: Dict[str, Any]) -> Dict[str, Any]:
        return json_result(build_checkout_request(args.get("items"), args.get("currency") or DEFAULT_CURRENCY))
    return handler


INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "description": "Array of items with name, quantity, and price_cents",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "number"},
                    "price_cents": {"type": "number"}
                }
            }
        },
        "currency": {
            "type": "string",
            "description": "ISO 4217 currency code (default: USD)"
        }
    }
}
