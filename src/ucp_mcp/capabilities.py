# src/ucp_mcp/capabilities.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from .index import SchemaIndex
from .store import DocumentStore

SHOPPING_PREFIX = "shopping/"
CAPABILITY_SCHEMA_NAME = "capability"

# key -> (keyword matched against schema names, description)
CORE_CAPABILITIES: Dict[str, Tuple[str, str]] = {
    "checkout": ("checkout", "Facilitates checkout sessions including cart management and tax calculation"),
    "order": ("order", "Webhook-based updates for order lifecycle events"),
    "payment": ("payment", "Payment handling and token exchange"),
    "fulfillment": ("fulfillment", "Fulfillment options and shipping"),
}

EXTENSIONS: Dict[str, Tuple[str, str]] = {
    "discount": ("discount", "Discount and promotional pricing"),
    "buyer_consent": ("buyer_consent", "Buyer consent management"),
}


def group_by_keyword(table: Mapping[str, Tuple[str, str]], names: List[str]) -> Dict[str, Dict[str, Any]]:
    return {
        key: {
            "description": description,
            "schemas": [n for n in names if keyword in n],
        }
        for key, (keyword, description) in table.items()
    }


class CapabilityAggregator:
    """Presentation grouping of shopping schemas; recomputed from a fresh index scan on every call."""

    def __init__(self, index: SchemaIndex, store: DocumentStore) -> None:
        self._index = index
        self._store = store

    def list_capabilities(self) -> Dict[str, Any]:
        shopping = self._index.names(SHOPPING_PREFIX)
        return {
            "core": group_by_keyword(CORE_CAPABILITIES, shopping),
            "extensions": group_by_keyword(EXTENSIONS, shopping),
            "capabilitySchema": self._store.resolve(CAPABILITY_SCHEMA_NAME),
        }
