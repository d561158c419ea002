# src/ucp_mcp/store.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, MutableMapping, Optional, Tuple

from .util.fs import ensure_under_root, load_json

logger = logging.getLogger("ucp_mcp.store")

# Fixed spec documents, addressed verbatim under the spec root
OPENAPI_SPEC = "services/shopping/rest.openapi.json"
OPENRPC_SPEC = "services/shopping/mcp.openrpc.json"
DISCOVERY_PROFILE_SPEC = "discovery/profile_schema.json"

# Schema name merchant profiles are validated against
DISCOVERY_PROFILE_SCHEMA = "discovery/profile_schema"


class DocumentStore:
    """
    Resolves logical schema names (e.g. "shopping/checkout_resp", "ucp") to
    parsed JSON documents.

    Candidates, first hit wins:
      1. <schema_root>/<name>.json
      2. <schema_root>/<name>/index.json
      3. <spec_root>/<name>                  (verbatim, for non-schema spec files)
      4. <source_root>/schemas/<name>.json

    A candidate that exists but does not parse is skipped like a missing one.
    Hits are memoized in `cache` (write-once per name); misses are not, so a
    document added after startup becomes visible on the next call.
    """

    def __init__(
        self,
        schema_root: Path,
        spec_root: Path,
        source_root: Path,
        cache: Optional[MutableMapping[str, Any]] = None,
    ) -> None:
        self.schema_root = Path(schema_root)
        self.spec_root = Path(spec_root)
        self.source_root = Path(source_root)
        self._cache: MutableMapping[str, Any] = cache if cache is not None else {}

    def candidates(self, name: str) -> List[Tuple[Path, str]]:
        """(root, relative target) pairs in resolution order."""
        return [
            (self.schema_root, f"{name}.json"),
            (self.schema_root, f"{name}/index.json"),
            (self.spec_root, name),
            (self.source_root / "schemas", f"{name}.json"),
        ]

    def resolve(self, name: str) -> Optional[Any]:
        if name in self._cache:
            return self._cache[name]

        for root, rel in self.candidates(name):
            try:
                path = ensure_under_root(str(root), rel)
            except ValueError:
                logger.debug("skipping candidate outside root: root=%s rel=%s", root, rel)
                continue
            doc = load_json(path)
            if doc is None:
                continue
            # Racing first resolutions store an equal document; keep whichever landed first.
            doc = self._cache.setdefault(name, doc)
            logger.debug("resolved %s -> %s", name, path)
            return doc

        logger.debug("unresolved schema name: %s", name)
        return None
