# src/ucp_mcp/index.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .util.fs import load_json, walk_files

SCHEMA_EXT = ".json"


class SchemaIndexEntry(BaseModel):
    name: str
    title: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def _str_field(doc: Any, key: str) -> Optional[str]:
    if isinstance(doc, dict) and isinstance(doc.get(key), str):
        return doc[key]
    return None


class SchemaIndex:
    """
    Filesystem-driven listing of every schema under the schema root.

    Not cached: each call rescans, so entries reflect storage at call time.
    Order follows directory traversal, not name.
    """

    def __init__(self, schema_root: Path) -> None:
        self.schema_root = Path(schema_root)

    def list_all(self) -> List[SchemaIndexEntry]:
        entries: List[SchemaIndexEntry] = []
        for abs_p, rel_p in walk_files(str(self.schema_root), SCHEMA_EXT):
            # Broken documents still get listed by name.
            doc = load_json(abs_p)
            entries.append(SchemaIndexEntry(
                name=rel_p[: -len(SCHEMA_EXT)],
                title=_str_field(doc, "title"),
                description=_str_field(doc, "description"),
            ))
        return entries

    def filter(self, category: Optional[str] = None) -> List[SchemaIndexEntry]:
        entries = self.list_all()
        if not category:
            return entries
        return [e for e in entries if category in e.name]

    def names(self, prefix: str = "") -> List[str]:
        return [e.name for e in self.list_all() if e.name.startswith(prefix)]
