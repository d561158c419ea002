# src/ucp_mcp/util/fs.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple


def ensure_under_root(root: str, target: str) -> Path:
    """
    Resolve `target` so it is guaranteed to be inside `root`.

    - If `target` is relative, interpret it under `root`.
    - If `target` is absolute, it must still live inside `root`.
    - Allows exact match with `root` or any descendant.
    """
    root_p = Path(root).resolve()
    tgt_p = Path(target)

    if not tgt_p.is_absolute():
        tgt_p = root_p / tgt_p

    # Resolve symlinks/.. and normalise
    tgt_p = tgt_p.resolve()

    try:
        tgt_p.relative_to(root_p)
    except ValueError:
        raise ValueError(f"path escapes root: {target}")

    return tgt_p


def load_json(path: Path) -> Optional[Any]:
    """Parsed content of `path`, or None when it is missing, unreadable or not JSON."""
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, ValueError):
        return None


def walk_files(root: str, suffix: str) -> Iterator[Tuple[Path, str]]:
    """
    Yield (abs_path, relpath) for files under `root` ending in `suffix`.

    Order follows os.walk; relpath always uses forward slashes.
    """
    if not os.path.isdir(root):
        return
    for dirpath, _, files in os.walk(root):
        for fn in files:
            if not fn.endswith(suffix):
                continue
            abs_p = Path(dirpath) / fn
            rel_p = os.path.relpath(abs_p, root).replace(os.sep, "/")
            yield abs_p, rel_p
