# src/ucp_mcp/config.py
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel

# src/ucp_mcp/config.py -> project root. Only meaningful for a source checkout or
# editable install; an installed package needs UCP_SPEC_DIR (and UCP_SOURCE_DIR).
PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseModel):
    # Storage layout
    spec_dir: Path
    schema_dir: Path
    source_dir: Path

    # Outbound discovery
    http_timeout_seconds: float = 10.0

    # Request handling
    max_workers: int = 4
    resource_list_limit: int = 50

    # Logging
    log_level: str = "info"
    log_format: str = "plain"

    @staticmethod
    def from_env() -> "Settings":
        spec_dir = Path(os.getenv("UCP_SPEC_DIR", str(PROJECT_ROOT / "spec")))
        return Settings(
            spec_dir=spec_dir,
            schema_dir=Path(os.getenv("UCP_SCHEMA_DIR", str(spec_dir / "schemas"))),
            source_dir=Path(os.getenv("UCP_SOURCE_DIR", str(PROJECT_ROOT / "source"))),
            http_timeout_seconds=float(os.getenv("UCP_HTTP_TIMEOUT_SECONDS", "10")),
            max_workers=int(os.getenv("UCP_MAX_WORKERS", "4")),
            resource_list_limit=int(os.getenv("UCP_RESOURCE_LIST_LIMIT", "50")),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
            log_format=os.getenv("LOG_FORMAT", "plain").lower(),
        )


__all__ = ["Settings", "PROJECT_ROOT"]
