"""
Utility script to generate and write the OpenAPI schema for the board API.

Serializes the application's OpenAPI schema to interfaces/openapi.json so
clients can consume a stable description without running the server.

Usage:
    python -m src.kanban.generate_openapi
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

from .main import create_app
from .repositories import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def _default_output_path() -> str:
    # <project_root>/interfaces/openapi.json
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(src_dir), "interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Write the OpenAPI schema file and return its path."""
    # The schema does not depend on the store, so avoid touching disk for data.
    app = create_app(store=InMemoryDocumentStore())
    schema = app.openapi()

    path = out_path or _default_output_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to %s", path)
    return path


def main() -> None:
    path = generate_openapi()
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
