"""Write the web app's OpenAPI document to docs/api/openapi.json."""

from __future__ import annotations

import json
import sys
from pathlib import Path

# Allow running from any directory without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import FastAPI  # noqa: E402

from alliswell.api.main import app as web_app  # noqa: E402


def export_openapi(app: FastAPI, destination: Path) -> None:
    """Persist the OpenAPI schema to the given destination."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    schema = app.openapi()
    destination.write_text(json.dumps(schema, indent=2))


def main() -> None:
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("docs/api/openapi.json")
    export_openapi(web_app, output)
    print(f"OpenAPI schema written to {output}")


if __name__ == "__main__":
    main()
