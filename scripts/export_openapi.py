"""Export the BetTracker OpenAPI schema to api_spec/openapi.json."""

from __future__ import annotations

import json
import os
from pathlib import Path

from fastapi.encoders import jsonable_encoder

from bettracker.api.server import app

OUTPUT_PATH = Path("api_spec/openapi.json")


def main() -> None:
    OUTPUT_PATH.parent.mkdir(parents=True, exist_ok=True)
    schema = app.openapi()
    public_base = os.getenv("BETTRACKER_PUBLIC_URL")
    if public_base:
        schema["servers"] = [{"url": public_base.rstrip("/")}]
    OUTPUT_PATH.write_text(json.dumps(jsonable_encoder(schema), indent=2))
    print(f"OpenAPI schema written to {OUTPUT_PATH} ({len(schema.get('paths', {}))} paths)")


if __name__ == "__main__":  # pragma: no cover
    main()
