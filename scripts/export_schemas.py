"""Export the generative response schemas (one per stage) to docs/schemas/."""

import json
from pathlib import Path

from backend.trip_planner.engine.schemas import RESPONSE_SCHEMAS


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for stage, schema in RESPONSE_SCHEMAS.items():
        path = schemas_dir / f"{stage}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {stage} schema to {path}")


if __name__ == "__main__":
    main()
