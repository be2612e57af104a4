"""JSON Schema export script for marketing-contracts record models.

Usage:
    python -m marketing_contracts.schemas.generate --out schemas/
    python -m marketing_contracts.schemas.generate --out schemas/ --check
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from marketing_contracts.schemas import generate_schema, list_schemas


def schema_to_json(schema: Dict[str, Any]) -> str:
    """Serialize schema to deterministic JSON string with trailing newline."""
    return json.dumps(schema, indent=2, sort_keys=True) + "\n"


def generate_all_schemas() -> Dict[str, Dict[str, Any]]:
    """Map schema name to schema dict for every record kind."""
    return {
        name: generate_schema(name[: -len("_record")]) for name in list_schemas()
    }


def write_all_schemas(out_dir: Path) -> List[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name, schema in generate_all_schemas().items():
        path = out_dir / f"{name}.schema.json"
        path.write_text(schema_to_json(schema), encoding="utf-8")
        written.append(path)
    return written


def check_drift(out_dir: Path) -> int:
    """Compare schemas on disk with freshly generated ones.

    Returns:
        0 if all schemas match, 1 if any file is missing, stale or orphaned.
    """
    schemas = generate_all_schemas()
    drift_detected = False

    for name, schema in schemas.items():
        path = out_dir / f"{name}.schema.json"
        if not path.exists():
            print(f"ERROR: Missing schema file: {path}", file=sys.stderr)
            drift_detected = True
            continue
        if path.read_text(encoding="utf-8") != schema_to_json(schema):
            print(f"ERROR: Schema drift detected in {path}", file=sys.stderr)
            drift_detected = True

    expected_files = {f"{name}.schema.json" for name in schemas}
    for orphan in sorted(
        p.name for p in out_dir.glob("*.schema.json") if p.name not in expected_files
    ):
        print(f"Orphaned schema {orphan}", file=sys.stderr)
        drift_detected = True

    if drift_detected:
        print("\nSchema drift detected. Run without --check to regenerate.", file=sys.stderr)
        return 1

    print(f"All {len(schemas)} schemas are up to date.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Export JSON schemas for marketing-contracts records"
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("schemas"),
        help="Directory to write *.schema.json files into",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check for schema drift without writing files (CI mode)",
    )
    args = parser.parse_args(argv)

    if args.check:
        return check_drift(args.out)

    written = write_all_schemas(args.out)
    for path in written:
        print(f"Generated {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
