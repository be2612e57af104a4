"""JSON Schema artifacts for marketing-contracts record models."""
from __future__ import annotations

from typing import Any, Dict, List

from marketing_contracts.validation import KindLike, RecordKind, model_for, resolve_kind

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def generate_schema(kind: KindLike) -> Dict[str, Any]:
    """Build the input JSON Schema for a record kind.

    The schema describes field shape only; cross-field invariants are
    enforced by check_invariants and have no JSON Schema equivalent.
    """
    record_kind = resolve_kind(kind)
    schema = model_for(record_kind).model_json_schema(mode="validation")
    schema["$schema"] = SCHEMA_DIALECT
    schema["$id"] = f"marketing-contracts/{record_kind.value}_record"
    return schema


def load_schema(name: str) -> Dict[str, Any]:
    """Return the schema for ``"<kind>_record"`` or a bare kind name."""
    kind = name[: -len("_record")] if name.endswith("_record") else name
    if kind not in {k.value for k in RecordKind}:
        raise FileNotFoundError(
            f"No schema found for '{name}'. Available: {list_schemas()}"
        )
    return generate_schema(kind)


def list_schemas() -> List[str]:
    """List all available schema names."""
    return sorted(f"{k.value}_record" for k in RecordKind)
