"""Canonical fixture loading for marketing-contracts conformance testing.

Provides FixtureCase (frozen dataclass) and load_fixtures() for data-driven
conformance tests. Reads from the bundled manifest.json and fixture JSON files.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from marketing_contracts.validation import RecordKind

_FIXTURES_DIR = Path(__file__).parent / "fixtures"
_MANIFEST_PATH = _FIXTURES_DIR / "manifest.json"

_VALID_CATEGORIES = frozenset(k.value for k in RecordKind)


@dataclass(frozen=True)
class FixtureCase:
    """A single fixture test case loaded from the manifest."""

    id: str
    kind: str
    payload: Any
    expected_valid: bool
    expected_rules: Tuple[str, ...]
    notes: str


def load_manifest() -> Dict[str, Any]:
    with open(_MANIFEST_PATH, "r", encoding="utf-8") as fh:
        manifest: Dict[str, Any] = json.load(fh)
    return manifest


def load_fixtures(category: str) -> List[FixtureCase]:
    """Load canonical fixture cases for a record kind.

    Args:
        category: One of ``"content"``, ``"campaign"`` or ``"bundle"``.

    Raises:
        ValueError: If category is not one of the recognised kinds.
        FileNotFoundError: If a referenced fixture file is missing.
    """
    if category not in _VALID_CATEGORIES:
        raise ValueError(
            f"Unknown fixture category: {category!r}. "
            f"Valid categories: {sorted(_VALID_CATEGORIES)}"
        )

    fixtures: List[FixtureCase] = []
    for entry in load_manifest()["fixtures"]:
        fixture_path: str = entry["path"]
        if not fixture_path.startswith(category + "/"):
            continue

        full_path = _FIXTURES_DIR / fixture_path
        if not full_path.exists():
            raise FileNotFoundError(
                f"Fixture file referenced in manifest does not exist: {full_path}"
            )
        with open(full_path, "r", encoding="utf-8") as fh:
            payload: Any = json.load(fh)

        fixtures.append(
            FixtureCase(
                id=entry["id"],
                kind=category,
                payload=payload,
                expected_valid=entry["expected_result"] == "valid",
                expected_rules=tuple(entry.get("expected_rules", ())),
                notes=entry["notes"],
            )
        )

    return fixtures
