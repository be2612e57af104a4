"""Shared pytest fixtures for conformance tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the bundled record fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def manifest(fixtures_dir: Path) -> Dict[str, Any]:
    """Loaded manifest.json contents."""
    manifest_path = fixtures_dir / "manifest.json"
    return json.loads(manifest_path.read_text(encoding="utf-8"))  # type: ignore[no-any-return]
