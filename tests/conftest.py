"""Shared pytest fixtures for all tests."""
from typing import Any, Dict

import pytest

from marketing_contracts import RolePermissionTable, WorkflowState


def make_content_data(**overrides: Any) -> Dict[str, Any]:
    """Build raw ContentRecord input with defaults for all required fields."""
    defaults: Dict[str, Any] = {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "product_id": "123e4567-e89b-12d3-a456-426614174001",
        "title": "Organic Heirloom Tomatoes",
        "description": "Vine-ripened heritage tomatoes.",
        "image_urls": ["https://example.com/images/tomatoes-hero.jpg"],
        "keywords": ["organic", "tomatoes"],
        "workflow_state": "draft",
        "created_by": "author-123",
    }
    defaults.update(overrides)
    return defaults


def make_campaign_data(**overrides: Any) -> Dict[str, Any]:
    """Build raw CampaignRecord input with defaults for all required fields."""
    defaults: Dict[str, Any] = {
        "id": "550e8400-e29b-41d4-a716-446655440000",
        "name": "Summer Harvest Sale",
        "campaign_type": "seasonal",
        "status": "planned",
        "start_date": "2025-01-01T00:00:00Z",
        "end_date": "2025-01-02T00:00:00Z",
        "discount_type": "percentage",
        "discount_value": 15,
    }
    defaults.update(overrides)
    return defaults


def make_bundle_data(**overrides: Any) -> Dict[str, Any]:
    """Build raw BundleRecord input: two products (10 x 1, 20 x 1) priced at 29."""
    defaults: Dict[str, Any] = {
        "id": "660e8400-e29b-41d4-a716-446655440000",
        "name": "Breakfast Bundle",
        "entries": [
            {
                "product_id": "123e4567-e89b-12d3-a456-426614174101",
                "unit_price": 10,
                "quantity": 1,
            },
            {
                "product_id": "123e4567-e89b-12d3-a456-426614174102",
                "unit_price": 20,
                "quantity": 1,
            },
        ],
        "pricing_strategy": "fixed_price",
        "bundle_price": 29,
        "savings_amount": 1,
        "valid_from": "2024-06-01T00:00:00Z",
    }
    defaults.update(overrides)
    return defaults


@pytest.fixture
def content_data() -> Dict[str, Any]:
    return make_content_data()


@pytest.fixture
def campaign_data() -> Dict[str, Any]:
    return make_campaign_data()


@pytest.fixture
def bundle_data() -> Dict[str, Any]:
    return make_bundle_data()


@pytest.fixture
def permissions() -> RolePermissionTable:
    """Permission predicate built from the default role table."""
    return RolePermissionTable()


@pytest.fixture
def allow_all() -> Any:
    def _allow(role: str, target_state: WorkflowState) -> bool:
        return True
    return _allow


@pytest.fixture
def deny_all() -> Any:
    def _deny(role: str, target_state: WorkflowState) -> bool:
        return False
    return _deny
