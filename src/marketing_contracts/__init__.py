"""
marketing-contracts: validation and workflow rules for marketing records.

This library validates product content, marketing campaigns and product
bundles in two stages (field constraints, then cross-field business
invariants) and decides which content workflow transitions an actor role
may make.

Example:
    >>> from marketing_contracts import RolePermissionTable, can_transition
    >>> can_transition("review", "approved", "marketing_manager", RolePermissionTable())
    True
    >>> can_transition("draft", "published", "admin", RolePermissionTable())
    False
"""

__version__ = "0.1.0"

# Core result types, settings and errors
from marketing_contracts.models import (
    DEFAULT_SETTINGS,
    FieldViolation,
    InvariantViolation,
    MarketingContractsError,
    RecordValidationError,
    SecureUrl,
    UnknownRecordKindError,
    UnknownStateError,
    ValidationResult,
    ValidationSettings,
    Violation,
)

# Content workflow
from marketing_contracts.workflow import (
    DEFAULT_ROLE_PERMISSIONS,
    INITIAL_STATE,
    STATE_PERMISSIONS,
    TERMINAL_STATES,
    TRANSITION_TABLE,
    PermissionCheck,
    RolePermissionTable,
    TransitionDecision,
    TransitionError,
    TransitionReason,
    WorkflowState,
    apply_transition,
    assert_transition,
    can_transition,
    evaluate_transition,
    normalize_state,
    valid_transitions,
)

# Records
from marketing_contracts.content import (
    APPROVED_STATES,
    PUBLISHED_STATES,
    ContentRecord,
)
from marketing_contracts.campaign import (
    CAMPAIGN_TRANSITIONS,
    TERMINAL_CAMPAIGN_STATUSES,
    CampaignMetrics,
    CampaignRecord,
    CampaignRules,
    CampaignStatus,
    CampaignType,
    DiscountType,
    can_activate,
    can_transition_campaign,
    duration_in_days,
    expected_metrics,
    has_expired,
    is_currently_active,
    is_eligible_for_metrics,
    valid_campaign_transitions,
)
from marketing_contracts.bundle import (
    BundleAvailability,
    BundleEntry,
    BundleRecord,
    InventoryCheck,
    InventoryShortage,
    PricingStrategy,
    check_inventory,
    component_total,
    has_meaningful_savings,
    inventory_impact,
    max_bundle_quantity,
    savings_percentage,
)

# Validation engine
from marketing_contracts.validation import (
    RecordKind,
    check_invariants,
    model_for,
    resolve_kind,
    validate,
    validate_record,
)
from marketing_contracts.cache import (
    CacheStats,
    ValidationCache,
    canonical_key,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "DEFAULT_SETTINGS",
    "FieldViolation",
    "InvariantViolation",
    "MarketingContractsError",
    "RecordValidationError",
    "SecureUrl",
    "UnknownRecordKindError",
    "UnknownStateError",
    "ValidationResult",
    "ValidationSettings",
    "Violation",
    # Workflow
    "DEFAULT_ROLE_PERMISSIONS",
    "INITIAL_STATE",
    "STATE_PERMISSIONS",
    "TERMINAL_STATES",
    "TRANSITION_TABLE",
    "PermissionCheck",
    "RolePermissionTable",
    "TransitionDecision",
    "TransitionError",
    "TransitionReason",
    "WorkflowState",
    "apply_transition",
    "assert_transition",
    "can_transition",
    "evaluate_transition",
    "normalize_state",
    "valid_transitions",
    # Content
    "APPROVED_STATES",
    "PUBLISHED_STATES",
    "ContentRecord",
    # Campaign
    "CAMPAIGN_TRANSITIONS",
    "TERMINAL_CAMPAIGN_STATUSES",
    "CampaignMetrics",
    "CampaignRecord",
    "CampaignRules",
    "CampaignStatus",
    "CampaignType",
    "DiscountType",
    "can_activate",
    "can_transition_campaign",
    "duration_in_days",
    "expected_metrics",
    "has_expired",
    "is_currently_active",
    "is_eligible_for_metrics",
    "valid_campaign_transitions",
    # Bundle
    "BundleAvailability",
    "BundleEntry",
    "BundleRecord",
    "InventoryCheck",
    "InventoryShortage",
    "PricingStrategy",
    "check_inventory",
    "component_total",
    "has_meaningful_savings",
    "inventory_impact",
    "max_bundle_quantity",
    "savings_percentage",
    # Validation engine
    "RecordKind",
    "check_invariants",
    "model_for",
    "resolve_kind",
    "validate",
    "validate_record",
    "CacheStats",
    "ValidationCache",
    "canonical_key",
]
