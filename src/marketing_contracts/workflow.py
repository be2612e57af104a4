"""Content workflow states and the transition authority.

Sections:
    1. WorkflowState Enum and transition table
    2. Permission predicates
    3. Transition decisions
    4. Applying a transition to a ContentRecord
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, FrozenSet, Mapping, Optional, Union

from marketing_contracts.models import (
    MarketingContractsError,
    RecordValidationError,
    UnknownStateError,
)

if TYPE_CHECKING:
    from marketing_contracts.content import ContentRecord

logger = logging.getLogger("marketing_contracts.workflow")

# ── Section 1: WorkflowState Enum and transition table ──────────────────────


class WorkflowState(str, Enum):
    """Content workflow states."""

    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    PUBLISHED = "published"
    ARCHIVED = "archived"


INITIAL_STATE: WorkflowState = WorkflowState.DRAFT

TERMINAL_STATES: FrozenSet[WorkflowState] = frozenset({WorkflowState.ARCHIVED})

TRANSITION_TABLE: Mapping[WorkflowState, FrozenSet[WorkflowState]] = MappingProxyType({
    WorkflowState.DRAFT: frozenset({WorkflowState.REVIEW}),
    WorkflowState.REVIEW: frozenset({WorkflowState.APPROVED, WorkflowState.DRAFT}),
    WorkflowState.APPROVED: frozenset({WorkflowState.PUBLISHED}),
    WorkflowState.PUBLISHED: frozenset({WorkflowState.ARCHIVED}),
    WorkflowState.ARCHIVED: frozenset(),
})

StateLike = Union[WorkflowState, str]


def normalize_state(value: StateLike) -> WorkflowState:
    """Resolve a string or enum member to a WorkflowState.

    Raises:
        UnknownStateError: If value is not a workflow state.
    """
    if isinstance(value, WorkflowState):
        return value
    for member in WorkflowState:
        if member.value == value:
            return member
    raise UnknownStateError(
        f"Unknown workflow state: {value!r}. "
        f"Valid values: {[m.value for m in WorkflowState]}"
    )


def valid_transitions(state: StateLike) -> FrozenSet[WorkflowState]:
    """Return the destinations reachable from state in one step."""
    return TRANSITION_TABLE[normalize_state(state)]


# ── Section 2: Permission predicates ─────────────────────────────────────────

# has_permission(role, target_state) -> bool, supplied by the caller's
# role/permission service.
PermissionCheck = Callable[[str, WorkflowState], bool]

CONTENT_MANAGEMENT = "content_management"
CONTENT_APPROVAL = "content_approval"
CONTENT_PUBLISH = "content_publish"

STATE_PERMISSIONS: Mapping[WorkflowState, str] = MappingProxyType({
    WorkflowState.DRAFT: CONTENT_MANAGEMENT,
    WorkflowState.REVIEW: CONTENT_MANAGEMENT,
    WorkflowState.APPROVED: CONTENT_APPROVAL,
    WorkflowState.PUBLISHED: CONTENT_PUBLISH,
    WorkflowState.ARCHIVED: CONTENT_MANAGEMENT,
})

DEFAULT_ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    "admin": frozenset({
        CONTENT_MANAGEMENT, CONTENT_APPROVAL, CONTENT_PUBLISH,
        "campaign_management", "bundle_management", "admin_access",
    }),
    "marketing_manager": frozenset({
        CONTENT_MANAGEMENT, CONTENT_APPROVAL, CONTENT_PUBLISH,
        "campaign_management", "bundle_management",
    }),
    "marketing_staff": frozenset({
        CONTENT_MANAGEMENT, "campaign_management", "bundle_management",
    }),
    "executive": frozenset({"executive_analytics"}),
    "inventory_staff": frozenset({"inventory_management"}),
})


class RolePermissionTable:
    """Permission predicate backed by static role and state mappings.

    Instances are callable with the PermissionCheck signature, so they can be
    passed anywhere a role/permission service is expected.
    """

    def __init__(
        self,
        role_permissions: Optional[Mapping[str, FrozenSet[str]]] = None,
        state_permissions: Optional[Mapping[WorkflowState, str]] = None,
    ) -> None:
        self._role_permissions = MappingProxyType(
            dict(role_permissions if role_permissions is not None else DEFAULT_ROLE_PERMISSIONS)
        )
        self._state_permissions = MappingProxyType(
            dict(state_permissions if state_permissions is not None else STATE_PERMISSIONS)
        )

    def permissions_for(self, role: str) -> FrozenSet[str]:
        """Permission names held by role (empty for unknown roles)."""
        return self._role_permissions.get(role, frozenset())

    def required_permission(self, target_state: StateLike) -> Optional[str]:
        return self._state_permissions.get(normalize_state(target_state))

    def __call__(self, role: str, target_state: WorkflowState) -> bool:
        required = self.required_permission(target_state)
        if required is None:
            return True
        return required in self.permissions_for(role)


# ── Section 3: Transition decisions ──────────────────────────────────────────


class TransitionReason(str, Enum):
    """Why a transition was accepted or rejected."""

    ALLOWED = "allowed"
    EDGE_NOT_ALLOWED = "edge_not_allowed"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True)
class TransitionDecision:
    """Result of evaluating a requested workflow transition."""

    allowed: bool
    current: WorkflowState
    requested: WorkflowState
    role: str
    reason: TransitionReason

    @property
    def message(self) -> str:
        edge = f"{self.current.value} -> {self.requested.value}"
        if self.reason is TransitionReason.EDGE_NOT_ALLOWED:
            return f"Transition {edge} is not allowed"
        if self.reason is TransitionReason.PERMISSION_DENIED:
            return (
                f"Role {self.role!r} lacks permission to move content "
                f"to {self.requested.value} ({edge})"
            )
        return f"Transition {edge} is allowed"


class TransitionError(MarketingContractsError):
    """Raised when a workflow transition is illegal or unauthorized."""

    def __init__(self, decision: TransitionDecision) -> None:
        self.decision = decision
        self.current = decision.current
        self.requested = decision.requested
        self.role = decision.role
        self.reason = decision.reason
        super().__init__(decision.message)


def evaluate_transition(
    current: StateLike,
    requested: StateLike,
    role: str,
    has_permission: PermissionCheck,
) -> TransitionDecision:
    """Decide whether role may move content from current to requested.

    The transition table is consulted first; the permission predicate is
    only asked about edges the table contains, so skipped states are
    rejected for every role.
    """
    current_state = normalize_state(current)
    requested_state = normalize_state(requested)

    if requested_state not in TRANSITION_TABLE[current_state]:
        reason = TransitionReason.EDGE_NOT_ALLOWED
    elif not has_permission(role, requested_state):
        reason = TransitionReason.PERMISSION_DENIED
    else:
        reason = TransitionReason.ALLOWED

    return TransitionDecision(
        allowed=reason is TransitionReason.ALLOWED,
        current=current_state,
        requested=requested_state,
        role=role,
        reason=reason,
    )


def can_transition(
    current: StateLike,
    requested: StateLike,
    role: str,
    has_permission: PermissionCheck,
) -> bool:
    """Return True if the transition is in the table and role may make it."""
    return evaluate_transition(current, requested, role, has_permission).allowed


def assert_transition(
    current: StateLike,
    requested: StateLike,
    role: str,
    has_permission: PermissionCheck,
) -> None:
    """Raise TransitionError unless the transition is permitted."""
    decision = evaluate_transition(current, requested, role, has_permission)
    if not decision.allowed:
        logger.info("Rejected workflow transition: %s", decision.message)
        raise TransitionError(decision)


# ── Section 4: Applying a transition to a ContentRecord ─────────────────────


def apply_transition(
    record: ContentRecord,
    requested: StateLike,
    role: str,
    has_permission: PermissionCheck,
    *,
    actor: str,
    now: Optional[datetime] = None,
) -> ContentRecord:
    """Return a new ContentRecord moved to the requested state.

    The version counter is incremented. Approval stamps ``approved_by`` with
    actor, publishing stamps ``published_at`` with now (UTC if omitted) and
    sending content back to draft clears the approver.

    Raises:
        TransitionError: If the transition is illegal or unauthorized.
        RecordValidationError: If the resulting record breaks an invariant.
    """
    from marketing_contracts.content import ContentRecord
    from marketing_contracts.validation import check_invariants

    assert_transition(record.workflow_state, requested, role, has_permission)
    target = normalize_state(requested)

    data = record.model_dump(mode="json")
    data["workflow_state"] = target
    data["version"] = record.version + 1
    if target is WorkflowState.APPROVED:
        data["approved_by"] = actor
    elif target is WorkflowState.PUBLISHED:
        data["published_at"] = now if now is not None else datetime.now(timezone.utc)
    elif target is WorkflowState.DRAFT:
        data["approved_by"] = None

    updated = ContentRecord.model_validate(data)
    result = check_invariants(updated)
    if not result.valid:
        raise RecordValidationError(result.violations)
    return updated
