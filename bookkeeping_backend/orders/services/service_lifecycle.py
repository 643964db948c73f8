"""
SERVICE LIFECYCLE DOMAIN RULES

Maps (from_status, to_status) to a TransitionPlan: which documents the
executor must remove, open or re-sync, and what happens to delivery_date.

Pure functions only. service_order_service executes the plan inside a
posting unit; nothing here touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass

from accounting.services.exceptions import ConflictError, LedgerValidationError
from orders.models import Service

# ============================================================
# DOMAIN ERRORS
# ============================================================


class ServiceLifecycleError(ConflictError):
    pass


class InvalidServiceTransitionError(ServiceLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

ALL_STATES = {code for code, _ in Service.STATUSES}

NON_DELIVERED_STATES = {
    Service.STATUS_PENDING,
    Service.STATUS_IN_PROGRESS,
    Service.STATUS_READY,
}

FORBIDDEN_TRANSITIONS = {
    (Service.STATUS_CANCELLED, Service.STATUS_DELIVERED): "Cannot deliver a cancelled service",
}


@dataclass(frozen=True)
class TransitionPlan:
    from_status: str
    to_status: str
    noop: bool = False
    remove_receivable: bool = False
    remove_payable: bool = False
    set_delivery_date: bool = False
    clear_delivery_date: bool = False
    ensure_receivable: bool = False
    ensure_payable: bool = False


# ============================================================
# DOMAIN RULES
# ============================================================


def require_status(value) -> str:
    status = (value or "").strip().lower() if isinstance(value, str) else value
    if status not in ALL_STATES:
        raise LedgerValidationError(
            f"Invalid service status '{value}'. Use one of: {', '.join(sorted(ALL_STATES))}"
        )
    return status


def can_transition(*, from_status: str, to_status: str) -> bool:
    return (from_status, to_status) not in FORBIDDEN_TRANSITIONS


def validate_transition(*, service: Service, target_status: str) -> None:
    message = FORBIDDEN_TRANSITIONS.get((service.status, target_status))
    if message:
        raise InvalidServiceTransitionError(message)


def plan_transition(*, from_status: str, to_status: str, editing: bool = False) -> TransitionPlan:
    """
    editing=False : a pure status change; same status is a no-op
    editing=True  : fields were edited too; same status keeps the plan live

    ensure_* only opens a document that is missing. An existing receivable
    or payable is never re-priced by a status change; that happens only when
    update_service edits price, cost or the counterparty.
    """
    if not can_transition(from_status=from_status, to_status=to_status):
        raise InvalidServiceTransitionError(FORBIDDEN_TRANSITIONS[(from_status, to_status)])

    if from_status == to_status:
        if not editing or to_status == Service.STATUS_CANCELLED:
            return TransitionPlan(from_status, to_status, noop=not editing)
        return TransitionPlan(
            from_status,
            to_status,
            ensure_receivable=True,
            ensure_payable=to_status == Service.STATUS_DELIVERED,
        )

    if to_status == Service.STATUS_CANCELLED:
        return TransitionPlan(
            from_status,
            to_status,
            remove_receivable=True,
            remove_payable=True,
            clear_delivery_date=True,
        )

    if to_status == Service.STATUS_DELIVERED:
        return TransitionPlan(
            from_status,
            to_status,
            set_delivery_date=True,
            ensure_receivable=True,
            ensure_payable=True,
        )

    # to a non-delivered, non-cancelled state
    if from_status == Service.STATUS_DELIVERED:
        return TransitionPlan(
            from_status,
            to_status,
            remove_payable=True,
            clear_delivery_date=True,
            ensure_receivable=True,
        )

    # cancelled -> non-delivered recreates the receivable; otherwise it exists
    return TransitionPlan(from_status, to_status, ensure_receivable=True)
