"""
ORM-Level Immutability Enforcement for the workflow audit trail.

SQLAlchemy fires mapper events before UPDATE/DELETE statements reach the
database.  The listeners registered here intercept them for
``AuditLogEntry`` and abort the flush:

    session.flush()
         |
         v
    [before_update] --> _check_audit_log_immutability() --> ImmutabilityViolationError
    [before_delete] --> _check_audit_log_delete() --------> ImmutabilityViolationError

Bulk ``update()`` / ``delete()`` statements bypass mapper events; the
kernel never issues them against the audit table.

Protected entities:

Entity          | When Immutable           | Why
----------------|--------------------------|------------------------------
AuditLogEntry   | ALWAYS (from creation)   | The audit trail is append-only
"""

from sqlalchemy import event

from workflow_kernel.exceptions import ImmutabilityViolationError
from workflow_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _check_audit_log_immutability(mapper, connection, target):
    """Prevent any updates to AuditLogEntry records."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "AuditLogEntry",
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="AuditLogEntry",
        entity_id=str(target.id),
        reason="Audit log entries are immutable and cannot be modified",
    )


def _check_audit_log_delete(mapper, connection, target):
    """Prevent deletion of AuditLogEntry records."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "AuditLogEntry",
            "entity_id": str(target.id),
            "operation": "DELETE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="AuditLogEntry",
        entity_id=str(target.id),
        reason="Audit log entries cannot be deleted",
    )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Call once during application initialization, after models are imported.
    Safe to call repeatedly.
    """
    from workflow_kernel.models.audit_log import AuditLogEntry

    if not event.contains(AuditLogEntry, "before_update", _check_audit_log_immutability):
        event.listen(AuditLogEntry, "before_update", _check_audit_log_immutability)
    if not event.contains(AuditLogEntry, "before_delete", _check_audit_log_delete):
        event.listen(AuditLogEntry, "before_delete", _check_audit_log_delete)


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring it if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests that deliberately violate immutability.
    """
    from workflow_kernel.models.audit_log import AuditLogEntry

    _safe_remove_listener(AuditLogEntry, "before_update", _check_audit_log_immutability)
    _safe_remove_listener(AuditLogEntry, "before_delete", _check_audit_log_delete)
