"""
Module: workflow_engines
Responsibility:
    Package entrypoint that re-exports the pure transition evaluator.
    This is the canonical import surface for higher layers
    (workflow_services, HTTP handlers).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import workflow_kernel/domain/.
    MUST NOT import workflow_services.

Usage:
    from workflow_engines import evaluate_transition, available_actions
"""

from workflow_engines.transitions import (
    actionable_statuses,
    available_actions,
    can_transition,
    evaluate_transition,
    resolve_transition,
    target_status,
)

__all__ = [
    "can_transition",
    "available_actions",
    "target_status",
    "evaluate_transition",
    "resolve_transition",
    "actionable_statuses",
]
