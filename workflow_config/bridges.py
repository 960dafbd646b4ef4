"""
Config -> Kernel Bridges.

Functions that convert validated configuration definitions into kernel
transition tables.  They live here (the producer) because the kernel
must never import ``workflow_config``.

Usage:
    from workflow_config.bridges import build_registry

    registry = build_registry(config_set)
"""

from __future__ import annotations

from workflow_config.schema import (
    DocumentWorkflowDef,
    TransitionRuleDef,
    WorkflowConfigurationSet,
)
from workflow_kernel.domain.transition_tables import (
    DEFAULT_REGISTRY,
    TransitionRegistry,
)
from workflow_kernel.domain.workflow import (
    DocumentType,
    Role,
    TransitionRule,
    TransitionTable,
    WorkflowAction,
    WorkflowStatus,
)


def build_transition_rule(rule: TransitionRuleDef) -> TransitionRule:
    return TransitionRule(
        from_status=WorkflowStatus(rule.from_status),
        to_status=WorkflowStatus(rule.to_status),
        action=WorkflowAction(rule.action),
        allowed_roles=frozenset(Role(r) for r in rule.roles),
    )


def build_transition_table(document: DocumentWorkflowDef) -> TransitionTable:
    """Compile one document definition (raises AmbiguousTransitionError)."""
    return TransitionTable(
        document_type=DocumentType(document.document_type),
        rules=tuple(build_transition_rule(r) for r in document.transitions),
    )


def build_registry(
    config: WorkflowConfigurationSet,
    base: TransitionRegistry | None = None,
) -> TransitionRegistry:
    """
    Built-in tables, with each configured document type replacing its
    built-in table wholesale.
    """
    base = base or DEFAULT_REGISTRY
    tables = {dt: base.table(dt) for dt in base.document_types}
    for document in config.documents:
        table = build_transition_table(document)
        tables[table.document_type] = table
    return TransitionRegistry(tables[dt] for dt in sorted(tables, key=lambda d: d.value))
