"""
Configuration Validator (``workflow_config.validator``).

Responsibility
--------------
Validates a ``WorkflowConfigurationSet`` before it is compiled, so a bad
table never reaches the evaluator.

Architecture position
---------------------
**Config layer** -- build-time validation.  Only reads kernel vocabulary
enums; never touches the database.

Invariants enforced
-------------------
* Every status, action and role named in a rule is part of the vocabulary.
* ``(from, action)`` resolves to at most one destination, per table and
  across tables.
* Terminal statuses have no outgoing rules.
* Every configured document defines at least one rule.
* Every rule lists at least one role.

Failure modes
-------------
* Errors (``ConfigValidationResult.errors``) -> configuration MUST NOT be
  compiled.
* Warnings (``ConfigValidationResult.warnings``) -> compiled, but should be
  reviewed (e.g. a status no rule can reach).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from workflow_config.schema import DocumentWorkflowDef, WorkflowConfigurationSet
from workflow_kernel.domain.workflow import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    DocumentType,
    Role,
    WorkflowAction,
    WorkflowStatus,
)

_STATUSES = frozenset(s.value for s in WorkflowStatus)
_ACTIONS = frozenset(a.value for a in WorkflowAction)
_ROLES = frozenset(r.value for r in Role)
_DOCUMENT_TYPES = frozenset(d.value for d in DocumentType)
_TERMINALS = frozenset(s.value for s in TERMINAL_STATUSES)
_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    Contract
    --------
    * ``is_valid`` returns ``True`` only when ``errors`` is empty.
    * Warnings do not block compilation.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_configuration(config: WorkflowConfigurationSet) -> ConfigValidationResult:
    """
    Validate a configuration set.

    Postconditions:
        - Returns a ``ConfigValidationResult`` with errors and warnings.
        - A configuration with errors MUST NOT be compiled.
    """
    result = ConfigValidationResult()

    _validate_settings(config, result)
    _validate_document_uniqueness(config, result)
    for document in config.documents:
        _validate_vocabulary(document, result)
        _validate_has_transitions(document, result)
        _validate_unambiguous(document, result)
        _validate_terminal_states(document, result)
        _validate_role_sets(document, result)
        _validate_reachability(document, result)
    _validate_shared_action_graph(config, result)

    return result


def _validate_settings(
    config: WorkflowConfigurationSet, result: ConfigValidationResult
) -> None:
    settings = config.settings
    if settings.log_level not in _LOG_LEVELS:
        result.add_error(f"Unknown log level: {settings.log_level}")
    if settings.pending_documents_limit < 1:
        result.add_error(
            f"pending_documents_limit must be positive, got "
            f"{settings.pending_documents_limit}"
        )
    if not settings.database_url:
        result.add_error("database_url must not be empty")


def _validate_document_uniqueness(
    config: WorkflowConfigurationSet, result: ConfigValidationResult
) -> None:
    seen: set[str] = set()
    for document in config.documents:
        if document.document_type in seen:
            result.add_error(
                f"Document type '{document.document_type}' is defined more than once"
            )
        seen.add(document.document_type)


def _validate_vocabulary(
    document: DocumentWorkflowDef, result: ConfigValidationResult
) -> None:
    name = document.document_type
    if name not in _DOCUMENT_TYPES:
        result.add_error(f"Unknown document type: {name}")
    for rule in document.transitions:
        for status in (rule.from_status, rule.to_status):
            if status not in _STATUSES:
                result.add_error(f"'{name}': unknown status '{status}'")
        if rule.action not in _ACTIONS:
            result.add_error(f"'{name}': unknown action '{rule.action}'")
        for role in rule.roles:
            if role not in _ROLES:
                result.add_error(f"'{name}': unknown role '{role}'")


def _validate_has_transitions(
    document: DocumentWorkflowDef, result: ConfigValidationResult
) -> None:
    if not document.transitions:
        result.add_error(f"'{document.document_type}': no transitions defined")


def _validate_unambiguous(
    document: DocumentWorkflowDef, result: ConfigValidationResult
) -> None:
    targets: dict[tuple[str, str], str] = {}
    for rule in document.transitions:
        key = (rule.from_status, rule.action)
        existing = targets.get(key)
        if existing is not None and existing != rule.to_status:
            result.add_error(
                f"'{document.document_type}': action '{rule.action}' from "
                f"'{rule.from_status}' leads to both '{existing}' and "
                f"'{rule.to_status}'"
            )
        targets.setdefault(key, rule.to_status)


def _validate_terminal_states(
    document: DocumentWorkflowDef, result: ConfigValidationResult
) -> None:
    for rule in document.transitions:
        if rule.from_status in _TERMINALS:
            result.add_error(
                f"'{document.document_type}': terminal status "
                f"'{rule.from_status}' has an outgoing '{rule.action}' rule"
            )


def _validate_role_sets(
    document: DocumentWorkflowDef, result: ConfigValidationResult
) -> None:
    for rule in document.transitions:
        if not rule.roles:
            result.add_error(
                f"'{document.document_type}': '{rule.action}' from "
                f"'{rule.from_status}' lists no roles"
            )


def _validate_reachability(
    document: DocumentWorkflowDef, result: ConfigValidationResult
) -> None:
    reached = {INITIAL_STATUS.value}
    frontier = [INITIAL_STATUS.value]
    while frontier:
        current = frontier.pop()
        for rule in document.transitions:
            if rule.from_status == current and rule.to_status not in reached:
                reached.add(rule.to_status)
                frontier.append(rule.to_status)
    for status in sorted(_STATUSES - reached):
        result.add_warning(
            f"'{document.document_type}': status '{status}' is unreachable from "
            f"'{INITIAL_STATUS.value}'"
        )


def _validate_shared_action_graph(
    config: WorkflowConfigurationSet, result: ConfigValidationResult
) -> None:
    shared: dict[tuple[str, str], tuple[str, str]] = {}
    for document in config.documents:
        for rule in document.transitions:
            key = (rule.from_status, rule.action)
            existing = shared.get(key)
            if existing is not None and existing[0] != rule.to_status:
                result.add_error(
                    f"'{document.document_type}' sends '{rule.action}' from "
                    f"'{rule.from_status}' to '{rule.to_status}' but "
                    f"'{existing[1]}' sends it to '{existing[0]}'"
                )
            shared.setdefault(key, (rule.to_status, document.document_type))
