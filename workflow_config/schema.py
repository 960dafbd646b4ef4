"""
WorkflowConfigurationSet schema.

Defines the human-authored, reviewable source artifact for workflow
configuration.  YAML files are parsed into these types by the loader,
checked by the validator, and compiled into a CompiledWorkflowConfig.

Key distinction:
  WorkflowConfigurationSet = source artifact (human-authored, versioned)
  CompiledWorkflowConfig   = runtime artifact (validated, frozen)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EngineSettings:
    """Runtime switches for the workflow engine."""

    database_url: str = "sqlite:///:memory:"
    log_level: str = "INFO"
    # Raise instead of defaulting unknown persisted statuses to draft
    strict_status_mapping: bool = False
    # Fail the transition when its audit record cannot be written
    audit_failure_blocks_transition: bool = False
    pending_documents_limit: int = 50


@dataclass(frozen=True)
class TransitionRuleDef:
    """One transition rule as written in YAML (plain strings)."""

    from_status: str
    to_status: str
    action: str
    roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentWorkflowDef:
    """Replacement transition table for one document type."""

    document_type: str
    transitions: tuple[TransitionRuleDef, ...] = ()


@dataclass(frozen=True)
class WorkflowConfigurationSet:
    """Complete workflow configuration as loaded from one YAML file."""

    config_id: str
    version: int
    settings: EngineSettings
    documents: tuple[DocumentWorkflowDef, ...] = ()
    checksum: str = ""
