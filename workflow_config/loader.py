"""
Configuration Loader (``workflow_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``workflow_config.schema`` dataclasses.  Runtime callers go through
``workflow_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Required keys are required: a missing key raises ``KeyError``; there
  are no silent defaults for ``config_id`` or rule fields.
* ``compute_checksum`` is deterministic for identical input.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from workflow_config.schema import (
    DocumentWorkflowDef,
    EngineSettings,
    TransitionRuleDef,
    WorkflowConfigurationSet,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_settings(data: dict[str, Any] | None) -> EngineSettings:
    data = data or {}
    defaults = EngineSettings()
    return EngineSettings(
        database_url=str(data.get("database_url", defaults.database_url)),
        log_level=str(data.get("log_level", defaults.log_level)).upper(),
        strict_status_mapping=bool(
            data.get("strict_status_mapping", defaults.strict_status_mapping)
        ),
        audit_failure_blocks_transition=bool(
            data.get(
                "audit_failure_blocks_transition",
                defaults.audit_failure_blocks_transition,
            )
        ),
        pending_documents_limit=int(
            data.get("pending_documents_limit", defaults.pending_documents_limit)
        ),
    )


def parse_transition(data: dict[str, Any]) -> TransitionRuleDef:
    """Parse one ``{from, to, action, roles}`` mapping."""
    return TransitionRuleDef(
        from_status=str(data["from"]),
        to_status=str(data["to"]),
        action=str(data["action"]),
        roles=tuple(str(r) for r in data.get("roles") or ()),
    )


def parse_document(document_type: str, data: dict[str, Any] | None) -> DocumentWorkflowDef:
    """An empty body parses to a document with no transitions."""
    return DocumentWorkflowDef(
        document_type=str(document_type),
        transitions=tuple(
            parse_transition(t) for t in (data or {}).get("transitions") or ()
        ),
    )


def parse_configuration(data: dict[str, Any]) -> WorkflowConfigurationSet:
    """
    Parse a full configuration mapping.

    The checksum is computed over the raw mapping, so two files with the
    same content yield the same checksum regardless of key order.
    """
    documents = data.get("documents") or {}
    return WorkflowConfigurationSet(
        config_id=str(data["config_id"]),
        version=int(data.get("version", 1)),
        settings=parse_settings(data.get("settings")),
        documents=tuple(
            parse_document(dt, documents[dt]) for dt in sorted(documents)
        ),
        checksum=compute_checksum(data),
    )


def load_configuration(path: Path) -> WorkflowConfigurationSet:
    return parse_configuration(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
