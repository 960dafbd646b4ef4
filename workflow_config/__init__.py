"""
workflow_config -- single public entrypoint for workflow configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files or environment variables directly.  Returns a
    ``CompiledWorkflowConfig`` -- engine settings plus the transition
    registry the evaluator consults.

Architecture position:
    Configuration -- YAML-driven, validated before use.  Sits above
    ``workflow_kernel`` and below ``workflow_services``.  The kernel MUST
    NEVER import from ``workflow_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - A configuration with validation errors is never compiled.
    - Deterministic: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``InvalidWorkflowConfigError`` -- validation failed.
    - ``AmbiguousTransitionError`` -- a configured table conflicts with the
      shared action graph.
"""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path

from workflow_config.compiler import CompiledWorkflowConfig, compile_configuration
from workflow_config.loader import load_configuration
from workflow_config.schema import EngineSettings
from workflow_kernel.logging_config import configure_logging, get_logger

logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

DATABASE_URL_ENV = "DATABASE_URL"


def get_active_config(config_path: Path | None = None) -> CompiledWorkflowConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to the packaged
            ``sets/default.yaml``.

    Also configures kernel logging at ``settings.log_level`` unless
    logging was configured earlier in the process.

    Returns:
        CompiledWorkflowConfig -- the sole runtime artifact.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config_set = load_configuration(path)

    database_url = os.environ.get(DATABASE_URL_ENV)
    if database_url:
        config_set = replace(
            config_set,
            settings=replace(config_set.settings, database_url=database_url),
        )

    compiled = compile_configuration(config_set)
    configure_logging(level=compiled.settings.log_level)

    logger.info(
        "workflow_config_loaded",
        extra={
            "config_id": compiled.config_id,
            "config_version": compiled.version,
            "checksum": compiled.checksum,
            "config_path": str(path),
            "document_types": sorted(dt.value for dt in compiled.registry.document_types),
            "overridden_document_types": [d.document_type for d in config_set.documents],
        },
    )
    return compiled


__all__ = [
    "CompiledWorkflowConfig",
    "DEFAULT_CONFIG_PATH",
    "EngineSettings",
    "get_active_config",
]
