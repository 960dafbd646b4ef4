"""
Configuration compiler (``workflow_config.compiler``).

Turns a validated ``WorkflowConfigurationSet`` into the frozen runtime
artifact the services consume.
"""

from __future__ import annotations

from dataclasses import dataclass

from workflow_config.bridges import build_registry
from workflow_config.schema import EngineSettings, WorkflowConfigurationSet
from workflow_config.validator import validate_configuration
from workflow_kernel.domain.transition_tables import TransitionRegistry
from workflow_kernel.exceptions import InvalidWorkflowConfigError


@dataclass(frozen=True)
class CompiledWorkflowConfig:
    """The sole runtime configuration artifact."""

    config_id: str
    version: int
    settings: EngineSettings
    registry: TransitionRegistry
    checksum: str


def compile_configuration(config: WorkflowConfigurationSet) -> CompiledWorkflowConfig:
    """
    Validate and compile ``config``.

    Raises:
        InvalidWorkflowConfigError: validation produced errors.
        AmbiguousTransitionError: a configured table disagrees with a
            built-in one on the shared action graph.
    """
    validation = validate_configuration(config)
    if not validation.is_valid:
        raise InvalidWorkflowConfigError(config.config_id, validation.errors)

    return CompiledWorkflowConfig(
        config_id=config.config_id,
        version=config.version,
        settings=config.settings,
        registry=build_registry(config),
        checksum=config.checksum,
    )
