"""Application services: execute workflow transitions on stored documents."""

from workflow_services.workflow_executor import WorkflowExecutor

__all__ = ["WorkflowExecutor"]
