"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every service in the kernel layer.  Services receive a SQLAlchemy
    ``Session`` and use ``session.flush()`` -- never ``session.commit()``.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or roll back themselves.  The caller (WorkflowExecutor's
    caller, session_scope(), or the test harness) owns commit/rollback, so
    a status update and its audit record land together.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for kernel services.

    Guarantees:
        The service never calls ``session.commit()`` or ``session.rollback()``.
        SAVEPOINTs (``begin_nested``) are allowed for isolating a sub-step.
    """

    def __init__(self, session: Session):
        self.session = session
