"""
Module: workflow_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/base.py and
    models/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller and never
      call session.add(), session.delete(), session.commit(), or session.flush().
    - Session ownership: the caller owns the session and its transaction.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors perform read-only queries and return DTOs or ORM rows the
        caller must not modify.
    """

    def __init__(self, session: Session):
        self.session = session
