"""
DocumentService -- the write side of workflow documents.

Responsibility:
    Creates documents at their initial status and applies accepted
    transitions with a conditional UPDATE, stamping the actor and time
    into the columns the document type carries.

Architecture position:
    Kernel > Services -- imperative shell.  Called by WorkflowExecutor.
    Never decides whether a transition is legal; that is the evaluator's
    job in ``workflow_engines.transitions``.

Invariants enforced:
    - A new document starts at the persisted form of ``DRAFT``.
    - ``apply_transition`` only changes a row whose status still equals the
      status the caller evaluated against.  Zero matched rows means another
      request won the race; the caller gets ``TransitionConflictError`` and
      nothing is written.
    - Stamp columns are written only for the document types that carry them.

Failure modes:
    - DocumentNotFoundError from ``load`` when the ID does not exist for
      the type.
    - TransitionConflictError from ``apply_transition`` on a lost race.
"""

from collections.abc import Mapping
from datetime import date, datetime
from types import MappingProxyType
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from workflow_kernel.domain.clock import Clock, SystemClock
from workflow_kernel.domain.status_mapping import from_canonical
from workflow_kernel.domain.workflow import (
    INITIAL_STATUS,
    ActorRef,
    DocumentType,
    WorkflowAction,
)
from workflow_kernel.exceptions import DocumentNotFoundError, TransitionConflictError
from workflow_kernel.logging_config import get_logger
from workflow_kernel.models.document import WorkflowDocument
from workflow_kernel.services.base import BaseService
from workflow_kernel.services.document_number_service import DocumentNumberService

logger = get_logger("services.document")

_A = WorkflowAction

# action -> (actor column, timestamp column)
_STAMP_COLUMNS: Mapping[WorkflowAction, tuple[str, str]] = MappingProxyType({
    _A.SUBMIT: ("submitted_by_id", "submitted_at"),
    _A.CHECK: ("checked_by_id", "checked_at"),
    _A.APPROVE: ("approved_by_id", "approved_at"),
    _A.REJECT: ("rejected_by_id", "rejected_at"),
})

# Which actions leave actor/time stamps on each document type
STAMPED_ACTIONS: Mapping[DocumentType, frozenset[WorkflowAction]] = MappingProxyType({
    DocumentType.PURCHASE_ORDER_LIKE: frozenset({_A.CHECK, _A.APPROVE, _A.REJECT}),
    DocumentType.JOB_ORDER: frozenset({_A.SUBMIT, _A.CHECK, _A.APPROVE, _A.REJECT}),
    DocumentType.CASH_DISBURSEMENT: frozenset({_A.APPROVE}),
})


class DocumentService(BaseService):
    """
    Create and move workflow documents.

    Guarantees:
        - Every write is flushed, never committed.
        - ``apply_transition`` is all-or-nothing for the row it targets.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        number_service: DocumentNumberService | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._numbers = number_service or DocumentNumberService(session)

    def create_document(
        self,
        document_type: DocumentType | str,
        created_by: UUID,
        as_of: date,
        document_number: str | None = None,
    ) -> WorkflowDocument:
        """
        Create a document at the initial status.

        A number is allocated from the period counter unless one is given.
        """
        document_type = DocumentType.coerce(document_type)
        if document_number is None:
            document_number = self._numbers.next_number(document_type, as_of)

        now = self._clock.now()
        document = WorkflowDocument(
            document_type=document_type.value,
            document_number=document_number,
            status=from_canonical(INITIAL_STATUS, document_type),
            created_at=now,
            updated_at=now,
            created_by_id=created_by,
        )
        self.session.add(document)
        self.session.flush()

        logger.info(
            "document_created",
            extra={
                "document_type": document_type.value,
                "document_id": str(document.id),
                "document_number": document_number,
                "status": document.status,
            },
        )
        return document

    def load(self, document_type: DocumentType | str, document_id: UUID) -> WorkflowDocument:
        document_type = DocumentType.coerce(document_type)
        document = self.session.execute(
            select(WorkflowDocument).where(
                WorkflowDocument.id == document_id,
                WorkflowDocument.document_type == document_type.value,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if document is None:
            raise DocumentNotFoundError(document_type.value, str(document_id))
        return document

    def apply_transition(
        self,
        document: WorkflowDocument,
        expected_status: str,
        new_status: str,
        action: WorkflowAction,
        actor: ActorRef,
        at: datetime,
        comment: str | None = None,
    ) -> WorkflowDocument:
        """
        Move ``document`` from ``expected_status`` to ``new_status``.

        Both statuses are in the document type's persisted vocabulary.

        Raises:
            TransitionConflictError: the stored status no longer equals
                ``expected_status``.
        """
        document_type = DocumentType.coerce(document.document_type)
        action = WorkflowAction(action)

        values: dict[str, object] = {
            "status": new_status,
            "updated_at": at,
            "updated_by_id": actor.actor_id,
        }
        if action in STAMPED_ACTIONS[document_type]:
            by_column, at_column = _STAMP_COLUMNS[action]
            values[by_column] = actor.actor_id
            values[at_column] = at
        if action == WorkflowAction.REJECT:
            values["rejection_reason"] = comment

        result = self.session.execute(
            update(WorkflowDocument)
            .where(
                WorkflowDocument.id == document.id,
                WorkflowDocument.status == expected_status,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            logger.warning(
                "transition_conflict",
                extra={
                    "document_type": document_type.value,
                    "document_id": str(document.id),
                    "expected_status": expected_status,
                    "action": action.value,
                },
            )
            raise TransitionConflictError(
                document_type.value, str(document.id), expected_status,
            )

        self.session.flush()
        self.session.refresh(document)
        return document
