"""
workflow_services.workflow_executor -- Workflow transition execution.

Responsibility:
    Executes maker-checker-approver transitions against stored documents.
    Thin coordinator -- delegates the legality decision to the pure
    evaluator (``workflow_engines.transitions``), persistence to
    DocumentService, and the audit append to an ``AuditRecorder``.

Architecture position:
    Services layer.  May import from workflow_engines/ (pure engines),
    workflow_kernel/ (domain, services, selectors) and workflow_config/
    (settings).

Invariants enforced:
    - A reject without a non-blank reason is refused before anything is
      evaluated or written.
    - The status update is conditional on the status that was evaluated;
      a lost race surfaces as TransitionConflictError and nothing changes.
    - An audit append failure is logged and does not undo the transition,
      unless ``audit_failure_blocks_transition`` is set.
    - Structural refusals (NO_TRANSITION) and authorization refusals
      (NOT_PERMITTED) are returned as results, never raised.
"""

from __future__ import annotations

import time
from uuid import UUID

from sqlalchemy.orm import Session

from workflow_config.compiler import CompiledWorkflowConfig
from workflow_config.schema import EngineSettings
from workflow_engines.transitions import (
    actionable_statuses,
    available_actions,
    resolve_transition,
)
from workflow_kernel.domain.audit import AuditRecord, AuditRecorder, build_audit_record
from workflow_kernel.domain.clock import Clock, SystemClock
from workflow_kernel.domain.status_mapping import PERSISTED_TO_CANONICAL, to_canonical
from workflow_kernel.domain.transition_tables import DEFAULT_REGISTRY, TransitionRegistry
from workflow_kernel.domain.workflow import (
    ActorRef,
    DocumentType,
    PendingDocument,
    Role,
    TransitionDecision,
    TransitionOutcome,
    TransitionResult,
    WorkflowAction,
    WorkflowStatusView,
)
from workflow_kernel.exceptions import AuditWriteError, RejectionReasonRequiredError
from workflow_kernel.logging_config import LogContext, get_logger
from workflow_kernel.models.document import WorkflowDocument
from workflow_kernel.selectors.document_selector import DocumentSelector
from workflow_kernel.services.audit_recorder import SqlAuditRecorder
from workflow_kernel.services.document_service import DocumentService

logger = get_logger("services.workflow_executor")


def _emit_transition_trace(
    decision: TransitionDecision,
    document_id: UUID,
    duration_ms: float,
    audit_recorded: bool = False,
) -> None:
    """One structured ``workflow_transition`` line per request, any outcome."""
    logger.info(
        "workflow_transition",
        extra={
            "action": decision.action.value,
            "role": getattr(decision.role, "value", decision.role),
            "from_status": decision.current_status.value,
            "to_status": decision.new_status.value if decision.new_status else None,
            "outcome": decision.outcome.value,
            "reason": decision.reason,
            "audit_recorded": audit_recorded,
            "duration_ms": round(duration_ms, 3),
            "entity_id": str(document_id),
        },
    )


class WorkflowExecutor:
    """Executes workflow transitions on stored documents.

    Thin coordinator: the evaluator decides, DocumentService writes,
    the recorder audits.  Never commits; the caller owns the transaction.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        registry: TransitionRegistry | None = None,
        recorder: AuditRecorder | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._session = session
        self._clock = clock or SystemClock()
        self._registry = registry or DEFAULT_REGISTRY
        self._recorder = recorder or SqlAuditRecorder(session)
        self._settings = settings or EngineSettings()
        self._documents = DocumentService(session, clock=self._clock)
        self._selector = DocumentSelector(session)

    @classmethod
    def from_config(
        cls,
        session: Session,
        config: CompiledWorkflowConfig,
        clock: Clock | None = None,
        recorder: AuditRecorder | None = None,
    ) -> WorkflowExecutor:
        return cls(
            session,
            clock=clock,
            registry=config.registry,
            recorder=recorder,
            settings=config.settings,
        )

    @property
    def documents(self) -> DocumentService:
        return self._documents

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def perform_transition(
        self,
        document_type: DocumentType | str,
        document_id: UUID,
        action: WorkflowAction | str,
        actor: ActorRef,
        comment: str | None = None,
    ) -> TransitionResult:
        """Evaluate and, if accepted, apply ``action`` to a stored document.

        Returns a TransitionResult for every business outcome; only invalid
        requests and persistence failures raise.

        Raises:
            RejectionReasonRequiredError: reject with a missing/blank comment.
            UnknownDocumentTypeError: no such document type.
            DocumentNotFoundError: no such document for the type.
            TransitionConflictError: the status changed after it was read.
            UnknownPersistedStatusError: strict mapping and an unknown status.
            AuditWriteError: audit append failed in blocking mode.
        """
        t0 = time.monotonic()
        document_type = DocumentType.coerce(document_type)
        action = WorkflowAction(action)

        if action == WorkflowAction.REJECT and not (comment and comment.strip()):
            raise RejectionReasonRequiredError(document_type.value, str(document_id))

        with LogContext.bind(
            actor_id=str(actor.actor_id),
            document_type=document_type.value,
            document_id=str(document_id),
        ):
            document = self._documents.load(document_type, document_id)
            persisted_before = document.status

            decision = resolve_transition(
                document_type,
                persisted_before,
                action,
                actor.role,
                strict=self._settings.strict_status_mapping,
                registry=self._registry,
            )

            if not decision.accepted:
                _emit_transition_trace(
                    decision, document_id, (time.monotonic() - t0) * 1000,
                )
                return TransitionResult(
                    success=False,
                    outcome=decision.outcome,
                    document_id=document_id,
                    document_type=document_type,
                    previous_status=decision.current_status,
                    reason=decision.reason,
                )

            occurred_at = self._clock.now()
            self._documents.apply_transition(
                document,
                expected_status=persisted_before,
                new_status=decision.new_persisted_status,
                action=action,
                actor=actor,
                at=occurred_at,
                comment=comment,
            )

            record = build_audit_record(
                actor=actor,
                document_type=document_type,
                record_id=document.id,
                record_number=document.document_number,
                action=action,
                status_from=decision.current_status,
                status_to=decision.new_status,
                occurred_at=occurred_at,
                comment=comment,
            )
            audit_recorded = self._record_audit(record)

            _emit_transition_trace(
                decision,
                document_id,
                (time.monotonic() - t0) * 1000,
                audit_recorded=audit_recorded,
            )

        return TransitionResult(
            success=True,
            outcome=TransitionOutcome.ACCEPTED,
            document_id=document_id,
            document_type=document_type,
            previous_status=decision.current_status,
            new_status=decision.new_status,
            new_persisted_status=decision.new_persisted_status,
            audit_recorded=audit_recorded,
            reason=decision.reason,
        )

    def submit(self, document_type, document_id, actor, comment=None) -> TransitionResult:
        return self.perform_transition(
            document_type, document_id, WorkflowAction.SUBMIT, actor, comment,
        )

    def check(self, document_type, document_id, actor, comment=None) -> TransitionResult:
        return self.perform_transition(
            document_type, document_id, WorkflowAction.CHECK, actor, comment,
        )

    def approve(self, document_type, document_id, actor, comment=None) -> TransitionResult:
        return self.perform_transition(
            document_type, document_id, WorkflowAction.APPROVE, actor, comment,
        )

    def reject(self, document_type, document_id, actor, reason: str) -> TransitionResult:
        return self.perform_transition(
            document_type, document_id, WorkflowAction.REJECT, actor, reason,
        )

    def _record_audit(self, record: AuditRecord) -> bool:
        """Append ``record``; False if the append failed and failures don't block."""
        try:
            self._recorder.record(record)
        except Exception as exc:
            logger.error(
                "audit_write_failed",
                extra={
                    "record_type": record.record_type,
                    "record_id": str(record.record_id),
                    "audit_action": record.action.value,
                    "blocking": self._settings.audit_failure_blocks_transition,
                },
                exc_info=True,
            )
            if not self._settings.audit_failure_blocks_transition:
                return False
            if isinstance(exc, AuditWriteError):
                raise
            raise AuditWriteError(
                record.record_type, str(record.record_id), str(exc),
            ) from exc
        return True

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def get_workflow_status(
        self,
        document_type: DocumentType | str,
        document_id: UUID,
        role: Role | str,
    ) -> WorkflowStatusView:
        """Current canonical status of a document and what ``role`` may do next.

        Raises:
            DocumentNotFoundError: no such document for the type.
        """
        document_type = DocumentType.coerce(document_type)
        document = self._documents.load(document_type, document_id)
        current = to_canonical(
            document.status, strict=self._settings.strict_status_mapping,
        )
        return WorkflowStatusView(
            document_id=document.id,
            document_type=document_type,
            document_number=document.document_number,
            current_status=current,
            available_actions=available_actions(
                document_type, current, role, self._registry,
            ),
            submitted_by=document.submitted_by_id,
            checked_by=document.checked_by_id,
            checked_at=document.checked_at,
            approved_by=document.approved_by_id,
            approved_at=document.approved_at,
            rejected_by=document.rejected_by_id,
            rejected_at=document.rejected_at,
            rejection_reason=document.rejection_reason,
        )

    def get_pending_documents(
        self,
        document_type: DocumentType | str,
        role: Role | str,
        limit: int | None = None,
    ) -> list[PendingDocument]:
        """Documents waiting on an action ``role`` may take, newest first."""
        document_type = DocumentType.coerce(document_type)
        statuses = actionable_statuses(document_type, role, self._registry)
        if not statuses:
            return []

        persisted = {
            value for value, canonical in PERSISTED_TO_CANONICAL.items()
            if canonical in statuses
        }
        rows = self._selector.find_by_statuses(
            document_type,
            persisted,
            limit=limit if limit is not None else self._settings.pending_documents_limit,
        )
        return [self._to_pending(document_type, row, role) for row in rows]

    def _to_pending(
        self,
        document_type: DocumentType,
        document: WorkflowDocument,
        role: Role | str,
    ) -> PendingDocument:
        status = to_canonical(document.status)
        return PendingDocument(
            document_id=document.id,
            document_number=document.document_number,
            status=status,
            created_at=document.created_at,
            available_actions=available_actions(
                document_type, status, role, self._registry,
            ),
        )
