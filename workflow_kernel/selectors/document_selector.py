"""
Module: workflow_kernel.selectors.document_selector
Responsibility: Read-only queries over workflow documents.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Read-only: no mutations performed on any queried row.
    - ``find_by_statuses`` orders newest first, ID as tie-breaker, so the
      order is stable across calls.

Failure modes:
    - Returns None or an empty list when nothing matches (never raises on
      absence of data).
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select

from workflow_kernel.domain.workflow import DocumentType
from workflow_kernel.models.document import WorkflowDocument
from workflow_kernel.selectors.base import BaseSelector


class DocumentSelector(BaseSelector):

    def get(self, document_type: DocumentType | str, document_id: UUID) -> WorkflowDocument | None:
        return self.session.execute(
            select(WorkflowDocument).where(
                WorkflowDocument.id == document_id,
                WorkflowDocument.document_type == DocumentType.coerce(document_type).value,
            )
        ).scalar_one_or_none()

    def find_by_statuses(
        self,
        document_type: DocumentType | str,
        statuses: Iterable[str],
        limit: int | None = None,
    ) -> list[WorkflowDocument]:
        """
        Documents of ``document_type`` whose persisted status is in ``statuses``.

        Args:
            document_type: Type to search.
            statuses: Persisted status strings.
            limit: Maximum rows, or None for all.
        """
        wanted = sorted(set(statuses))
        if not wanted:
            return []

        query = (
            select(WorkflowDocument)
            .where(
                WorkflowDocument.document_type == DocumentType.coerce(document_type).value,
                WorkflowDocument.status.in_(wanted),
            )
            .order_by(WorkflowDocument.created_at.desc(), WorkflowDocument.id)
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.session.execute(query).scalars().all())
