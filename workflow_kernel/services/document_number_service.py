"""
DocumentNumberService -- allocates printed document numbers.

Responsibility:
    Draws the next value from the period counter for a document type and
    formats it (``0001/CARGO/I/2026``, ``JO-0001/CARGO/I/2026``,
    ``BKK-2026-0001``).

Architecture position:
    Kernel > Services.  Thin shell over SequenceService and the pure
    formatters in ``domain/document_number.py``.

Invariants enforced:
    - Numbers within one period are strictly increasing with no gaps
      (inherits SequenceService guarantees).
    - PJO/JO counters reset monthly, BKK counters reset yearly.
"""

from datetime import date

from sqlalchemy.orm import Session

from workflow_kernel.domain.document_number import (
    format_document_number,
    sequence_name,
)
from workflow_kernel.domain.workflow import DocumentType
from workflow_kernel.logging_config import get_logger
from workflow_kernel.services.base import BaseService
from workflow_kernel.services.sequence_service import SequenceService

logger = get_logger("services.document_number")


class DocumentNumberService(BaseService):

    def __init__(self, session: Session, sequence_service: SequenceService | None = None):
        super().__init__(session)
        self._sequences = sequence_service or SequenceService(session)

    def next_number(self, document_type: DocumentType | str, as_of: date) -> str:
        document_type = DocumentType.coerce(document_type)
        name = sequence_name(document_type, as_of)
        value = self._sequences.next_value(name)
        number = format_document_number(document_type, value, as_of)
        logger.debug(
            "document_number_allocated",
            extra={
                "document_type": document_type.value,
                "sequence_name": name,
                "document_number": number,
            },
        )
        return number
