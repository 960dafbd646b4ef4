"""
Document numbering (``workflow_kernel.domain.document_number``).

Responsibility:
    Formats, parses and validates the human-readable numbers printed on
    workflow documents, and names the counter each number draws from.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.  Sequence values come from
    ``SequenceService`` via ``DocumentNumberService``.

Formats:
    PJO  ``NNNN/CARGO/<roman month>/YYYY``     counter per month
    JO   ``JO-NNNN/CARGO/<roman month>/YYYY``  counter per month
    BKK  ``BKK-YYYY-NNNN``                     counter per year
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from workflow_kernel.domain.workflow import DocumentType

_ROMAN_MONTHS = (
    "I", "II", "III", "IV", "V", "VI",
    "VII", "VIII", "IX", "X", "XI", "XII",
)

_PATTERNS = {
    DocumentType.PURCHASE_ORDER_LIKE: re.compile(
        r"^(?P<seq>\d{4})/CARGO/(?P<month>[IVX]+)/(?P<year>\d{4})$"
    ),
    DocumentType.JOB_ORDER: re.compile(
        r"^JO-(?P<seq>\d{4})/CARGO/(?P<month>[IVX]+)/(?P<year>\d{4})$"
    ),
    DocumentType.CASH_DISBURSEMENT: re.compile(
        r"^BKK-(?P<year>\d{4})-(?P<seq>\d{4})$"
    ),
}


@dataclass(frozen=True)
class ParsedDocumentNumber:
    document_type: DocumentType
    year: int
    sequence: int
    month: int | None = None


def to_roman_month(month: int) -> str:
    """Roman numeral for a month number (1-12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return _ROMAN_MONTHS[month - 1]


def from_roman_month(numeral: str) -> int:
    try:
        return _ROMAN_MONTHS.index(numeral) + 1
    except ValueError:
        raise ValueError(f"Not a roman month numeral: {numeral!r}") from None


def sequence_name(document_type: DocumentType, as_of: date) -> str:
    """Counter name the next number is drawn from (resets per period)."""
    if document_type == DocumentType.CASH_DISBURSEMENT:
        return f"{document_type.value}:{as_of.year:04d}"
    return f"{document_type.value}:{as_of.year:04d}-{as_of.month:02d}"


def format_document_number(document_type: DocumentType, sequence: int, as_of: date) -> str:
    if sequence < 1:
        raise ValueError(f"Sequence must be positive, got {sequence}")
    seq = f"{sequence:04d}"
    if document_type == DocumentType.CASH_DISBURSEMENT:
        return f"BKK-{as_of.year}-{seq}"
    month = to_roman_month(as_of.month)
    if document_type == DocumentType.JOB_ORDER:
        return f"JO-{seq}/CARGO/{month}/{as_of.year}"
    return f"{seq}/CARGO/{month}/{as_of.year}"


def parse_document_number(
    document_type: DocumentType, number: str,
) -> ParsedDocumentNumber | None:
    """Split a number into year/month/sequence, or None if malformed."""
    match = _PATTERNS[document_type].match(number)
    if match is None:
        return None
    month = None
    if "month" in match.groupdict():
        try:
            month = from_roman_month(match["month"])
        except ValueError:
            return None
    return ParsedDocumentNumber(
        document_type=document_type,
        year=int(match["year"]),
        sequence=int(match["seq"]),
        month=month,
    )


def is_valid_document_number(document_type: DocumentType, number: str) -> bool:
    return parse_document_number(document_type, number) is not None
