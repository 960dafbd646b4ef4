"""Tests for document number formatting and parsing."""

from datetime import date

import pytest

from workflow_kernel.domain.document_number import (
    format_document_number,
    from_roman_month,
    is_valid_document_number,
    parse_document_number,
    sequence_name,
    to_roman_month,
)
from workflow_kernel.domain.workflow import DocumentType

PJO = DocumentType.PURCHASE_ORDER_LIKE
JO = DocumentType.JOB_ORDER
BKK = DocumentType.CASH_DISBURSEMENT


class TestRomanMonths:

    @pytest.mark.parametrize(
        "month, numeral", [(1, "I"), (4, "IV"), (9, "IX"), (10, "X"), (12, "XII")],
    )
    def test_to_roman(self, month, numeral):
        assert to_roman_month(month) == numeral
        assert from_roman_month(numeral) == month

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_out_of_range(self, month):
        with pytest.raises(ValueError):
            to_roman_month(month)

    def test_unknown_numeral(self):
        with pytest.raises(ValueError):
            from_roman_month("XIII")


class TestFormat:

    def test_purchase_order_like(self):
        assert format_document_number(PJO, 7, date(2026, 3, 9)) == "0007/CARGO/III/2026"

    def test_job_order(self):
        assert format_document_number(JO, 42, date(2026, 11, 1)) == "JO-0042/CARGO/XI/2026"

    def test_cash_disbursement(self):
        assert format_document_number(BKK, 1, date(2026, 6, 30)) == "BKK-2026-0001"

    def test_sequence_must_be_positive(self):
        with pytest.raises(ValueError):
            format_document_number(JO, 0, date(2026, 1, 1))


class TestSequenceName:

    def test_monthly_counters(self):
        assert sequence_name(PJO, date(2026, 2, 14)) == "pjo:2026-02"
        assert sequence_name(JO, date(2026, 12, 1)) == "jo:2026-12"

    def test_yearly_counter_for_disbursements(self):
        assert sequence_name(BKK, date(2026, 2, 14)) == sequence_name(BKK, date(2026, 9, 1))


class TestParse:

    def test_parse_job_order(self):
        parsed = parse_document_number(JO, "JO-0042/CARGO/XI/2026")
        assert parsed.sequence == 42
        assert parsed.month == 11
        assert parsed.year == 2026

    def test_parse_cash_disbursement(self):
        parsed = parse_document_number(BKK, "BKK-2026-0013")
        assert parsed.sequence == 13
        assert parsed.month is None

    @pytest.mark.parametrize(
        "document_type, number",
        [
            (PJO, "JO-0001/CARGO/I/2026"),
            (JO, "0001/CARGO/I/2026"),
            (JO, "JO-0001/CARGO/XIV/2026"),
            (BKK, "BKK-26-0001"),
            (BKK, ""),
        ],
    )
    def test_malformed(self, document_type, number):
        assert parse_document_number(document_type, number) is None
        assert not is_valid_document_number(document_type, number)

    @pytest.mark.parametrize("document_type", list(DocumentType))
    def test_formatted_numbers_are_valid(self, document_type):
        number = format_document_number(document_type, 128, date(2026, 8, 17))
        parsed = parse_document_number(document_type, number)
        assert parsed.sequence == 128
        assert parsed.year == 2026
