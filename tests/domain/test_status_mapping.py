"""
Tests for status translation (``workflow_kernel.domain.status_mapping``).

Invariants tested:
- Round-trip on the known domain, in both directions, for every type.
- Nothing that means "approved" maps anywhere but APPROVED.
- Unknown strings default to DRAFT with a warning, or raise in strict mode.
"""

import pytest

from workflow_kernel.domain.status_mapping import (
    PERSISTED_TO_CANONICAL,
    from_canonical,
    persisted_vocabulary,
    to_canonical,
)
from workflow_kernel.domain.workflow import DocumentType, WorkflowStatus
from workflow_kernel.exceptions import (
    ConfigurationError,
    UnknownDocumentTypeError,
    UnknownPersistedStatusError,
)

_S = WorkflowStatus


class TestToCanonical:

    @pytest.mark.parametrize(
        "persisted, canonical",
        [
            ("draft", _S.DRAFT),
            ("pending_approval", _S.PENDING_CHECK),
            ("pending_check", _S.PENDING_CHECK),
            ("checked", _S.CHECKED),
            ("approved", _S.APPROVED),
            ("rejected", _S.REJECTED),
            ("active", _S.APPROVED),
            ("completed", _S.APPROVED),
        ],
    )
    def test_known_strings(self, persisted, canonical):
        assert to_canonical(persisted) == canonical

    def test_approval_synonyms_never_map_elsewhere(self):
        for persisted in ("approved", "active", "completed"):
            assert PERSISTED_TO_CANONICAL[persisted] == _S.APPROVED

    @pytest.mark.parametrize("persisted", ["archived", "", None, "APPROVED"])
    def test_unknown_defaults_to_draft(self, persisted):
        assert to_canonical(persisted) == _S.DRAFT

    def test_default_is_logged(self, captured_logs):
        to_canonical("legacy_hold")

        logs = captured_logs()
        (record,) = [r for r in logs if r["message"] == "status_mapping_defaulted"]
        assert record["level"] == "WARNING"
        assert record["persisted_status"] == "legacy_hold"
        assert record["defaulted_to"] == "draft"

    def test_strict_mode_raises(self):
        with pytest.raises(UnknownPersistedStatusError) as exc_info:
            to_canonical("legacy_hold", strict=True)
        assert exc_info.value.persisted_status == "legacy_hold"
        assert exc_info.value.code == "UNKNOWN_PERSISTED_STATUS"

    def test_strict_mode_accepts_known(self):
        assert to_canonical("active", strict=True) == _S.APPROVED


class TestFromCanonical:

    def test_purchase_order_like_approved_is_approved(self):
        assert from_canonical(_S.APPROVED, DocumentType.PURCHASE_ORDER_LIKE) == "approved"

    def test_job_order_approved_is_active(self):
        assert from_canonical(_S.APPROVED, DocumentType.JOB_ORDER) == "active"

    def test_purchase_order_like_pending_check(self):
        assert from_canonical(_S.PENDING_CHECK, DocumentType.PURCHASE_ORDER_LIKE) == "pending_approval"

    def test_cash_disbursement_is_identity(self):
        for status in WorkflowStatus:
            assert from_canonical(status, DocumentType.CASH_DISBURSEMENT) == status.value

    def test_accepts_plain_strings(self):
        assert from_canonical("approved", "jo") == "active"

    def test_unknown_document_type(self):
        with pytest.raises(UnknownDocumentTypeError) as exc_info:
            from_canonical(_S.DRAFT, "invoice")
        assert isinstance(exc_info.value, ConfigurationError)

    def test_unknown_document_type_vocabulary(self):
        with pytest.raises(UnknownDocumentTypeError):
            persisted_vocabulary("invoice")


class TestRoundTrip:

    @pytest.mark.parametrize("document_type", list(DocumentType))
    def test_canonical_round_trip(self, document_type):
        for status in WorkflowStatus:
            assert to_canonical(from_canonical(status, document_type)) == status

    @pytest.mark.parametrize("document_type", list(DocumentType))
    def test_persisted_round_trip_on_vocabulary(self, document_type):
        for persisted in persisted_vocabulary(document_type):
            assert from_canonical(to_canonical(persisted), document_type) == persisted

    def test_vocabularies(self):
        assert persisted_vocabulary(DocumentType.JOB_ORDER) == {
            "draft", "pending_check", "checked", "active", "rejected",
        }
        assert "pending_approval" in persisted_vocabulary(DocumentType.PURCHASE_ORDER_LIKE)
        assert "pending_check" not in persisted_vocabulary(DocumentType.PURCHASE_ORDER_LIKE)
