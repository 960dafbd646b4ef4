"""
Typed Exception Hierarchy for the Workflow Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the workflow engine turn failures into user-facing messages
("not found", "changed by someone else", "reason required").  Matching on
message text is fragile, so every failure has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA as attributes (not just a message string)

Normal business outcomes are NOT exceptions.  "This action does not exist
in this state" and "this role may not take it" are returned as
``TransitionOutcome`` values by the evaluator.  Exceptions here cover
configuration mistakes, persistence failures, and invalid requests.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    WorkflowKernelError (base)
    |
    +-- ConfigurationError
    |   +-- UnknownDocumentTypeError
    |   +-- AmbiguousTransitionError
    |   +-- InvalidWorkflowConfigError
    |
    +-- StatusMappingError
    |   +-- UnknownPersistedStatusError
    |
    +-- DocumentError
    |   +-- DocumentNotFoundError
    |   +-- RejectionReasonRequiredError
    |
    +-- ConcurrencyError
    |   +-- TransitionConflictError
    |
    +-- AuditError
    |   +-- AuditWriteError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | UNKNOWN_DOCUMENT_TYPE       | No transition table registered for type
                | AMBIGUOUS_TRANSITION        | Two rules share (from, action), differ in to
                | INVALID_WORKFLOW_CONFIG     | YAML configuration failed validation
----------------|-----------------------------|-----------------------------------------
Status mapping  | UNKNOWN_PERSISTED_STATUS    | Strict mapping saw an unrecognized string
----------------|-----------------------------|-----------------------------------------
Document        | DOCUMENT_NOT_FOUND          | Document ID doesn't exist for that type
                | REJECTION_REASON_REQUIRED   | Reject requested without a comment
----------------|-----------------------------|-----------------------------------------
Concurrency     | TRANSITION_CONFLICT         | Status changed between read and update
----------------|-----------------------------|-----------------------------------------
Audit           | AUDIT_WRITE_FAILED          | Audit append failed in blocking mode
----------------|-----------------------------|-----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION      | UPDATE/DELETE of an audit log row

===============================================================================
HANDLING PATTERNS
===============================================================================

1. RACE ON A STATUS UPDATE (re-read and retry or tell the user):

    try:
        result = executor.approve(DocumentType.JOB_ORDER, jo_id, actor)
    except TransitionConflictError as e:
        notify_user(f"{e.document_type} {e.document_id} was changed, reload")

2. USE STRUCTURED DATA (not message parsing):

    except UnknownPersistedStatusError as e:
        return {"error": e.code, "status": e.persisted_status}

===============================================================================
"""


class WorkflowKernelError(Exception):
    """
    Base exception for all workflow kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "WORKFLOW_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(WorkflowKernelError):
    """Base exception for workflow configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class UnknownDocumentTypeError(ConfigurationError):
    """No transition table is registered for the document type."""

    code: str = "UNKNOWN_DOCUMENT_TYPE"

    def __init__(self, document_type: str):
        self.document_type = document_type
        super().__init__(f"No transition table registered for document type: {document_type}")


class AmbiguousTransitionError(ConfigurationError):
    """
    Two rules share the same (from_status, action) but lead to different
    destinations.  The evaluator relies on action x status -> status being
    a partial function.
    """

    code: str = "AMBIGUOUS_TRANSITION"

    def __init__(
        self,
        table_name: str,
        from_status: str,
        action: str,
        destinations: tuple[str, ...],
    ):
        self.table_name = table_name
        self.from_status = from_status
        self.action = action
        self.destinations = destinations
        super().__init__(
            f"Ambiguous transition in '{table_name}': action '{action}' from "
            f"'{from_status}' leads to {', '.join(destinations)}"
        )


class InvalidWorkflowConfigError(ConfigurationError):
    """Workflow configuration failed validation and must not be compiled."""

    code: str = "INVALID_WORKFLOW_CONFIG"

    def __init__(self, config_name: str, errors: list[str]):
        self.config_name = config_name
        self.errors = errors
        super().__init__(
            f"Workflow configuration '{config_name}' is invalid: "
            + "; ".join(errors)
        )


# Status mapping exceptions


class StatusMappingError(WorkflowKernelError):
    """Base exception for status translation errors."""

    code: str = "STATUS_MAPPING_ERROR"


class UnknownPersistedStatusError(StatusMappingError):
    """A persisted status string is not in the mapping table."""

    code: str = "UNKNOWN_PERSISTED_STATUS"

    def __init__(self, persisted_status: str | None):
        self.persisted_status = persisted_status
        super().__init__(f"Unrecognized persisted status: {persisted_status!r}")


# Document exceptions


class DocumentError(WorkflowKernelError):
    """Base exception for document-related errors."""

    code: str = "DOCUMENT_ERROR"


class DocumentNotFoundError(DocumentError):
    """Document with given ID was not found for the document type."""

    code: str = "DOCUMENT_NOT_FOUND"

    def __init__(self, document_type: str, document_id: str):
        self.document_type = document_type
        self.document_id = document_id
        super().__init__(f"{document_type.upper()} document not found: {document_id}")


class RejectionReasonRequiredError(DocumentError):
    """A reject action was requested without a reason."""

    code: str = "REJECTION_REASON_REQUIRED"

    def __init__(self, document_type: str, document_id: str):
        self.document_type = document_type
        self.document_id = document_id
        super().__init__(
            f"Rejection reason is required to reject {document_type.upper()} {document_id}"
        )


# Concurrency exceptions


class ConcurrencyError(WorkflowKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class TransitionConflictError(ConcurrencyError):
    """
    The conditional status update matched zero rows: another request moved
    the document out of ``expected_status`` after it was read.
    """

    code: str = "TRANSITION_CONFLICT"

    def __init__(self, document_type: str, document_id: str, expected_status: str):
        self.document_type = document_type
        self.document_id = document_id
        self.expected_status = expected_status
        super().__init__(
            f"Transition conflict on {document_type.upper()} {document_id}: "
            f"status is no longer '{expected_status}'"
        )


# Audit exceptions


class AuditError(WorkflowKernelError):
    """Base exception for audit-related errors."""

    code: str = "AUDIT_ERROR"


class AuditWriteError(AuditError):
    """Appending an audit record failed."""

    code: str = "AUDIT_WRITE_FAILED"

    def __init__(self, record_type: str, record_id: str, reason: str):
        self.record_type = record_type
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"Audit write failed for {record_type} {record_id}: {reason}")


# Immutability exceptions


class ImmutabilityError(WorkflowKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )
