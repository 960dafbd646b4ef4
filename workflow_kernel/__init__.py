"""
Workflow Kernel

Maker-checker-approver lifecycle for freight-forwarding documents:
- Static, role-gated transition tables per document type
- Canonical <-> persisted status translation
- Conditional (race-safe) status updates
- Append-only audit trail for every accepted transition
"""

__version__ = "0.1.0"
