"""Database layer - engine, base classes, and append-only enforcement.

Startup::

    init_engine_from_url(settings.database_url)
    create_tables()                     # also registers the listeners

A process that runs against an existing schema and never calls
``create_tables`` must call ``register_immutability_listeners()`` itself.
"""

from workflow_kernel.db.base import Base, TrackedBase, UUIDString
from workflow_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)
from workflow_kernel.db.immutability import (
    register_immutability_listeners,
    unregister_immutability_listeners,
)

__all__ = [
    "init_engine_from_url",
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "register_immutability_listeners",
    "unregister_immutability_listeners",
    "Base",
    "TrackedBase",
    "UUIDString",
]
