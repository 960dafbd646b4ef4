"""
SequenceService -- monotonic sequence allocation via locked counter rows.

Responsibility:
    Provides strictly increasing sequence numbers for document numbering.
    Uses a dedicated counter table with row-level locking
    (``SELECT ... FOR UPDATE``) to guarantee uniqueness and ordering under
    concurrent access.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.
    Called by DocumentNumberService.

Invariants enforced:
    - Monotonicity: the locked counter row is the sole source of truth for
      the next value.  Counting existing rows (max + 1) is never used.
    - Transactional: an increment is only visible after the caller's
      transaction commits.  Rollback returns the value.

Failure modes:
    - IntegrityError on concurrent counter creation (handled via savepoint
      rollback and re-read).
"""

from sqlalchemy import BigInteger, String, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, mapped_column

from workflow_kernel.db.base import Base
from workflow_kernel.logging_config import get_logger
from workflow_kernel.services.base import BaseService

logger = get_logger("services.sequence")


class SequenceCounter(Base):
    """One named counter, e.g. ``jo:2026-10`` or ``bkk:2026``."""

    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(String(50), unique=True)
    current_value: Mapped[int] = mapped_column(BigInteger, default=0)


class SequenceService(BaseService):
    """
    Transactional counters for document numbering.

    Guarantees:
        - Strictly increasing values per sequence name via a locked row.
        - Gap-free under normal operation; a rolled back transaction
          returns its value.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
    """

    def next_value(self, sequence_name: str) -> int:
        """Increment the named counter (creating it at 0) and return the new value."""
        counter = self._locked(sequence_name) or self._create(sequence_name)
        counter.current_value += 1
        self.session.flush()
        logger.debug(
            "sequence_allocated",
            extra={"sequence_name": sequence_name, "value": counter.current_value},
        )
        return counter.current_value

    def current_value(self, sequence_name: str) -> int | None:
        """Current value without incrementing, or None if never used."""
        return self.session.execute(
            select(SequenceCounter.current_value)
            .where(SequenceCounter.name == sequence_name)
        ).scalar_one_or_none()

    def _locked(self, sequence_name: str) -> SequenceCounter | None:
        return self.session.execute(
            select(SequenceCounter)
            .where(SequenceCounter.name == sequence_name)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def _create(self, sequence_name: str) -> SequenceCounter:
        # A concurrent first use may insert the same name; the savepoint
        # keeps that loss from rolling back the caller's work.
        try:
            with self.session.begin_nested():
                counter = SequenceCounter(name=sequence_name, current_value=0)
                self.session.add(counter)
                self.session.flush()
        except IntegrityError:
            logger.debug(
                "sequence_counter_race_retry",
                extra={"sequence_name": sequence_name},
            )
            return self._locked(sequence_name)
        return counter
