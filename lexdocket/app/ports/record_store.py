"""Record store port interface for hearing and deadline persistence."""

from collections.abc import Iterable
from typing import Protocol

from lexdocket.domain import Deadline, Hearing, Record, Transition


class RecordStorePort(Protocol):
    """Port interface for the durable keyed store of hearings and deadlines.

    Adapters must make :meth:`create_many` and :meth:`commit` all-or-nothing:
    when they raise, no record of the batch may be visible afterwards.

    Side effects: Reads/writes persisted records.
    """

    def load_hearing(self, hearing_id: str) -> Hearing:
        """Load a hearing.

        Raises:
            RecordNotFoundError: If no hearing has this id
        """
        ...

    def load_deadline(self, deadline_id: str) -> Deadline:
        """Load a deadline.

        Raises:
            RecordNotFoundError: If no deadline has this id
        """
        ...

    def list_hearings(self) -> list[Hearing]:
        """Return all hearings."""
        ...

    def list_deadlines(self) -> list[Deadline]:
        """Return all deadlines."""
        ...

    def save(self, record: Record) -> None:
        """Insert or replace a single record."""
        ...

    def create_many(self, records: Iterable[Record]) -> None:
        """Insert or replace several records in one transaction."""
        ...

    def commit(self, transition: Transition) -> None:
        """Persist a transition's primary record and its cascade in one transaction."""
        ...
