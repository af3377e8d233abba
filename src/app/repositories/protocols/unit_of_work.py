"""Unit of work protocol: transactional grouping of store access."""

from typing import ContextManager, Protocol


class UnitOfWork(Protocol):
    """Interface for grouping store reads and writes."""

    def atomic(self) -> ContextManager[None]:
        """
        Group writes into one transaction.

        Commits when the outermost block exits normally; rolls back on any
        exception. Nested blocks join the outer transaction.
        """
        ...

    def snapshot(self) -> ContextManager[None]:
        """
        Read from a single consistent instant.

        Opens a read transaction that is released when the outermost block
        exits. Nested blocks reuse it.
        """
        ...
