from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Groups repository calls made on the current thread into one transaction."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError
