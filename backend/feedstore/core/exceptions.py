"""
Exceptions raised by the storage layer
"""

from typing import Optional


class FeedStoreError(Exception):
    """A storage operation failed (connection, statement execution or row decoding)."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        feed_id: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.feed_id = feed_id

    def __str__(self) -> str:
        return f"store: {self.message}"


class FeedNotRemovedError(FeedStoreError):
    """A delete matched no row."""

    def __init__(self, feed_id: Optional[int] = None) -> None:
        super().__init__(
            "no feed has been removed",
            operation="remove_feed",
            feed_id=feed_id,
        )


class AdminRequiredError(FeedStoreError):
    """A process-wide operation was requested by a non-administrator."""

    def __init__(self, user_id: int, operation: str) -> None:
        super().__init__(
            f"user #{user_id} is not allowed to run {operation}",
            operation=operation,
        )
        self.user_id = user_id
