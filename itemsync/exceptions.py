"""Exception hierarchy for itemsync.

Per-field validation failures are never raised: they arrive as outcomes in a
successful response and are folded into item status. Exceptions cover
failed requests.
"""


class ItemSyncError(Exception):
    """Base exception for all itemsync errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
