"""External collaborators: remote validation and deletion clients.

Abstract interfaces with mock implementations; concrete transports plug in
behind the same interfaces.
"""

from itemsync.providers.deletion import DeletionClient, MockDeletionClient
from itemsync.providers.validation import MockValidationClient, ValidationClient

__all__ = [
    # Validation
    "ValidationClient",
    "MockValidationClient",
    # Deletion
    "DeletionClient",
    "MockDeletionClient",
]
