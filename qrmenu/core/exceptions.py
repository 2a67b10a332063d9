"""
Error taxonomy for the data-access layer.

Read paths degrade to the demo dataset (fail-open) or raise
StoreUnavailableError (fail-closed). Write paths always raise
StoreWriteError on store failure. NotFoundError signals that an
update or delete targeted a category or item that does not exist.
"""

from typing import Optional


class MenuError(Exception):
    """Base class for all menu data-access errors."""


class StoreUnavailableError(MenuError):
    """The document store could not be reached (network, auth or timeout)."""


class StoreWriteError(MenuError):
    """
    A write to the document store failed.

    Attributes:
        operation: Repository operation that failed (e.g. "update_info")
    """

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(message or f"Write failed: {operation}")


class NotFoundError(MenuError):
    """
    The targeted document does not exist.

    Attributes:
        kind: Entity kind ("category", "item" or "document")
        identifier: Identifier or path that was looked up
    """

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} '{identifier}' not found")
