"""Media store port.

Product images and order invoices live in an external media store. The
storefront only ever needs to delete them; uploads happen client side.
"""

from abc import ABC, abstractmethod


class MediaDeletionError(Exception):
    def __init__(self, ref: str, reason: str) -> None:
        super().__init__(f"Could not delete {ref}: {reason}")
        self.ref = ref
        self.reason = reason


class MediaStore(ABC):
    @abstractmethod
    def delete(self, ref: str) -> None:
        """Delete the asset behind ``ref``. Raises ``MediaDeletionError`` on failure."""
        ...
