from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Keeps exported invoice PDFs, addressed by a relative key such as
    ``invoices/2024-01/INV-202401-101.pdf``."""

    @abstractmethod
    def save(self, key: str, data: bytes) -> str:
        """Write ``data`` under ``key``, replacing any earlier export, and return its location."""
        ...

    @abstractmethod
    def get(self, key: str) -> bytes: ...

    @abstractmethod
    def exists(self, key: str) -> bool: ...

    @abstractmethod
    def location(self, key: str) -> str:
        """Absolute location of ``key``, whether or not it has been written yet."""
        ...
