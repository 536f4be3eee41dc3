import logging

from rentroll.settings import settings
from rentroll.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def get_storage() -> StorageBackend:
    """Storage for exported invoice PDFs, picked by ``RENTROLL_STORAGE_BACKEND``."""
    backend = settings.storage_backend.lower()

    if backend == "local":
        from rentroll.storage.local import LocalStorage

        storage = LocalStorage(settings.storage_local_path)
        logger.info("Invoice PDFs are stored under %s", storage.root)
        return storage

    raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")
