"""Object storage backends for signature images and generated documents."""

from signdesk.infrastructure.external.storage.factory import StorageFactory

__all__ = ["StorageFactory"]
