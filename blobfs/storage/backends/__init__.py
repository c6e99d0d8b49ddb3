"""Storage backends for blob I/O."""

from blobfs.storage.backends.base import Container, Item, Location
from blobfs.storage.backends.local import LocalContainer, LocalLocation
from blobfs.storage.backends.local_item import LocalItem

__all__ = ["Container", "Item", "LocalContainer", "LocalItem", "LocalLocation", "Location"]
