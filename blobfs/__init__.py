"""blobfs - a local directory tree served as paginated blob containers.

Examples:
    >>> from blobfs.storage import CURSOR_START, LocationConfig, dial
    >>> location = dial("local", LocationConfig(path="/srv/blobs"))
    >>> container = location.container("photos")
    >>> items, cursor = container.items("", CURSOR_START, 50, 0)
"""

__version__ = "0.3.0"
