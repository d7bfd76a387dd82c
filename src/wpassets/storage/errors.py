"""Asset store errors."""


class StoreError(Exception):
    """Base exception for asset store operations."""


class ResourceImportError(StoreError):
    """Raised when a file cannot be copied into the resource tree."""


class SearchError(StoreError):
    """Raised when a search cannot be executed against the store."""
