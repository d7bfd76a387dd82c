"""Import errors that abort a run before any file is processed."""


class IngestionError(Exception):
    """Base exception for fatal import failures."""


class WalkerError(IngestionError):
    """Raised when the import root cannot be traversed at all."""


class InvalidPathError(WalkerError):
    """Raised when the import root is not an existing directory."""


class PathNotReadableError(WalkerError):
    """Raised when the import root exists but cannot be read."""


class ImportSetupError(IngestionError):
    """Raised when import options are inconsistent or reference missing entities."""


class ImportTargetError(ImportSetupError):
    """Raised unless exactly one of collection or tag is given."""


class CollectionNotFoundError(ImportSetupError):
    """Raised when the requested collection does not exist in the store."""


class UnknownFileTypeError(ImportSetupError):
    """Raised when a file type filter name is not recognized."""
