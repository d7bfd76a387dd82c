"""Directory walking and batch asset import."""

from .detectors import FILE_TYPE_FILTERS, available_filter_types, validate_file_type
from .discovery import DirectoryWalker
from .errors import (
    CollectionNotFoundError,
    ImportSetupError,
    ImportTargetError,
    IngestionError,
    InvalidPathError,
    PathNotReadableError,
    UnknownFileTypeError,
    WalkerError,
)
from .models import FileDescriptor, ImportReport, ImportTarget, WalkResult
from .pipeline import ImportPipeline

__all__ = [
    "FILE_TYPE_FILTERS",
    "available_filter_types",
    "validate_file_type",
    "DirectoryWalker",
    "FileDescriptor",
    "WalkResult",
    "ImportTarget",
    "ImportReport",
    "ImportPipeline",
    "IngestionError",
    "WalkerError",
    "InvalidPathError",
    "PathNotReadableError",
    "ImportSetupError",
    "ImportTargetError",
    "CollectionNotFoundError",
    "UnknownFileTypeError",
]
