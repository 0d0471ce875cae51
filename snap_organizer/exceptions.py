"""
Custom exception hierarchy for the snap organizer.

Fatal conditions (layout creation, source traversal) abort the run.
Per-file conditions are logged by the caller and the run continues.
"""


class OrganizerError(Exception):
    """Base exception for all snap organizer errors."""
    pass


class MetadataExtractionError(OrganizerError):
    """Raised when a single EXIF tag cannot be decoded."""
    pass


class WalkError(OrganizerError):
    """Raised when the source tree cannot be fully enumerated."""
    pass


class LayoutError(OrganizerError):
    """Raised when the destination layout cannot be created."""
    pass


class FileOperationError(OrganizerError):
    """Raised when a file copy fails."""
    pass
