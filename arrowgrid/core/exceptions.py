"""Custom exception hierarchy for the arrow-word editor."""


class ArrowGridError(Exception):
    """Base exception for editor failures."""


class GridSizeError(ArrowGridError):
    """Raised when a grid is created or resized with non-positive dimensions."""


class InvalidPlacementAttempt(ArrowGridError):
    """Raised when a definition cannot be anchored on the requested cell."""


class StaleReferenceError(ArrowGridError):
    """Describes a placement whose anchor no longer holds after a grid edit."""


class ImportDecodeError(ArrowGridError):
    """Raised when a packed set or legacy save cannot be decoded."""


class ExportRenderError(ArrowGridError):
    """Raised when a PDF export cannot be produced."""


class ValidationError(ArrowGridError):
    """Raised when the grid integrity checks fail."""


class SetOperationError(ArrowGridError):
    """Raised when a set or saved grid operation targets nothing valid."""
