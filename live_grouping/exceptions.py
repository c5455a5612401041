"""Custom exception hierarchy for live-grouping."""


class LiveGroupingError(Exception):
    """Base exception for all live-grouping errors."""


class EntityNotFoundError(LiveGroupingError):
    """Raised when a referenced project, tower, floor or unit does not exist."""


class InvalidEntityStateError(LiveGroupingError):
    """Raised when an entity is in an invalid state for the operation."""


class ValidationError(LiveGroupingError):
    """Raised when input values are malformed."""


class WizardValidationError(ValidationError):
    """Raised when a wizard gate blocks navigation or submission."""

    def __init__(self, message: str, step: int | None = None) -> None:
        super().__init__(message)
        self.step = step


class ConfigurationError(LiveGroupingError):
    """Raised when configuration is invalid or missing."""


class BackendError(LiveGroupingError):
    """Raised when a persistence collaborator call fails."""


class MediaUploadError(BackendError):
    """Raised when a media upload fails."""


class SubmissionError(LiveGroupingError):
    """Raised when the final project create fails."""


class AdminActionError(LiveGroupingError):
    """Raised when an admin action on a persisted project or unit fails."""

    def __init__(self, message: str, action: str | None = None) -> None:
        super().__init__(message)
        self.action = action


class UnitActionError(AdminActionError):
    """Raised when a lock, book, release or edit of a unit fails."""
