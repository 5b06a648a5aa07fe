"""Exception hierarchy for the CodePipeline unzip action."""


class UnzipArtifactError(Exception):
    """Base exception for all unzip action errors."""


class InvalidEventError(UnzipArtifactError):
    """Raised when the invocation event carries no CodePipeline job."""


class ConfigurationError(UnzipArtifactError):
    """Raised when the action's user parameters are missing or invalid."""


class FetchError(UnzipArtifactError):
    """Raised when the source artifact cannot be retrieved."""


class ExtractionError(UnzipArtifactError):
    """Raised when the artifact is not a readable zip archive."""


class UploadError(UnzipArtifactError):
    """Raised when an extracted entry cannot be written to the destination.

    Attributes:
        key: The destination object key that failed to upload.
    """

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"Failed to upload '{key}': {message}")


class NotificationError(UnzipArtifactError):
    """Raised when the completion notification cannot be published."""
