"""Exceptions for uploads app."""


class UploadTypeConfigurationError(Exception):
    """Raised when an upload type has no configured root directory."""

    def __init__(self, upload_type: str) -> None:
        """Initialize UploadTypeConfigurationError.

        Args:
            upload_type: The upload type identifier that was looked up.
        """
        self.upload_type = upload_type
        super().__init__(
            f'Upload type {upload_type!r} has no configured root directory',
        )
