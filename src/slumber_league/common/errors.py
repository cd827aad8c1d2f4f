class InputUnavailableError(RuntimeError):
    """The device data source can't be reached or access was not granted."""

    def __init__(self, message: str, action: str = "Open Settings and allow sleep data access.") -> None:
        super().__init__(message)
        self.action = action


class UploadError(RuntimeError):
    """A single night could not be persisted."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
