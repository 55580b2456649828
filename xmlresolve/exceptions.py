class ResourceError(RuntimeError):
    """Base class for failures opening or reading a resource."""

    def __init__(self, message: str, description: str = "") -> None:
        super().__init__(message)
        self.description = description


class ResourceNotFoundError(ResourceError):
    """Raised when the resource does not exist."""


class ResourceAccessDeniedError(ResourceError):
    """Raised when permissions forbid reading the resource."""


class ResourceIOError(ResourceError):
    """Raised for any other I/O failure while opening the resource."""
