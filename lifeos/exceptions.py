"""Custom exception hierarchy for lifeos."""


class LifeOSError(Exception):
    """Base exception for LifeOS applications."""
    pass


class ConfigurationError(LifeOSError):
    """Raised when a required credential or setting is missing."""
    pass


class ToolArgumentError(LifeOSError):
    """Raised when model-supplied tool arguments do not match the tool's schema."""

    def __init__(self, tool_name: str, detail: str) -> None:
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(f"Invalid arguments for {tool_name}: {detail}")


class VaultError(LifeOSError):
    """Raised when the GitHub-hosted vault returns an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class StorageError(LifeOSError):
    """Raised when the durable conversation snapshot cannot be read or written."""
    pass


class ProviderFailedError(LifeOSError):
    """
    Raised when both the primary and the fallback provider failed a turn.
    The message names both causes so channels can show it verbatim.
    """

    def __init__(
        self,
        primary_name: str,
        primary_error: BaseException,
        secondary_name: str,
        secondary_error: BaseException,
    ) -> None:
        self.primary_error = primary_error
        self.secondary_error = secondary_error
        super().__init__(
            f"{primary_name}: {primary_error}\n"
            f"{secondary_name} fallback: {secondary_error}"
        )
