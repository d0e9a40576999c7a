"""Exceptions raised while turning commands into Alpaca API calls."""


class ApcaCliError(Exception):
    """Base exception for all client errors reported to the user."""


class ConfigError(ApcaCliError):
    """Raised when environment configuration is invalid or missing."""


class TransportError(ApcaCliError):
    """Raised when an Alpaca API call fails."""


class IssueError(TransportError):
    """Raised when a request could not be sent to the API at all."""

    def __init__(self, method: str, endpoint: str, detail: str) -> None:
        self.method = method
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"failed to issue {method} request to {endpoint} endpoint: {detail}")


class ResponseError(TransportError):
    """Raised when the API rejected a request or sent an unusable response."""

    def __init__(self, endpoint: str, detail: str, status_code: int | None = None) -> None:
        self.endpoint = endpoint
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class CommandError(ApcaCliError):
    """Raised when a command fails; carries the action that was attempted."""

    def __init__(self, action: str, cause: Exception) -> None:
        self.action = action
        super().__init__(f"failed to {action}: {cause}")
