"""Exception hierarchy for configuration and API exchange failures."""


class WenError(Exception):
    """Base exception for the wen client."""


class ConfigError(WenError):
    """Raised when the configuration file is missing, unreadable or incomplete."""


class ExchangeError(WenError):
    """Raised when a single request/response exchange with the API fails."""


class EncodeError(ExchangeError):
    """Raised when a request payload cannot be serialized."""


class TransportError(ExchangeError):
    """Raised on connection failures and non-success HTTP statuses."""

    def __init__(
        self, message: str, *, status: int | None = None, detail: str = ""
    ) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


class DecodeError(ExchangeError):
    """Raised when the API answers with a body that carries no usable text."""
