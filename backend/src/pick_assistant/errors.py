"""Error taxonomy shared by the provider client, stats sources and engine."""

from typing import Optional


class InputError(ValueError):
    """Invalid caller input (missing role, bad weights). Never retried."""


class ProviderError(Exception):
    """Base class for failures talking to an external data provider."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientProviderError(ProviderError):
    """Network failure, timeout, 429 or 5xx. Safe to retry."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class DataUnavailableError(ProviderError):
    """A fetch failed permanently (retries exhausted or non-retryable status)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        last_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.last_error = last_error


class CatalogUnavailableError(DataUnavailableError):
    """The patch version or champion catalog could not be obtained."""
