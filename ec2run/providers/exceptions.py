"""Provider-agnostic exceptions raised by infrastructure queries."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for infrastructure inventory failures."""


class ProviderCredentialsError(ProviderError):
    """Credentials are missing, unreadable, or name an unknown profile."""


class ProviderConnectionError(ProviderError):
    """The provider endpoint could not be reached."""


class ProviderAPIError(ProviderError):
    """The provider API rejected a request.

    Parameters
    ----------
    message : str
        Error message as reported by the provider
    error_code : str | None
        Provider error code (e.g. ``UnauthorizedOperation``)
    operation : str | None
        Name of the API operation that failed
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.operation = operation
