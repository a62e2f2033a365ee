"""Core error types for the OAuth relay.

Every per-request failure is a ``RelayError``; the API layer turns it into a
plain-text response using ``status_code``. Configuration problems are not
relay errors, see ``decap_oauth.config.settings.ConfigurationError``.
"""


class RelayError(Exception):
    """Base exception for all per-request relay errors."""

    status_code: int = 500

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize with a message and optional cause.

        Args:
            message: The error message, returned verbatim as the response body
            cause: The underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause
        if cause:
            # Use Python's exception chaining
            self.__cause__ = cause


class MissingParameterError(RelayError):
    """Error raised when a required query parameter or header is absent."""

    status_code = 400

    def __init__(
        self, message: str, parameter: str | None = None, cause: Exception | None = None
    ):
        """Initialize with a message and the name of the missing parameter.

        Args:
            message: The error message
            parameter: The query parameter or header that was missing
            cause: The underlying exception
        """
        super().__init__(message, cause)
        self.parameter = parameter


class ProviderMismatchError(RelayError):
    """Error raised when the requested provider is not the configured one."""

    status_code = 400

    def __init__(self, provider: str, expected: str):
        super().__init__(f"Unexpected provider `{provider}`")
        self.provider = provider
        self.expected = expected


class InvalidStateError(RelayError):
    """Error raised when a signed state token fails verification."""

    status_code = 400

    def __init__(self, reason: str, cause: Exception | None = None):
        """Initialize with the internal reason.

        The response body is always ``Invalid state``; ``reason`` is kept for
        logging only.

        Args:
            reason: Why verification failed
            cause: The underlying exception
        """
        super().__init__("Invalid state", cause)
        self.reason = reason


class ExchangeError(RelayError):
    """Error raised when the code-for-token exchange fails.

    Covers transport errors, timeouts, non-2xx responses and malformed token
    payloads. The message may include the provider's error text but never
    client credentials.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        provider_status: int | None = None,
        cause: Exception | None = None,
    ):
        """Initialize with a message, the provider's HTTP status, and cause.

        Args:
            message: The error message
            provider_status: HTTP status returned by the token endpoint, if any
            cause: The underlying exception
        """
        super().__init__(message, cause)
        self.provider_status = provider_status
