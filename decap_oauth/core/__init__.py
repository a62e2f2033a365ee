"""Core abstractions for the Decap OAuth relay."""

from decap_oauth.core.errors import (
    ExchangeError,
    InvalidStateError,
    MissingParameterError,
    ProviderMismatchError,
    RelayError,
)


__all__ = [
    "RelayError",
    "MissingParameterError",
    "ProviderMismatchError",
    "InvalidStateError",
    "ExchangeError",
]
