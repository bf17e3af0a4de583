"""Error taxonomy shared by the core and the data adapters."""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for every error raised by sgdnet."""


class InvalidConfiguration(NetworkError, ValueError):
    """Raised when a network or training run is configured incorrectly."""


class InvalidSize(InvalidConfiguration):
    """Raised when a layer is given a non-positive size."""


class SizeMismatch(NetworkError, ValueError):
    """Raised when two arrays do not have compatible shapes."""


class OutOfRange(NetworkError, IndexError):
    """Raised when an index falls outside a layer or data source."""


class InvalidRange(NetworkError, ValueError):
    """Raised when a subset view does not describe a valid range."""


class DataSourceUnavailable(NetworkError, OSError):
    """Raised when a dataset adapter cannot read or validate its input."""


def size_mismatch(expected: object, actual: object) -> SizeMismatch:
    return SizeMismatch(f"Arrays must be same shape ({expected} != {actual})")


__all__ = [
    "NetworkError",
    "InvalidConfiguration",
    "InvalidSize",
    "SizeMismatch",
    "OutOfRange",
    "InvalidRange",
    "DataSourceUnavailable",
]
