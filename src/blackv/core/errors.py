"""Exception types shared across BlackV."""

from __future__ import annotations


class BlackVError(Exception):
    """Base class for BlackV errors."""


class TransportError(BlackVError):
    """The generation request was rejected or the connection failed.

    Raised for any non-success HTTP status and for network-level failures,
    whether they happen before the first chunk or in the middle of a stream.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
