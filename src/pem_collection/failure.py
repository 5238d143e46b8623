"""
Failure description — structured error information for the failure track.

Every operation in pem_collection reports problems as a FailureDescription
carried inside a Failure, tagged with one of the ErrorCode values below.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """Kinds of failure reported by collection, parser, and exporter operations."""

    DUPLICATE_KEY = "DUPLICATE_KEY"
    """A private key is already stored in the collection."""

    DUPLICATE_CSR = "DUPLICATE_CSR"
    """A certificate signing request is already stored in the collection."""

    INVALID_INPUT = "INVALID_INPUT"
    """A required argument (certificate, key, CSR) was absent."""

    CERTIFICATE_DECODE_ERROR = "CERTIFICATE_DECODE_ERROR"
    """A block labeled CERTIFICATE is not a parseable X.509 certificate."""

    ENCODING_ERROR = "ENCODING_ERROR"
    """The private key encoder could not produce a PEM block."""

    MALFORMED_INPUT = "MALFORMED_INPUT"
    """PEM text is absent, undecodable, or carries the wrong label."""

    UNSUPPORTED_KEY = "UNSUPPORTED_KEY"
    """The private key block label cannot be turned into a runtime key."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Settings could not be loaded or validated."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor: error code, message, optional exception, timestamp.

    >>> desc = FailureDescription(ErrorCode.INVALID_INPUT, "certificate cannot be None")
    >>> desc.code
    <ErrorCode.INVALID_INPUT: 'INVALID_INPUT'>
    """

    code: ErrorCode
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__)
        )
        return f"{self.message}\n{tb}"
