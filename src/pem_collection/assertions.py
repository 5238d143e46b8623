"""
Test assertions for Result values.

    from pem_collection.assertions import ResultAssertions

    def test_duplicate_key():
        result = add_private_key(collection_with_key, other_key)
        ResultAssertions.assert_failure(result, ErrorCode.DUPLICATE_KEY)
"""

from __future__ import annotations

from typing import TypeVar

from pem_collection.failure import ErrorCode, FailureDescription
from pem_collection.result import Result

T = TypeVar("T")


class ResultAssertions:
    """Assertion helpers that print the other track when they fail."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Assert Success and return the value."""
        context = f" — {message}" if message else ""
        assert result.is_success(), (
            f"Expected Success but got Failure("
            f"{result.error().code.value}: {result.error().message!r}){context}"
        )
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureDescription:
        """Assert Failure, optionally with a specific code, and return the description."""
        context = f" — {message}" if message else ""
        assert result.is_failure(), f"Expected Failure but got Success({result.value()!r}){context}"
        error = result.error()
        if expected_code is not None:
            assert error.code == expected_code, (
                f"Expected error code {expected_code.value} "
                f"but got {error.code.value}: {error.message!r}{context}"
            )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        error = ResultAssertions.assert_failure(result)
        assert substring.lower() in error.message.lower(), (
            f"Expected failure message to contain {substring!r} but message was: {error.message!r}"
        )
