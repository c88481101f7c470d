"""
Test assertions for Result values.

Expressive assert helpers that produce clear failure messages.

Usage in tests:
    from railway import ResultAssertions

    def test_build_csr():
        der = ResultAssertions.assert_success(build_csr(request, signer))
        assert der[0] == 0x30

    def test_empty_subject():
        result = build_csr(empty_request, signer)
        ResultAssertions.assert_failure(result, ErrorCode.CONFIGURATION_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "subject")
"""

from __future__ import annotations

from typing import Any, TypeVar

from railway.failure import ErrorCode, FailureDescription
from railway.result import Result

T = TypeVar("T")


class ResultAssertions:
    """Expressive test assertions for Result values."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """
        Assert the Result is a Success and return the value.

            der = ResultAssertions.assert_success(result)
        """
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
        """
        Assert the Result is a Failure, optionally checking the error code.

            error = ResultAssertions.assert_failure(result, ErrorCode.SIGNING_ERROR)
        """
        context = f" — {message}" if message else ""
        assert result.is_failure(), (
            f"Expected Failure but got Success({result.value()!r}){context}"
        )
        error = result.error()
        if expected_code is not None:
            assert error.code == expected_code, (
                f"Expected error code {expected_code.value} "
                f"but got {error.code.value}: {error.message!r}{context}"
            )
        return error

    @staticmethod
    def assert_failure_message_contains(result: Result[T], substring: str) -> None:
        """Assert that the failure message contains the given substring (case-insensitive)."""
        assert result.is_failure(), (
            f"Expected Failure but got Success({result.value()!r})"
        )
        error = result.error()
        assert substring.lower() in error.message.lower(), (
            f"Expected failure message to contain {substring!r} "
            f"but message was: {error.message!r}"
        )

    @staticmethod
    def assert_failure_caused_by(
        result: Result[T],
        exception_type: type[BaseException],
    ) -> BaseException:
        """
        Assert the failure carries an exception of the given type as its cause.

            cause = ResultAssertions.assert_failure_caused_by(result, EncodingError)
        """
        assert result.is_failure(), (
            f"Expected Failure but got Success({result.value()!r})"
        )
        cause = result.error().exception
        assert isinstance(cause, exception_type), (
            f"Expected cause of type {exception_type.__name__} but got {cause!r}"
        )
        return cause

    @staticmethod
    def assert_success_value(result: Result[T], expected_value: Any) -> None:
        """Assert the Result is a Success with the specific value."""
        value = ResultAssertions.assert_success(result)
        assert value == expected_value, (
            f"Expected success value {expected_value!r} but got {value!r}"
        )
