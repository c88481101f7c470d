"""
Convenience factory methods for common Result failures.

Eliminates boilerplate for the failures adapters report by hand; encoder
failures come out of Result.from_computation() instead.

Usage:
    from railway.result_failures import ResultFailures

    # Instead of:
    Result.failure(ErrorCode.CONFIGURATION_ERROR, "Subject is empty")

    # Write:
    ResultFailures.configuration_error("Subject is empty")
"""

from __future__ import annotations

from railway.failure import ErrorCode
from railway.result import Result


class ResultFailures:
    """Factory methods for common failure types."""

    @staticmethod
    def configuration_error(message: str, exception: BaseException | None = None) -> Result:
        """Invalid or inconsistent input configuration."""
        return Result.failure(ErrorCode.CONFIGURATION_ERROR, message, exception)

    @staticmethod
    def signing_error(message: str, exception: BaseException | None = None) -> Result:
        """The signing capability failed or refused."""
        return Result.failure(ErrorCode.SIGNING_ERROR, message, exception)
