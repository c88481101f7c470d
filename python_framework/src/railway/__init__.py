"""
Railway-Oriented Programming (ROP) Framework for Python.

Explicit, composable, functional error handling — no exceptions in pipeline logic.

    from railway import Result, ErrorCode

    def require_key(public_key: bytes) -> Result[bytes]:
        if not public_key:
            return Result.failure(ErrorCode.CONFIGURATION_ERROR, "Public key must not be empty")
        return Result.success(public_key)

    result = (
        Result.success(b"\\x01\\x02")
        .flat_map(require_key)
        .map(len)
    )
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.result_failures import ResultFailures
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultFailures",
    "ResultAssertions",
]

__version__ = "1.1.0"
