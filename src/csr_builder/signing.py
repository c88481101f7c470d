"""
Signing adapter — hands the TBS bytes to the external signing capability.

The core never hashes, pads or retries: the capability applies whatever
digest-then-sign transform its algorithm implies, and a failure for a given
key/attempt is surfaced immediately as SIGNING_ERROR with its cause.
"""

from __future__ import annotations

import structlog
from railway import ErrorCode, FailureDescription
from railway.result import Result
from railway.result_failures import ResultFailures

from csr_builder.domain.algorithms import SignatureAlgorithm
from csr_builder.domain.ports import SigningCapability

log = structlog.get_logger()


def _as_signing_failure(error: FailureDescription) -> FailureDescription:
    if error.code is ErrorCode.SIGNING_ERROR:
        return error
    return error.recoded(ErrorCode.SIGNING_ERROR, "Signing capability failed")


def _unwrap(outcome: object) -> Result[bytes]:
    if not isinstance(outcome, Result):
        return Result.failure(
            ErrorCode.SIGNING_ERROR,
            f"Signing capability returned {type(outcome).__name__} instead of a Result",
        )
    return outcome.map_failure(_as_signing_failure)


def _check_signature(signature: object) -> Result[bytes]:
    if not isinstance(signature, (bytes, bytearray)):
        return Result.failure(
            ErrorCode.SIGNING_ERROR,
            f"Signature must be bytes, got {type(signature).__name__}",
        )
    if len(signature) == 0:
        return ResultFailures.signing_error("Signing capability returned an empty signature")
    return Result.success(bytes(signature))


def sign_tbs(
    tbs: bytes,
    signer: SigningCapability,
    algorithm: SignatureAlgorithm,
) -> Result[bytes]:
    """
    Sign the TBS bytes with the external capability, exactly once.

    Returns Result[bytes] with the raw signature on success.
    Returns Result.failure(SIGNING_ERROR, ...) when the capability fails,
    raises, returns something other than a Result, or returns an empty
    signature. The underlying message and exception are kept.
    """
    log.debug("signing.started", algorithm=algorithm.value, tbs_size=len(tbs))
    return (
        Result.from_computation(
            lambda: signer.sign(tbs, algorithm),
            ErrorCode.SIGNING_ERROR,
            "Signing capability raised",
        )
        .flat_map(_unwrap)
        .flat_map(_check_signature)
        .peek_failure(lambda err: log.warning("signing.failed", algorithm=algorithm.value, reason=err.message))
    )
