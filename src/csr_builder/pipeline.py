"""
Pipeline — the ROP chain that builds one signed certification request.

Pure except for the single call into the signing capability, which is
injected via the SigningCapability port.

  check algorithm consistency(request, signer)
    → encode_tbs_request(request)                  → tbs
      → sign_tbs(tbs, signer, algorithm)           → signature
        → encode_certification_request(tbs, ...)   → DER

The same `tbs` object is signed and embedded; it is never re-encoded.
Each stage returns Result[T]. Failures short-circuit automatically, so
the caller gets either the complete DER or a Failure, never a partial
structure.
"""

from __future__ import annotations

import structlog
from railway import ErrorCode
from railway.result import Result

from csr_builder.domain.models import CsrRequest
from csr_builder.domain.ports import SigningCapability
from csr_builder.encoding.request import encode_certification_request, encode_tbs_request
from csr_builder.signing import sign_tbs

log = structlog.get_logger()


def check_algorithm_consistency(
    request: CsrRequest,
    signer: SigningCapability,
) -> Result[CsrRequest]:
    """
    Verify the signature algorithm identifier will match what was signed.

    The signer must be bound to the requested signature algorithm, and that
    algorithm must belong to the same key family as the public key.
    A mismatch still produces valid DER, so it has to be caught here.
    """
    if signer.algorithm != request.signature_algorithm:
        return Result.failure(
            ErrorCode.CONFIGURATION_ERROR,
            f"Signer is bound to {signer.algorithm.value} "
            f"but the request asks for {request.signature_algorithm.value}",
        )
    if request.signature_algorithm.family != request.key_algorithm.family:
        return Result.failure(
            ErrorCode.CONFIGURATION_ERROR,
            f"Signature algorithm {request.signature_algorithm.value} "
            f"does not fit a {request.key_algorithm.value} public key",
        )
    return Result.success(request)


def _sign_and_finalize(
    tbs: bytes,
    request: CsrRequest,
    signer: SigningCapability,
) -> Result[bytes]:
    return sign_tbs(tbs, signer, request.signature_algorithm).flat_map(
        lambda signature: encode_certification_request(tbs, request.signature_algorithm, signature)
    )


def build_csr(request: CsrRequest, signer: SigningCapability) -> Result[bytes]:
    """
    Build the DER-encoded PKCS#10 CertificationRequest.

    Returns Result[bytes] with the complete DER on success,
    or Result.failure with the error from the first failing stage:
    CONFIGURATION_ERROR, ENCODING_ERROR or SIGNING_ERROR.
    The signer is not called when configuration or encoding fails.
    """
    return (
        check_algorithm_consistency(request, signer)
        .flat_map(encode_tbs_request)
        .flat_map(lambda tbs: _sign_and_finalize(tbs, request, signer))
        .peek(
            lambda der: log.info(
                "csr.built",
                size=len(der),
                key_algorithm=request.key_algorithm.value,
                signature_algorithm=request.signature_algorithm.value,
            )
        )
        .peek_failure(
            lambda err: log.warning("csr.build_failed", code=err.code.value, reason=err.message)
        )
    )
