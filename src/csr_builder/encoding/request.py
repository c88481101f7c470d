"""
CertificationRequest assembly — the TBS structure and the signed envelope.

    CertificationRequestInfo ::= SEQUENCE {
        version       INTEGER { v1(0) },
        subject       Name,
        subjectPKInfo SubjectPublicKeyInfo,
        attributes    [0] Attributes
    }

    CertificationRequest ::= SEQUENCE {
        certificationRequestInfo CertificationRequestInfo,
        signatureAlgorithm       AlgorithmIdentifier,
        signature                BIT STRING
    }

encode_tbs_request() produces the CertificationRequestInfo bytes once; the
pipeline hands that same object to the signer and to
encode_certification_request(), which embeds it verbatim.
"""

from __future__ import annotations

from typing import Final

import structlog
from railway import ErrorCode
from railway.result import Result

from csr_builder.domain.algorithms import SignatureAlgorithm
from csr_builder.domain.models import CsrRequest
from csr_builder.encoding import der
from csr_builder.encoding.name import encode_name
from csr_builder.encoding.spki import encode_algorithm_identifier, encode_subject_public_key_info

log = structlog.get_logger()

PKCS10_VERSION: Final = 0


def _assemble_tbs(name: bytes, spki: bytes) -> bytes:
    return der.encode_sequence([
        der.encode_integer(PKCS10_VERSION),
        name,
        spki,
        # No attributes requested; the [0] field itself is mandatory.
        der.encode_context_constructed(0),
    ])


def encode_tbs_request(request: CsrRequest) -> Result[bytes]:
    """
    Encode the CertificationRequestInfo ("to-be-signed") bytes.

    Subject failures are reported before public key failures.
    """
    return Result.combine(
        encode_name(request.subject),
        encode_subject_public_key_info(request.public_key, request.key_algorithm),
        lambda name, spki: (name, spki),
    ).flat_map(
        lambda parts: Result.from_computation(
            lambda: _assemble_tbs(*parts),
            ErrorCode.ENCODING_ERROR,
            "Failed to assemble CertificationRequestInfo",
        )
    ).peek(lambda tbs: log.debug("tbs.encoded", size=len(tbs)))


def _assemble_request(tbs: bytes, signature_algorithm: SignatureAlgorithm, signature: bytes) -> bytes:
    if not tbs or tbs[0] != der.SEQUENCE:
        raise der.EncodingError("TBS bytes must be a DER SEQUENCE")
    return der.encode_sequence([
        tbs,
        encode_algorithm_identifier(signature_algorithm.identifier),
        der.encode_bit_string(signature),
    ])


def encode_certification_request(
    tbs: bytes,
    signature_algorithm: SignatureAlgorithm,
    signature: bytes,
) -> Result[bytes]:
    """
    Wrap TBS bytes, the signature algorithm identifier and the signature.

    The TBS bytes are embedded verbatim, never re-encoded. The identifier
    must describe what the signer actually did; build_csr() checks that
    before calling in here.

    Returns Result.failure(ENCODING_ERROR, ...) when the TBS bytes are not a SEQUENCE.
    """
    return Result.from_computation(
        lambda: _assemble_request(tbs, signature_algorithm, signature),
        ErrorCode.ENCODING_ERROR,
        "Failed to assemble CertificationRequest",
    )
