"""
SubjectPublicKeyInfo encoder.

    SubjectPublicKeyInfo ::= SEQUENCE {
        algorithm         AlgorithmIdentifier,
        subjectPublicKey  BIT STRING
    }

The public key bytes are opaque: they go into the BIT STRING exactly as the
key-management collaborator produced them and are never parsed.
"""

from __future__ import annotations

from railway import ErrorCode
from railway.result import Result
from railway.result_failures import ResultFailures

from csr_builder.domain.algorithms import AlgorithmIdentifier, KeyAlgorithm
from csr_builder.encoding import der


def encode_algorithm_identifier(identifier: AlgorithmIdentifier) -> bytes:
    """
    Encode SEQUENCE { OID, parameters } for one table entry.

    Raises EncodingError when the OID is malformed.
    """
    children = [der.encode_oid(identifier.oid)]
    if identifier.null_parameters:
        children.append(der.encode_null())
    elif identifier.curve_oid is not None:
        children.append(der.encode_oid(identifier.curve_oid))
    return der.encode_sequence(children)


def _encode(public_key: bytes, key_algorithm: KeyAlgorithm) -> bytes:
    return der.encode_sequence([
        encode_algorithm_identifier(key_algorithm.identifier),
        der.encode_bit_string(public_key),
    ])


def encode_subject_public_key_info(
    public_key: bytes,
    key_algorithm: KeyAlgorithm,
) -> Result[bytes]:
    """
    Wrap raw public key bytes and the key algorithm into a SubjectPublicKeyInfo.

    Returns Result.failure(CONFIGURATION_ERROR, ...) when the key is empty or not bytes.
    """
    if not isinstance(public_key, (bytes, bytearray, memoryview)):
        return ResultFailures.configuration_error(f"Public key must be bytes, got {type(public_key).__name__}")
    if len(public_key) == 0:
        return ResultFailures.configuration_error("Public key must not be empty")
    return Result.from_computation(
        lambda: _encode(bytes(public_key), key_algorithm),
        ErrorCode.ENCODING_ERROR,
        "Failed to encode SubjectPublicKeyInfo",
    )
