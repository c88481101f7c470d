"""
Distinguished Name encoder — subject attributes → RDNSequence.

    Name ::= SEQUENCE OF RelativeDistinguishedName
    RelativeDistinguishedName ::= SET OF AttributeTypeAndValue
    AttributeTypeAndValue ::= SEQUENCE { type OID, value DirectoryString }

Each present attribute becomes its own single-valued RDN, emitted in the
canonical order C, ST, L, O, OU, CN whatever order the caller supplied.

String types come from a fixed table: countryName is always a
PrintableString (X.520 restricts it to two printable characters); the other
attributes are PrintableString when the value fits that repertoire and
UTF8String otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from railway import ErrorCode
from railway.result import Result

from csr_builder.domain.models import AttributeKind, DistinguishedName
from csr_builder.encoding import der


@dataclass(frozen=True, slots=True)
class _AttributeType:
    oid: str
    utf8_fallback: bool


ATTRIBUTE_TYPES: Final[Mapping[AttributeKind, _AttributeType]] = MappingProxyType({
    AttributeKind.COUNTRY: _AttributeType("2.5.4.6", utf8_fallback=False),
    AttributeKind.STATE: _AttributeType("2.5.4.8", utf8_fallback=True),
    AttributeKind.LOCALITY: _AttributeType("2.5.4.7", utf8_fallback=True),
    AttributeKind.ORGANIZATION: _AttributeType("2.5.4.10", utf8_fallback=True),
    AttributeKind.ORGANIZATIONAL_UNIT: _AttributeType("2.5.4.11", utf8_fallback=True),
    AttributeKind.COMMON_NAME: _AttributeType("2.5.4.3", utf8_fallback=True),
})

COUNTRY_CODE_LENGTH: Final = 2


def _encode_value(kind: AttributeKind, value: str) -> bytes:
    """Pick the string type from the table and encode the value (may raise EncodingError)."""
    if ATTRIBUTE_TYPES[kind].utf8_fallback and not der.is_printable(value):
        return der.encode_utf8_string(value)
    return der.encode_printable_string(value)


def _encode_rdn(kind: AttributeKind, value: str) -> bytes:
    attribute = der.encode_sequence([der.encode_oid(ATTRIBUTE_TYPES[kind].oid), _encode_value(kind, value)])
    return der.encode_set([attribute])


def _validate_attribute(kind: AttributeKind, value: object) -> Result[str]:
    if not isinstance(value, str):
        return Result.failure(
            ErrorCode.CONFIGURATION_ERROR,
            f"Attribute {kind.name} must be text, got {type(value).__name__}",
        )
    if not value:
        return Result.failure(
            ErrorCode.CONFIGURATION_ERROR,
            f"Attribute {kind.name} is empty; omit it instead",
        )
    if kind is AttributeKind.COUNTRY and len(value) != COUNTRY_CODE_LENGTH:
        return Result.failure(
            ErrorCode.CONFIGURATION_ERROR,
            f"Attribute COUNTRY must be a two-letter code, got {value!r}",
        )
    return Result.success(value)


def encode_rdn(kind: AttributeKind, value: str) -> Result[bytes]:
    """Encode one attribute as a single-valued RelativeDistinguishedName SET."""
    return _validate_attribute(kind, value).flat_map(
        lambda text: Result.from_computation(
            lambda: _encode_rdn(kind, text),
            ErrorCode.ENCODING_ERROR,
            f"Failed to encode attribute {kind.name}",
        )
    )


def encode_name(subject: DistinguishedName) -> Result[bytes]:
    """
    Encode the subject as a DER Name.

    Returns Result[bytes] with the Name SEQUENCE on success.
    Returns Result.failure(CONFIGURATION_ERROR, ...) when no attribute is present
    or a present attribute is empty/invalid, and
    Result.failure(ENCODING_ERROR, ...) when a value does not fit its string type.
    """
    if subject.is_empty:
        return Result.failure(
            ErrorCode.CONFIGURATION_ERROR,
            "Distinguished name is empty; at least one subject attribute is required",
        )
    return Result.all_of(
        encode_rdn(kind, value) for kind, value in subject.attributes()
    ).map(der.encode_sequence)
