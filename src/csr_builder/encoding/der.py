"""
DER primitive encoder — tag/length/value framing for the ASN.1 types a
PKCS#10 request is made of.

Every function returns the complete encoding (tag ++ length ++ content) and
raises EncodingError when the value cannot be represented in its type.
Higher layers turn EncodingError into a Result failure at their boundary;
nothing here knows about the railway.

Only the low-tag-number form is supported (tag numbers 0..30), which covers
every universal and context-specific tag used in a certification request.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Final

# ─────────────────────── Tags ───────────────────────

INTEGER: Final = 0x02
BIT_STRING: Final = 0x03
OCTET_STRING: Final = 0x04
NULL: Final = 0x05
OBJECT_IDENTIFIER: Final = 0x06
UTF8_STRING: Final = 0x0C
PRINTABLE_STRING: Final = 0x13
SEQUENCE: Final = 0x30
SET: Final = 0x31

CONSTRUCTED: Final = 0x20
CONTEXT_SPECIFIC: Final = 0x80
_HIGH_TAG_NUMBER: Final = 0x1F

# A-Z a-z 0-9 space ' ( ) + , - . / : = ?
_PRINTABLE_RE: Final = re.compile(r"[A-Za-z0-9 '()+,\-./:=?]*")


class EncodingError(ValueError):
    """A value violates the constraints of the ASN.1 type it is encoded as."""


# ─────────────────────── Framing ───────────────────────


def encode_length(length: int) -> bytes:
    """
    Encode a content length in DER definite form.

    0..127 use the single-byte short form. Larger values use the long form:
    0x80 | n followed by the n big-endian bytes of the length, with n minimal.
    """
    if length < 0:
        raise EncodingError(f"Length must be non-negative, got {length}")
    if length < 0x80:
        return bytes([length])
    length_bytes = length.to_bytes((length.bit_length() + 7) // 8, "big")
    if len(length_bytes) > 126:
        raise EncodingError("Length does not fit the DER long form")
    return bytes([0x80 | len(length_bytes)]) + length_bytes


def encode_tlv(tag: int, content: bytes) -> bytes:
    """Frame pre-encoded content bytes with a single tag byte and its length."""
    if not 0 <= tag <= 0xFF:
        raise EncodingError(f"Tag must fit in one byte, got {tag:#x}")
    if tag & _HIGH_TAG_NUMBER == _HIGH_TAG_NUMBER:
        raise EncodingError(f"High tag numbers are not supported: {tag:#04x}")
    return bytes([tag]) + encode_length(len(content)) + content


# ─────────────────────── Primitive types ───────────────────────


def encode_integer(value: int) -> bytes:
    """
    Encode an INTEGER as minimal big-endian two's complement.

    A non-negative value whose top content bit would be set gets a leading
    0x00 so it is not read back as negative: 0x80 → 02 02 00 80.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"INTEGER value must be an int, got {type(value).__name__}")
    magnitude = value if value >= 0 else ~value
    size = magnitude.bit_length() // 8 + 1
    return encode_tlv(INTEGER, value.to_bytes(size, "big", signed=True))


def _parse_arcs(oid: str | Sequence[int]) -> list[int]:
    if isinstance(oid, str):
        parts = oid.split(".") if oid else []
        if not all(part.isascii() and part.isdigit() for part in parts):
            raise EncodingError(f"OID arcs must be decimal numbers: {oid!r}")
        return [int(part) for part in parts]
    arcs = list(oid)
    if not all(isinstance(arc, int) and not isinstance(arc, bool) for arc in arcs):
        raise EncodingError(f"OID arcs must be integers: {oid!r}")
    return arcs


def _base128(arc: int) -> bytes:
    chunks = [arc & 0x7F]
    arc >>= 7
    while arc:
        chunks.append(0x80 | (arc & 0x7F))
        arc >>= 7
    return bytes(reversed(chunks))


def encode_oid(oid: str | Sequence[int]) -> bytes:
    """
    Encode an OBJECT IDENTIFIER from dotted form ("2.5.4.3") or a sequence of arcs.

    The first two arcs are combined as 40*X+Y; every subidentifier is
    base-128 with the high bit set on all but its last byte.
    """
    arcs = _parse_arcs(oid)
    if len(arcs) < 2:
        raise EncodingError(f"OID needs at least two arcs: {oid!r}")
    first, second = arcs[0], arcs[1]
    if any(arc < 0 for arc in arcs):
        raise EncodingError(f"OID arcs must be non-negative: {oid!r}")
    if first > 2:
        raise EncodingError(f"First OID arc must be 0, 1 or 2: {oid!r}")
    if first < 2 and second >= 40:
        raise EncodingError(f"Second OID arc must be below 40 under arc {first}: {oid!r}")
    content = _base128(40 * first + second) + b"".join(_base128(arc) for arc in arcs[2:])
    return encode_tlv(OBJECT_IDENTIFIER, content)


def encode_bit_string(payload: bytes, unused_bits: int = 0) -> bytes:
    """
    Encode a BIT STRING: one unused-bits byte followed by the payload.

    Keys and signatures are whole bytes, so callers in this package always
    pass unused_bits=0.
    """
    if not 0 <= unused_bits <= 7:
        raise EncodingError(f"Unused bits must be in 0..7, got {unused_bits}")
    if not payload and unused_bits:
        raise EncodingError("An empty BIT STRING cannot have unused bits")
    if payload and payload[-1] & ((1 << unused_bits) - 1):
        raise EncodingError("Unused bits of a DER BIT STRING must be zero")
    return encode_tlv(BIT_STRING, bytes([unused_bits]) + bytes(payload))


def encode_octet_string(payload: bytes) -> bytes:
    return encode_tlv(OCTET_STRING, bytes(payload))


def encode_null() -> bytes:
    return encode_tlv(NULL, b"")


def is_printable(text: str) -> bool:
    """True when every character belongs to the PrintableString repertoire."""
    return _PRINTABLE_RE.fullmatch(text) is not None


def encode_printable_string(text: str) -> bytes:
    if not is_printable(text):
        raise EncodingError(f"Value is not a PrintableString: {text!r}")
    return encode_tlv(PRINTABLE_STRING, text.encode("ascii"))


def encode_utf8_string(text: str) -> bytes:
    try:
        content = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Value is not encodable as UTF8String: {text!r}") from e
    return encode_tlv(UTF8_STRING, content)


# ─────────────────────── Constructed types ───────────────────────


def encode_sequence(children: Iterable[bytes]) -> bytes:
    """Wrap pre-encoded children, in the given order, in a SEQUENCE."""
    return encode_tlv(SEQUENCE, b"".join(children))


def encode_set(children: Iterable[bytes]) -> bytes:
    """
    Wrap pre-encoded children in a SET.

    Children are emitted in the order supplied; ordering policy belongs to
    the caller.
    """
    return encode_tlv(SET, b"".join(children))


def encode_context_constructed(number: int, content: bytes = b"") -> bytes:
    """Encode a context-specific constructed value, e.g. [0] → A0."""
    if not 0 <= number < _HIGH_TAG_NUMBER:
        raise EncodingError(f"Context tag number must be in 0..30, got {number}")
    return encode_tlv(CONTEXT_SPECIFIC | CONSTRUCTED | number, content)
