"""
Domain models — immutable inputs of the CSR pipeline.

These are pure value objects with no behavior beyond self-description.
A CsrRequest is built once, frozen, and handed to build_csr(); nothing
in the pipeline can mutate the subject or the key mid-build.

All models are frozen dataclasses (immutable) following functional principles.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, unique

from railway import ErrorCode
from railway.result import Result

from csr_builder.domain.algorithms import KeyAlgorithm, SignatureAlgorithm


@unique
class AttributeKind(Enum):
    """The six distinguished-name attribute kinds the encoder recognizes."""

    COUNTRY = "country"
    STATE = "state"
    LOCALITY = "locality"
    ORGANIZATION = "organization"
    ORGANIZATIONAL_UNIT = "organizational_unit"
    COMMON_NAME = "common_name"


# Order of RDNs in the encoded subject, independent of input order.
CANONICAL_ORDER: tuple[AttributeKind, ...] = (
    AttributeKind.COUNTRY,
    AttributeKind.STATE,
    AttributeKind.LOCALITY,
    AttributeKind.ORGANIZATION,
    AttributeKind.ORGANIZATIONAL_UNIT,
    AttributeKind.COMMON_NAME,
)


@dataclass(frozen=True, slots=True)
class DistinguishedName:
    """
    Subject of the certificate request.

    Every attribute is optional; None means absent and is never encoded.
    Field names match AttributeKind values.
    """

    country: str | None = None
    state: str | None = None
    locality: str | None = None
    organization: str | None = None
    organizational_unit: str | None = None
    common_name: str | None = None

    @staticmethod
    def from_attributes(
        attributes: Iterable[tuple[AttributeKind, str]],
    ) -> Result[DistinguishedName]:
        """
        Build a DistinguishedName from (kind, value) pairs in any order.

        Returns Result.failure(CONFIGURATION_ERROR, ...) when a kind is given twice.
        """
        values: dict[str, str] = {}
        for kind, value in attributes:
            if kind.value in values:
                return Result.failure(
                    ErrorCode.CONFIGURATION_ERROR,
                    f"Attribute {kind.name} given more than once",
                )
            values[kind.value] = value
        return Result.success(DistinguishedName(**values))

    def get(self, kind: AttributeKind) -> str | None:
        return getattr(self, kind.value)

    def attributes(self) -> Iterator[tuple[AttributeKind, str]]:
        """Yield the present attributes in canonical order."""
        for kind in CANONICAL_ORDER:
            value = self.get(kind)
            if value is not None:
                yield kind, value

    @property
    def is_empty(self) -> bool:
        return all(self.get(kind) is None for kind in CANONICAL_ORDER)


@dataclass(frozen=True, slots=True)
class CsrRequest:
    """
    Everything build_csr() needs besides the signing capability.

    The public key is the raw key material exactly as the key-management
    collaborator supplied it (PKCS#1 RSAPublicKey DER for RSA, X9.62 point
    for EC); it is embedded without being parsed.
    """

    subject: DistinguishedName
    public_key: bytes = field(repr=False)
    key_algorithm: KeyAlgorithm = KeyAlgorithm.RSA
    signature_algorithm: SignatureAlgorithm = SignatureAlgorithm.SHA256_WITH_RSA
