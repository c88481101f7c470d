"""
Algorithm tables — key and signature algorithm identifiers.

Process-wide constant data: each KeyAlgorithm / SignatureAlgorithm member
maps to exactly one AlgorithmIdentifier (OID + parameters). The tables are
read-only mappings built once at import time.

    AlgorithmIdentifier ::= SEQUENCE {
        algorithm   OBJECT IDENTIFIER,
        parameters  ANY DEFINED BY algorithm OPTIONAL
    }

RSA identifiers carry an explicit NULL; ECDSA signature identifiers omit the
parameters field (RFC 5758); EC public keys carry the named-curve OID.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, unique
from types import MappingProxyType
from typing import Final


@unique
class KeyFamily(Enum):
    """Family of asymmetric key; a signature algorithm only fits one family."""

    RSA = "rsa"
    EC = "ec"


@unique
class KeyAlgorithm(Enum):
    """Algorithm of the public key placed in SubjectPublicKeyInfo."""

    RSA = "rsa"
    EC_P256 = "ec-p256"
    EC_P384 = "ec-p384"

    @property
    def family(self) -> KeyFamily:
        return KeyFamily.RSA if self is KeyAlgorithm.RSA else KeyFamily.EC

    @property
    def identifier(self) -> AlgorithmIdentifier:
        return KEY_ALGORITHM_IDENTIFIERS[self]


@unique
class SignatureAlgorithm(Enum):
    """Digest + padding scheme the signing capability applies to the TBS bytes."""

    SHA256_WITH_RSA = "sha256WithRSAEncryption"
    SHA384_WITH_RSA = "sha384WithRSAEncryption"
    SHA512_WITH_RSA = "sha512WithRSAEncryption"
    ECDSA_WITH_SHA256 = "ecdsa-with-SHA256"
    ECDSA_WITH_SHA384 = "ecdsa-with-SHA384"

    @property
    def family(self) -> KeyFamily:
        return SIGNATURE_KEY_FAMILIES[self]

    @property
    def hash_name(self) -> str:
        """Digest name as understood by hashlib / cryptography (e.g. "sha256")."""
        return SIGNATURE_HASH_NAMES[self]

    @property
    def identifier(self) -> AlgorithmIdentifier:
        return SIGNATURE_ALGORITHM_IDENTIFIERS[self]


@dataclass(frozen=True, slots=True)
class AlgorithmIdentifier:
    """
    OID plus the shape of its parameters field.

    Exactly one of the parameter forms applies:
      - null_parameters=True  → parameters is an explicit NULL
      - curve_oid set         → parameters is a namedCurve OID
      - neither               → parameters is absent
    """

    oid: str
    null_parameters: bool = False
    curve_oid: str | None = None


# ─────────────────────── OIDs ───────────────────────

RSA_ENCRYPTION_OID: Final = "1.2.840.113549.1.1.1"
EC_PUBLIC_KEY_OID: Final = "1.2.840.10045.2.1"
SECP256R1_OID: Final = "1.2.840.10045.3.1.7"
SECP384R1_OID: Final = "1.3.132.0.34"

# ─────────────────────── Tables ───────────────────────

KEY_ALGORITHM_IDENTIFIERS: Final[Mapping[KeyAlgorithm, AlgorithmIdentifier]] = MappingProxyType({
    KeyAlgorithm.RSA: AlgorithmIdentifier(RSA_ENCRYPTION_OID, null_parameters=True),
    KeyAlgorithm.EC_P256: AlgorithmIdentifier(EC_PUBLIC_KEY_OID, curve_oid=SECP256R1_OID),
    KeyAlgorithm.EC_P384: AlgorithmIdentifier(EC_PUBLIC_KEY_OID, curve_oid=SECP384R1_OID),
})

SIGNATURE_ALGORITHM_IDENTIFIERS: Final[Mapping[SignatureAlgorithm, AlgorithmIdentifier]] = MappingProxyType({
    SignatureAlgorithm.SHA256_WITH_RSA: AlgorithmIdentifier("1.2.840.113549.1.1.11", null_parameters=True),
    SignatureAlgorithm.SHA384_WITH_RSA: AlgorithmIdentifier("1.2.840.113549.1.1.12", null_parameters=True),
    SignatureAlgorithm.SHA512_WITH_RSA: AlgorithmIdentifier("1.2.840.113549.1.1.13", null_parameters=True),
    SignatureAlgorithm.ECDSA_WITH_SHA256: AlgorithmIdentifier("1.2.840.10045.4.3.2"),
    SignatureAlgorithm.ECDSA_WITH_SHA384: AlgorithmIdentifier("1.2.840.10045.4.3.3"),
})

SIGNATURE_KEY_FAMILIES: Final[Mapping[SignatureAlgorithm, KeyFamily]] = MappingProxyType({
    SignatureAlgorithm.SHA256_WITH_RSA: KeyFamily.RSA,
    SignatureAlgorithm.SHA384_WITH_RSA: KeyFamily.RSA,
    SignatureAlgorithm.SHA512_WITH_RSA: KeyFamily.RSA,
    SignatureAlgorithm.ECDSA_WITH_SHA256: KeyFamily.EC,
    SignatureAlgorithm.ECDSA_WITH_SHA384: KeyFamily.EC,
})

SIGNATURE_HASH_NAMES: Final[Mapping[SignatureAlgorithm, str]] = MappingProxyType({
    SignatureAlgorithm.SHA256_WITH_RSA: "sha256",
    SignatureAlgorithm.SHA384_WITH_RSA: "sha384",
    SignatureAlgorithm.SHA512_WITH_RSA: "sha512",
    SignatureAlgorithm.ECDSA_WITH_SHA256: "sha256",
    SignatureAlgorithm.ECDSA_WITH_SHA384: "sha384",
})
