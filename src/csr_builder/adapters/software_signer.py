"""
Software key adapter — SigningCapability backed by a cryptography private key.

Adapter layer — implements the SigningCapability port using:
  - cryptography (PyCA): RSA PKCS#1 v1.5 and ECDSA signatures
  - cryptography serialization: raw public key bits for SubjectPublicKeyInfo

RSA public keys are exported as PKCS#1 RSAPublicKey DER and EC public keys
as X9.62 uncompressed points, which is what the subjectPublicKey BIT STRING
holds for rsaEncryption / id-ecPublicKey. ECDSA signatures come out of
cryptography already DER-encoded (Ecdsa-Sig-Value), ready for the
signature BIT STRING.

All exceptions are caught at this adapter boundary via Result.from_computation().
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

import structlog
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from railway import ErrorCode
from railway.result import Result

from csr_builder.domain.algorithms import KeyAlgorithm, KeyFamily, SignatureAlgorithm

log = structlog.get_logger()

_HASHES: Final[Mapping[str, type[hashes.HashAlgorithm]]] = MappingProxyType({
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
})

_CURVES: Final[Mapping[str, KeyAlgorithm]] = MappingProxyType({
    ec.SECP256R1.name: KeyAlgorithm.EC_P256,
    ec.SECP384R1.name: KeyAlgorithm.EC_P384,
})


class CryptographySigner:
    """
    Sign TBS bytes with an in-process RSA or EC private key.

    Implements the SigningCapability port. The signer is bound to one
    SignatureAlgorithm at construction; asking for another one fails.
    """

    def __init__(
        self,
        private_key: rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey,
        algorithm: SignatureAlgorithm,
    ) -> None:
        self._private_key = private_key
        self._algorithm = algorithm

    @property
    def algorithm(self) -> SignatureAlgorithm:
        return self._algorithm

    @classmethod
    def from_pem(
        cls,
        data: bytes,
        algorithm: SignatureAlgorithm,
        password: bytes | None = None,
    ) -> Result[CryptographySigner]:
        """
        Load a PEM private key and bind it to a signature algorithm.

        Returns Result.failure(CONFIGURATION_ERROR, ...) when the PEM cannot be
        loaded, holds a key type other than RSA / EC, or holds an EC key on a
        curve other than secp256r1 / secp384r1.
        """
        return Result.from_computation(
            lambda: serialization.load_pem_private_key(data, password=password),
            ErrorCode.CONFIGURATION_ERROR,
            "Failed to load PEM private key",
        ).ensure(
            lambda key: isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)),
            ErrorCode.CONFIGURATION_ERROR,
            "Only RSA and EC private keys are supported",
        ).ensure(
            lambda key: isinstance(key, rsa.RSAPrivateKey) or key.curve.name in _CURVES,
            ErrorCode.CONFIGURATION_ERROR,
            f"Only the {' and '.join(_CURVES)} curves are supported",
        ).map(
            lambda key: cls(key, algorithm)
        ).peek(
            lambda signer: log.info("signer.loaded", algorithm=algorithm.value)
        )

    def key_algorithm(self) -> KeyAlgorithm:
        """KeyAlgorithm matching the wrapped key (raises ValueError for unsupported curves)."""
        if isinstance(self._private_key, rsa.RSAPrivateKey):
            return KeyAlgorithm.RSA
        curve_name = self._private_key.curve.name
        if curve_name not in _CURVES:
            raise ValueError(f"Unsupported curve: {curve_name}")
        return _CURVES[curve_name]

    def public_key_bits(self) -> bytes:
        """Raw subjectPublicKey contents for the wrapped key."""
        public_key = self._private_key.public_key()
        if isinstance(public_key, rsa.RSAPublicKey):
            return public_key.public_bytes(
                serialization.Encoding.DER,
                serialization.PublicFormat.PKCS1,
            )
        return public_key.public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.UncompressedPoint,
        )

    def sign(self, data: bytes, algorithm: SignatureAlgorithm) -> Result[bytes]:
        """
        Sign data with the wrapped key.

        Returns Result.failure(SIGNING_ERROR, ...) when the algorithm differs
        from the bound one, does not fit the key type, or signing raises.
        """
        if algorithm is not self._algorithm:
            return Result.failure(
                ErrorCode.SIGNING_ERROR,
                f"Signer is bound to {self._algorithm.value}, cannot sign with {algorithm.value}",
            )
        return Result.from_computation(
            lambda: self._do_sign(data, algorithm),
            ErrorCode.SIGNING_ERROR,
            "Software key signing failed",
        )

    def _do_sign(self, data: bytes, algorithm: SignatureAlgorithm) -> bytes:
        """Internal sign — may raise (caught by from_computation)."""
        digest = _HASHES[algorithm.hash_name]()
        key = self._private_key
        if algorithm.family is KeyFamily.RSA and isinstance(key, rsa.RSAPrivateKey):
            return key.sign(data, padding.PKCS1v15(), digest)
        if algorithm.family is KeyFamily.EC and isinstance(key, ec.EllipticCurvePrivateKey):
            return key.sign(data, ec.ECDSA(digest))
        raise TypeError(f"{type(key).__name__} cannot produce {algorithm.value} signatures")
