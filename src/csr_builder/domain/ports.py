"""
Ports — Protocol-based interfaces for infrastructure adapters.

These define WHAT the pipeline needs (contracts) without specifying
HOW it's done (implementation). Following hexagonal architecture:

  Domain ← Ports (protocols) ← Adapters (implementations)

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.
A software key, a hardware-backed key store or a remote signer can all
stand behind the same port without touching the encoders.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from railway.result import Result

from csr_builder.domain.algorithms import SignatureAlgorithm


@runtime_checkable
class SigningCapability(Protocol):
    """
    Port: sign arbitrary bytes with a private key the caller owns.

    The capability is bound to one SignatureAlgorithm (`algorithm`) and is
    expected to apply the digest-then-sign transform that algorithm implies;
    the pipeline hands over the TBS bytes as-is.

    sign() may block (secure enclave, user-authentication prompt).
    Returns Result[bytes] with the raw signature, or a failure when the key
    is missing, unusable for signing, or the operation was cancelled.
    """

    algorithm: SignatureAlgorithm

    def sign(self, data: bytes, algorithm: SignatureAlgorithm) -> Result[bytes]: ...
