"""
Shared test fixtures and helpers for the csr-builder test suite.

Provides fixture file resolution, deterministic stub signers and a
recursive DER walker used to check framing across whole outputs.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest
import structlog
from railway.result import Result

from csr_builder.domain.algorithms import SignatureAlgorithm
from csr_builder.domain.models import CsrRequest, DistinguishedName

FIXTURES_DIR = Path(__file__).parent / "fixtures"

STUB_PUBLIC_KEY = bytes.fromhex("01020304")
STUB_SIGNATURE = bytes([0x5A] * 8)


def fixture_path(filename: str) -> Path:
    """
    Resolve the absolute path to a test fixture file.

    Raises FileNotFoundError if the fixture does not exist.
    """
    path = FIXTURES_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Test fixture not found: {path}")
    return path


def load_hex_fixture(filename: str) -> bytes:
    """Read a commented hex dump fixture ('#' lines ignored) into bytes."""
    lines = fixture_path(filename).read_text(encoding="utf-8").splitlines()
    return bytes.fromhex(" ".join(line for line in lines if not line.lstrip().startswith("#")))


def walk_der(data: bytes) -> int:
    """
    Walk every TLV in data recursively, asserting DER framing.

    Checks that each length field equals the exact content byte count,
    that the long form is only used above 127 with minimal length bytes,
    and that constructed values are made of complete children.
    Returns the number of TLVs visited.
    """
    visited = 0
    offset = 0
    while offset < len(data):
        tag = data[offset]
        first = data[offset + 1]
        offset += 2
        if first & 0x80:
            count = first & 0x7F
            assert 0 < count <= 126, f"indefinite or oversized length at {offset}"
            length_bytes = data[offset:offset + count]
            assert length_bytes[0] != 0, "long-form length has a leading zero byte"
            length = int.from_bytes(length_bytes, "big")
            assert length > 127, f"long form used for short length {length}"
            offset += count
        else:
            length = first
        content = data[offset:offset + length]
        assert len(content) == length, f"tag {tag:#04x} declares {length} bytes, {len(content)} present"
        visited += 1
        if tag & 0x20:
            visited += walk_der(content)
        offset += length
    return visited


@dataclass
class RecordingSigner:
    """Deterministic SigningCapability stub that records what it was asked to sign."""

    signature: bytes = STUB_SIGNATURE
    algorithm: SignatureAlgorithm = SignatureAlgorithm.SHA256_WITH_RSA
    calls: list[tuple[bytes, SignatureAlgorithm]] = field(default_factory=list)

    def sign(self, data: bytes, algorithm: SignatureAlgorithm) -> Result[bytes]:
        self.calls.append((data, algorithm))
        return Result.success(self.signature)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test (or build_from_settings) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture()
def recording_signer() -> RecordingSigner:
    return RecordingSigner()


@pytest.fixture()
def cn_only_request() -> CsrRequest:
    """Request with CN=test.example.com and the stub public key."""
    return CsrRequest(
        subject=DistinguishedName(common_name="test.example.com"),
        public_key=STUB_PUBLIC_KEY,
    )
