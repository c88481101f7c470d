"""
Unit tests for the ROP pipeline — build_csr() end to end with stub signers.

Uses a recording stub signer (a fake adapter) to test the pipeline in
isolation, without real keys.

Test categories:
  - Success track: golden bytes, framing, signed bytes == embedded bytes
  - Configuration failures: signer never called
  - Signing failures: no partial output
  - Logging: one summary event per build
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from asn1crypto import csr as asn1_csr
from railway import ErrorCode, Result, ResultAssertions
from structlog.testing import capture_logs

from csr_builder.domain.algorithms import KeyAlgorithm, SignatureAlgorithm
from csr_builder.domain.models import CsrRequest, DistinguishedName
from csr_builder.pipeline import build_csr, check_algorithm_consistency
from tests.conftest import STUB_PUBLIC_KEY, STUB_SIGNATURE, RecordingSigner, load_hex_fixture, walk_der


def _tbs_slice(der_bytes: bytes) -> bytes:
    """Cut the first child of the outer SEQUENCE by hand (short or long form header)."""
    offset = 2 if der_bytes[1] < 0x80 else 2 + (der_bytes[1] & 0x7F)
    first = der_bytes[offset + 1]
    if first < 0x80:
        length, header = first, 2
    else:
        count = first & 0x7F
        length = int.from_bytes(der_bytes[offset + 2:offset + 2 + count], "big")
        header = 2 + count
    return der_bytes[offset:offset + header + length]


# ─────────────────────── Success Track ───────────────────────


class TestBuildCsrSuccess:
    def test_golden_output(self, cn_only_request: CsrRequest, recording_signer: RecordingSigner) -> None:
        """
        GIVEN CN=test.example.com, key 01 02 03 04 and a signer returning eight 0x5A bytes
        WHEN build_csr is called
        THEN the output equals the recorded golden DER byte for byte.
        """
        result = build_csr(cn_only_request, recording_signer)

        ResultAssertions.assert_success_value(result, load_hex_fixture("golden_cn_only.hex"))

    def test_signed_bytes_are_embedded_bytes(
        self, cn_only_request: CsrRequest, recording_signer: RecordingSigner
    ) -> None:
        """
        GIVEN a recording signer
        WHEN build_csr succeeds
        THEN the signer was called once and the bytes it signed are exactly the
             certificationRequestInfo inside the output.
        """
        der_bytes = ResultAssertions.assert_success(build_csr(cn_only_request, recording_signer))

        assert len(recording_signer.calls) == 1
        signed, algorithm = recording_signer.calls[0]
        assert algorithm is SignatureAlgorithm.SHA256_WITH_RSA
        assert signed == _tbs_slice(der_bytes)
        parsed = asn1_csr.CertificationRequest.load(der_bytes)
        assert parsed["certification_request_info"].dump() == signed

    def test_signature_embedded_unchanged(
        self, cn_only_request: CsrRequest, recording_signer: RecordingSigner
    ) -> None:
        der_bytes = ResultAssertions.assert_success(build_csr(cn_only_request, recording_signer))

        parsed = asn1_csr.CertificationRequest.load(der_bytes)
        assert parsed["signature"].native == STUB_SIGNATURE
        assert parsed["signature_algorithm"]["algorithm"].native == "sha256_rsa"

    def test_long_signature_framing(self, cn_only_request: CsrRequest) -> None:
        """
        GIVEN a 256-byte signature (RSA-2048 sized)
        WHEN build_csr is called
        THEN every TLV in the output has exact, minimal lengths.
        """
        signer = RecordingSigner(signature=b"\xff" * 256)

        der_bytes = ResultAssertions.assert_success(build_csr(cn_only_request, signer))

        assert walk_der(der_bytes) > 10
        assert bytes.fromhex("03820101" "00") + b"\xff" * 256 == der_bytes[-261:]

    def test_ecdsa_request(self) -> None:
        request = CsrRequest(
            subject=DistinguishedName(common_name="device-01", country="FR"),
            public_key=b"\x04" + b"\x33" * 64,
            key_algorithm=KeyAlgorithm.EC_P256,
            signature_algorithm=SignatureAlgorithm.ECDSA_WITH_SHA256,
        )
        signer = RecordingSigner(signature=bytes.fromhex("3006020101020102"), algorithm=request.signature_algorithm)

        der_bytes = ResultAssertions.assert_success(build_csr(request, signer))

        parsed = asn1_csr.CertificationRequest.load(der_bytes)
        assert parsed["signature_algorithm"]["algorithm"].native == "sha256_ecdsa"
        assert parsed["certification_request_info"]["subject"].native == {
            "country_name": "FR",
            "common_name": "device-01",
        }

    def test_repeated_builds_are_identical(
        self, cn_only_request: CsrRequest, recording_signer: RecordingSigner
    ) -> None:
        first = build_csr(cn_only_request, recording_signer)
        second = build_csr(cn_only_request, recording_signer)

        assert first == second
        assert recording_signer.calls[0][0] == recording_signer.calls[1][0]


# ─────────────────────── Configuration failures ───────────────────────


class TestBuildCsrConfigurationFailures:
    """The signer must never be invoked when the request is unusable."""

    def test_empty_subject(self, recording_signer: RecordingSigner) -> None:
        request = CsrRequest(subject=DistinguishedName(), public_key=STUB_PUBLIC_KEY)

        result = build_csr(request, recording_signer)

        ResultAssertions.assert_failure(result, ErrorCode.CONFIGURATION_ERROR)
        assert recording_signer.calls == []

    def test_empty_public_key(self, recording_signer: RecordingSigner) -> None:
        request = CsrRequest(subject=DistinguishedName(common_name="host"), public_key=b"")

        result = build_csr(request, recording_signer)

        ResultAssertions.assert_failure(result, ErrorCode.CONFIGURATION_ERROR)
        assert recording_signer.calls == []

    def test_unencodable_country(self, recording_signer: RecordingSigner) -> None:
        request = CsrRequest(subject=DistinguishedName(country="D_"), public_key=STUB_PUBLIC_KEY)

        result = build_csr(request, recording_signer)

        ResultAssertions.assert_failure(result, ErrorCode.ENCODING_ERROR)
        assert recording_signer.calls == []

    def test_signer_bound_to_other_algorithm(self, cn_only_request: CsrRequest) -> None:
        """
        GIVEN a request for sha256WithRSAEncryption and a signer bound to sha512WithRSAEncryption
        WHEN build_csr is called
        THEN CONFIGURATION_ERROR is returned before anything is signed.
        """
        signer = RecordingSigner(algorithm=SignatureAlgorithm.SHA512_WITH_RSA)

        result = build_csr(cn_only_request, signer)

        ResultAssertions.assert_failure(result, ErrorCode.CONFIGURATION_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "bound to sha512WithRSAEncryption")
        assert signer.calls == []

    def test_signature_algorithm_does_not_fit_key(self) -> None:
        request = CsrRequest(
            subject=DistinguishedName(common_name="host"),
            public_key=STUB_PUBLIC_KEY,
            key_algorithm=KeyAlgorithm.RSA,
            signature_algorithm=SignatureAlgorithm.ECDSA_WITH_SHA256,
        )
        signer = RecordingSigner(algorithm=SignatureAlgorithm.ECDSA_WITH_SHA256)

        result = build_csr(request, signer)

        ResultAssertions.assert_failure(result, ErrorCode.CONFIGURATION_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "does not fit a rsa public key")
        assert signer.calls == []

    @pytest.mark.parametrize(
        ("key_algorithm", "signature_algorithm"),
        [
            (KeyAlgorithm.RSA, SignatureAlgorithm.SHA384_WITH_RSA),
            (KeyAlgorithm.EC_P384, SignatureAlgorithm.ECDSA_WITH_SHA384),
            (KeyAlgorithm.EC_P256, SignatureAlgorithm.ECDSA_WITH_SHA384),
        ],
    )
    def test_consistent_pairs_pass(
        self, key_algorithm: KeyAlgorithm, signature_algorithm: SignatureAlgorithm
    ) -> None:
        request = CsrRequest(
            subject=DistinguishedName(common_name="host"),
            public_key=STUB_PUBLIC_KEY,
            key_algorithm=key_algorithm,
            signature_algorithm=signature_algorithm,
        )

        result = check_algorithm_consistency(request, RecordingSigner(algorithm=signature_algorithm))

        ResultAssertions.assert_success_value(result, request)


# ─────────────────────── Signing failures ───────────────────────


class TestBuildCsrSigningFailures:
    def test_cancelled_signing_yields_no_output(self, cn_only_request: CsrRequest) -> None:
        """
        GIVEN a signer whose user cancels authentication
        WHEN build_csr is called
        THEN the result is SIGNING_ERROR "User cancellation" and no DER is returned.
        """
        signer = MagicMock()
        signer.algorithm = SignatureAlgorithm.SHA256_WITH_RSA
        signer.sign.return_value = Result.failure(ErrorCode.SIGNING_ERROR, "User cancellation")

        result = build_csr(cn_only_request, signer)

        ResultAssertions.assert_failure(result, ErrorCode.SIGNING_ERROR)
        ResultAssertions.assert_failure_message_contains(result, "User cancellation")
        assert result.get_or_else(b"") == b""
        signer.sign.assert_called_once()

    def test_empty_signature(self, cn_only_request: CsrRequest) -> None:
        result = build_csr(cn_only_request, RecordingSigner(signature=b""))

        ResultAssertions.assert_failure(result, ErrorCode.SIGNING_ERROR)


# ─────────────────────── Logging ───────────────────────


class TestBuildCsrLogging:
    def test_success_logs_built_event(
        self, cn_only_request: CsrRequest, recording_signer: RecordingSigner
    ) -> None:
        with capture_logs() as logs:
            build_csr(cn_only_request, recording_signer)

        built = [entry for entry in logs if entry["event"] == "csr.built"]
        assert len(built) == 1
        assert built[0]["size"] == 88
        assert built[0]["signature_algorithm"] == "sha256WithRSAEncryption"

    def test_failure_logs_code(self, recording_signer: RecordingSigner) -> None:
        request = CsrRequest(subject=DistinguishedName(), public_key=STUB_PUBLIC_KEY)

        with capture_logs() as logs:
            build_csr(request, recording_signer)

        failed = [entry for entry in logs if entry["event"] == "csr.build_failed"]
        assert len(failed) == 1
        assert failed[0]["code"] == "CONFIGURATION_ERROR"
        assert failed[0]["log_level"] == "warning"
