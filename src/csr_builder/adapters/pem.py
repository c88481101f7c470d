"""
Text framing for finished requests.

The pipeline only ever produces DER; CAs and mobile bridges usually want
text. to_pem() wraps the DER in a "CERTIFICATE REQUEST" PEM block via
asn1crypto, to_base64() gives the bare single-line Base64 form.
"""

from __future__ import annotations

import base64
from typing import Final

from asn1crypto import pem

CSR_PEM_LABEL: Final = "CERTIFICATE REQUEST"


def to_pem(der: bytes) -> bytes:
    return pem.armor(CSR_PEM_LABEL, der)


def to_base64(der: bytes) -> str:
    return base64.b64encode(der).decode("ascii")
