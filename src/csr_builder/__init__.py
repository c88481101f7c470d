"""
csr_builder — PKCS#10 certificate signing request builder.

Encodes a subject distinguished name and a raw public key into a DER
CertificationRequestInfo, has it signed by an external signing capability,
and wraps everything into the final DER CertificationRequest.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"
