"""
Composition root — wires settings, logging and the pipeline together.

Responsibilities:
  1. Configure structlog for structured logging
  2. Turn validated AppSettings plus the caller's key material into a CsrRequest
  3. Run the pipeline with the caller's SigningCapability

Key generation, storage and the signing backend stay with the caller; this
module only assembles the frozen input value and hands it to build_csr().
"""

from __future__ import annotations

import logging

import structlog
from railway.result import Result

from csr_builder.config import AppSettings
from csr_builder.domain.models import CsrRequest
from csr_builder.domain.ports import SigningCapability
from csr_builder.pipeline import build_csr


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for structured logging.

    Colored, human-readable console output; unknown level names fall back to INFO.
    Loggers are not cached, so a later call with another level takes effect
    for module-level loggers too.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def create_request(settings: AppSettings, public_key: bytes) -> CsrRequest:
    """Freeze the configured subject and algorithms together with the public key."""
    return CsrRequest(
        subject=settings.subject.to_distinguished_name(),
        public_key=public_key,
        key_algorithm=settings.key_algorithm,
        signature_algorithm=settings.signature_algorithm,
    )


def build_from_settings(
    settings: AppSettings,
    public_key: bytes,
    signer: SigningCapability,
) -> Result[bytes]:
    """
    Build a DER certification request from settings.

    Applies settings.log_level first. Returns the pipeline's Result unchanged.
    """
    configure_structlog(settings.log_level)
    log = structlog.get_logger()
    log.debug(
        "csr.requested",
        key_algorithm=settings.key_algorithm.value,
        signature_algorithm=settings.signature_algorithm.value,
    )
    return build_csr(create_request(settings, public_key), signer)
