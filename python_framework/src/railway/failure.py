"""
Failure description — structured error information for the failure track.

An ErrorCode classifies WHY a stage of the CSR pipeline left the success
track; FailureDescription carries the code together with a message, the
underlying exception (the cause) and the moment the failure was recorded.

Enum + frozen dataclass give us __eq__, __hash__ and __repr__ for free,
and Enum members are singleton-comparable with `is`.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Structured error codes for the failure track.

    Organized by the stage that produces them:
    - Input: CONFIGURATION
    - Encoding: ENCODING
    - External collaborators: SIGNING
    """

    # --- Input errors ---
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Empty/invalid subject, empty public key, inconsistent algorithms."""

    # --- Encoding errors ---
    ENCODING_ERROR = "ENCODING_ERROR"
    """A value violates the constraints of its ASN.1 type."""

    # --- External collaborator errors ---
    SIGNING_ERROR = "SIGNING_ERROR"
    """The signing capability failed, refused, or was cancelled."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.CONFIGURATION_ERROR, "Subject is empty")
    >>> desc.code
    <ErrorCode.CONFIGURATION_ERROR: 'CONFIGURATION_ERROR'>
    >>> desc.message
    'Subject is empty'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @staticmethod
    def create(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> FailureDescription:
        """Factory method with an optional cause."""
        return FailureDescription(code=code, message=message, exception=exception)

    def recoded(self, code: ErrorCode, prefix: str = "") -> FailureDescription:
        """
        Copy this failure under another code, keeping the cause.

        The original message is kept and optionally prefixed, so the
        caller still sees why the collaborator failed:

            err.recoded(ErrorCode.SIGNING_ERROR, "Signing failed")
            # → SIGNING_ERROR: "Signing failed: key not found"
        """
        message = f"{prefix}: {self.message}" if prefix else self.message
        return FailureDescription(code=code, message=message, exception=self.exception)

    def full_stack_trace(self) -> str:
        """Full stack trace string including the message and exception chain."""
        if self.exception is None:
            return self.message
        tb = "".join(traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__))
        return f"{self.message}\n{tb}"
