"""Shared exceptions for :mod:`digestcore.crypto`.

The library raises a small set of domain-specific exceptions so that callers
never see backend-specific exception types from :pypi:`cryptography`.
"""

from __future__ import annotations


class DigestError(Exception):
    """Base error for digest operations."""


class AllocationError(DigestError):
    """Raised when a context or secret buffer cannot be allocated."""


class InvalidStateError(DigestError):
    """Raised when a context is used after it was finalized or destroyed."""


class InvalidArgumentError(DigestError):
    """Raised for malformed input at the API boundary."""


class AlgorithmError(DigestError):
    """Raised when the underlying digest primitive fails or is unavailable."""


class InvalidSignatureError(DigestError):
    """Raised when an HMAC tag does not match the computed digest."""
