"""Digest primitives and their supporting pieces.

Modules in this package intentionally provide *thin* wrappers around vetted
implementations from :pypi:`cryptography`. The stateful contexts built on top
of them live in :mod:`digestcore.context`.
"""

from __future__ import annotations

from .algorithms import (
    BLAKE2B,
    BLAKE2S,
    HMAC_MD5,
    HMAC_SHA1,
    HMAC_SHA224,
    HMAC_SHA256,
    HMAC_SHA384,
    HMAC_SHA512,
    MD5,
    SHA1,
    SHA224,
    SHA256,
    SHA384,
    SHA3_256,
    SHA3_512,
    SHA512,
    DigestAlgorithm,
    available_algorithms,
    get_algorithm,
    register_algorithm,
    unregister_algorithm,
)
from .errors import (
    AlgorithmError,
    AllocationError,
    DigestError,
    InvalidArgumentError,
    InvalidSignatureError,
    InvalidStateError,
)
from .primitives import DigestPrimitive, HashPrimitive, HmacPrimitive, open_primitive
from .secret import SecretAllocator, SecretBuffer, ZeroingAllocator, secure_zero

__all__ = [
    "AlgorithmError",
    "AllocationError",
    "BLAKE2B",
    "BLAKE2S",
    "DigestAlgorithm",
    "DigestError",
    "DigestPrimitive",
    "HMAC_MD5",
    "HMAC_SHA1",
    "HMAC_SHA224",
    "HMAC_SHA256",
    "HMAC_SHA384",
    "HMAC_SHA512",
    "HashPrimitive",
    "HmacPrimitive",
    "InvalidArgumentError",
    "InvalidSignatureError",
    "InvalidStateError",
    "MD5",
    "SHA1",
    "SHA224",
    "SHA256",
    "SHA384",
    "SHA3_256",
    "SHA3_512",
    "SHA512",
    "SecretAllocator",
    "SecretBuffer",
    "ZeroingAllocator",
    "available_algorithms",
    "get_algorithm",
    "open_primitive",
    "register_algorithm",
    "secure_zero",
    "unregister_algorithm",
]
