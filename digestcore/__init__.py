"""digestcore: incremental hashing and HMAC behind opaque, single-owner contexts."""

import logging

__version__ = "0.1.0"
__author__ = "digestcore developers"

from .binding import HandleRegistry
from .config import EngineConfig
from .context import ContextState, DigestContext, KeyedContext, resolve_output_length
from .crypto.errors import (
    AlgorithmError,
    AllocationError,
    DigestError,
    InvalidArgumentError,
    InvalidSignatureError,
    InvalidStateError,
)
from .digest import hash_chunks, hash_digest, hmac_digest, hmac_verify

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AlgorithmError",
    "AllocationError",
    "ContextState",
    "DigestContext",
    "DigestError",
    "EngineConfig",
    "HandleRegistry",
    "InvalidArgumentError",
    "InvalidSignatureError",
    "InvalidStateError",
    "KeyedContext",
    "hash_chunks",
    "hash_digest",
    "hmac_digest",
    "hmac_verify",
    "resolve_output_length",
]
