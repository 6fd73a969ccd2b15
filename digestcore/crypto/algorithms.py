"""Named digest algorithms.

Every algorithm identity fixes its native digest size and whether it needs a
secret. The set is closed by default but new identities can be registered at
runtime without touching the context API.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from cryptography.hazmat.primitives import hashes

from .errors import InvalidArgumentError

log = logging.getLogger(__name__)

HashFactory = Callable[[], hashes.HashAlgorithm]


@dataclass(frozen=True, slots=True)
class DigestAlgorithm:
    """A digest algorithm identity.

    Args:
        name: Canonical display name, e.g. ``"SHA256"`` or ``"HMAC-SHA256"``.
        digest_size: Native output size in bytes.
        hash_factory: Builds the :mod:`cryptography` hash algorithm object. For
            keyed identities this is the hash used inside HMAC.
        keyed: Whether contexts for this algorithm require a secret.
    """

    name: str
    digest_size: int
    hash_factory: HashFactory
    keyed: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("algorithm name must not be empty")
        if self.digest_size <= 0:
            raise ValueError("digest_size must be positive")

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    def __str__(self) -> str:
        return self.name


def normalize_name(name: str) -> str:
    """Fold ``"sha-256"``, ``"SHA_256"`` and ``"sha256"`` onto one lookup key."""

    return name.strip().upper().replace("-", "").replace("_", "")


MD5 = DigestAlgorithm("MD5", 16, hashes.MD5)
SHA1 = DigestAlgorithm("SHA1", 20, hashes.SHA1)
SHA224 = DigestAlgorithm("SHA224", 28, hashes.SHA224)
SHA256 = DigestAlgorithm("SHA256", 32, hashes.SHA256)
SHA384 = DigestAlgorithm("SHA384", 48, hashes.SHA384)
SHA512 = DigestAlgorithm("SHA512", 64, hashes.SHA512)
SHA3_256 = DigestAlgorithm("SHA3-256", 32, hashes.SHA3_256)
SHA3_512 = DigestAlgorithm("SHA3-512", 64, hashes.SHA3_512)
BLAKE2B = DigestAlgorithm("BLAKE2b-512", 64, lambda: hashes.BLAKE2b(64))
BLAKE2S = DigestAlgorithm("BLAKE2s-256", 32, lambda: hashes.BLAKE2s(32))

HMAC_MD5 = DigestAlgorithm("HMAC-MD5", 16, hashes.MD5, keyed=True)
HMAC_SHA1 = DigestAlgorithm("HMAC-SHA1", 20, hashes.SHA1, keyed=True)
HMAC_SHA224 = DigestAlgorithm("HMAC-SHA224", 28, hashes.SHA224, keyed=True)
HMAC_SHA256 = DigestAlgorithm("HMAC-SHA256", 32, hashes.SHA256, keyed=True)
HMAC_SHA384 = DigestAlgorithm("HMAC-SHA384", 48, hashes.SHA384, keyed=True)
HMAC_SHA512 = DigestAlgorithm("HMAC-SHA512", 64, hashes.SHA512, keyed=True)

_lock = threading.Lock()
_registry: dict[str, DigestAlgorithm] = {}


def register_algorithm(algorithm: DigestAlgorithm, *, replace: bool = False) -> DigestAlgorithm:
    """Make ``algorithm`` available to name-based lookups.

    Raises:
        InvalidArgumentError: If the name is taken and ``replace`` is false.
    """

    with _lock:
        existing = _registry.get(algorithm.key)
        if existing is not None and existing != algorithm and not replace:
            raise InvalidArgumentError(f"algorithm {algorithm.name!r} is already registered")
        _registry[algorithm.key] = algorithm
    log.debug("registered digest algorithm %s (%d bytes, keyed=%s)", algorithm.name, algorithm.digest_size, algorithm.keyed)
    return algorithm


def unregister_algorithm(name: str) -> None:
    with _lock:
        _registry.pop(normalize_name(name), None)


def get_algorithm(algorithm: str | DigestAlgorithm) -> DigestAlgorithm:
    """Resolve a name or identity to a registered :class:`DigestAlgorithm`."""

    if isinstance(algorithm, DigestAlgorithm):
        return algorithm
    if not isinstance(algorithm, str):
        raise InvalidArgumentError("algorithm must be a name or DigestAlgorithm")
    with _lock:
        found = _registry.get(normalize_name(algorithm))
    if found is None:
        raise InvalidArgumentError(f"unknown digest algorithm: {algorithm!r}")
    return found


def available_algorithms(*, keyed: bool | None = None) -> list[DigestAlgorithm]:
    """Return registered algorithms, optionally filtered by family."""

    with _lock:
        algs = list(_registry.values())
    if keyed is not None:
        algs = [a for a in algs if a.keyed == keyed]
    return sorted(algs, key=lambda a: a.name)


for _alg in (
    MD5,
    SHA1,
    SHA224,
    SHA256,
    SHA384,
    SHA512,
    SHA3_256,
    SHA3_512,
    BLAKE2B,
    BLAKE2S,
    HMAC_MD5,
    HMAC_SHA1,
    HMAC_SHA224,
    HMAC_SHA256,
    HMAC_SHA384,
    HMAC_SHA512,
):
    register_algorithm(_alg)
del _alg
