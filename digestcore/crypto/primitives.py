"""Digest algorithm primitives.

A primitive is the black-box absorb/finalize unit a context drives. The
implementations here are thin adapters over :class:`cryptography.hazmat.primitives.hashes.Hash`
and :class:`cryptography.hazmat.primitives.hmac.HMAC` that translate backend
exceptions into :mod:`digestcore.crypto.errors`.
"""

from __future__ import annotations

from typing import Protocol

from cryptography.exceptions import AlreadyFinalized, InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from .algorithms import DigestAlgorithm
from .errors import AlgorithmError, AllocationError, InvalidArgumentError, InvalidStateError

Buffer = bytes | bytearray | memoryview


class DigestPrimitive(Protocol):
    """Interface every concrete primitive satisfies."""

    digest_size: int

    def update(self, data: Buffer) -> None: ...

    def finalize(self, length: int) -> bytes: ...


def _translate(e: Exception, what: str) -> Exception:
    if isinstance(e, AlreadyFinalized):
        return InvalidStateError(f"{what}: primitive already finalized")
    if isinstance(e, MemoryError):
        return AllocationError(f"{what}: out of memory")
    if isinstance(e, TypeError):
        return InvalidArgumentError(f"{what}: {e}")
    return AlgorithmError(f"{what}: {e}")


class _CryptographyPrimitive:
    """Shared update/finalize plumbing over a ``cryptography`` context."""

    __slots__ = ("algorithm", "digest_size", "_ctx")

    def __init__(self, algorithm: DigestAlgorithm, ctx: hashes.Hash | hmac.HMAC):
        self.algorithm = algorithm
        self.digest_size = algorithm.digest_size
        self._ctx = ctx

    def update(self, data: Buffer) -> None:
        try:
            self._ctx.update(data)
        except (AlreadyFinalized, InternalError, MemoryError, TypeError, ValueError) as e:
            raise _translate(e, f"{self.algorithm.name} update") from e

    def finalize(self, length: int) -> bytes:
        """Finalize into a fresh buffer of exactly ``length`` bytes."""

        if not 0 <= length <= self.digest_size:
            raise InvalidArgumentError(f"output length must be in range 0..{self.digest_size}")
        try:
            full = self._ctx.finalize()
        except (AlreadyFinalized, InternalError, MemoryError, ValueError) as e:
            raise _translate(e, f"{self.algorithm.name} finalize") from e
        if len(full) != self.digest_size:
            raise AlgorithmError(
                f"{self.algorithm.name} produced {len(full)} bytes, expected {self.digest_size}"
            )
        return full[:length]


class HashPrimitive(_CryptographyPrimitive):
    """Unkeyed hash primitive."""

    __slots__ = ()

    def __init__(self, algorithm: DigestAlgorithm):
        if algorithm.keyed:
            raise InvalidArgumentError(f"{algorithm.name} requires a secret")
        try:
            ctx = hashes.Hash(algorithm.hash_factory())
        except (UnsupportedAlgorithm, InternalError, MemoryError, ValueError) as e:
            raise _translate(e, f"{algorithm.name} init") from e
        super().__init__(algorithm, ctx)


class HmacPrimitive(_CryptographyPrimitive):
    """Keyed primitive (HMAC over the algorithm's hash)."""

    __slots__ = ()

    def __init__(self, algorithm: DigestAlgorithm, key: Buffer):
        if not algorithm.keyed:
            raise InvalidArgumentError(f"{algorithm.name} is not a keyed algorithm")
        try:
            ctx = hmac.HMAC(key, algorithm.hash_factory())
        except (UnsupportedAlgorithm, InternalError, MemoryError, TypeError, ValueError) as e:
            raise _translate(e, f"{algorithm.name} init") from e
        super().__init__(algorithm, ctx)


def open_primitive(algorithm: DigestAlgorithm, key: Buffer | None = None) -> DigestPrimitive:
    """Construct the primitive matching ``algorithm``'s family."""

    if algorithm.keyed:
        if key is None:
            raise InvalidArgumentError(f"{algorithm.name} requires a secret")
        return HmacPrimitive(algorithm, key)
    if key is not None:
        raise InvalidArgumentError(f"{algorithm.name} does not take a secret")
    return HashPrimitive(algorithm)
