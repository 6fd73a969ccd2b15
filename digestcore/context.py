"""Incremental digest contexts.

A context owns one digest primitive and drives it through a small state
machine::

    READY --update--> READY
    READY --finalize--> FINALIZED
    READY | FINALIZED --destroy--> DESTROYED

``finalize`` moves the context to ``FINALIZED`` whether or not the primitive
succeeds; there is no separate error state. An error raised from ``update``
leaves the context ``READY``.

:class:`KeyedContext` additionally owns a copy of the secret for its whole
lifetime and erases it on every destruction path: explicit :meth:`destroy`,
leaving a ``with`` block, garbage collection, and failed construction.
"""

from __future__ import annotations

import logging
import weakref
from enum import Enum
from typing import Optional

from cryptography.hazmat.primitives import constant_time

from .config import DEFAULT_CONFIG, EngineConfig
from .crypto.algorithms import DigestAlgorithm, get_algorithm
from .crypto.errors import (
    AlgorithmError,
    InvalidArgumentError,
    InvalidSignatureError,
    InvalidStateError,
)
from .crypto.primitives import Buffer, DigestPrimitive, open_primitive
from .crypto.secret import SecretBuffer

log = logging.getLogger(__name__)

# 80 bits, the floor RFC 2104 puts on truncated HMAC output
MIN_TAG_LENGTH = 10


class ContextState(Enum):
    READY = "ready"
    FINALIZED = "finalized"
    DESTROYED = "destroyed"


def resolve_output_length(digest_size: int, truncate_to: Optional[int] = None) -> int:
    """Return the number of digest bytes to produce.

    ``None`` selects the native size. Larger requests clamp to the native size;
    the output is never padded.

    Raises:
        InvalidArgumentError: If ``truncate_to`` is not a non-negative integer.
    """

    if truncate_to is None:
        return digest_size
    if isinstance(truncate_to, bool) or not isinstance(truncate_to, int):
        raise InvalidArgumentError("truncate_to must be None or a non-negative integer")
    if truncate_to < 0:
        raise InvalidArgumentError("truncate_to must be non-negative")
    return min(digest_size, truncate_to)


class DigestContext:
    """Incremental unkeyed digest.

    Not safe for concurrent use from several threads; distinct contexts are
    independent.
    """

    def __init__(self, algorithm: DigestAlgorithm, primitive: DigestPrimitive):
        self._algorithm = algorithm
        self._primitive: DigestPrimitive | None = primitive
        self._state = ContextState.READY

    @classmethod
    def create(cls, algorithm: str | DigestAlgorithm, *, config: Optional[EngineConfig] = None) -> DigestContext:
        """Create a context in the ``READY`` state.

        Raises:
            AllocationError: If the backend runs out of memory.
            AlgorithmError: If the backend cannot provide the algorithm.
            InvalidArgumentError: If the algorithm is unknown, keyed, or disabled.
        """

        config = config or DEFAULT_CONFIG
        alg = get_algorithm(algorithm)
        if alg.keyed:
            raise InvalidArgumentError(f"{alg.name} is keyed; use KeyedContext.create")
        config.require_enabled(alg)
        ctx = cls(alg, open_primitive(alg))
        log.debug("created %s context", alg.name)
        return ctx

    @property
    def algorithm(self) -> DigestAlgorithm:
        return self._algorithm

    @property
    def digest_size(self) -> int:
        return self._algorithm.digest_size

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def finalized(self) -> bool:
        return self._state is not ContextState.READY

    def _require_ready(self, op: str) -> DigestPrimitive:
        if self._state is ContextState.DESTROYED:
            raise InvalidStateError(f"cannot {op}: {self._algorithm.name} context has been destroyed")
        if self._state is ContextState.FINALIZED or self._primitive is None:
            raise InvalidStateError(f"cannot {op}: {self._algorithm.name} context is already finalized")
        return self._primitive

    def update(self, data: Buffer) -> None:
        """Absorb ``data``.

        Any chunking of the input gives the same digest as one call with the
        concatenation.
        """

        primitive = self._require_ready("update")
        primitive.update(data)

    def finalize(self, truncate_to: Optional[int] = None) -> bytes:
        """Finish the digest and return ``min(digest_size, truncate_to)`` bytes.

        The context is unusable afterwards, including when this call raises
        :class:`AlgorithmError`.
        """

        primitive = self._require_ready("finalize")
        length = resolve_output_length(self.digest_size, truncate_to)

        self._state = ContextState.FINALIZED
        self._primitive = None
        try:
            out = primitive.finalize(length)
        except AlgorithmError:
            log.warning("%s finalize failed", self._algorithm.name)
            raise
        if len(out) != length:
            raise AlgorithmError(f"{self._algorithm.name} returned {len(out)} bytes, expected {length}")
        log.debug("finalized %s context (%d of %d bytes)", self._algorithm.name, length, self.digest_size)
        return out

    # Alias matching the binding layer's name for finalize.
    digest = finalize

    def _release(self) -> None:
        self._primitive = None

    def destroy(self) -> None:
        """Release the primitive and any owned secret. Calling again is a no-op."""

        if self._state is ContextState.DESTROYED:
            return
        self._state = ContextState.DESTROYED
        self._release()
        log.debug("destroyed %s context", self._algorithm.name)

    def __enter__(self) -> DigestContext:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._algorithm.name} {self._state.value}>"


class KeyedContext(DigestContext):
    """Incremental keyed digest (HMAC) holding its own copy of the secret."""

    def __init__(self, algorithm: DigestAlgorithm, primitive: DigestPrimitive, secret: SecretBuffer):
        super().__init__(algorithm, primitive)
        self._secret = secret
        # Runs SecretBuffer.wipe exactly once: on destroy() or on collection.
        self._erase_secret = weakref.finalize(self, secret.wipe)

    @classmethod
    def create(
        cls,
        algorithm: str | DigestAlgorithm,
        secret: Buffer,
        *,
        config: Optional[EngineConfig] = None,
    ) -> KeyedContext:
        """Copy ``secret`` and create a keyed context in the ``READY`` state.

        If the primitive cannot be initialised, the copied secret is erased
        before the error propagates.
        """

        config = config or DEFAULT_CONFIG
        alg = get_algorithm(algorithm)
        if not alg.keyed:
            raise InvalidArgumentError(f"{alg.name} is not keyed; use DigestContext.create")
        config.require_enabled(alg)

        owned = SecretBuffer.copy_of(secret, config.allocator)
        try:
            primitive = open_primitive(alg, owned.view())
            ctx = cls(alg, primitive, owned)
        except BaseException as e:
            owned.wipe()
            log.warning("failed to create %s context: %s", alg.name, e)
            raise
        log.debug("created %s context with %d-byte secret", alg.name, len(owned))
        return ctx

    @property
    def secret_erased(self) -> bool:
        return self._secret.released

    @property
    def min_tag_length(self) -> int:
        """Shortest truncated tag :meth:`verify` accepts (RFC 2104 section 5)."""

        return min(self.digest_size, max(MIN_TAG_LENGTH, self.digest_size // 2))

    def verify(self, signature: Buffer, truncate_to: Optional[int] = None) -> None:
        """Finalize and compare against ``signature`` in constant time.

        Arguments are checked before the context is finalized, so a rejected
        call leaves it ``READY``.

        Raises:
            InvalidArgumentError: If ``signature`` is not bytes-like, or the tag
                length is below :attr:`min_tag_length`.
            InvalidSignatureError: If the tags differ.
        """

        try:
            with memoryview(signature) as view:
                if not view.c_contiguous:
                    raise InvalidArgumentError("signature must be a contiguous buffer")
                tag = view.tobytes()
        except TypeError as e:
            raise InvalidArgumentError("signature must be a bytes-like object") from e

        length = resolve_output_length(self.digest_size, truncate_to)
        if length < self.min_tag_length:
            raise InvalidArgumentError(
                f"{self._algorithm.name} tags shorter than {self.min_tag_length} bytes cannot be verified"
            )

        expected = self.finalize(length)
        if not constant_time.bytes_eq(expected, tag):
            raise InvalidSignatureError(f"{self._algorithm.name} tag did not match")

    def _release(self) -> None:
        try:
            self._erase_secret()
        finally:
            super()._release()
