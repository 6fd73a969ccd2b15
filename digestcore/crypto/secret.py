"""Owned secret buffers.

Secrets live in mutable :class:`bytearray` storage obtained from a
:class:`SecretAllocator` so that they can be overwritten in place before the
storage is handed back. Immutable ``bytes`` copies of a secret cannot be
erased and are never created here.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .errors import AllocationError, InvalidArgumentError, InvalidStateError

log = logging.getLogger(__name__)


def secure_zero(buf: bytearray) -> None:
    """Overwrite ``buf`` with zeroes in place."""

    buf[:] = bytes(len(buf))


class SecretAllocator(Protocol):
    """Source of storage for secret key material."""

    def allocate(self, size: int) -> bytearray: ...

    def release(self, buf: bytearray) -> None: ...


class ZeroingAllocator:
    """Default allocator.

    Buffers are plain bytearrays. ``release`` zeroes again so that a buffer
    released through any path ends up cleared.
    """

    def allocate(self, size: int) -> bytearray:
        if size < 0:
            raise ValueError("size must be non-negative")
        return bytearray(size)

    def release(self, buf: bytearray) -> None:
        secure_zero(buf)


class SecretBuffer:
    """Exclusive owner of one secret held in allocator-provided storage."""

    __slots__ = ("_allocator", "_buf")

    def __init__(self, allocator: SecretAllocator, buf: bytearray):
        self._allocator = allocator
        self._buf: bytearray | None = buf

    @classmethod
    def copy_of(cls, secret: bytes | bytearray | memoryview, allocator: SecretAllocator) -> "SecretBuffer":
        """Copy ``secret`` into freshly allocated storage.

        The caller's buffer may be reused or freed afterwards without
        affecting the copy.
        """

        try:
            view = memoryview(secret)
        except TypeError as e:
            raise InvalidArgumentError("secret must be a bytes-like object") from e
        if not view.c_contiguous:
            raise InvalidArgumentError("secret must be a contiguous buffer")

        size = view.nbytes
        try:
            buf = allocator.allocate(size)
        except MemoryError as e:
            raise AllocationError("could not allocate secret storage") from e
        if not isinstance(buf, bytearray) or len(buf) != size:
            raise AllocationError("allocator returned storage of the wrong size")
        owned = cls(allocator, buf)
        try:
            buf[:] = view
        except BaseException:
            owned.wipe()
            raise
        return owned

    @property
    def released(self) -> bool:
        return self._buf is None

    def __len__(self) -> int:
        return 0 if self._buf is None else len(self._buf)

    def view(self) -> memoryview:
        """Return a read-only view of the secret without copying it."""

        if self._buf is None:
            raise InvalidStateError("secret has already been erased")
        return memoryview(self._buf).toreadonly()

    def wipe(self) -> None:
        """Zero the secret and return its storage to the allocator. Idempotent."""

        buf, self._buf = self._buf, None
        if buf is None:
            return
        try:
            secure_zero(buf)
        finally:
            self._allocator.release(buf)
        log.debug("erased %d-byte secret", len(buf))

    def __repr__(self) -> str:
        state = "erased" if self._buf is None else f"{len(self._buf)} bytes"
        return f"<SecretBuffer {state}>"
