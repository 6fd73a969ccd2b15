"""Handle-based binding layer.

Host environments do not hold :class:`~digestcore.context.DigestContext`
objects directly. They receive opaque integer handles from a
:class:`HandleRegistry`, which owns the contexts, marshals host values into
raw bytes and hands digests back as read-only binary views.

The module-level functions (``hash_md5_new``, ``hash_update``,
``hmac_sha256_new`` ...) operate on a process default registry and mirror the
host-facing API one to one.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Sequence
from typing import Any, Dict, Optional

from .config import DEFAULT_CONFIG, UINT32_MAX, EngineConfig
from .context import DigestContext, KeyedContext
from .crypto.algorithms import HMAC_SHA256, MD5, SHA256, DigestAlgorithm
from .crypto.errors import InvalidArgumentError
from .crypto.secret import secure_zero

log = logging.getLogger(__name__)

Handle = int


def to_bytes(value: Any, *, what: str = "data") -> bytes:
    """Marshal a host value into raw bytes.

    Accepts ``str`` (UTF-8), any buffer object, and sequences of integers in
    ``0..255``.

    Raises:
        InvalidArgumentError: For anything else.
    """

    return bytes(to_bytearray(value, what=what))


def to_bytearray(value: Any, *, what: str = "data") -> bytearray:
    """Like :func:`to_bytes` but returns mutable storage the caller can wipe."""

    if isinstance(value, str):
        return bytearray(value.encode("utf-8"))
    try:
        with memoryview(value) as view:
            return bytearray(view)
    except TypeError:
        pass
    if isinstance(value, Sequence):
        try:
            return bytearray(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"{what} argument must be a string or array of bytes") from e
    raise InvalidArgumentError(f"{what} argument must be a string or array")


def to_truncate_length(value: Any, *, limit: int = UINT32_MAX) -> Optional[int]:
    """Validate a host ``truncate_to`` argument (``None`` or an unsigned 32-bit integer)."""

    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= limit:
        raise InvalidArgumentError("truncate_to argument must be undefined or a positive number")
    return value


class HandleRegistry:
    """
    Owner of every context reachable through a handle.

    Handle allocation and release are thread-safe. Operations on a single
    handle are not synchronised; drive one handle from one thread at a time.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        """
        Initialize the registry.

        Args:
            config: Engine configuration used for every context created here.
        """
        self.config = config or DEFAULT_CONFIG
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._contexts: Dict[Handle, DigestContext] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._contexts

    def _register(self, ctx: DigestContext) -> Handle:
        with self._lock:
            handle = next(self._ids)
            self._contexts[handle] = ctx
        log.debug("handle %d -> %r", handle, ctx)
        return handle

    def get(self, handle: Handle) -> DigestContext:
        """
        Look up the context behind ``handle``.

        Raises:
            InvalidArgumentError: If the handle is unknown or already destroyed.
        """
        with self._lock:
            ctx = self._contexts.get(handle)
        if ctx is None:
            raise InvalidArgumentError(f"unknown digest handle: {handle!r}")
        return ctx

    def new_hash(self, algorithm: str | DigestAlgorithm) -> Handle:
        """Create an unkeyed context and return its handle."""
        return self._register(DigestContext.create(algorithm, config=self.config))

    def new_hmac(self, algorithm: str | DigestAlgorithm, secret: Any) -> Handle:
        """
        Create a keyed context and return its handle.

        The marshaled copy of ``secret`` is wiped once the context has taken
        its own copy, whether or not construction succeeded.
        """
        raw = to_bytearray(secret, what="secret")
        try:
            ctx = KeyedContext.create(algorithm, raw, config=self.config)
        finally:
            secure_zero(raw)
        return self._register(ctx)

    def update(self, handle: Handle, data: Any) -> None:
        """Marshal ``data`` and absorb it into the context behind ``handle``."""
        ctx = self.get(handle)
        ctx.update(to_bytes(data))

    def digest(self, handle: Handle, truncate_to: Any = None) -> memoryview:
        """
        Finalize the context behind ``handle``.

        Args:
            handle: Handle returned by :meth:`new_hash` or :meth:`new_hmac`.
            truncate_to: ``None`` for the native size, otherwise an unsigned
                32-bit length; larger values clamp to the native size.

        Returns:
            Read-only view over the digest bytes.
        """
        length = to_truncate_length(truncate_to, limit=self.config.max_truncate_length)
        ctx = self.get(handle)
        return memoryview(ctx.finalize(length))

    def destroy(self, handle: Handle) -> None:
        """Release the context behind ``handle``; keyed contexts erase their secret."""
        with self._lock:
            ctx = self._contexts.pop(handle, None)
        if ctx is None:
            raise InvalidArgumentError(f"unknown digest handle: {handle!r}")
        ctx.destroy()

    def close(self) -> None:
        """Destroy every context still registered."""
        with self._lock:
            contexts = list(self._contexts.values())
            self._contexts.clear()
        for ctx in contexts:
            ctx.destroy()

    def __enter__(self) -> HandleRegistry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


default_registry = HandleRegistry()


def _require_family(handle: Handle, *, keyed: bool) -> DigestContext:
    ctx = default_registry.get(handle)
    if isinstance(ctx, KeyedContext) != keyed:
        kind = "hmac" if keyed else "hash"
        raise InvalidArgumentError(f"handle {handle!r} is not a {kind} handle")
    return ctx


def hash_md5_new() -> Handle:
    return default_registry.new_hash(MD5)


def hash_sha256_new() -> Handle:
    return default_registry.new_hash(SHA256)


def hash_update(handle: Handle, data: Any) -> None:
    _require_family(handle, keyed=False)
    default_registry.update(handle, data)


def hash_digest(handle: Handle, truncate_to: Any = None) -> memoryview:
    _require_family(handle, keyed=False)
    return default_registry.digest(handle, truncate_to)


def hmac_sha256_new(secret: Any) -> Handle:
    return default_registry.new_hmac(HMAC_SHA256, secret)


def hmac_update(handle: Handle, data: Any) -> None:
    _require_family(handle, keyed=True)
    default_registry.update(handle, data)


def hmac_digest(handle: Handle, truncate_to: Any = None) -> memoryview:
    _require_family(handle, keyed=True)
    return default_registry.digest(handle, truncate_to)


def destroy(handle: Handle) -> None:
    default_registry.destroy(handle)
