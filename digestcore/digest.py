"""One-shot digest helpers built on :mod:`digestcore.context`."""

from __future__ import annotations

from typing import Iterable, Optional

from .config import EngineConfig
from .context import DigestContext, KeyedContext
from .crypto.algorithms import DigestAlgorithm
from .crypto.primitives import Buffer


def hash_digest(
    algorithm: str | DigestAlgorithm,
    data: Buffer,
    *,
    truncate_to: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> bytes:
    """Compute an unkeyed digest of ``data``.

    Args:
        algorithm: Algorithm name or identity, e.g. ``"SHA256"``.
        data: Data to hash.
        truncate_to: Optional output length; clamps to the native size.
        config: Engine configuration.

    Returns:
        Digest bytes.
    """

    return hash_chunks(algorithm, (data,), truncate_to=truncate_to, config=config)


def hash_chunks(
    algorithm: str | DigestAlgorithm,
    chunks: Iterable[Buffer],
    *,
    truncate_to: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> bytes:
    """Compute an unkeyed digest over the concatenation of ``chunks``."""

    with DigestContext.create(algorithm, config=config) as ctx:
        for chunk in chunks:
            ctx.update(chunk)
        return ctx.finalize(truncate_to)


def hmac_digest(
    algorithm: str | DigestAlgorithm,
    key: Buffer,
    data: Buffer,
    *,
    truncate_to: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> bytes:
    """Compute a keyed digest (HMAC) of ``data``.

    The key copy held by the context is erased before this function returns.
    """

    with KeyedContext.create(algorithm, key, config=config) as ctx:
        ctx.update(data)
        return ctx.finalize(truncate_to)


def hmac_verify(
    algorithm: str | DigestAlgorithm,
    key: Buffer,
    data: Buffer,
    signature: Buffer,
    *,
    truncate_to: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> None:
    """Check ``signature`` against the HMAC of ``data`` in constant time.

    Raises:
        InvalidSignatureError: If the tag does not match.
    """

    with KeyedContext.create(algorithm, key, config=config) as ctx:
        ctx.update(data)
        ctx.verify(signature, truncate_to)
