"""Test configuration for digestcore package."""

from __future__ import annotations

import pytest

from digestcore.config import EngineConfig


class RecordingAllocator:
    """Allocator that keeps every buffer it hands out and snapshots it on release."""

    def __init__(self) -> None:
        self.allocated: list[bytearray] = []
        self.released: list[bytearray] = []
        self.release_snapshots: list[bytes] = []

    def allocate(self, size: int) -> bytearray:
        buf = bytearray(size)
        self.allocated.append(buf)
        return buf

    def release(self, buf: bytearray) -> None:
        self.release_snapshots.append(bytes(buf))
        self.released.append(buf)

    def holds(self, secret: bytes) -> bool:
        """Whether any buffer ever allocated still contains ``secret``."""
        return any(secret in bytes(buf) for buf in self.allocated)


@pytest.fixture
def allocator() -> RecordingAllocator:
    """Provide an instrumented secret allocator."""
    return RecordingAllocator()


@pytest.fixture
def config(allocator: RecordingAllocator) -> EngineConfig:
    """Provide an engine configuration wired to the recording allocator."""
    return EngineConfig(allocator=allocator)


@pytest.fixture
def fox() -> bytes:
    return b"The quick brown fox jumps over the lazy dog"
