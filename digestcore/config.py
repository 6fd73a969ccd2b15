"""Configuration for the digest engine.

The engine has no process-wide state beyond the algorithm registry. Anything
tunable, including where secret storage comes from, is carried by an
:class:`EngineConfig` passed explicitly to contexts and handle registries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import os

from .crypto.algorithms import DigestAlgorithm, normalize_name
from .crypto.errors import InvalidArgumentError
from .crypto.secret import SecretAllocator, ZeroingAllocator

DISABLED_ALGORITHMS_ENV = "DIGESTCORE_DISABLED_ALGORITHMS"
MAX_TRUNCATE_LENGTH_ENV = "DIGESTCORE_MAX_TRUNCATE_LENGTH"

# truncate_to is an unsigned 32-bit value at the binding boundary
UINT32_MAX = 2**32 - 1


@dataclass(frozen=True)
class EngineConfig:
    """Settings threaded through context construction."""

    allocator: SecretAllocator = field(default_factory=ZeroingAllocator)
    disabled_algorithms: frozenset[str] = frozenset()
    max_truncate_length: int = UINT32_MAX

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "disabled_algorithms",
            frozenset(normalize_name(n) for n in self.disabled_algorithms),
        )

    @classmethod
    def from_environment(cls, allocator: Optional[SecretAllocator] = None) -> EngineConfig:
        """
        Build a configuration from ``DIGESTCORE_*`` environment variables.

        Args:
            allocator: Secret allocator to use. Defaults to :class:`ZeroingAllocator`.

        Returns:
            Engine configuration.

        Raises:
            InvalidArgumentError: If a variable cannot be parsed or the result
                fails :meth:`validate`.
        """
        disabled = os.getenv(DISABLED_ALGORITHMS_ENV, "")
        names = frozenset(n for n in (part.strip() for part in disabled.split(",")) if n)

        max_truncate = UINT32_MAX
        raw = os.getenv(MAX_TRUNCATE_LENGTH_ENV)
        if raw is not None and raw.strip():
            try:
                max_truncate = int(raw.strip())
            except ValueError as e:
                raise InvalidArgumentError(f"{MAX_TRUNCATE_LENGTH_ENV} must be an integer, got {raw!r}") from e

        config = cls(
            allocator=allocator if allocator is not None else ZeroingAllocator(),
            disabled_algorithms=names,
            max_truncate_length=max_truncate,
        )
        errors = config.validate()
        if errors:
            raise InvalidArgumentError("invalid environment configuration: " + "; ".join(errors))
        return config

    def is_enabled(self, algorithm: DigestAlgorithm) -> bool:
        return algorithm.key not in self.disabled_algorithms

    def require_enabled(self, algorithm: DigestAlgorithm) -> None:
        if not self.is_enabled(algorithm):
            raise InvalidArgumentError(f"digest algorithm {algorithm.name} is disabled")

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            List of validation errors. Empty if valid.
        """
        errors = []

        if not 0 <= self.max_truncate_length <= UINT32_MAX:
            errors.append(f"max_truncate_length must be in range 0..{UINT32_MAX}")

        for method in ("allocate", "release"):
            if not callable(getattr(self.allocator, method, None)):
                errors.append(f"allocator must provide {method}()")

        return errors


DEFAULT_CONFIG = EngineConfig()
