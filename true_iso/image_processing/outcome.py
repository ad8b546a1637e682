"""Tagged results for operations that fall back instead of failing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Value produced by a stage, optionally marked as degraded.

    A degraded outcome still carries a usable value (identity map,
    unchanged buffer, default angle); ``reason`` says which fallback ran.
    """

    value: T
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(value)

    @classmethod
    def degraded(cls, value: T, reason: str) -> "Outcome[T]":
        return cls(value, reason)

    @property
    def is_degraded(self) -> bool:
        return self.reason is not None
