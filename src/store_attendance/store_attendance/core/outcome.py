from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .enums import OutcomeStatus

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an external call that may succeed, degrade or fail.

    ``DEGRADED`` still carries a usable value (e.g. the inline image when the
    upload failed) together with the reason it is not the normal one.
    """

    status: OutcomeStatus
    value: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(status=OutcomeStatus.SUCCESS, value=value)

    @classmethod
    def degraded(cls, value: T, reason: str) -> "Outcome[T]":
        return cls(status=OutcomeStatus.DEGRADED, value=value, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "Outcome[T]":
        return cls(status=OutcomeStatus.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def usable(self) -> bool:
        return self.status != OutcomeStatus.FAILED
