"""Explicit success/failure values returned by every collaborator call.

Ports never raise for remote failures; they return ``Ok`` or ``Err`` and the
caller decides whether the workflow halts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    message: str
    cause: BaseException | None = None

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: BaseException, message: str | None = None) -> Err:
        return cls(message=message or str(exc) or type(exc).__name__, cause=exc)


Result = Union[Ok[T], Err]
