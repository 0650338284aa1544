"""Tagged result returned by every service operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from app.errors import Failure

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T
    status_code: int = 200


@dataclass(frozen=True, slots=True)
class Err:
    failure: Failure


Result = Ok[T] | Err


__all__ = ["Err", "Ok", "Result"]
