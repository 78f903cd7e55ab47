"""
Explicit result type for request boundaries.

Endpoints run their work through ``guard`` and then branch on the outcome, so
a client disconnect (``Cancelled``) can never be turned into an error response
by a broad exception handler.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Cancelled:
    error: asyncio.CancelledError

    def reraise(self) -> None:
        raise self.error


@dataclass(frozen=True)
class Failed:
    error: Exception


Outcome = Union[Ok[T], Cancelled, Failed]


async def guard(awaitable: Awaitable[T]) -> "Outcome[T]":
    """Await the work and classify how it finished."""
    try:
        return Ok(await awaitable)
    except asyncio.CancelledError as e:
        return Cancelled(e)
    except Exception as e:
        return Failed(e)
