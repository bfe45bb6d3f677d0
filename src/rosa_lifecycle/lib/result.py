"""Result type used by every operation and workflow.

Operations never raise for expected failures (a failed `rosa` call, an API
error, a poll timeout). They return `Ok(value)` or `Err(error)` and callers
pattern match:

    match ensure_account_roles(ctx, prefix, version, channel_group):
        case Err() as e:
            return e
        case Ok(roles):
            ...
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success, carrying the value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure, carrying an error value (a frozen dataclass from lib.errors)."""

    error: E


type Result[T, E] = Ok[T] | Err[E]


def map_ok(result: Result[T, E], f: Callable[[T], U]) -> Result[U, E]:
    """Transform the success value, leaving errors untouched."""
    match result:
        case Ok(value):
            return Ok(f(value))
        case Err() as e:
            return e


def map_err(result: Result[T, E], f: Callable[[E], F]) -> Result[T, F]:
    """Transform the error value, leaving successes untouched."""
    match result:
        case Ok() as o:
            return o
        case Err(error):
            return Err(f(error))
