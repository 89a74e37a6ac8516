"""Ok / Err results for tree operations.

Tree mutations either succeed with a change-set or fail with a message.
Failing is an expected outcome (a stale path from a concurrent render, a
task that is already complete), so it is returned rather than raised.

Example usage:
    >>> result = complete_task(workspace, path)
    >>> if is_ok(result):
    ...     print(result.value.changed)
    ... else:
    ...     print(f"Error: {result.error}")
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure carrying ``error``, usually a message for the user."""

    error: E


# Union instead of | because the alias is subscripted with TypeVars at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    return isinstance(result, Err)


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Transform a success value; failures pass through unchanged."""
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def flat_map(result: Ok[T] | Err[E], fn: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Run ``fn`` on a success value and return its result.

    Used to chain a lookup into a mutation, e.g. locating the focused task
    and then completing it. The first failure short-circuits the chain.
    """
    if isinstance(result, Ok):
        return fn(result.value)
    return result


def unwrap_or(result: Ok[T] | Err[E], default: T) -> T:
    """The success value, or ``default`` on failure."""
    if isinstance(result, Ok):
        return result.value
    return default
