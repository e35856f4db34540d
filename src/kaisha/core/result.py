"""Two-variant result type for validating commands.

Every aggregate command returns ``Result[T, E]`` instead of raising on an
expected business-rule violation.  The error side is always a ``LegalError``
(an ``Exception`` subclass) except for low-level value parsers, which carry a
bare ``str`` until the aggregate boundary wraps it.

``unwrap()`` is the only place an error turns into a raised exception.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union, cast

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Functional result wrapper: either ``ok(value)`` or ``err(error)``."""

    _value: Union[T, E]
    _is_ok: bool

    @classmethod
    def ok(cls, value: T) -> Result[T, E]:
        return cls(_value=value, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> Result[T, E]:
        return cls(_value=error, _is_ok=False)

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    @property
    def value(self) -> T:
        """The success value.  Raises ``ValueError`` on an error result."""
        if not self._is_ok:
            raise ValueError(f"Result is an error: {self._value!r}")
        return cast(T, self._value)

    @property
    def error(self) -> E:
        """The error value.  Raises ``ValueError`` on a success result."""
        if self._is_ok:
            raise ValueError("Result is ok; no error to read")
        return cast(E, self._value)

    def unwrap(self) -> T:
        if self._is_ok:
            return cast(T, self._value)
        err = self._value
        if isinstance(err, BaseException):
            raise err
        raise ValueError(str(err))

    def unwrap_or(self, default: T) -> T:
        return cast(T, self._value) if self._is_ok else default

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        if self._is_ok:
            return Result.ok(fn(cast(T, self._value)))
        return cast(Result[U, E], self)

    def map_err(self, fn: Callable[[E], F]) -> Result[T, F]:
        if self._is_ok:
            return cast(Result[T, F], self)
        return Result.err(fn(cast(E, self._value)))

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        if self._is_ok:
            return fn(cast(T, self._value))
        return cast(Result[U, E], self)

    def __repr__(self) -> str:
        tag = "Ok" if self._is_ok else "Err"
        return f"{tag}({self._value!r})"


def require(condition: bool, error: E) -> Result[None, E]:
    """Precondition check: ``ok(None)`` when *condition* holds."""
    if condition:
        return Result.ok(None)
    return Result.err(error)


def first_error(*checks: Result[Any, E]) -> Result[None, E]:
    """Return the first failing check, or ``ok(None)`` if all pass.

    Checks are evaluated eagerly by the caller, so only cheap predicates
    belong here.
    """
    for check in checks:
        if check.is_err():
            return Result.err(check.error)
    return Result.ok(None)
