from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from sigbase.error import SignatureError, error_type_for_kind
from sigbase.status import ErrorKind, Kind

T = TypeVar("T")


@dataclass
class Error:
    """Error returned by a signature operation.

    This is not a Python exception: operations return it inside a Result so
    that every failure path is an explicit value. Use to_exception() to get
    an exception to raise.
    """

    kind: ErrorKind
    message: str
    context: Optional[Any] = None

    def __init__(self, kind: ErrorKind, message: str, context: Optional[Any] = None):
        """Create a new Error.

        Args:
            kind: categorization of the error. One of the Kind values, or an
                arbitrary string chosen by a callback.
            message: short human readable message.
            context: additional diagnostic payload. Optional.

        Raises:
            ValueError: kind or message is missing.
        """
        if not kind:
            raise ValueError("Error kind is required")
        if message is None:
            raise ValueError("Error message is required")

        self.kind = kind
        self.message = message
        self.context = context

    @classmethod
    def from_exception(cls, ex: Exception, kind: Optional[ErrorKind] = None) -> Error:
        """Create an Error from a Python exception.

        SignatureError instances keep their kind, message and context. Any
        other exception is reported with its string representation as the
        message and the exception itself as the context.
        """
        if isinstance(ex, SignatureError):
            return cls(kind or ex.kind, ex.message, ex.context)
        return cls(kind or Kind.ERROR, str(ex) or type(ex).__qualname__, ex)

    def to_exception(self) -> SignatureError:
        """Returns an equivalent exception."""
        exception_type = error_type_for_kind(self.kind)
        ex = exception_type(self.message, self.context)
        if exception_type is SignatureError:
            ex._kind = self.kind
        if isinstance(self.context, BaseException):
            ex.__cause__ = self.context
        return ex


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation: either a value or an Error.

    Use the ok() and err() class methods to create instances.
    """

    value: Optional[T] = None
    error: Optional[Error] = None

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def err(cls, error: Error) -> Result[Any]:
        if error is None:
            raise ValueError("Result.err requires an error")
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Returns the value, or raises the exception matching the error."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.value  # type: ignore[return-value]

    def value_or(self, default: Any = None) -> Any:
        return default if self.error is not None else self.value

    def __bool__(self):
        return self.is_ok


def ok(value: T) -> Result[T]:
    """Shorthand for Result.ok, convenient in sign and verify callbacks."""
    return Result.ok(value)


def err(
    kind: ErrorKind, message: str, context: Optional[Any] = None
) -> Result[Any]:
    """Shorthand for Result.err(Error(kind, message, context))."""
    return Result.err(Error(kind, message, context))
