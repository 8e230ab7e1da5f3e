import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Union

from sigbase.result import Error, Result
from sigbase.status import Kind


@dataclass(frozen=True)
class SigningContext:
    """Argument passed to sign callbacks."""

    signature_base: str
    params: Mapping[str, Any]


@dataclass(frozen=True)
class VerificationContext:
    """Argument passed to verify callbacks."""

    signature_base: str
    params: Mapping[str, Any]
    signature: bytes


SignFunction = Callable[
    [SigningContext], Union[Result[bytes], Awaitable[Result[bytes]]]
]
"""Signs a signature base. May be a plain function or a coroutine function."""

VerifyFunction = Callable[
    [VerificationContext], Union[Result[bool], Awaitable[Result[bool]]]
]
"""Verifies a signature. May be a plain function or a coroutine function."""


async def invoke(callback: Callable[[Any], Any], context: Any, message: str) -> Result:
    """Call a sign or verify callback exactly once and return its Result.

    Exceptions raised by the callback, and return values that are not a
    Result, are reported as errors of kind "error" with the given message.
    """
    try:
        result = callback(context)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        return Result.err(Error(Kind.ERROR, message, e))

    if not isinstance(result, Result):
        return Result.err(
            Error(
                Kind.ERROR,
                message,
                TypeError(f"callback returned {type(result).__name__}, not a Result"),
            )
        )
    return result
