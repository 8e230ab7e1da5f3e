from typing import Any, Dict, Type

from sigbase.status import ErrorKind, Kind


class SignatureError(Exception):
    """Base class for sigbase exceptions."""

    _kind: ErrorKind = Kind.ERROR

    def __init__(self, message: str, context: Any = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        if self.context is None:
            return self.message
        return f"{self.message}: {self.context}"

    @property
    def kind(self) -> ErrorKind:
        return self._kind


class ValidationError(SignatureError, ValueError):
    """Input was malformed or did not satisfy the verification policy."""

    _kind = Kind.VALIDATION


class EncodingError(SignatureError, ValueError):
    """Structured field text could not be serialized or parsed."""

    _kind = Kind.ENCODING


class CallbackError(SignatureError):
    """The signer or verifier callback raised an exception."""

    _kind = Kind.ERROR


_ERROR_TYPES: Dict[str, Type[SignatureError]] = {
    Kind.VALIDATION.value: ValidationError,
    Kind.ENCODING.value: EncodingError,
    Kind.ERROR.value: CallbackError,
}


def error_type_for_kind(kind: ErrorKind) -> Type[SignatureError]:
    """Returns the exception class raised for errors of the given kind.

    Kinds chosen by callbacks that are not one of the built-in kinds map to
    SignatureError, and keep their kind on the raised exception.
    """
    return _ERROR_TYPES.get(str(kind), SignatureError)
