import enum
from typing import Union


@enum.unique
class Kind(str, enum.Enum):
    """Enumeration of the categories of errors returned by signature
    operations.
    """

    VALIDATION = "validation"
    ENCODING = "encoding"
    ERROR = "error"

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.value


Kind.VALIDATION.__doc__ = (
    "Input was malformed or violated the verification policy, the caller may recover"
)
Kind.ENCODING.__doc__ = "Structured field text could not be serialized or parsed"
Kind.ERROR.__doc__ = "The signer or verifier callback raised instead of returning"


ErrorKind = Union[Kind, str]
"""Kind of an error. Callbacks may report failures with their own kind
strings, which are passed through unchanged."""
