import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from http_message_signatures.algorithms import ED25519

LABEL = "sig1"

SIGNATURE_ALGORITHM = ED25519

DEFAULT_KEY_ID = "default"

DEFAULT_MAX_AGE = timedelta(minutes=5)

VERIFICATION_KEY_ENVVAR = "SIGBASE_VERIFICATION_KEY"

COVERED_COMPONENT_IDS = (
    "@method",
    "@path",
    "@authority",
    "content-type",
    "content-digest",
)


@dataclass
class NamedValueFromEnvironment:
    """A configuration value that is either set explicitly or read from an
    environment variable.

    Values read from the environment are read again when the object is
    unpickled, so that a process picks up its own environment.
    """

    _envvar: str
    _name: str
    _value: str
    _from_envvar: bool

    def __init__(
        self,
        envvar: str,
        name: str,
        value: Optional[str] = None,
        from_envvar: bool = False,
    ):
        self._envvar = envvar
        self._name = name
        self._from_envvar = from_envvar
        if value is None:
            self._value = os.environ.get(envvar) or ""
            self._from_envvar = True
        else:
            self._value = value

    def __str__(self):
        return self.value

    def __bool__(self):
        return bool(self._value)

    def __getstate__(self):
        return (self._envvar, self._name, self._value, self._from_envvar)

    def __setstate__(self, state):
        (self._envvar, self._name, self._value, self._from_envvar) = state
        if self._from_envvar:
            self._value = os.environ.get(self._envvar) or ""
            self._from_envvar = True

    @property
    def name(self) -> str:
        """Name to use when reporting the value: the environment variable
        when the value came from the environment."""
        return self._envvar if self._from_envvar else self._name

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str):
        self._value = value
        self._from_envvar = False

    @property
    def from_envvar(self) -> bool:
        return self._from_envvar
