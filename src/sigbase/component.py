from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

import http_sfv
from typing_extensions import TypeAlias

from sigbase.codec import BareValue, encode_item, make_item
from sigbase.result import Error, Result
from sigbase.status import Kind

METHOD = "@method"
TARGET_URI = "@target-uri"
AUTHORITY = "@authority"
SCHEME = "@scheme"
PATH = "@path"
REQUEST_TARGET = "@request-target"
QUERY = "@query"
QUERY_PARAM = "@query-param"
SIGNATURE_PARAMS = "@signature-params"

DERIVED_COMPONENTS = frozenset(
    {
        METHOD,
        TARGET_URI,
        AUTHORITY,
        SCHEME,
        PATH,
        REQUEST_TARGET,
        QUERY,
        QUERY_PARAM,
    }
)


@dataclass(frozen=True, slots=True)
class SimpleComponent:
    """A component identified by its name only: a header field name or one
    of the derived component names such as "@method"."""

    name: str

    @property
    def parameters(self) -> Dict[str, BareValue]:
        return {}

    def as_item(self) -> http_sfv.Item:
        return make_item(self.name)


@dataclass(frozen=True, slots=True)
class ParameterizedComponent:
    """A component carrying parameters, e.g. "@query-param";name="foo".

    Parameters are kept as an ordered tuple of (key, value) pairs; their order
    is preserved when the component is serialized.
    """

    name: str
    params: Tuple[Tuple[str, BareValue], ...]

    @property
    def parameters(self) -> Dict[str, BareValue]:
        return dict(self.params)

    def as_item(self) -> http_sfv.Item:
        return make_item(self.name, self.parameters)


Component: TypeAlias = Union[SimpleComponent, ParameterizedComponent]
ComponentLike: TypeAlias = Union[Component, str]


def component(name: str, /, **params: BareValue) -> Component:
    """Returns the identifier of a component, with optional parameters."""
    if params:
        return ParameterizedComponent(name, tuple(params.items()))
    return SimpleComponent(name)


def query_param(name: str) -> ParameterizedComponent:
    """Returns the identifier of a single named query parameter."""
    return ParameterizedComponent(QUERY_PARAM, (("name", name),))


def as_component(value: ComponentLike) -> Component:
    match value:
        case str():
            return SimpleComponent(value)
        case SimpleComponent() | ParameterizedComponent():
            return value
    raise TypeError(f"unsupported component identifier: {value!r}")


def as_components(values: Iterable[ComponentLike]) -> List[Component]:
    return [as_component(value) for value in values]


def from_item(item: http_sfv.Item) -> Component:
    """Returns the component identified by a parsed structured field item."""
    if item.params:
        return ParameterizedComponent(str(item.value), tuple(item.params.items()))
    return SimpleComponent(str(item.value))


def component_key(c: Component) -> Result[str]:
    """Returns the serialized form of a component identifier, which is
    the key of its line in the signature base."""
    result = encode_item(c.as_item())
    if result.is_err:
        return Result.err(
            Error(
                Kind.ENCODING,
                "Failed to encode signature input key",
                result.error.context if result.error else None,
            )
        )
    return result


def describe(c: Component) -> str:
    """Returns the serialized component key, falling back to the bare name
    when the component cannot be serialized."""
    return component_key(c).value_or(c.name)


def matches(required: Component, covered: Component) -> bool:
    """Reports whether a covered component satisfies a required one.

    A simple identifier is satisfied by any covered component with the same
    name. A parameterized identifier also needs the exact same parameters.
    """
    if required.name != covered.name:
        return False
    match required:
        case SimpleComponent():
            return True
        case ParameterizedComponent():
            return _same_params(required.parameters, covered.parameters)
    return False


def _same_params(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    if a.keys() != b.keys():
        return False
    # bool is a subclass of int: ?1 and 1 are different parameters.
    return all(
        isinstance(a[k], bool) == isinstance(b[k], bool) and a[k] == b[k] for k in a
    )
