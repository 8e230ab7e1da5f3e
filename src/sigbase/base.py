import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import http_sfv

from sigbase.codec import encode_item, make_inner_list, make_item
from sigbase.component import (
    SIGNATURE_PARAMS,
    Component,
    ComponentLike,
    as_components,
    component_key,
)
from sigbase.request import Request
from sigbase.resolver import resolve
from sigbase.result import Error, Result
from sigbase.status import Kind

logger = logging.getLogger(__name__)

ParamValue = Any
Params = Mapping[str, ParamValue]


@dataclass(frozen=True)
class SignatureBase:
    """Canonical signature base of a request.

    Attributes:
        signature_base: the lines of the base, joined by newlines.
        signature_params: the serialized component list and parameters, which
            is also the value of the Signature-Input dictionary member.
    """

    signature_base: str
    signature_params: str

    def __str__(self):
        return self.signature_base


def signature_params_member(
    components: Iterable[Component], params: Params
) -> http_sfv.InnerList:
    """Returns the inner list holding the component identifiers and the
    signature parameters, as it appears in the Signature-Input header."""
    return make_inner_list([c.as_item() for c in components], params)


def build_signature_base(
    components: Iterable[ComponentLike], params: Params, request: Request
) -> Result[SignatureBase]:
    """Build the signature base covering the components of a request.

    Each component contributes one "<key>: <value>" line, in order, followed
    by the "@signature-params" line. The first component that cannot be
    resolved aborts the build and its error is returned unchanged.
    """
    try:
        covered = as_components(components)
    except TypeError as e:
        return Result.err(Error(Kind.VALIDATION, "Invalid signature input", e))

    lines: List[Tuple[str, str]] = []
    seen: Dict[str, Component] = {}
    for c in covered:
        key = component_key(c)
        if key.is_err:
            return key
        assert key.value is not None

        if key.value in seen:
            return Result.err(
                Error(
                    Kind.VALIDATION,
                    "Invalid signature input",
                    f"Duplicate component {key.value} in signature input",
                )
            )
        seen[key.value] = c

        value = resolve(c, request)
        if value.is_err:
            return value
        assert value.value is not None

        if "\n" in value.value or "\r" in value.value:
            return Result.err(
                Error(
                    Kind.VALIDATION,
                    "Invalid signature input",
                    f"Value of field {key.value} contains a newline character",
                )
            )
        lines.append((key.value, value.value))

    trailer = encode_item(signature_params_member(covered, params))
    if trailer.is_err:
        assert trailer.error is not None
        return Result.err(
            Error(
                Kind.ENCODING,
                "Failed to encode signature parameters",
                trailer.error.context,
            )
        )
    assert trailer.value is not None

    signature_params_key = encode_item(make_item(SIGNATURE_PARAMS)).unwrap()
    lines.append((signature_params_key, trailer.value))

    logger.debug("built signature base with %d components", len(covered))
    return Result.ok(
        SignatureBase(
            signature_base="\n".join(f"{k}: {v}" for k, v in lines),
            signature_params=trailer.value,
        )
    )
