import logging
from dataclasses import dataclass
from typing import Iterable

from sigbase.base import Params, build_signature_base, signature_params_member
from sigbase.callback import SigningContext, SignFunction, invoke
from sigbase.codec import encode_dictionary
from sigbase.component import ComponentLike, as_components
from sigbase.request import Request
from sigbase.result import Error, Result
from sigbase.status import Kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedMessage:
    """Header values produced by signing a request.

    Attributes:
        signature_input: value of the Signature-Input header.
        signature: value of the Signature header.
        signature_base: the signature base that was signed.
    """

    signature_input: str
    signature: str
    signature_base: str


async def create_signature(
    components: Iterable[ComponentLike],
    label: str,
    params: Params,
    request: Request,
    sign: SignFunction,
) -> Result[SignedMessage]:
    """Sign a request using HTTP Message Signatures.

    See https://www.rfc-editor.org/rfc/rfc9421 for details.

    The signature base covering the components and parameters is passed to
    the sign callback, which is invoked exactly once and returns the
    signature bytes wrapped in a Result.

    Args:
        components: The components to cover, in order. Strings are header
            names or derived component names; use query_param() or
            component() for components with parameters.
        label: The label of the signature in the dictionary headers.
        params: The signature parameters (e.g. keyid, created, alg).
        request: The request to sign. It is not modified.
        sign: The callback producing the signature of the base.

    Returns:
        The Signature-Input and Signature header values and the signature
        base, or the first error encountered.
    """
    try:
        covered = as_components(components)
    except TypeError as e:
        return Result.err(Error(Kind.VALIDATION, "Invalid signature input", e))

    logger.debug("signing request with %d components", len(covered))

    signature_input = encode_dictionary(
        {label: signature_params_member(covered, params)}
    )
    if signature_input.is_err:
        assert signature_input.error is not None
        return Result.err(
            Error(
                Kind.ENCODING,
                "Failed to encode signature input dictionary",
                signature_input.error.context,
            )
        )

    base = build_signature_base(covered, params, request)
    if base.is_err:
        return base
    assert base.value is not None
    signature_base = base.value.signature_base

    signed = await invoke(
        sign,
        SigningContext(signature_base=signature_base, params=params),
        "Failed to sign request",
    )
    if signed.is_err:
        logger.debug("sign callback failed: %s", signed.error)
        return signed

    signature_bytes = signed.value
    if not isinstance(signature_bytes, (bytes, bytearray, memoryview)):
        return Result.err(
            Error(
                Kind.ENCODING,
                "Invalid data in provided signature",
                TypeError(
                    f"signature must be bytes, not {type(signature_bytes).__name__}"
                ),
            )
        )

    signature = encode_dictionary({label: bytes(signature_bytes)})
    if signature.is_err:
        assert signature.error is not None
        return Result.err(
            Error(
                Kind.ENCODING,
                "Failed to encode signature dictionary",
                signature.error.context,
            )
        )

    logger.debug("signed request successfully")
    return Result.ok(
        SignedMessage(
            signature_input=signature_input.value,  # type: ignore[arg-type]
            signature=signature.value,  # type: ignore[arg-type]
            signature_base=signature_base,
        )
    )
