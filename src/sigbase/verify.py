import logging
import time
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Union

import http_sfv

from sigbase.base import build_signature_base
from sigbase.callback import VerificationContext, VerifyFunction, invoke
from sigbase.codec import decode_dictionary
from sigbase.component import (
    Component,
    ComponentLike,
    as_components,
    describe,
    from_item,
    matches,
)
from sigbase.digest import DigestFunction, compute_digest, verify_content_digest
from sigbase.request import Request
from sigbase.result import Error, Result
from sigbase.status import Kind

logger = logging.getLogger(__name__)

Seconds = Union[int, float, timedelta]

INVALID_SIGNATURE_INPUT = "Invalid signature input"
INVALID_SIGNATURE = "Invalid signature"


async def verify_signature(
    signature_input: Union[str, bytes],
    signature: Union[str, bytes],
    label: str,
    required_components: Iterable[ComponentLike],
    required_params: Iterable[str],
    max_age: Seconds,
    request: Request,
    verify: VerifyFunction,
    *,
    digest: DigestFunction = compute_digest,
    max_skew: Optional[Seconds] = None,
) -> Result[bool]:
    """Verify a request containing an HTTP Message Signature.

    See https://www.rfc-editor.org/rfc/rfc9421 for details.

    The signature labeled `label` must cover at least the required components
    and carry the required parameters. Its "created" parameter must be an
    integer no older than max_age. When the signature covers the
    Content-Digest header, the header must match the request body.

    The signature base is rebuilt from the components listed in the
    Signature-Input header (not from required_components), so that the verify
    callback always checks what was actually signed.

    Args:
        signature_input: The value of the Signature-Input header.
        signature: The value of the Signature header.
        label: The label of the signature to verify.
        required_components: Components the signature must cover.
        required_params: Names of the parameters the signature must carry.
        max_age: The maximum age of the signature, in seconds or as a
            timedelta.
        request: The request to verify.
        verify: The callback verifying the signature of the base, invoked
            exactly once when all the other checks succeed.
        digest: The digest primitive used to check Content-Digest.
        max_skew: When set, how far in the future the "created" parameter
            may be.

    Returns:
        Result.ok(True) if the signature is valid, the first error
        encountered otherwise.
    """
    logger.debug("verifying request signature")

    signature_input_dict = decode_dictionary(signature_input)
    if signature_input_dict.is_err:
        return _invalid(INVALID_SIGNATURE_INPUT, _context(signature_input_dict))
    signature_dict = decode_dictionary(signature)
    if signature_dict.is_err:
        return _invalid(INVALID_SIGNATURE, _context(signature_dict))
    assert signature_input_dict.value is not None
    assert signature_dict.value is not None

    if label not in signature_input_dict.value:
        return _invalid(
            INVALID_SIGNATURE_INPUT,
            f'Signature input does not contain "{label}" field',
        )
    if label not in signature_dict.value:
        return _invalid(
            INVALID_SIGNATURE, f'Signature does not contain "{label}" field'
        )

    input_member = signature_input_dict.value[label]
    if not _is_component_list(input_member):
        return _invalid(
            INVALID_SIGNATURE_INPUT, f'Invalid signature input for "{label}"'
        )
    signature_member = signature_dict.value[label]
    if not isinstance(signature_member, http_sfv.Item) or not isinstance(
        signature_member.value, bytes
    ):
        return _invalid(INVALID_SIGNATURE, f'Invalid signature for "{label}"')

    covered = [from_item(item) for item in input_member]
    params: Dict[str, Any] = dict(input_member.params)
    provided_signature: bytes = signature_member.value

    try:
        required = as_components(required_components)
    except TypeError as e:
        return _invalid(INVALID_SIGNATURE_INPUT, e)

    for r in required:
        if not any(matches(r, c) for c in covered):
            return _invalid(
                INVALID_SIGNATURE,
                f"Missing required input field {describe(r)} in signature input",
            )

    for name in required_params:
        if name not in params:
            return _invalid(
                INVALID_SIGNATURE,
                f'Missing required parameter "{name}" in signature input',
            )

    fresh = check_freshness(params, max_age, max_skew)
    if fresh.is_err:
        return fresh

    if any(c.name.lower() == "content-digest" for c in covered):
        digest_header = request.header("content-digest")
        if digest_header is None:
            return _invalid(
                INVALID_SIGNATURE, 'Missing required header "content-digest"'
            )
        digest_ok = await verify_content_digest(
            digest_header, request.body, digest=digest
        )
        if digest_ok.is_err:
            return digest_ok

    base = build_signature_base(covered, params, request)
    if base.is_err:
        return base
    assert base.value is not None

    verified = await invoke(
        verify,
        VerificationContext(
            signature_base=base.value.signature_base,
            params=params,
            signature=provided_signature,
        ),
        "Failed to verify request",
    )
    if verified.is_err:
        logger.debug("signature verification failed: %s", verified.error)
        return verified
    if verified.value is not True:
        return _invalid(
            "Signature verification didn't pass",
            f"verify callback returned {verified.value!r}",
        )

    logger.debug("verified request signature '%s'", label)
    return verified


def check_freshness(
    params: Dict[str, Any],
    max_age: Seconds,
    max_skew: Optional[Seconds] = None,
    now: Optional[float] = None,
) -> Result[bool]:
    """Check the "created" (and when present "expires") parameters of a
    signature against the current time."""
    if now is None:
        now = time.time()

    created = params.get("created")
    if created is None:
        return _invalid(
            INVALID_SIGNATURE,
            'Missing required parameter "created" in signature input',
        )
    if not _is_integer(created):
        return _invalid(
            INVALID_SIGNATURE, 'Invalid parameter "created" in signature input'
        )

    if now - created > _seconds(max_age):
        return _invalid("Signature expired", "Signature expired")

    if max_skew is not None and created - now > _seconds(max_skew):
        return _invalid(
            "Signature created in the future", "Signature created in the future"
        )

    if "expires" in params:
        expires = params["expires"]
        if not _is_integer(expires):
            return _invalid(
                INVALID_SIGNATURE, 'Invalid parameter "expires" in signature input'
            )
        if now > expires:
            return _invalid("Signature expired", "Signature expired")

    return Result.ok(True)


def covered_components(signature_input: Union[str, bytes], label: str) -> List[Component]:
    """Returns the components covered by a labeled signature, or an empty
    list if the header cannot be parsed or has no such label."""
    parsed = decode_dictionary(signature_input)
    if parsed.is_err:
        return []
    assert parsed.value is not None
    member = parsed.value.get(label)
    if not _is_component_list(member):
        return []
    return [from_item(item) for item in member]


def _is_component_list(member: Any) -> bool:
    if not isinstance(member, http_sfv.InnerList) or len(member) < 1:
        return False
    return all(
        isinstance(item, http_sfv.Item) and type(item.value) is str
        for item in member
    )


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _seconds(value: Seconds) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def _context(result: Result) -> Any:
    return result.error.context if result.error is not None else None


def _invalid(message: str, context: Any) -> Result[Any]:
    logger.debug("signature rejected: %s (%s)", message, context)
    return Result.err(Error(Kind.VALIDATION, message, context))
