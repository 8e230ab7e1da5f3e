import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Union

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from sigbase.component import ComponentLike, as_components
from sigbase.config import (
    COVERED_COMPONENT_IDS,
    DEFAULT_KEY_ID,
    DEFAULT_MAX_AGE,
    LABEL,
    SIGNATURE_ALGORITHM,
)
from sigbase.digest import generate_content_digest
from sigbase.error import ValidationError
from sigbase.key import Ed25519Signer, Ed25519Verifier
from sigbase.request import Request
from sigbase.sign import create_signature
from sigbase.verify import verify_signature

logger = logging.getLogger(__name__)


async def sign_request(
    request: Request,
    key: Ed25519PrivateKey,
    created: Union[datetime, int],
    *,
    label: str = LABEL,
    key_id: str = DEFAULT_KEY_ID,
    components: Iterable[ComponentLike] = COVERED_COMPONENT_IDS,
    include_alg: bool = True,
):
    """Sign a request using HTTP Message Signatures.

    The function adds up to three headers to the request: Content-Digest
    (when the signature covers it), Signature-Input, and Signature. See
    https://www.rfc-editor.org/rfc/rfc9421 for more details.

    By default the signature covers the request method, the URL authority
    and path, the Content-Type header, and the request body (via the
    Content-Digest header).

    Args:
        request: The request to sign.
        key: The Ed25519 private key to use to generate the signature.
        created: The time at which the signature is created.
        label: The label of the signature.
        key_id: The key ID recorded in the signature parameters.
        components: The components covered by the signature.
        include_alg: Whether to record the algorithm in the signature
            parameters.

    Raises:
        SignatureError: The request cannot be signed.
    """
    covered = as_components(components)
    logger.debug("signing request with %d byte body", len(request.body_bytes))

    if any(c.name.lower() == "content-digest" for c in covered):
        request.headers["Content-Digest"] = generate_content_digest(
            request.body_bytes
        )

    params: Dict[str, Any] = {}
    if include_alg:
        params["alg"] = SIGNATURE_ALGORITHM.algorithm_id
    params["keyid"] = key_id
    params["created"] = _timestamp(created)

    signed = (
        await create_signature(covered, label, params, request, Ed25519Signer(key))
    ).unwrap()

    request.headers["Signature-Input"] = signed.signature_input
    request.headers["Signature"] = signed.signature
    logger.debug("signed request successfully")


async def verify_request(
    request: Request,
    key: Ed25519PublicKey,
    max_age: timedelta = DEFAULT_MAX_AGE,
    *,
    label: str = LABEL,
    key_id: str = DEFAULT_KEY_ID,
    required_components: Iterable[ComponentLike] = COVERED_COMPONENT_IDS,
):
    """Verify a request containing an HTTP Message Signature.

    The function checks the Signature-Input and Signature headers, and the
    Content-Digest header when the signature covers it. See
    https://www.rfc-editor.org/rfc/rfc9421 for more details.

    The signature must cover at least the required components, and be made
    with the key identified by key_id.

    Args:
        request: The request to verify.
        key: The Ed25519 public key to use to verify the signature.
        max_age: The maximum age of the signature.
        label: The label of the signature to verify.
        key_id: The key ID the signature must have been made with.
        required_components: The components the signature must cover.

    Raises:
        ValidationError: The request is not signed, or the signature is
            invalid.
        SignatureError: The signature could not be verified.
    """
    logger.debug("verifying request signature")

    signature_input = request.header("Signature-Input")
    signature = request.header("Signature")
    if signature_input is None or signature is None:
        raise ValidationError(
            "request does not contain any signatures",
            "missing Signature-Input or Signature header",
        )

    result = await verify_signature(
        signature_input,
        signature,
        label,
        required_components,
        ("keyid", "created"),
        max_age,
        request,
        Ed25519Verifier(key, key_id=key_id),
    )
    result.unwrap()


def _timestamp(created: Union[datetime, int]) -> int:
    if isinstance(created, datetime):
        return int(created.timestamp())
    return int(created)
