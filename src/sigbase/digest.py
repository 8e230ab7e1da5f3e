import base64
import hashlib
import hmac
import inspect
import logging
from typing import Awaitable, Callable, Union

import http_sfv

from sigbase.codec import decode_dictionary
from sigbase.result import Error, Result
from sigbase.status import Kind

logger = logging.getLogger(__name__)

# See https://datatracker.ietf.org/doc/html/rfc9530#name-hash-algorithms-for-http-di
SUPPORTED_ALGORITHMS = ("sha-256", "sha-512")

_HASHES = {
    "sha-256": hashlib.sha256,
    "sha-512": hashlib.sha512,
}

DigestFunction = Callable[[str, bytes], Union[bytes, Awaitable[bytes]]]


def compute_digest(algorithm: str, body: bytes) -> bytes:
    """Returns the digest of a body using one of the supported algorithms."""
    try:
        hash_function = _HASHES[algorithm]
    except KeyError:
        raise ValueError(f"unsupported digest algorithm: {algorithm}")
    return hash_function(body).digest()


def generate_content_digest(body: Union[str, bytes], algorithm: str = "sha-512") -> str:
    """Returns a Content-Digest header, according to
    https://datatracker.ietf.org/doc/html/rfc9530
    """
    if isinstance(body, str):
        body = body.encode()

    digest = compute_digest(algorithm, body)
    return str(http_sfv.Dictionary({algorithm: digest}))


async def verify_content_digest(
    digest_header: Union[str, bytes],
    body: Union[str, bytes, None],
    digest: DigestFunction = compute_digest,
) -> Result[bool]:
    """Verify that a SHA-256 or SHA-512 Content-Digest header matches a
    request body.

    The first supported algorithm listed in the header is used. The digest
    function may be synchronous or a coroutine function.
    """
    if body is None:
        body = b""
    elif isinstance(body, str):
        body = body.encode()

    parsed = decode_dictionary(digest_header)
    if parsed.is_err:
        assert parsed.error is not None
        return Result.err(
            Error(
                Kind.VALIDATION,
                'Invalid value for header "content-digest"',
                parsed.error.context,
            )
        )
    assert parsed.value is not None

    provided = list(parsed.value.keys())
    algorithm = next((a for a in provided if a in SUPPORTED_ALGORITHMS), None)
    if algorithm is None:
        message = f"Unsupported content-digest algorithm: {', '.join(provided)}"
        return Result.err(Error(Kind.VALIDATION, message, message))

    member = parsed.value[algorithm]
    if not isinstance(member, http_sfv.Item) or not isinstance(member.value, bytes):
        message = f"Invalid digest for algorithm {algorithm}"
        return Result.err(Error(Kind.VALIDATION, message, message))
    expected = member.value

    try:
        actual = digest(algorithm, body)
        if inspect.isawaitable(actual):
            actual = await actual
    except Exception as e:
        return Result.err(
            Error(
                Kind.VALIDATION,
                f"Failed to calculate digest for algorithm {algorithm}",
                e,
            )
        )
    actual = bytes(actual)  # type: ignore[arg-type]

    if not hmac.compare_digest(expected, actual):
        logger.debug("content digest mismatch for algorithm %s", algorithm)
        message = (
            f"Digest mismatch for algorithm {algorithm}. "
            f"Expected {_b64(expected)}, got {_b64(actual)}"
        )
        return Result.err(Error(Kind.VALIDATION, message, message))

    return Result.ok(True)


def _b64(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")
