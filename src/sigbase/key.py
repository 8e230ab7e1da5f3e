import base64
import logging
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    load_pem_private_key,
    load_pem_public_key,
)

from sigbase.callback import SigningContext, VerificationContext
from sigbase.config import (
    SIGNATURE_ALGORITHM,
    VERIFICATION_KEY_ENVVAR,
    NamedValueFromEnvironment,
)
from sigbase.result import Error, Result
from sigbase.status import Kind

logger = logging.getLogger(__name__)


def public_key_from_pem(pem: Union[str, bytes]) -> Ed25519PublicKey:
    """Returns an Ed25519 public key given a PEM representation."""
    if isinstance(pem, str):
        pem = pem.encode()

    key = load_pem_public_key(pem)
    if not isinstance(key, Ed25519PublicKey):
        raise ValueError(f"unexpected public key type: {type(key)}")
    return key


def public_key_from_bytes(key: bytes) -> Ed25519PublicKey:
    """Returns an Ed25519 public key from 32 raw bytes."""
    return Ed25519PublicKey.from_public_bytes(key)


def private_key_from_pem(
    pem: Union[str, bytes], password: Optional[Union[str, bytes]] = None
) -> Ed25519PrivateKey:
    """Returns an Ed25519 private key given a PEM representation
    and optional password."""
    if isinstance(pem, str):
        pem = pem.encode()
    if isinstance(password, str):
        password = password.encode()

    key = load_pem_private_key(pem, password=password)
    if not isinstance(key, Ed25519PrivateKey):
        raise ValueError(f"unexpected private key type: {type(key)}")
    return key


def private_key_from_bytes(key: bytes) -> Ed25519PrivateKey:
    """Returns an Ed25519 private key from 32 raw bytes."""
    return Ed25519PrivateKey.from_private_bytes(key)


def parse_verification_key(
    verification_key: Optional[Union[Ed25519PublicKey, str, bytes]],
) -> Optional[Ed25519PublicKey]:
    """Returns the Ed25519 public key described by verification_key.

    The key may be a key object, a PEM representation, or the base64
    encoding of the raw key bytes. When it is empty, the key is read from the
    SIGBASE_VERIFICATION_KEY environment variable. None is returned when no
    key is configured.

    Raises:
        ValueError: The key cannot be parsed.
    """
    if isinstance(verification_key, Ed25519PublicKey):
        return verification_key

    if isinstance(verification_key, bytes):
        verification_key = verification_key.decode()

    key = NamedValueFromEnvironment(
        VERIFICATION_KEY_ENVVAR, "verification key", verification_key or None
    )
    if not key:
        return None

    # PEM keys passed through environment variables often have their
    # newlines escaped as a literal "\n".
    try:
        return public_key_from_pem(key.value.replace("\\n", "\n"))
    except ValueError:
        pass

    try:
        return public_key_from_bytes(base64.b64decode(key.value.encode()))
    except ValueError:
        raise ValueError(f"invalid {key.name} '{key.value}'")


@dataclass(slots=True)
class Ed25519Signer:
    """Sign callback producing Ed25519 signatures."""

    private_key: Ed25519PrivateKey

    algorithm_id = SIGNATURE_ALGORITHM.algorithm_id

    def __call__(self, context: SigningContext) -> Result[bytes]:
        return Result.ok(self.private_key.sign(context.signature_base.encode()))


@dataclass(slots=True)
class Ed25519Verifier:
    """Verify callback checking Ed25519 signatures.

    When key_id is set, signatures made with any other key ID are rejected.
    """

    public_key: Ed25519PublicKey
    key_id: Optional[str] = None

    algorithm_id = SIGNATURE_ALGORITHM.algorithm_id

    def __call__(self, context: VerificationContext) -> Result[bool]:
        key_id = context.params.get("keyid")
        if self.key_id is not None and key_id != self.key_id:
            return Result.err(
                Error(
                    Kind.VALIDATION,
                    "Invalid signature",
                    f"public key '{key_id}' not available",
                )
            )

        alg = context.params.get("alg")
        if alg is not None and alg != self.algorithm_id:
            return Result.err(
                Error(
                    Kind.VALIDATION,
                    "Invalid signature",
                    f"unsupported signature algorithm '{alg}'",
                )
            )

        try:
            self.public_key.verify(
                context.signature, context.signature_base.encode()
            )
        except InvalidSignature:
            logger.debug("ed25519 signature does not match signature base")
            return Result.err(
                Error(
                    Kind.VALIDATION,
                    "Invalid signature",
                    "Signature verification failed",
                )
            )
        return Result.ok(True)
