"""Signature base construction and verification for HTTP Message Signatures
(RFC 9421)."""

from http_message_signatures.structures import CaseInsensitiveDict

from sigbase.base import SignatureBase, build_signature_base
from sigbase.callback import SigningContext, VerificationContext
from sigbase.component import (
    ParameterizedComponent,
    SimpleComponent,
    component,
    query_param,
)
from sigbase.digest import (
    compute_digest,
    generate_content_digest,
    verify_content_digest,
)
from sigbase.error import (
    CallbackError,
    EncodingError,
    SignatureError,
    ValidationError,
)
from sigbase.key import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
    Ed25519Signer,
    Ed25519Verifier,
    parse_verification_key,
    private_key_from_bytes,
    private_key_from_pem,
    public_key_from_bytes,
    public_key_from_pem,
)
from sigbase.request import Request
from sigbase.resolver import resolve
from sigbase.result import Error, Result, err, ok
from sigbase.sign import SignedMessage, create_signature
from sigbase.signature import sign_request, verify_request
from sigbase.status import Kind
from sigbase.verify import covered_components, verify_signature

__all__ = [
    "CallbackError",
    "CaseInsensitiveDict",
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "Ed25519Signer",
    "Ed25519Verifier",
    "EncodingError",
    "Error",
    "Kind",
    "ParameterizedComponent",
    "Request",
    "Result",
    "SignatureBase",
    "SignatureError",
    "SignedMessage",
    "SigningContext",
    "SimpleComponent",
    "ValidationError",
    "VerificationContext",
    "build_signature_base",
    "component",
    "compute_digest",
    "covered_components",
    "create_signature",
    "err",
    "generate_content_digest",
    "ok",
    "parse_verification_key",
    "private_key_from_bytes",
    "private_key_from_pem",
    "public_key_from_bytes",
    "public_key_from_pem",
    "query_param",
    "resolve",
    "sign_request",
    "verify_content_digest",
    "verify_request",
    "verify_signature",
]
