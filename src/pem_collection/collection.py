"""
Collection operations — build and extend a PemCollection.

Every operation returns Result[PemCollection]. Collections are immutable, so
a successful call returns a new collection and a failed call leaves the
caller's collection exactly as it was: there is no half-updated state.

Private keys go through the PrivateKeyEncoder port; the default adapter is
CryptographyPrivateKeyEncoder.
"""

from __future__ import annotations

from dataclasses import replace

import structlog
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from pem_collection.adapters.key_encoder import CryptographyPrivateKeyEncoder
from pem_collection.domain.models import PemCollection
from pem_collection.domain.ports import PrivateKeyEncoder
from pem_collection.failure import ErrorCode
from pem_collection.result import Result

log = structlog.get_logger()

_DEFAULT_ENCODER = CryptographyPrivateKeyEncoder()


def certificate_to_pem(certificate: x509.Certificate) -> str:
    return certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")


def _encode_key(
    signing_key: PrivateKeyTypes,
    key_password: bytes | str | None,
    key_format: str,
    encoder: PrivateKeyEncoder | None,
) -> Result[str]:
    return (encoder or _DEFAULT_ENCODER).encode(signing_key, key_password or None, key_format or "")


def new_from_certificate(
    certificate: x509.Certificate | None = None,
    signing_key: PrivateKeyTypes | None = None,
    key_password: bytes | str | None = None,
    key_format: str = "",
    encoder: PrivateKeyEncoder | None = None,
) -> Result[PemCollection]:
    """
    Build a collection from an in-memory certificate and optional signing key.

    Certificate and key are independent; either or both may be omitted.
    The key is password-protected when `key_password` is non-empty.
    Fails with ENCODING_ERROR when the key cannot be encoded.
    """
    collection = PemCollection(
        certificate=certificate_to_pem(certificate) if certificate is not None else None,
    )
    if signing_key is None:
        return Result.success(collection)

    return _encode_key(signing_key, key_password, key_format, encoder).map(
        lambda key_pem: replace(collection, private_key=key_pem)
    )


def add_private_key(
    collection: PemCollection,
    signing_key: PrivateKeyTypes | None,
    key_password: bytes | str | None = None,
    key_format: str = "",
    encoder: PrivateKeyEncoder | None = None,
) -> Result[PemCollection]:
    """
    Return a copy of `collection` holding the encoded signing key.

    A collection carries at most one private key: DUPLICATE_KEY if one is
    already present, INVALID_INPUT if no key is given.
    """
    if collection.has_private_key:
        return Result.failure(
            ErrorCode.DUPLICATE_KEY,
            "The PEM collection can only contain one private key",
        )

    return (
        Result.from_optional(signing_key, "Signing key cannot be None")
        .flat_map(lambda key: _encode_key(key, key_password, key_format, encoder))
        .map(lambda key_pem: replace(collection, private_key=key_pem))
        .peek(lambda _: log.debug("collection.key_added", encrypted=bool(key_password)))
    )


def add_chain_element(
    collection: PemCollection,
    certificate: x509.Certificate | None,
) -> Result[PemCollection]:
    """Append a certificate to the chain; order of calls is the chain order."""
    return Result.from_optional(certificate, "Certificate cannot be None").map(
        lambda cert: replace(collection, chain=(*collection.chain, certificate_to_pem(cert)))
    )


def add_csr(
    collection: PemCollection,
    csr: x509.CertificateSigningRequest | None,
) -> Result[PemCollection]:
    """Store a certificate signing request; a collection holds at most one."""
    if collection.csr:
        return Result.failure(
            ErrorCode.DUPLICATE_CSR,
            "The PEM collection can only contain one certificate signing request",
        )

    return Result.from_optional(csr, "Certificate signing request cannot be None").map(
        lambda request: replace(
            collection,
            csr=request.public_bytes(serialization.Encoding.PEM).decode("ascii"),
        )
    )
