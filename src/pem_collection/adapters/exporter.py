"""
Runtime certificate exporter — PemCollection → RuntimeCertificate.

Decodes the collection's certificate and chain into DER, leaf first, and
turns its private key block into a cryptography key object:

    label              handling
    ─────────────────  ─────────────────────────────────────────────
    EC PRIVATE KEY     SEC1 elliptic-curve key
    RSA PRIVATE KEY    PKCS#1 or PKCS#8 body
    anything else      UNSUPPORTED_KEY (ENCRYPTED PRIVATE KEY, PRIVATE KEY)

Every PEM decode step is checked: absent or undecodable text is reported as
MALFORMED_INPUT rather than assumed present.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from pem_collection.adapters.pem_scanner import (
    CERTIFICATE_LABEL,
    PRIVATE_KEY_LABELS,
    PemBlock,
    decode_single_pem,
)
from pem_collection.domain.models import PemCollection, RuntimeCertificate
from pem_collection.failure import ErrorCode
from pem_collection.result import Result

log = structlog.get_logger()


def _key_loader(label: str, key_type: type) -> Callable[[bytes], PrivateKeyTypes]:
    """Build a DER loader that rejects keys of any other type than `key_type`."""

    def load(der: bytes) -> PrivateKeyTypes:
        # Reads both the traditional (PKCS#1, SEC1) and PKCS#8 structures.
        key = serialization.load_der_private_key(der, password=None)
        if not isinstance(key, key_type):
            raise TypeError(f"{label} block holds a {type(key).__name__}")
        return key

    return load


_KEY_LOADERS: dict[str, Callable[[bytes], PrivateKeyTypes]] = {
    "EC PRIVATE KEY": _key_loader("EC PRIVATE KEY", ec.EllipticCurvePrivateKey),
    "RSA PRIVATE KEY": _key_loader("RSA PRIVATE KEY", rsa.RSAPrivateKey),
}


def _is_legacy_encrypted(block: PemBlock) -> bool:
    return "ENCRYPTED" in block.headers.get("Proc-Type", "")


def _parse_key_block(block: PemBlock) -> Result[PrivateKeyTypes]:
    loader = _KEY_LOADERS.get(block.label)
    if loader is None or _is_legacy_encrypted(block):
        log.warning("exporter.unsupported_key", label=block.label, encrypted=_is_legacy_encrypted(block))
        return Result.failure(
            ErrorCode.UNSUPPORTED_KEY,
            f"Private key block {block.label!r} cannot be converted to a runtime key",
        )
    return Result.from_computation(
        lambda: loader(block.der),
        ErrorCode.MALFORMED_INPUT,
        f"Failed to parse {block.label} block",
    )


def _decode_certificate(text: str | None, what: str) -> Result[bytes]:
    return decode_single_pem(text, what, {CERTIFICATE_LABEL}).map(lambda block: block.der)


def _decode_chain(chain: Sequence[str]) -> Result[list[bytes]]:
    return Result.all_of(
        _decode_certificate(entry, f"chain entry #{index}") for index, entry in enumerate(chain)
    )


def _decode_private_key(text: str | None) -> Result[PrivateKeyTypes]:
    return decode_single_pem(text, "private key", PRIVATE_KEY_LABELS).flat_map(_parse_key_block)


def to_runtime_certificate(collection: PemCollection) -> Result[RuntimeCertificate]:
    """
    Convert a collection into a certificate chain + private key pair.

    Both the certificate and the private key are required. The resulting
    chain is the certificate's DER followed by each chain entry's DER in the
    collection's stored order.
    """
    return (
        _decode_certificate(collection.certificate, "certificate")
        .flat_map(lambda leaf: _decode_chain(collection.chain).map(lambda chain: (leaf, *chain)))
        .flat_map(
            lambda ders: _decode_private_key(collection.private_key).map(
                lambda key: RuntimeCertificate(certificate_chain=ders, private_key=key)
            )
        )
        .peek(
            lambda runtime: log.info(
                "exporter.complete",
                chain_length=len(runtime.certificate_chain),
                key_type=type(runtime.private_key).__name__,
            )
        )
    )
