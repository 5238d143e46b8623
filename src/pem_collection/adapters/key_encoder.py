"""
Private key encoder adapter — signing key → PEM private key block.

Implements the PrivateKeyEncoder port with cryptography (PyCA) serialization.

Block produced per key type and format hint:

    key type     hint          no password          password
    ──────────   ───────────   ──────────────────   ─────────────────────────────
    RSA          legacy-pem    RSA PRIVATE KEY      RSA PRIVATE KEY (Proc-Type)
    RSA          other         PRIVATE KEY          ENCRYPTED PRIVATE KEY
    EC           legacy-pem    EC PRIVATE KEY       EC PRIVATE KEY (Proc-Type)
    EC           other         EC PRIVATE KEY       ENCRYPTED PRIVATE KEY
    Ed25519/448  any           PRIVATE KEY          ENCRYPTED PRIVATE KEY
"""

from __future__ import annotations

import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from pem_collection.failure import ErrorCode
from pem_collection.result import Result

log = structlog.get_logger()

LEGACY_PEM_FORMAT = "legacy-pem"


def _select_private_format(
    signing_key: PrivateKeyTypes,
    key_format: str,
    encrypted: bool,
) -> serialization.PrivateFormat:
    legacy = key_format.lower() == LEGACY_PEM_FORMAT
    if isinstance(signing_key, rsa.RSAPrivateKey):
        return serialization.PrivateFormat.TraditionalOpenSSL if legacy else serialization.PrivateFormat.PKCS8
    if isinstance(signing_key, ec.EllipticCurvePrivateKey):
        if legacy or not encrypted:
            return serialization.PrivateFormat.TraditionalOpenSSL
        return serialization.PrivateFormat.PKCS8
    if isinstance(signing_key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return serialization.PrivateFormat.PKCS8
    raise TypeError(f"Unable to format key of type {type(signing_key).__name__}")


def _normalize_password(password: bytes | str | None) -> bytes:
    if password is None:
        return b""
    if isinstance(password, str):
        return password.encode("utf-8")
    return bytes(password)


class CryptographyPrivateKeyEncoder:
    """
    Encode signing keys as PEM text.

    Implements the PrivateKeyEncoder port. Exceptions from cryptography are
    caught at this adapter boundary and reported as ENCODING_ERROR.
    """

    def encode(
        self,
        signing_key: PrivateKeyTypes,
        password: bytes | str | None = None,
        key_format: str = "",
    ) -> Result[str]:
        return Result.from_computation(
            lambda: self._do_encode(signing_key, _normalize_password(password), key_format or ""),
            ErrorCode.ENCODING_ERROR,
            "Failed to encode private key",
        ).peek_failure(
            lambda err: log.warning(
                "key_encoder.failed",
                key_type=type(signing_key).__name__,
                key_format=key_format,
                error=str(err.exception),
            )
        )

    def _do_encode(self, signing_key: PrivateKeyTypes, password: bytes, key_format: str) -> str:
        encrypted = len(password) > 0
        private_format = _select_private_format(signing_key, key_format, encrypted)
        encryption: serialization.KeySerializationEncryption = (
            serialization.BestAvailableEncryption(password) if encrypted else serialization.NoEncryption()
        )
        pem = signing_key.private_bytes(serialization.Encoding.PEM, private_format, encryption)

        log.debug(
            "key_encoder.encoded",
            key_type=type(signing_key).__name__,
            private_format=private_format.name,
            encrypted=encrypted,
        )
        return pem.decode("ascii")
