"""
Ports — Protocol-based interfaces for the adapters this package depends on.

Adapters satisfy a port structurally, simply by implementing its method:

  Domain ← Ports (protocols) ← Adapters (implementations)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from pem_collection.domain.models import PemCollection, RuntimeCertificate
from pem_collection.result import Result


@runtime_checkable
class PrivateKeyEncoder(Protocol):
    """
    Port: turn a signing key into a PEM private key block.

    An empty or missing password yields an unencrypted block; a non-empty one
    yields a password-protected block. `key_format` is an optional hint
    (for example "legacy-pem") selecting the encoding.

    Returns Result[str] holding the PEM text, or an ENCODING_ERROR failure.
    """

    def encode(
        self,
        signing_key: PrivateKeyTypes,
        password: bytes | None,
        key_format: str,
    ) -> Result[str]: ...


@runtime_checkable
class BundleParser(Protocol):
    """Port: parse concatenated PEM blocks into a PemCollection."""

    def parse(self, raw_bundle: bytes) -> Result[PemCollection]: ...


@runtime_checkable
class CertificateExporter(Protocol):
    """Port: convert a PemCollection into a RuntimeCertificate."""

    def __call__(self, collection: PemCollection) -> Result[RuntimeCertificate]: ...
