"""
Pipeline — raw PEM bundle to runtime certificate in one railway.

  parser.parse(raw_bundle)
    → exporter(collection)
      → RuntimeCertificate

Each stage returns Result[T]; the first failure short-circuits the rest.

create_toolkit() is the composition root: it applies every setting
(log level → structlog, chain order → parser, key format → key encoding)
and returns a PemToolkit bound to them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from pem_collection.adapters.bundle_parser import PemBundleParser
from pem_collection.adapters.exporter import to_runtime_certificate
from pem_collection.collection import add_private_key, new_from_certificate
from pem_collection.config import PemCollectionSettings, configure_structlog, load_settings
from pem_collection.domain.models import PemCollection, RuntimeCertificate
from pem_collection.domain.ports import BundleParser, CertificateExporter, PrivateKeyEncoder
from pem_collection.result import Result

log = structlog.get_logger()


def create_parser(settings: PemCollectionSettings) -> PemBundleParser:
    """Build the bundle parser configured by `settings`."""
    return PemBundleParser(chain_order=settings.chain_order)


def run_pipeline(
    raw_bundle: bytes,
    parser: BundleParser,
    exporter: CertificateExporter = to_runtime_certificate,
) -> Result[RuntimeCertificate]:
    """
    Parse a PEM bundle and export it as a RuntimeCertificate.

    Returns the first failure from either stage unchanged.
    """
    return parser.parse(raw_bundle).flat_map(exporter)


@dataclass(frozen=True, slots=True)
class PemToolkit:
    """Bundle parsing, export and key encoding bound to one set of settings."""

    parser: BundleParser
    key_format: str = ""
    exporter: CertificateExporter = to_runtime_certificate
    encoder: PrivateKeyEncoder | None = None

    def parse_bundle(self, raw_bundle: bytes | str) -> Result[PemCollection]:
        return self.parser.parse(raw_bundle)

    def export_bundle(self, raw_bundle: bytes) -> Result[RuntimeCertificate]:
        return run_pipeline(raw_bundle, self.parser, self.exporter)

    def new_collection(
        self,
        certificate: x509.Certificate | None = None,
        signing_key: PrivateKeyTypes | None = None,
        key_password: bytes | str | None = None,
    ) -> Result[PemCollection]:
        return new_from_certificate(certificate, signing_key, key_password, self.key_format, self.encoder)

    def add_private_key(
        self,
        collection: PemCollection,
        signing_key: PrivateKeyTypes | None,
        key_password: bytes | str | None = None,
    ) -> Result[PemCollection]:
        return add_private_key(collection, signing_key, key_password, self.key_format, self.encoder)


def create_toolkit(settings: PemCollectionSettings) -> PemToolkit:
    """Configure logging from `settings` and wire a PemToolkit."""
    configure_structlog(settings.log_level)
    log.info(
        "toolkit.configured",
        log_level=settings.log_level,
        chain_order=settings.chain_order.value,
        key_format=settings.key_format or "default",
    )
    return PemToolkit(parser=create_parser(settings), key_format=settings.key_format)


def bootstrap(**overrides: Any) -> Result[PemToolkit]:
    """Load settings from the environment and wire a toolkit; CONFIGURATION_ERROR on bad settings."""
    return load_settings(**overrides).map(create_toolkit)
