"""
Domain models — immutable values for assembled PEM material.

These are pure value objects. Building and extending a collection is done by
the functions in pem_collection.collection, which return new instances
instead of mutating existing ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes


@dataclass(frozen=True, slots=True)
class PemCollection:
    """
    Certificate, chain, private key and CSR, all kept as PEM text.

    At most one certificate and one private key are held. The order of
    `chain` only has meaning relative to the ChainOrderPolicy that produced it.
    """

    certificate: str | None = None
    private_key: str | None = field(default=None, repr=False)
    chain: tuple[str, ...] = ()
    csr: str | None = None

    @property
    def has_certificate(self) -> bool:
        return bool(self.certificate)

    @property
    def has_private_key(self) -> bool:
        return bool(self.private_key)

    @property
    def is_empty(self) -> bool:
        return not (self.certificate or self.private_key or self.chain or self.csr)


@dataclass(frozen=True, slots=True)
class RuntimeCertificate:
    """
    A certificate chain plus private key, ready to hand to a TLS stack.

    `certificate_chain` holds raw DER bytes, leaf first, followed by the chain
    entries in the collection's stored order. `private_key` is a
    `cryptography` private key object.
    """

    certificate_chain: tuple[bytes, ...] = field(repr=False)
    private_key: PrivateKeyTypes = field(repr=False)

    @property
    def leaf(self) -> x509.Certificate:
        return x509.load_der_x509_certificate(self.certificate_chain[0])
