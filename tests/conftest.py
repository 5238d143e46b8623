"""
Shared test fixtures and helpers for the pem-collection test suite.

Builds a real three-level PKI in memory (root CA → intermediate CA → leaf)
with cryptography, plus RSA and EC signing keys, so every test works on
genuine X.509 and key material instead of stored fixture files.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.x509.oid import NameOID


@dataclass(frozen=True)
class Pki:
    """Root, intermediate and leaf certificates with their keys."""

    root: x509.Certificate
    intermediate: x509.Certificate
    leaf: x509.Certificate
    root_key: PrivateKeyTypes
    intermediate_key: PrivateKeyTypes
    leaf_key: PrivateKeyTypes


def build_certificate(
    common_name: str,
    subject_key: PrivateKeyTypes,
    issuer: x509.Certificate | None = None,
    issuer_key: PrivateKeyTypes | None = None,
    ca: bool = False,
) -> x509.Certificate:
    """Issue a certificate; self-signed when no issuer is given."""
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer.subject if issuer is not None else subject)
        .public_key(subject_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=5))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
        .sign(issuer_key if issuer_key is not None else subject_key, hashes.SHA256())
    )


def cert_pem(certificate: x509.Certificate) -> str:
    return certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")


def cert_der(certificate: x509.Certificate) -> bytes:
    return certificate.public_bytes(serialization.Encoding.DER)


def key_pem(
    key: PrivateKeyTypes,
    private_format: serialization.PrivateFormat = serialization.PrivateFormat.TraditionalOpenSSL,
    password: bytes | None = None,
) -> str:
    encryption: serialization.KeySerializationEncryption = (
        serialization.BestAvailableEncryption(password) if password else serialization.NoEncryption()
    )
    return key.private_bytes(serialization.Encoding.PEM, private_format, encryption).decode("ascii")


def bundle(*pems: str) -> bytes:
    """Concatenate PEM texts back-to-back into a raw bundle."""
    return "".join(pems).encode("ascii")


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def pki(rsa_key: rsa.RSAPrivateKey) -> Pki:
    """A root → intermediate → leaf chain; the leaf uses the session RSA key."""
    root_key = ec.generate_private_key(ec.SECP384R1())
    intermediate_key = ec.generate_private_key(ec.SECP256R1())
    root = build_certificate("Test Root CA", root_key, ca=True)
    intermediate = build_certificate("Test Intermediate CA", intermediate_key, root, root_key, ca=True)
    leaf = build_certificate("leaf.example.com", rsa_key, intermediate, intermediate_key)
    return Pki(
        root=root,
        intermediate=intermediate,
        leaf=leaf,
        root_key=root_key,
        intermediate_key=intermediate_key,
        leaf_key=rsa_key,
    )


@pytest.fixture(scope="session")
def csr(rsa_key: rsa.RSAPrivateKey) -> x509.CertificateSigningRequest:
    return (
        x509.CertificateSigningRequestBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "leaf.example.com")]))
        .sign(rsa_key, hashes.SHA256())
    )
