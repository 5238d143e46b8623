"""
pem_collection — assemble certificates, chains and keys from PEM bundles.

Parses a byte stream of concatenated PEM blocks into a PemCollection
(certificate, chain, private key, CSR), decides which certificate is the
leaf according to a ChainOrderPolicy, and converts the collection back into
a runtime certificate + private key pair.

Failures are returned as Result values, never raised.
"""

from pem_collection.adapters.bundle_parser import PemBundleParser, parse_bundle
from pem_collection.adapters.exporter import to_runtime_certificate
from pem_collection.collection import (
    add_chain_element,
    add_csr,
    add_private_key,
    new_from_certificate,
)
from pem_collection.domain.models import PemCollection, RuntimeCertificate
from pem_collection.domain.policy import ChainOrderPolicy, assign_roles, parse_policy
from pem_collection.failure import ErrorCode, FailureDescription
from pem_collection.pipeline import PemToolkit, bootstrap, create_toolkit
from pem_collection.result import Failure, Result, Success

__all__ = [
    "ChainOrderPolicy",
    "ErrorCode",
    "Failure",
    "FailureDescription",
    "PemBundleParser",
    "PemCollection",
    "PemToolkit",
    "Result",
    "RuntimeCertificate",
    "Success",
    "add_chain_element",
    "add_csr",
    "add_private_key",
    "assign_roles",
    "bootstrap",
    "create_toolkit",
    "new_from_certificate",
    "parse_bundle",
    "parse_policy",
    "to_runtime_certificate",
]

__version__ = "0.1.0"
