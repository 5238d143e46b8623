"""
PEM bundle parser adapter — concatenated PEM blocks → PemCollection.

Adapter layer — implements the BundleParser port using:
  - asn1crypto (via pem_scanner): PEM unarmoring of each block
  - cryptography (PyCA): X.509 parsing of CERTIFICATE blocks

Pipeline:
  raw bytes
    → scan_pem_blocks(): lazy (label, DER) stream
    → fold: CERTIFICATE → parsed cert list, *PRIVATE KEY → last key block
    → assign_roles(certs, policy): leaf + chain
    → PemCollection (domain model)

Labels other than CERTIFICATE and the four private key labels are skipped.
A CERTIFICATE block that does not parse aborts the whole bundle.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog
from cryptography import x509

from pem_collection.adapters.pem_scanner import (
    CERTIFICATE_LABEL,
    PRIVATE_KEY_LABELS,
    PemBlock,
    scan_pem_blocks,
)
from pem_collection.collection import certificate_to_pem
from pem_collection.domain.models import PemCollection
from pem_collection.domain.policy import ChainOrderPolicy, assign_roles
from pem_collection.failure import ErrorCode
from pem_collection.result import Result

log = structlog.get_logger()


@dataclass(slots=True)
class _ScanState:
    """Accumulator for the classify-and-accumulate fold."""

    certificates: list[x509.Certificate] = field(default_factory=list)
    private_key: PemBlock | None = None
    skipped: int = 0


def _load_certificate(block: PemBlock, index: int) -> Result[x509.Certificate]:
    return Result.from_computation(
        lambda: x509.load_der_x509_certificate(block.der),
        ErrorCode.CERTIFICATE_DECODE_ERROR,
        f"Failed to parse CERTIFICATE block #{index} as X.509",
    )


def _accumulate(state: _ScanState, block: PemBlock, index: int) -> Result[_ScanState]:
    if block.label == CERTIFICATE_LABEL:
        return _load_certificate(block, index).peek(state.certificates.append).map(lambda _: state)
    if block.label in PRIVATE_KEY_LABELS:
        state.private_key = block
    else:
        state.skipped += 1
        log.debug("bundle.block_skipped", label=block.label, index=index)
    return Result.success(state)


def _scan(blocks: Iterable[PemBlock]) -> Result[_ScanState]:
    state = _ScanState()
    for index, block in enumerate(blocks):
        step = _accumulate(state, block, index)
        if step.is_failure():
            return step
    return Result.success(state)


def _assemble(state: _ScanState, chain_order: ChainOrderPolicy) -> PemCollection:
    leaf, chain = assign_roles(state.certificates, chain_order)
    return PemCollection(
        certificate=certificate_to_pem(leaf) if leaf is not None else None,
        private_key=state.private_key.to_pem() if state.private_key is not None else None,
        chain=tuple(certificate_to_pem(cert) for cert in chain),
    )


class PemBundleParser:
    """
    Parse a byte buffer of concatenated PEM blocks into a PemCollection.

    Implements the BundleParser port. The chain order policy decides which
    certificate becomes the collection's certificate and which form the chain.
    """

    def __init__(self, chain_order: ChainOrderPolicy = ChainOrderPolicy.ROOT_LAST) -> None:
        self._chain_order = chain_order

    @property
    def chain_order(self) -> ChainOrderPolicy:
        return self._chain_order

    def parse(self, raw_bundle: bytes | str) -> Result[PemCollection]:
        """
        Parse `raw_bundle` under this parser's chain order policy.

        Returns Result[PemCollection]; a bundle without any PEM block yields an
        empty collection. Returns CERTIFICATE_DECODE_ERROR, and no partial
        collection, when a CERTIFICATE block is not valid X.509.
        """
        return (
            _scan(scan_pem_blocks(raw_bundle))
            .peek(
                lambda state: log.info(
                    "bundle.parsed",
                    certificates=len(state.certificates),
                    private_key=state.private_key is not None,
                    skipped=state.skipped,
                    chain_order=self._chain_order.value,
                )
            )
            .peek_failure(lambda err: log.warning("bundle.rejected", error=err.message))
            .map(lambda state: _assemble(state, self._chain_order))
        )


def parse_bundle(
    raw_bundle: bytes | str,
    chain_order: ChainOrderPolicy = ChainOrderPolicy.ROOT_LAST,
) -> Result[PemCollection]:
    """Shorthand for PemBundleParser(chain_order).parse(raw_bundle)."""
    return PemBundleParser(chain_order).parse(raw_bundle)
