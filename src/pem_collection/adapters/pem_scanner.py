"""
PEM scanner adapter — byte buffer → lazy sequence of decoded PEM blocks.

asn1crypto.pem does the RFC 7468 armor/unarmor work. This module finds the
BEGIN..END boundaries itself, requiring the END label to match the BEGIN
label, and hands each region to asn1crypto. The stream ends quietly on
malformed data instead of raising, so a bundle with garbage after its last
valid block still yields every block before the garbage.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator
from dataclasses import dataclass, field

import structlog
from asn1crypto import pem

from pem_collection.failure import ErrorCode
from pem_collection.result import Result

log = structlog.get_logger()

CERTIFICATE_LABEL = "CERTIFICATE"
PRIVATE_KEY_LABELS = frozenset(
    {
        "RSA PRIVATE KEY",
        "EC PRIVATE KEY",
        "ENCRYPTED PRIVATE KEY",
        "PRIVATE KEY",
    }
)


@dataclass(frozen=True, slots=True)
class PemBlock:
    """One decoded PEM block: its label, DER payload, and RFC 1421 headers."""

    label: str
    der: bytes = field(repr=False)
    headers: dict[str, str] = field(default_factory=dict)

    def to_pem(self) -> str:
        """Re-armor this block on its own, headers included."""
        return pem.armor(self.label, self.der, headers=self.headers or None).decode("ascii")


_BEGIN_LINE = re.compile(rb"^-----BEGIN ([A-Z0-9 ]+)-----")
_END_LINE = re.compile(rb"^-----END ([A-Z0-9 ]+)-----\s*$")


def _armored_regions(data: bytes) -> Iterator[bytes]:
    """
    Split `data` into BEGIN..END regions whose END label matches the BEGIN label.

    Any other boundary line inside an open block (another BEGIN, an END with a
    different label) ends the scan, as does a block left open at end of input.
    """
    label: bytes | None = None
    region: list[bytes] = []
    for line in data.splitlines(keepends=True):
        if label is None:
            begin = _BEGIN_LINE.match(line)
            if begin is not None:
                label, region = begin.group(1), [line]
            continue

        region.append(line)
        if not line.startswith(b"-----"):
            continue
        end = _END_LINE.match(line)
        if end is None or end.group(1) != label:
            log.debug("pem.scan_stopped", reason="unmatched boundary", label=label.decode("ascii"))
            return
        yield b"".join(region)
        label = None

    if label is not None:
        log.debug("pem.scan_stopped", reason="missing END line", label=label.decode("ascii"))


def scan_pem_blocks(data: bytes | str) -> Iterator[PemBlock]:
    """
    Yield each PEM block of `data` in order.

    Finite and non-restartable. Stops at end of input, or at the first point
    where the remaining data no longer decodes: a missing END line, an END
    label that differs from its BEGIN label, or bad base64. Text before,
    between, and after blocks is skipped.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    for region in _armored_regions(data):
        try:
            label, headers, der = pem.unarmor(region)
        except ValueError as e:
            log.debug("pem.scan_stopped", reason=str(e))
            return
        yield PemBlock(label=label, der=der, headers=dict(headers))


def decode_single_pem(
    text: str | bytes | None,
    what: str,
    expected_labels: Collection[str] | None = None,
) -> Result[PemBlock]:
    """
    Decode the first PEM block of `text`.

    Fails with MALFORMED_INPUT when `text` is absent or empty, holds no
    decodable block, or the block label is not one of `expected_labels`.
    """
    if not text:
        return Result.failure(ErrorCode.MALFORMED_INPUT, f"{what} is empty")

    block = next(scan_pem_blocks(text), None)
    if block is None:
        return Result.failure(ErrorCode.MALFORMED_INPUT, f"{what} is not valid PEM data")

    if expected_labels is not None and block.label not in expected_labels:
        return Result.failure(
            ErrorCode.MALFORMED_INPUT,
            f"{what} has unexpected PEM label {block.label!r}",
        )
    return Result.success(block)
