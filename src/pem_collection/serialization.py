"""
Serialized form of a PemCollection.

    {"Certificate": "...", "PrivateKey": "...", "Chain": ["...", ...], "CSR": "..."}

Empty fields are left out entirely, so an empty collection serializes to {}.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pem_collection.domain.models import PemCollection
from pem_collection.failure import ErrorCode
from pem_collection.result import Result


def to_dict(collection: PemCollection) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if collection.certificate:
        data["Certificate"] = collection.certificate
    if collection.private_key:
        data["PrivateKey"] = collection.private_key
    if collection.chain:
        data["Chain"] = list(collection.chain)
    if collection.csr:
        data["CSR"] = collection.csr
    return data


def to_json(collection: PemCollection) -> str:
    return json.dumps(to_dict(collection))


def _optional_text(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _chain(data: Mapping[str, Any]) -> tuple[str, ...]:
    value = data.get("Chain") or []
    if not isinstance(value, list) or not all(isinstance(entry, str) for entry in value):
        raise TypeError("Chain must be a list of strings")
    return tuple(value)


def from_dict(data: Mapping[str, Any]) -> Result[PemCollection]:
    """Rebuild a collection from its serialized form; unknown keys are ignored."""
    return Result.from_computation(
        lambda: PemCollection(
            certificate=_optional_text(data, "Certificate"),
            private_key=_optional_text(data, "PrivateKey"),
            chain=_chain(data),
            csr=_optional_text(data, "CSR"),
        ),
        ErrorCode.MALFORMED_INPUT,
        "Serialized PEM collection has an invalid shape",
    )


def from_json(text: str) -> Result[PemCollection]:
    return (
        Result.from_computation(
            lambda: json.loads(text),
            ErrorCode.MALFORMED_INPUT,
            "Serialized PEM collection is not valid JSON",
        )
        .ensure(
            lambda data: isinstance(data, dict),
            ErrorCode.MALFORMED_INPUT,
            "Serialized PEM collection must be a JSON object",
        )
        .flat_map(from_dict)
    )
