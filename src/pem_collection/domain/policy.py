"""
Chain ordering policy and positional role inference.

No PEM block is labeled "leaf" or "root"; which certificate of a bundle is the
end-entity one is decided purely from its position and the caller's declared
ordering:

    policy       leaf          chain
    ──────────   ───────────   ───────────────────────────────
    ROOT_LAST    first item    items 2..N  (intermediates → root)
    ROOT_FIRST   last item     items 1..N-1 (root → intermediates)
    IGNORE       first item    always empty

Certificate content (issuer/subject linkage, self-signature) is never consulted.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, unique
from typing import TypeVar

T = TypeVar("T")


@unique
class ChainOrderPolicy(Enum):
    """How a bundle's certificate order is read and how the chain is kept."""

    ROOT_LAST = "root-last"
    ROOT_FIRST = "root-first"
    IGNORE = "ignore"


def parse_policy(text: str | None) -> ChainOrderPolicy:
    """
    Map configuration text onto a policy, case-insensitively.

    Unrecognized or empty text falls back to ROOT_LAST; this never fails.

        >>> parse_policy("Root-First")
        <ChainOrderPolicy.ROOT_FIRST: 'root-first'>
        >>> parse_policy("bogus")
        <ChainOrderPolicy.ROOT_LAST: 'root-last'>
    """
    match (text or "").lower():
        case "root-first":
            return ChainOrderPolicy.ROOT_FIRST
        case "ignore":
            return ChainOrderPolicy.IGNORE
        case _:
            return ChainOrderPolicy.ROOT_LAST


def assign_roles(items: Sequence[T], policy: ChainOrderPolicy) -> tuple[T | None, list[T]]:
    """
    Split an ordered sequence into (leaf, chain) according to the policy.

    Pure function: works on certificate objects, PEM strings, or anything else,
    and keeps the original relative order of the chain items.
    """
    if not items:
        return None, []

    match policy:
        case ChainOrderPolicy.ROOT_FIRST:
            return items[-1], list(items[:-1])
        case ChainOrderPolicy.IGNORE:
            return items[0], []
        case _:
            return items[0], list(items[1:])
