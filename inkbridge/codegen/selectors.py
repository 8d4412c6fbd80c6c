"""
EVM function selectors.

A selector is the canonical signature ``name(t1,...,tn)``; its hash is the
first four bytes of Keccak-256 over the UTF-8 signature, which is what EVM
contracts dispatch on.
"""

from typing import Iterable

from Crypto.Hash import keccak


SELECTOR_LENGTH = 4


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (the pre-standard SHA-3 used by Ethereum)."""
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def build_selector(name: str, raw_types: Iterable[str]) -> str:
    """
    Build the canonical selector string.

    Args:
        name: Function name
        raw_types: Parameter types exactly as written in the ABI

    Returns:
        The selector, e.g. ``transfer(address,uint256)``
    """
    return f'{name}({",".join(raw_types)})'


def selector_hash(selector: str) -> str:
    """First four bytes of Keccak-256(selector) as 8 lowercase hex digits."""
    return keccak256(selector.encode('utf-8'))[:SELECTOR_LENGTH].hex()
