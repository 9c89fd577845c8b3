"""Sorted-pair Keccak Merkle trees stored as flat arrays."""

from __future__ import annotations

import bisect
import itertools
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from Crypto.Hash import keccak

HASH_LENGTH = 32

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


class EmptyTreeError(ValueError):
    """The tree holds no nodes."""


class InvalidIndexError(IndexError):
    """A leaf index is out of range."""


class HashNotFoundError(LookupError):
    """A hash is not among the leaves of the tree."""


def keccak256(*args: bytes) -> bytes:
    """Keccak-256 digest of the concatenation of all arguments."""
    digest = keccak.new(digest_bits=256)
    for chunk in args:
        digest.update(bytes(chunk))
    return digest.digest()


def hex_to_hash(value: str) -> bytes:
    """Decode hex (optionally "0x" prefixed) into a 32-byte hash.

    Shorter values are left-padded with zeros, longer ones keep their last
    32 bytes.
    """
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if len(digits) % 2:
        digits = "0" + digits
    if not _HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"invalid hex string {value!r}")
    data = bytes.fromhex(digits)
    return data[-HASH_LENGTH:].rjust(HASH_LENGTH, b"\0")


def sorted_hash_pair(x: bytes, y: bytes) -> bytes:
    """Hash two nodes, the smaller one first."""
    if x <= y:
        return keccak256(x, y)
    return keccak256(y, x)


@dataclass(frozen=True)
class Tree:
    """A Merkle tree as a flat array: the root first, the sorted leaves last."""

    nodes: tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(bytes(node) for node in self.nodes))

    def root(self) -> bytes:
        """Return the root hash; raises EmptyTreeError for an empty tree."""
        if not self.nodes:
            raise EmptyTreeError("empty tree")
        return self.nodes[0]

    def hash_count(self) -> int:
        """Number of leaves."""
        if not self.nodes:
            return 0
        return (len(self.nodes) + 1) // 2

    def sorted_hashes(self) -> list[bytes]:
        """All leaves, in tree order."""
        count = self.hash_count()
        if count == 0:
            return []
        return list(self.nodes[count - 1:])

    def _check_index(self, i: int) -> int:
        count = self.hash_count()
        if count == 0 or not 0 <= i < count:
            raise InvalidIndexError("invalid index")
        return len(self.nodes) - count + i

    def get_hash(self, i: int) -> bytes:
        """Return the ``i``-th leaf."""
        return self.nodes[self._check_index(i)]

    def get_proof(self, i: int) -> list[bytes]:
        """Return the Merkle proof (sibling hashes, bottom up) of the ``i``-th leaf."""
        pos = self._check_index(i)
        proof: list[bytes] = []
        while pos > 0:
            sibling = pos + 1 if pos % 2 else pos - 1
            proof.append(self.nodes[sibling])
            pos = (pos - 1) // 2
        return proof

    def get_proof_from_hash(self, hash_: bytes) -> list[bytes]:
        """Return the Merkle proof of the leaf equal to ``hash_``."""
        leaves = self.sorted_hashes()
        i = bisect.bisect_left(leaves, hash_)
        if i < len(leaves) and leaves[i] == hash_:
            return self.get_proof(i)
        raise HashNotFoundError("hash not found")


def new_from_hex(hex_values: Iterable[str]) -> Tree:
    """Wrap already laid-out hex node values in a Tree."""
    return Tree(tuple(hex_to_hash(value) for value in hex_values))


def build(hashes: Sequence[bytes], initial_hash: bool = False) -> Tree:
    """Build a tree over the leaves, hashing each leaf first if ``initial_hash``."""
    if initial_hash:
        leaves = [keccak256(h) for h in hashes]
    else:
        leaves = [bytes(h) for h in hashes]
    leaves.sort()
    n = len(leaves)
    if n == 0:
        return Tree()
    nodes = [b""] * (n - 1) + leaves
    for i in range(n - 2, -1, -1):
        nodes[i] = sorted_hash_pair(nodes[2 * i + 1], nodes[2 * i + 2])
    return Tree(tuple(nodes))


def build_from_hex(hex_values: Iterable[str], initial_hash: bool = False) -> Tree:
    """Build a tree from hex leaves, dropping consecutive duplicates."""
    hashes = [hex_to_hash(value) for value, _ in itertools.groupby(hex_values)]
    return build(hashes, initial_hash)


def verify_proof(leaf: bytes, proof: Iterable[bytes], root: bytes) -> bool:
    """Check that ``proof`` leads from ``leaf`` to ``root``."""
    current = leaf
    for pair in proof:
        current = sorted_hash_pair(pair, current)
    return current == root