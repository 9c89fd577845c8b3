"""Ethereum ABI encoding of the static and string types used by attestations."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

WORD = 32


class AbiType(Enum):
    """Supported ABI types as (kind, size) pairs."""

    UINT8 = ("uint", 8)
    UINT16 = ("uint", 16)
    UINT32 = ("uint", 32)
    UINT64 = ("uint", 64)
    BYTES20 = ("bytes", 20)
    BYTES32 = ("bytes", 32)
    STRING = ("string", 0)

    @property
    def is_dynamic(self) -> bool:
        """Whether the type is encoded in the tail of the arguments."""
        return self is AbiType.STRING

    def encode(self, value: object) -> bytes:
        """Encode one value of this type on its own."""
        kind, size = self.value
        if kind == "uint":
            return encode_uint(value, size)  # type: ignore[arg-type]
        if kind == "bytes":
            return encode_fixed_bytes(value, size)  # type: ignore[arg-type]
        return encode_string(value)  # type: ignore[arg-type]


def encode_uint(value: int, bits: int) -> bytes:
    """Encode an unsigned integer of ``bits`` bits as a 32-byte word."""
    if not 8 <= bits <= 256 or bits % 8:
        raise ValueError(f"invalid integer size {bits}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"uint{bits} requires an int, got {type(value).__name__}")
    if not 0 <= value < 1 << bits:
        raise ValueError(f"value {value} does not fit in uint{bits}")
    return value.to_bytes(WORD, "big")


def encode_fixed_bytes(value: bytes, size: int) -> bytes:
    """Encode a ``bytes<size>`` value, right-padded to a 32-byte word."""
    if not 1 <= size <= WORD:
        raise ValueError(f"invalid fixed bytes size {size}")
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"bytes{size} requires bytes, got {type(value).__name__}")
    if len(value) != size:
        raise ValueError(f"bytes{size} requires {size} bytes, got {len(value)}")
    return bytes(value).ljust(WORD, b"\0")


def encode_string(value: str) -> bytes:
    """Encode a string as its length word followed by right-padded UTF-8 data."""
    if not isinstance(value, str):
        raise TypeError(f"string requires str, got {type(value).__name__}")
    data = value.encode("utf-8")
    padded = -(-len(data) // WORD) * WORD
    return encode_uint(len(data), 256) + data.ljust(padded, b"\0")


def pack(types: Iterable[AbiType], values: Iterable[object]) -> bytes:
    """ABI-encode ``values`` as a tuple of ``types``."""
    types = list(types)
    values = list(values)
    if len(types) != len(values):
        raise ValueError(f"argument count mismatch: got {len(values)} for {len(types)}")
    heads: list[bytes] = []
    tails: list[bytes] = []
    offset = WORD * len(types)
    for abi_type, value in zip(types, values):
        encoded = abi_type.encode(value)
        if abi_type.is_dynamic:
            heads.append(encode_uint(offset, 256))
            tails.append(encoded)
            offset += len(encoded)
        else:
            heads.append(encoded)
    return b"".join(heads + tails)