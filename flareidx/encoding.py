"""Hex, CB58 and bech32 encodings of chain identifiers and addresses."""

from __future__ import annotations

import hashlib
import re

HEX_PREFIX = "0x"
ADDRESS_CHAIN_SEPARATOR = "-"
NODE_ID_PREFIX = "NodeID-"

_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {c: i for i, c in enumerate(_B58_ALPHABET)}
_CHECKSUM_LEN = 4

_BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


def _decode_hex(value: str) -> bytes:
    if not _HEX.fullmatch(value):
        raise ValueError(f"invalid hex string {value!r}")
    return bytes.fromhex(value)


def _strip_prefix(value: str) -> str:
    return value[len(HEX_PREFIX):] if value.startswith(HEX_PREFIX) else value


def decode_hex_string(s: str) -> bytes:
    """Decode a hex string that must start with "0x"."""
    if not s.startswith(HEX_PREFIX):
        raise ValueError("string does not have hex prefix")
    return _decode_hex(s[len(HEX_PREFIX):])


# --- base58 / CB58 ---------------------------------------------------------

def _b58encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_B58_ALPHABET[rem])
    zeros = len(data) - len(data.lstrip(b"\0"))
    return "1" * zeros + "".join(reversed(digits))


def _b58decode(s: str) -> bytes:
    number = 0
    for char in s:
        try:
            number = number * 58 + _B58_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    zeros = len(s) - len(s.lstrip("1"))
    return b"\0" * zeros + number.to_bytes((number.bit_length() + 7) // 8, "big")


def _checksum(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()[-_CHECKSUM_LEN:]


def cb58_encode(data: bytes) -> str:
    """Base58-encode ``data`` followed by a 4-byte SHA-256 checksum."""
    return _b58encode(bytes(data) + _checksum(data))


def cb58_decode(s: str) -> bytes:
    """Decode a CB58 string, verifying its checksum."""
    raw = _b58decode(s)
    if len(raw) < _CHECKSUM_LEN:
        raise ValueError("input string is smaller than the checksum size")
    data, check = raw[:-_CHECKSUM_LEN], raw[-_CHECKSUM_LEN:]
    if _checksum(data) != check:
        raise ValueError("invalid input checksum")
    return data


def _sized(data: bytes, size: int) -> bytes:
    if len(data) != size:
        raise ValueError(f"expected {size} bytes but got {len(data)}")
    return data


def id_from_string(s: str) -> bytes:
    """Decode a CB58 32-byte id (transaction or block id)."""
    return _sized(cb58_decode(s), 32)


def node_id_from_string(s: str) -> bytes:
    """Decode a "NodeID-" prefixed CB58 20-byte node id."""
    if not s.startswith(NODE_ID_PREFIX):
        raise ValueError(f"ID: {s} is missing the prefix: {NODE_ID_PREFIX}")
    return _sized(cb58_decode(s[len(NODE_ID_PREFIX):]), 20)


def node_id_to_hex(node_id: str) -> str:
    """Convert a node id string to a "0x" prefixed 20-byte hex string."""
    return HEX_PREFIX + node_id_from_string(node_id).hex()


def address_to_hex(addr: str) -> str:
    """Convert an address ("P-hrp1..." or "hrp1...") to a 20-byte hex string."""
    if ADDRESS_CHAIN_SEPARATOR not in addr:
        addr = ADDRESS_CHAIN_SEPARATOR + addr
    _chain, _, raw = addr.partition(ADDRESS_CHAIN_SEPARATOR)
    _hrp, payload = _parse_bech32(raw)
    return HEX_PREFIX + _sized(payload, 20).hex()


def id_to_hex(id_str: str) -> str:
    """Convert a CB58 id string to a "0x" prefixed 32-byte hex string."""
    return HEX_PREFIX + id_from_string(id_str).hex()


def uint64_to_hex(value: int) -> str:
    """Little-endian hex of an unsigned 64-bit integer."""
    return value.to_bytes(8, "little").hex()


def uint32_to_hex(value: int) -> str:
    """Little-endian hex of an unsigned 32-bit integer."""
    return value.to_bytes(4, "little").hex()


def uint16_to_hex(value: int) -> str:
    """Little-endian hex of an unsigned 16-bit integer."""
    return value.to_bytes(2, "little").hex()


def pad_hex_string(value: str, length: int) -> str:
    """Validate a hex string and left-pad it with zeros to ``length`` digits."""
    if length % 2 != 0:
        raise ValueError("length must be even")
    value = _strip_prefix(value)
    if len(value) % 2 != 0:
        value = "0" + value
    if not _HEX_DIGITS.fullmatch(value):
        raise ValueError(f"invalid hex string {value!r}")
    if len(value) > length:
        raise ValueError("string too long")
    return value.rjust(length, "0")


def transaction_hex_to_bytes32(value: str) -> bytes:
    """Decode a (optionally "0x" prefixed) 32-byte hex string."""
    data = _decode_hex(_strip_prefix(value))
    if len(data) != 32:
        raise ValueError("address length is not 32")
    return data


def hex20_to_bytes20(value: str) -> bytes:
    """Decode a (optionally "0x" prefixed) 20-byte hex string."""
    data = _decode_hex(_strip_prefix(value))
    if len(data) != 20:
        raise ValueError("id length is not 20")
    return data


# --- bech32 ----------------------------------------------------------------

def _polymod(values: list[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for i, gen in enumerate(_BECH32_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data: list[int] | bytes, from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out: list[int] = []
    max_value = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & max_value)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (acc << (to_bits - bits)) & max_value:
        raise ValueError("invalid padding in bech32 data")
    return out


def _bech32_encode(hrp: str, data: list[int]) -> str:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(_BECH32_CHARSET[d] for d in data + checksum)


def _bech32_decode(s: str) -> tuple[str, list[int]]:
    if not 8 <= len(s) <= 90:
        raise ValueError(f"invalid bech32 string length {len(s)}")
    if any(not 33 <= ord(c) <= 126 for c in s):
        raise ValueError("invalid character in bech32 string")
    if s.lower() != s and s.upper() != s:
        raise ValueError("bech32 string is mixed case")
    s = s.lower()
    pos = s.rfind("1")
    if pos < 1 or pos + 7 > len(s):
        raise ValueError("invalid bech32 separator position")
    hrp = s[:pos]
    data = []
    for char in s[pos + 1:]:
        index = _BECH32_CHARSET.find(char)
        if index < 0:
            raise ValueError(f"invalid bech32 character {char!r}")
        data.append(index)
    if _polymod(_hrp_expand(hrp) + data) != 1:
        raise ValueError("invalid bech32 checksum")
    return hrp, data[:-6]


def _parse_bech32(addr: str) -> tuple[str, bytes]:
    hrp, data = _bech32_decode(addr)
    return hrp, bytes(_convert_bits(data, 5, 8, False))


def format_address_bytes(hrp: str, addr: bytes) -> str:
    """Bech32-encode raw address bytes with the given human-readable part."""
    return _bech32_encode(hrp.lower(), _convert_bits(bytes(addr), 8, 5, True))


def parse_address(addr: str, hrp: str) -> bytes:
    """Decode a bech32 address whose prefix must equal ``hrp``; returns 20 bytes."""
    found_hrp, payload = _parse_bech32(addr)
    if found_hrp != hrp:
        raise ValueError(f"invalid address prefix: {found_hrp}")
    return (payload + bytes(20))[:20]