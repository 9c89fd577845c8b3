"""Hashing and byte packing of P-chain staking attestation requests."""

from __future__ import annotations

import re

from .abi import AbiType, pack
from .api import ARPChainStaking, DHPChainStaking
from .encoding import (
    decode_hex_string,
    hex20_to_bytes20,
    pad_hex_string,
    transaction_hex_to_bytes32,
    uint16_to_hex,
    uint32_to_hex,
)
from .merkle import keccak256

REQUEST_LENGTH = 74

_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")

_HASH_TYPES = (
    AbiType.UINT16,   # attestation type
    AbiType.UINT32,   # source id
    AbiType.UINT32,   # block number
    AbiType.BYTES32,  # transaction hash
    AbiType.UINT8,    # transaction type
    AbiType.BYTES20,  # node id
    AbiType.UINT64,   # start time
    AbiType.UINT64,   # end time
    AbiType.UINT64,   # weight
    AbiType.BYTES20,  # source address
)

_UINT16 = 0xFFFF
_UINT32 = 0xFFFFFFFF
_UINT64 = 0xFFFFFFFFFFFFFFFF


def hash_pchain_staking(
    request: ARPChainStaking, response: DHPChainStaking, salt: str = ""
) -> str:
    """Return the "0x" prefixed Keccak hash of the ABI-encoded attestation."""
    values = [
        request.attestation_type,
        request.source_id & _UINT32,
        response.block_number,
        transaction_hex_to_bytes32(response.transaction_hash),
        response.transaction_type,
        hex20_to_bytes20(response.node_id),
        response.start_time & _UINT64,
        response.end_time & _UINT64,
        response.weight,
        hex20_to_bytes20(response.source_address),
    ]
    types = list(_HASH_TYPES)
    if salt:
        types.append(AbiType.STRING)
        values.append(salt)
    return "0x" + keccak256(pack(types, values)).hex()


def pack_pchain_staking_request(request: ARPChainStaking | None) -> str:
    """Encode a request as the hex bytes submitted to the State Connector."""
    if request is None:
        raise ValueError("request is empty")
    try:
        mic = pad_hex_string(request.message_integrity_code, 64)
    except ValueError as err:
        raise ValueError(f"error packing MessageIntegrityCode: {err}") from err
    try:
        tx_id = pad_hex_string(request.id, 64)
    except ValueError as err:
        raise ValueError(f"error packing id: {err}") from err
    return "".join(
        (
            "0x",
            uint16_to_hex(request.attestation_type & _UINT16),
            uint32_to_hex(request.source_id & _UINT32),
            mic,
            tx_id,
            uint32_to_hex(request.block_number),
        )
    )


def unpack_pchain_staking_request(request: str) -> ARPChainStaking:
    """Decode the hex bytes of a request back into its fields."""
    digits = request[2:] if request.startswith("0x") else request
    if not _HEX.fullmatch(digits):
        raise ValueError(f"error decoding request: invalid hex string {request!r}")
    raw = bytes.fromhex(digits)
    if len(raw) != REQUEST_LENGTH:
        raise ValueError("invalid request length")
    return ARPChainStaking(
        attestation_type=int.from_bytes(raw[0:2], "little"),
        source_id=int.from_bytes(raw[2:6], "little"),
        message_integrity_code="0x" + raw[6:38].hex(),
        id="0x" + raw[38:70].hex(),
        block_number=int.from_bytes(raw[70:74], "little"),
    )


def validate_tx_id(value: str) -> bool:
    """Whether ``value`` is a "0x" prefixed hex encoding of a 32-byte id."""
    try:
        data = decode_hex_string(value)
    except ValueError:
        return False
    return len(data) == 32