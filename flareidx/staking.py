"""Staking epochs and the Merkle tree over P-chain staking transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Sequence

from .abi import AbiType, pack
from .encoding import id_from_string, node_id_from_string, parse_address
from .merkle import HashNotFoundError, Tree, build, keccak256

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_UINT64_MASK = 2**64 - 1

_TREE_ITEM_TYPES = (
    AbiType.BYTES32,  # txId
    AbiType.UINT8,    # stakingType
    AbiType.BYTES20,  # inputAddress
    AbiType.BYTES20,  # nodeId
    AbiType.UINT64,   # startTime
    AbiType.UINT64,   # endTime
    AbiType.UINT64,   # weight
)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _micros(value: timedelta) -> int:
    return value // timedelta(microseconds=1)


@dataclass(frozen=True)
class EpochInfo:
    """Reward epochs of fixed ``period`` counted from ``start``."""

    period: timedelta
    start: datetime
    first: int = 0

    def get_start_time(self, epoch: int) -> datetime:
        """Start of the given epoch."""
        return self.start + epoch * self.period

    def get_end_time(self, epoch: int) -> datetime:
        """End of the given epoch (start of the next one)."""
        return self.get_start_time(epoch + 1)

    def get_time_range(self, epoch: int) -> tuple[datetime, datetime]:
        """Start and end of the given epoch."""
        return self.get_start_time(epoch), self.get_end_time(epoch)

    def get_epoch_index(self, t: datetime) -> int:
        """Index of the epoch containing ``t``; the division truncates toward zero."""
        elapsed = _micros(_aware(t) - _aware(self.start))
        period = _micros(self.period)
        if period == 0:
            raise ZeroDivisionError("epoch period is zero")
        quotient = abs(elapsed) // abs(period)
        return quotient if (elapsed >= 0) == (period > 0) else -quotient


class PChainTxType(str, Enum):
    """Kinds of P-chain transactions."""

    ADD_VALIDATOR_TX = "ADD_VALIDATOR_TX"
    ADD_DELEGATOR_TX = "ADD_DELEGATOR_TX"
    IMPORT_TX = "IMPORT_TX"
    EXPORT_TX = "EXPORT_TX"


@dataclass
class PChainTxData:
    """A P-chain transaction joined with one of its input addresses."""

    id: int = 0
    tx_id: str | None = None
    type: PChainTxType = PChainTxType.ADD_VALIDATOR_TX
    node_id: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    weight: int = 0
    input_address: str = ""
    input_index: int = 0


@dataclass(frozen=True)
class StakeData:
    """Stake as it is mirrored to the contract and hashed into the tree."""

    tx_id: bytes
    staking_type: int
    input_address: bytes
    node_id: bytes
    start_time: int
    end_time: int
    weight: int = field(default=0)


def _unix(value: datetime) -> int:
    return ((_aware(value) - _EPOCH) // timedelta(seconds=1)) & _UINT64_MASK


def get_tx_type(tx_type: PChainTxType) -> int:
    """Staking type code: 0 for validator, 1 for delegator transactions."""
    if tx_type == PChainTxType.ADD_VALIDATOR_TX:
        return 0
    if tx_type == PChainTxType.ADD_DELEGATOR_TX:
        return 1
    raise ValueError("invalid tx type")


def to_stake_data(tx: PChainTxData, hrp: str) -> StakeData:
    """Convert a transaction to stake data; addresses must carry prefix ``hrp``."""
    if tx.tx_id is None:
        raise ValueError("tx.TxID is nil")
    try:
        tx_hash = id_from_string(tx.tx_id)
    except ValueError as err:
        raise ValueError(f"ids.FromString: {err}") from err
    tx_type = get_tx_type(tx.type)
    try:
        node_id = node_id_from_string(tx.node_id)
    except ValueError as err:
        raise ValueError(f"ids.NodeIDFromString: {err}") from err
    if tx.start_time is None:
        raise ValueError("tx.StartTime is nil")
    start_time = _unix(tx.start_time)
    if tx.end_time is None:
        raise ValueError("tx.EndTime is nil")
    end_time = _unix(tx.end_time)
    try:
        address = parse_address(tx.input_address, hrp)
    except ValueError as err:
        raise ValueError(f"utils.ParseAddress: {err}") from err
    return StakeData(
        tx_id=tx_hash,
        staking_type=tx_type,
        input_address=address,
        node_id=node_id,
        start_time=start_time,
        end_time=end_time,
        weight=tx.weight,
    )


def _encode_tree_item(tx: PChainTxData, hrp: str) -> bytes:
    try:
        stake = to_stake_data(tx, hrp)
    except ValueError as err:
        raise ValueError(f"toStakeData: {err}") from err
    return pack(
        _TREE_ITEM_TYPES,
        (
            stake.tx_id,
            stake.staking_type,
            stake.input_address,
            stake.node_id,
            stake.start_time,
            stake.end_time,
            stake.weight,
        ),
    )


def hash_transaction(tx: PChainTxData, hrp: str) -> bytes:
    """Keccak hash of the ABI-encoded stake data of ``tx``."""
    if tx.tx_id is None:
        raise ValueError("tx.TxID is nil")
    try:
        encoded = _encode_tree_item(tx, hrp)
    except ValueError as err:
        raise ValueError(f"encodeTreeItem: {err}") from err
    return keccak256(encoded)


def build_tree(txs: Iterable[PChainTxData], hrp: str) -> Tree:
    """Build the Merkle tree over the hashes of the transactions."""
    hashes = []
    for tx in txs:
        try:
            hashes.append(hash_transaction(tx, hrp))
        except ValueError as err:
            raise ValueError(f"getTxHash: {err}") from err
    return build(hashes, False)


def get_merkle_root(txs: Iterable[PChainTxData], hrp: str) -> bytes:
    """Root of the Merkle tree over the transactions."""
    return build_tree(txs, hrp).root()


def get_merkle_proof(tree: Tree, tx: PChainTxData, hrp: str) -> list[bytes]:
    """Merkle proof of ``tx`` in ``tree``."""
    leaf = hash_transaction(tx, hrp)
    try:
        return tree.get_proof_from_hash(leaf)
    except HashNotFoundError as err:
        raise HashNotFoundError(f"merkleTree.GetProof: {err}") from err


def dedupe_txs(txs: Sequence[PChainTxData]) -> list[PChainTxData]:
    """Keep one entry per transaction id, taken from input index 0, sorted by id."""
    unique: dict[str, PChainTxData] = {}
    for tx in txs:
        if tx.tx_id is None or tx.input_index != 0:
            continue
        unique[tx.tx_id] = tx
    return sorted(unique.values(), key=lambda tx: tx.tx_id or "")