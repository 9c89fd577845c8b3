"""P-chain RPC replies and a client answering from recorded data."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .encoding import cb58_encode

HEX_ENCODING = "hex"


@dataclass(frozen=True)
class GetRewardUTXOsReply:
    """Reply of platform.getRewardUTXOs."""

    num_fetched: int
    utxos: list[str]
    encoding: str = HEX_ENCODING


@dataclass(frozen=True)
class GetTxReply:
    """Reply of platform.getTx."""

    tx: str
    encoding: str = HEX_ENCODING


@dataclass(frozen=True)
class RPCRecording:
    """Recorded RPC data for one transaction."""

    id: str
    utxos: list[str] = field(default_factory=list)
    tx: str = ""

    def to_reward_utxos_reply(self) -> GetRewardUTXOsReply:
        """Build the getRewardUTXOs reply for this transaction."""
        return GetRewardUTXOsReply(num_fetched=len(self.utxos), utxos=list(self.utxos))

    def to_tx_reply(self) -> GetTxReply:
        """Build the getTx reply for this transaction."""
        return GetTxReply(tx=self.tx)


def read_rpc_recordings(file_name: str | Path) -> list[RPCRecording]:
    """Load RPC recordings from a JSON file."""
    with open(file_name, encoding="utf-8") as handle:
        raw = json.load(handle)
    return [
        RPCRecording(
            id=item.get("id", ""),
            utxos=list(item.get("utxos") or []),
            tx=item.get("tx", ""),
        )
        for item in raw or []
    ]


class RecordedRPCClient:
    """An RPC client answering from recordings keyed by transaction id."""

    def __init__(self, recordings: Iterable[RPCRecording]) -> None:
        self._by_id = {recording.id: recording for recording in recordings}

    def _lookup(self, tx_id: bytes | str) -> RPCRecording:
        key = tx_id if isinstance(tx_id, str) else cb58_encode(bytes(tx_id))
        try:
            return self._by_id[key]
        except KeyError:
            raise LookupError(f"no recording for tx {key}") from None

    def get_reward_utxos(self, tx_id: bytes | str) -> GetRewardUTXOsReply:
        """Return the reward UTXOs recorded for the transaction."""
        return self._lookup(tx_id).to_reward_utxos_reply()

    def get_tx(self, tx_id: bytes | str) -> GetTxReply:
        """Return the transaction recorded under the id."""
        return self._lookup(tx_id).to_tx_reply()