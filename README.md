# flareidx

A library of building blocks for indexing the P-chain and serving staking
data. It has no commands of its own; everything is used from Python.

## Modules

- `flareidx.merkle`: sorted-pair Keccak-256 Merkle trees held as flat
  arrays (`Tree`, `build`, `build_from_hex`, `new_from_hex`,
  `verify_proof`, `sorted_hash_pair`, `keccak256`, `hex_to_hash`).
- `flareidx.staking`: reward epochs (`EpochInfo`), P-chain staking
  transactions (`PChainTxData`, `PChainTxType`, `StakeData`), their
  hashing into tree leaves and proofs (`to_stake_data`,
  `hash_transaction`, `build_tree`, `get_merkle_root`,
  `get_merkle_proof`, `dedupe_txs`).
- `flareidx.attestation`: packing, unpacking and hashing of P-chain
  staking attestation requests, and `validate_tx_id`.
- `flareidx.api`: the request, response and status objects
  (`ARPChainStaking`, `DHPChainStaking`, `Verification`,
  `ApiResponseWrapper`, `VerificationStatus`, `ApiResStatus`,
  `AttestationType`, `SourceId`) with their JSON dictionaries.
- `flareidx.abi`: a small ABI encoder for `uint8/16/32/64`, `bytes20`,
  `bytes32` and `string` (`AbiType`, `pack`).
- `flareidx.encoding`: hex helpers, CB58 ids and node ids, bech32
  addresses (`format_address_bytes`, `parse_address`, `address_to_hex`,
  `node_id_to_hex`, `id_to_hex`, `pad_hex_string`, ...).
- `flareidx.indexer_client`, `flareidx.rpc_client`,
  `flareidx.uptime_client`: clients that answer from recorded JSON data
  (`RecordedIndexerClient`, `RecordedRPCClient`, `RecordedUptimeClient`)
  together with their file readers.
- `flareidx.cache`, `flareidx.helpers`, `flareidx.timeutil`: a cache that
  evicts read entries, small collection/error/path helpers, and time
  helpers (`ShiftedTime`, `parse_time`, `parse_timestamp`,
  `timestamp_to_time`, `randomized_ticker`).

## Merkle trees

```python
from flareidx.merkle import build_from_hex, verify_proof

tree = build_from_hex(["0x01", "0x02", "0x03", "0x04", "0x05"], True)
root = tree.root()
leaf = tree.get_hash(0)
proof = tree.get_proof(0)
assert verify_proof(leaf, proof, root)
```

`Tree.root()` raises `EmptyTreeError` on an empty tree; `get_hash` and
`get_proof` raise `InvalidIndexError`; `get_proof_from_hash` raises
`HashNotFoundError`.

## Attestation requests

```python
from flareidx.attestation import (
    pack_pchain_staking_request,
    unpack_pchain_staking_request,
)

raw = "0x0500a200000054141f408ab37e4ed1411c9db2f875c064f67024654a42bda597298628eefb8c213686a516f05a706ed2ae1f20b3bb69d1916a59468a3b8d31790e0269fa2c88bc000000"
request = unpack_pchain_staking_request(raw)
assert request.block_number == 188
assert pack_pchain_staking_request(request) == raw
```

`hash_pchain_staking(request, response, salt)` returns the "0x" prefixed
message integrity code for a request and its `DHPChainStaking` response.

## Staking trees

```python
from flareidx.staking import build_tree, dedupe_txs, get_merkle_proof

txs = dedupe_txs(transactions)        # a list of PChainTxData
tree = build_tree(txs, "costwo")      # the chain's address prefix
proof = get_merkle_proof(tree, txs[0], "costwo")
```

`dedupe_txs` keeps one entry per transaction id (the one with input
index 0) and sorts them by id.

## Recorded clients

```python
from flareidx.indexer_client import RecordedIndexerClient, read_container_recordings
from flareidx.rpc_client import RecordedRPCClient, read_rpc_recordings
from flareidx.uptime_client import RecordedUptimeClient, read_uptime_recordings

indexer = RecordedIndexerClient(read_container_recordings("blocks.json"))
rpc = RecordedRPCClient(read_rpc_recordings("rpc_data.json"))
uptime = RecordedUptimeClient(read_uptime_recordings("uptime_data.json"))
uptime.set_now_unix(1676629054)
validators, status = uptime.get_validator_status()
```

Lookups of unknown indexes or ids raise `LookupError`.

## What it does not do

The package serves no HTTP API, stores nothing in a database, and talks
to no live node: the indexer, RPC and uptime clients only replay
recorded data, and no contract is called. Epoch start and period are
passed to `EpochInfo` by the caller.

## Tests

The test suite uses pytest, available through the `test` extra.