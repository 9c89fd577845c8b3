"""P-chain indexer utilities: Merkle trees, staking hashes, attestation encoding and recorded chain clients."""

__version__ = "0.1.0"