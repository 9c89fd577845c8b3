"""Indexer clients serving P-chain containers, plus the helpers that call them."""

from __future__ import annotations

import hashlib
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Protocol

from .encoding import id_from_string
from .timeutil import parse_time

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")
_UINT = re.compile(r"\d+")
_UINT64_MAX = 2**64 - 1
_CHECKSUM_LEN = 4


@dataclass(frozen=True)
class Container:
    """An indexed object: its 32-byte id, raw bytes and timestamp in nanoseconds."""

    id: bytes
    data: bytes
    timestamp: int


class IndexerClient(Protocol):
    def get_container_range(self, start: int, num_to_fetch: int) -> list[Container]: ...

    def get_last_accepted(self) -> tuple[Container, int]: ...

    def get_container_by_index(self, index: int) -> Container: ...

    def get_index(self, container_id: bytes) -> int: ...


def decode_checked_hex(value: str) -> bytes:
    """Decode "0x" prefixed hex whose last 4 bytes are a SHA-256 checksum."""
    if not value:
        return b""
    if not value.startswith("0x"):
        raise ValueError("missing 0x prefix to hex encoding")
    digits = value[2:]
    if not _HEX.fullmatch(digits):
        raise ValueError(f"invalid hex string {value!r}")
    decoded = bytes.fromhex(digits)
    if len(decoded) < _CHECKSUM_LEN:
        raise ValueError("input string is smaller than the checksum size")
    data, checksum = decoded[:-_CHECKSUM_LEN], decoded[-_CHECKSUM_LEN:]
    if hashlib.sha256(data).digest()[-_CHECKSUM_LEN:] != checksum:
        raise ValueError("invalid input checksum")
    return data


def _unix_nanos(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(microseconds=1) * 1000


@dataclass(frozen=True)
class ContainerRecording:
    """A recorded reply of the indexer's getContainerByIndex call."""

    id: str
    data: str
    timestamp: datetime
    index: str

    def to_container(self) -> tuple[Container, int]:
        """Decode the recording into a container and its index."""
        container_id = id_from_string(self.id)
        if not _UINT.fullmatch(self.index) or int(self.index) > _UINT64_MAX:
            raise ValueError(f"invalid index {self.index!r}")
        index = int(self.index)
        data = decode_checked_hex(self.data)
        return Container(container_id, data, _unix_nanos(self.timestamp)), index


def read_container_recordings(file_name: str | Path) -> list[ContainerRecording]:
    """Load container recordings from a JSON file."""
    with open(file_name, encoding="utf-8") as handle:
        raw = json.load(handle)
    return [
        ContainerRecording(
            id=item.get("id", ""),
            data=item.get("bytes", ""),
            timestamp=parse_time(item["timestamp"]) if "timestamp" in item else _EPOCH,
            index=item.get("index", ""),
        )
        for item in raw or []
    ]


class RecordedIndexerClient:
    """An indexer client answering from recorded containers."""

    def __init__(self, recordings: Iterable[ContainerRecording]) -> None:
        self._by_index: dict[int, Container] = {}
        self._by_id: dict[bytes, int] = {}
        self._max_index = 0
        for recording in recordings:
            container, index = recording.to_container()
            self._by_index[index] = container
            self._by_id[container.id] = index
            self._max_index = max(self._max_index, index)

    def get_last_accepted(self) -> tuple[Container, int]:
        """Return the container with the highest index, and that index."""
        try:
            return self._by_index[self._max_index], self._max_index
        except KeyError:
            raise LookupError("no containers recorded") from None

    def get_container_by_index(self, index: int) -> Container:
        """Return the container at ``index``."""
        try:
            return self._by_index[index]
        except KeyError:
            raise LookupError(f"container with index {index} not found") from None

    def get_container_range(self, start: int, num_to_fetch: int) -> list[Container]:
        """Return up to ``num_to_fetch`` consecutive containers from ``start``."""
        if start not in self._by_index:
            raise LookupError(f"invalid from value {start}")
        result = [self._by_index[start]]
        for i in range(start + 1, start + num_to_fetch):
            container = self._by_index.get(i)
            if container is None:
                break
            result.append(container)
        return result

    def get_index(self, container_id: bytes) -> int:
        """Return the index of the container with the given id."""
        try:
            return self._by_id[bytes(container_id)]
        except KeyError:
            raise LookupError(f"container with id {bytes(container_id).hex()} not found") from None


def fetch_container_range(client: IndexerClient, start: int, num_to_fetch: int) -> list[Container]:
    """Fetch a range of indexed containers."""
    return client.get_container_range(start, num_to_fetch)


def fetch_last_accepted_container(client: IndexerClient) -> tuple[Container, int]:
    """Fetch the last accepted container and its index."""
    return client.get_last_accepted()


def fetch_container(client: IndexerClient, container_id: str) -> Container | None:
    """Fetch a container by its CB58 id; None if the id is not indexed."""
    try:
        raw_id = id_from_string(container_id)
    except ValueError:
        raw_id = bytes(32)
    try:
        index = client.get_index(raw_id)
    except Exception:
        # Some transactions (genesis) are not indexed.
        logger.warning("Cannot fetch a container with id %s", container_id)
        return None
    return client.get_container_by_index(index)


def rpc_client_options(api_key: str) -> str:
    """Query string carrying the API key, or "" when there is none."""
    if not api_key:
        return ""
    return "?x-apikey=" + api_key