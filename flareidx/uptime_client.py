"""Validator uptime status and a client answering from recorded data."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Iterable

from .timeutil import ShiftedTime


class UptimeStatus(IntEnum):
    """Status of one uptime query."""

    DISCONNECTED = 0
    TIMEOUT = -1
    SERVICE_ERROR = -2


@dataclass
class ValidatorStatus:
    """Whether a validator node is connected."""

    node_id: str
    connected: bool


@dataclass(frozen=True)
class RecordedUptimeData:
    """A validator's connection state during [start, end) in Unix seconds."""

    node_id: str
    connected: int
    start: int
    end: int


def read_uptime_recordings(file_name: str | Path) -> list[RecordedUptimeData]:
    """Load uptime recordings from a JSON file."""
    with open(file_name, encoding="utf-8") as handle:
        raw = json.load(handle)
    return [
        RecordedUptimeData(
            node_id=item.get("nodeID", ""),
            connected=int(item.get("connected", 0)),
            start=int(item.get("start", 0)),
            end=int(item.get("end", 0)),
        )
        for item in raw or []
    ]


class RecordedUptimeClient:
    """An uptime client replaying recordings against a shiftable clock."""

    def __init__(self, data: Iterable[RecordedUptimeData], start_now: datetime | None = None) -> None:
        self.time = ShiftedTime(start_now)
        self._data = list(data)

    def get_validator_status(self) -> tuple[list[ValidatorStatus], UptimeStatus]:
        """Return the validators active now; disconnected wins over connected."""
        now = math.floor(self.time.now().timestamp())
        validators: dict[str, ValidatorStatus] = {}
        for record in self._data:
            if not record.start <= now < record.end:
                continue
            status = validators.get(record.node_id)
            if status is None:
                validators[record.node_id] = ValidatorStatus(record.node_id, record.connected == 1)
            elif record.connected == 0:
                status.connected = False
        return list(validators.values()), UptimeStatus.DISCONNECTED

    def now(self) -> datetime:
        """Current time of the client's clock."""
        return self.time.now()

    def set_now(self, start_now: datetime) -> None:
        """Set the client's clock to ``start_now``."""
        self.time.set_now(start_now)

    def set_now_unix(self, now: int) -> None:
        """Set the client's clock to a Unix timestamp in seconds."""
        self.time.set_now_unix(now)