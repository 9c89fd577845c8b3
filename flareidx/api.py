"""Data objects exchanged with the attestation and indexer HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Mapping


class VerificationStatus(str, Enum):
    """Outcome of verifying an attestation request."""

    OK = "OK"
    DATA_AVAILABILITY_ISSUE = "DATA_AVAILABILITY_ISSUE"
    NEEDS_MORE_CHECKS = "NEEDS_MORE_CHECKS"
    SYSTEM_FAILURE = "SYSTEM_FAILURE"
    NON_EXISTENT_BLOCK = "NON_EXISTENT_BLOCK"
    NOT_CONFIRMED = "NOT_CONFIRMED"
    NOT_PAYMENT = "NOT_PAYMENT"
    NOT_STANDARD_PAYMENT_REFERENCE = "NOT_STANDARD_PAYMENT_REFERENCE"
    PAYMENT_SUMMARY_ERROR = "PAYMENT_SUMMARY_ERROR"
    REFERENCED_TRANSACTION_EXISTS = "REFERENCED_TRANSACTION_EXISTS"
    ZERO_PAYMENT_REFERENCE_UNSUPPORTED = "ZERO_PAYMENT_REFERENCE_UNSUPPORTED"
    NON_EXISTENT_TRANSACTION = "NON_EXISTENT_TRANSACTION"


class SourceId(IntEnum):
    """Known ids of underlying chains."""

    INVALID = -1
    BTC = 0
    LTC = 1
    DOGE = 2
    XRP = 3
    ALGO = 4
    FLARE = 14
    SONGBIRD = 19
    COSTON = 16
    COSTON2 = 114


class AttestationType(IntEnum):
    """Attestation type ids."""

    PAYMENT = 1
    BALANCE_DECREASING_TRANSACTION = 2
    CONFIRMED_BLOCK_HEIGHT_EXISTS = 3
    REFERENCED_PAYMENT_NONEXISTENCE = 4
    PCHAIN_STAKING = 5


class ApiResStatus(str, Enum):
    """Status field of API responses."""

    OK = "OK"
    ERROR = "ERROR"
    REQUEST_BODY_ERROR = "REQUEST_BODY_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    UNAUTHORIZED = "UNAUTHORIZED"
    AUTH_ERROR = "AUTH_ERROR"
    UPSTREAM_HTTP_ERROR = "UPSTREAM_HTTP_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    PENDING = "PENDING"


def _plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


@dataclass
class AttestationRequest:
    """An attestation request as hex bytes, as submitted to the State Connector."""

    request: str


@dataclass
class ARPChainStaking:
    """A parsed P-chain staking attestation request."""

    attestation_type: int = 0
    source_id: int = 0
    message_integrity_code: str = ""
    id: str = ""
    block_number: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ARPChainStaking:
        """Build from the JSON field names; missing fields take zero values."""
        return cls(
            attestation_type=int(data.get("attestationType", 0)),
            source_id=int(data.get("sourceId", 0)),
            message_integrity_code=str(data.get("messageIntegrityCode", "")),
            id=str(data.get("id", "")),
            block_number=int(data.get("blockNumber", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation."""
        return {
            "attestationType": int(self.attestation_type),
            "sourceId": int(self.source_id),
            "messageIntegrityCode": self.message_integrity_code,
            "id": self.id,
            "blockNumber": self.block_number,
        }


@dataclass
class DHPChainStaking:
    """Attestation response for a P-chain staking transaction."""

    state_connector_round: int = 0
    merkle_proof: list[str] | None = None
    block_number: int = 0
    transaction_hash: str = ""
    transaction_type: int = 0
    node_id: str = ""
    start_time: int = 0
    end_time: int = 0
    weight: int = 0
    source_address: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation."""
        return {
            "stateConnectorRound": self.state_connector_round,
            "merkleProof": None if self.merkle_proof is None else list(self.merkle_proof),
            "blockNumber": self.block_number,
            "transactionHash": self.transaction_hash,
            "transactionType": self.transaction_type,
            "nodeId": self.node_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "weight": self.weight,
            "sourceAddress": self.source_address,
        }


@dataclass
class Verification:
    """Result of verifying an attestation request."""

    status: VerificationStatus
    hash: str = ""
    request: ARPChainStaking | None = None
    response: DHPChainStaking | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation."""
        return {
            "hash": self.hash,
            "request": _plain(self.request),
            "response": _plain(self.response),
            "status": _plain(self.status),
        }


@dataclass
class ApiValidationErrorDetails:
    """Per-field validation errors of a request body."""

    class_name: str = ""
    field_errors: dict[str, str] | None = None


@dataclass
class ApiResponseWrapper:
    """Envelope around every API response."""

    data: Any = None
    status: ApiResStatus = ApiResStatus.OK
    error_details: str = ""
    error_message: str = ""
    validation_error_details: ApiValidationErrorDetails | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation."""
        details = self.validation_error_details
        return {
            "data": _plain(self.data),
            "errorDetails": self.error_details,
            "errorMessage": self.error_message,
            "status": _plain(self.status),
            "validationErrorDetails": None
            if details is None
            else {
                "className": details.class_name,
                "fieldErrors": None if details.field_errors is None else dict(details.field_errors),
            },
        }