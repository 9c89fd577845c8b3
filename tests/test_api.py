from flareidx.api import (
    ApiResponseWrapper,
    ApiResStatus,
    ApiValidationErrorDetails,
    ARPChainStaking,
    AttestationType,
    DHPChainStaking,
    Verification,
    VerificationStatus,
)

TX_ID = "0x213686a516f05a706ed2ae1f20b3bb69d1916a59468a3b8d31790e0269fa2c88"

REQUEST_JSON = {
    "attestationType": 5,
    "sourceId": 162,
    "messageIntegrityCode": "",
    "id": TX_ID,
    "blockNumber": 188,
}


def test_request_from_dict():
    request = ARPChainStaking.from_dict(REQUEST_JSON)
    assert request.attestation_type == AttestationType.PCHAIN_STAKING
    assert request.source_id == 162
    assert request.id == TX_ID
    assert request.block_number == 188


def test_request_round_trip():
    request = ARPChainStaking.from_dict(REQUEST_JSON)
    assert request.to_dict() == REQUEST_JSON
    assert ARPChainStaking.from_dict(request.to_dict()) == request


def test_request_missing_fields_take_zero_values():
    request = ARPChainStaking.from_dict({"id": TX_ID})
    assert request == ARPChainStaking(id=TX_ID)


def test_response_to_dict_keys():
    response = DHPChainStaking(block_number=188, transaction_hash=TX_ID, weight=100000000000)
    data = response.to_dict()
    assert set(data) == {
        "stateConnectorRound", "merkleProof", "blockNumber", "transactionHash",
        "transactionType", "nodeId", "startTime", "endTime", "weight", "sourceAddress",
    }
    assert data["merkleProof"] is None
    assert data["blockNumber"] == 188
    assert data["weight"] == 100000000000


def test_verification_to_dict_nests_objects():
    verification = Verification(
        status=VerificationStatus.OK,
        request=ARPChainStaking.from_dict(REQUEST_JSON),
        response=DHPChainStaking(transaction_hash=TX_ID),
    )
    data = verification.to_dict()
    assert data["status"] == "OK"
    assert data["request"] == REQUEST_JSON
    assert data["response"]["transactionHash"] == TX_ID
    assert data["hash"] == ""


def test_verification_without_response():
    data = Verification(status=VerificationStatus.NON_EXISTENT_BLOCK).to_dict()
    assert data["status"] == "NON_EXISTENT_BLOCK"
    assert data["request"] is None
    assert data["response"] is None


def test_wrapper_ok_wraps_data():
    wrapper = ApiResponseWrapper(data=ARPChainStaking.from_dict(REQUEST_JSON))
    data = wrapper.to_dict()
    assert data["status"] == "OK"
    assert data["data"] == REQUEST_JSON
    assert data["validationErrorDetails"] is None


def test_wrapper_error():
    wrapper = ApiResponseWrapper(
        status=ApiResStatus.INVALID_REQUEST,
        error_message="invalid request",
        error_details="invalid request length",
    )
    data = wrapper.to_dict()
    assert data["status"] == "INVALID_REQUEST"
    assert data["errorMessage"] == "invalid request"
    assert data["errorDetails"] == "invalid request length"
    assert data["data"] is None


def test_wrapper_validation_details():
    details = ApiValidationErrorDetails(class_name="ARPChainStaking", field_errors={"id": "tx-id"})
    data = ApiResponseWrapper(
        status=ApiResStatus.VALIDATION_ERROR, validation_error_details=details
    ).to_dict()
    assert data["validationErrorDetails"] == {
        "className": "ARPChainStaking",
        "fieldErrors": {"id": "tx-id"},
    }