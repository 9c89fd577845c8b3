import json

import pytest

from flareidx.encoding import cb58_encode, id_from_string
from flareidx.rpc_client import (
    RecordedRPCClient,
    RPCRecording,
    read_rpc_recordings,
)

ID1 = "22ewQXuJw8PKQPiqJxwDezQszrNT2GbLyh4oCpCyVCSjAaDp2o"
ID2 = "oUpTu8TbYSWviCxV5mxuh2Wk9xSHRVrPXVKfPmFESPsRRdh2X"
ID3 = "2VhbseqzJLTZ1wxBWzWqvgshmAqx8LshT2p8HJP7P6zwz4iZTg"


@pytest.fixture
def client(tmp_path):
    path = tmp_path / "rpc.json"
    path.write_text(
        json.dumps(
            [
                {"id": ID1, "tx": "0x0011"},
                {"id": ID3, "utxos": ["0xaa", "0xbb"], "tx": "0x2233"},
            ]
        )
    )
    return RecordedRPCClient(read_rpc_recordings(path))


def test_rpc_client_cases(client):
    id1 = id_from_string(ID1)
    id2 = id_from_string(ID2)
    id3 = id_from_string(ID3)
    assert cb58_encode(id1) == ID1

    assert client.get_tx(id1).tx == "0x0011"
    with pytest.raises(LookupError):
        client.get_tx(id2)
    assert client.get_tx(id3).tx == "0x2233"

    utxos1 = client.get_reward_utxos(id1)
    assert utxos1.num_fetched == 0 and utxos1.utxos == []

    utxos3 = client.get_reward_utxos(id3)
    assert utxos3.num_fetched == 2 and len(utxos3.utxos) == 2


def test_lookup_by_string(client):
    assert client.get_tx(ID3).encoding == "hex"
    with pytest.raises(LookupError):
        client.get_reward_utxos(ID2)


def test_recording_replies():
    recording = RPCRecording(id=ID1, utxos=["0x01"], tx="0xff")
    reply = recording.to_reward_utxos_reply()
    assert (reply.num_fetched, reply.utxos, reply.encoding) == (1, ["0x01"], "hex")
    assert recording.to_tx_reply().tx == "0xff"