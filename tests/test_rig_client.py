import json

import httpx
import pytest
from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector

from mining_verification.core.clients.rig import MiningRigClient
from mining_verification.core.errors import RigReadError

from .fakes import TEST_ADDRESS, UINT256_MAX

RPC_URL = "http://rpc.test"
RIG_ADDRESS = "0x86ae97f9245c592d2cda14d1bc31104228eae569"


def _result(types, values):
    return "0x" + abi_encode(types, values).hex()


def _client(handler) -> MiningRigClient:
    return MiningRigClient(RPC_URL, RIG_ADDRESS, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_scores_encodes_eth_call_and_decodes_fields():
    captured = {}
    values = [1, 2, 3, 4, 5, 6, UINT256_MAX]

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": _result(["uint256"] * 7, values)})

    data = await _client(handler).scores(TEST_ADDRESS)

    assert (data.base, data.balance, data.frequency, data.held, data.debt, data.redeemable) == (1, 2, 3, 4, 5, 6)
    assert data.total_mining_txs == UINT256_MAX

    body = captured["body"]
    assert body["method"] == "eth_call"
    call, block = body["params"]
    assert block == "latest"
    assert call["to"].lower() == RIG_ADDRESS
    calldata = bytes.fromhex(call["data"][2:])
    assert calldata[:4] == function_signature_to_4byte_selector("scores(address)")
    (encoded_wallet,) = abi_decode(["address"], calldata[4:])
    assert encoded_wallet.lower() == TEST_ADDRESS


@pytest.mark.asyncio
async def test_score_uses_score_selector():
    def handler(request: httpx.Request) -> httpx.Response:
        data = json.loads(request.content)["params"][0]["data"]
        assert bytes.fromhex(data[2:10]) == function_signature_to_4byte_selector("score(address)")
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": _result(["uint256"], [987])})

    assert await _client(handler).score(TEST_ADDRESS) == 987


@pytest.mark.asyncio
async def test_revert_raises_rig_read_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted"}}
        )

    with pytest.raises(RigReadError, match="execution reverted") as excinfo:
        await _client(handler).score(TEST_ADDRESS)
    assert excinfo.value.rig_address.lower() == RIG_ADDRESS


@pytest.mark.asyncio
async def test_empty_return_data_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "0x"})

    with pytest.raises(RigReadError, match="returned no data"):
        await _client(handler).scores(TEST_ADDRESS)


@pytest.mark.asyncio
async def test_short_return_data_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": _result(["uint256"], [1])})

    with pytest.raises(RigReadError, match="Could not decode"):
        await _client(handler).scores(TEST_ADDRESS)


@pytest.mark.asyncio
async def test_http_error_status_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(RigReadError, match="HTTP 502"):
        await _client(handler).scores(TEST_ADDRESS)


@pytest.mark.asyncio
async def test_transport_failure_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RigReadError, match="RPC request failed"):
        await _client(handler).scores(TEST_ADDRESS)


@pytest.mark.asyncio
async def test_invalid_json_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(RigReadError, match="invalid JSON"):
        await _client(handler).scores(TEST_ADDRESS)


def test_client_checksums_contract_address():
    client = MiningRigClient(RPC_URL, RIG_ADDRESS)

    assert client.address.lower() == RIG_ADDRESS
    assert client.address != RIG_ADDRESS


def test_client_requires_rpc_url():
    with pytest.raises(ValueError):
        MiningRigClient("", RIG_ADDRESS)
