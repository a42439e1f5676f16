"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from curve_engine.app import create_app
from curve_engine.config import Config
from curve_engine.errors import RpcFailure

from conftest import (
    ALICE,
    CURVE,
    ETH,
    TEST_ADDRESS,
    TEST_PRIVATE_KEY,
    TOKEN,
    FakeChainGateway,
    make_purchase_log,
    make_sold_log,
)


@pytest.fixture
def client(gateway):
    app = create_app(Config(), gateway=gateway)
    with TestClient(app) as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_gateway_closed_on_shutdown():
    gateway = FakeChainGateway()
    with TestClient(create_app(Config(), gateway=gateway)):
        assert not gateway.closed
    assert gateway.closed


def test_curve_info(client):
    response = client.get(f"/v1/curves/{CURVE}")
    assert response.status_code == 200
    body = response.json()
    assert body["currentPhase"] == "Bonding"
    assert body["remainingEthToTarget"] == "18.0"
    assert body["settings"]["sellFee"] == 100


def test_buy_quote(client):
    response = client.get(f"/v1/curves/{CURVE}/quote/buy", params={"ethAmount": "1"})
    assert response.status_code == 200
    body = response.json()
    assert body["ethAmount"] == "1.0"
    assert body["slippageBps"] == 250


def test_sell_quote_with_slippage(client):
    response = client.get(
        f"/v1/curves/{CURVE}/quote/sell",
        params={"tokenAmount": "1000", "slippageBps": 100},
    )
    assert response.status_code == 200
    assert response.json()["slippageBps"] == 100


def test_buy(client, gateway):
    response = client.post(
        f"/v1/curves/{CURVE}/buy",
        json={"ethAmount": "0.5", "privateKey": TEST_PRIVATE_KEY},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["buyer"] == TEST_ADDRESS
    assert body["txHash"] in gateway.receipts
    assert TEST_PRIVATE_KEY not in response.text


def test_sell_with_approval(client):
    response = client.post(
        f"/v1/curves/{CURVE}/sell",
        json={"tokenAmount": "1000", "privateKey": TEST_PRIVATE_KEY},
    )
    assert response.status_code == 200
    assert response.json()["approvalTxHash"] is not None


def test_approve(client):
    response = client.post(
        f"/v1/tokens/{TOKEN}/approve",
        json={"spenderAddress": CURVE, "amount": "5", "privateKey": TEST_PRIVATE_KEY},
    )
    assert response.status_code == 200
    assert response.json()["approvedAmount"] == "5.0"


def test_history_routes(client, gateway):
    gateway.logs = [
        make_purchase_log(ALICE, ETH, 1000 * ETH, block_number=49_990, tx_index=1),
        make_sold_log(TEST_ADDRESS, ETH, ETH // 2, 0, block_number=49_995, tx_index=2),
    ]

    history = client.get(f"/v1/curves/{CURVE}/history", params={"limit": 1}).json()
    assert history["total"] == 2
    assert history["hasMore"] is True
    assert history["trades"][0]["direction"] == "sell"

    buys = client.get(f"/v1/curves/{CURVE}/history", params={"direction": "buy"}).json()
    assert [t["trader"] for t in buys["trades"]] == [ALICE]

    mine = client.get(f"/v1/curves/{CURVE}/history/{TEST_ADDRESS}").json()
    assert mine["total"] == 1

    recent = client.get(f"/v1/curves/{CURVE}/recent", params={"count": 5}).json()
    assert len(recent) == 2


def test_history_limit_bounds(client):
    assert client.get(f"/v1/curves/{CURVE}/history", params={"limit": 0}).status_code == 422
    assert client.get(f"/v1/curves/{CURVE}/history", params={"limit": 1001}).status_code == 422


def test_history_window_from_config(gateway):
    app = create_app(Config(history_window_blocks=100), gateway=gateway)
    with TestClient(app) as client:
        body = client.get(f"/v1/curves/{CURVE}/history").json()
    assert body["fromBlock"] == gateway.block_number - 100


def test_token_reads(client, gateway):
    gateway.balances[(TOKEN, ALICE)] = 7 * ETH
    assert client.get(f"/v1/tokens/{TOKEN}").json()["symbol"] == "TEST"
    assert client.get(f"/v1/tokens/{TOKEN}/balance/{ALICE}").json()["balance"] == "7.0"
    allowance = client.get(f"/v1/tokens/{TOKEN}/allowance/{ALICE}/{CURVE}").json()
    assert allowance["allowance"] == "0.0"


class TestErrorMapping:
    def test_invalid_credential(self, client):
        response = client.post(
            f"/v1/curves/{CURVE}/buy",
            json={"ethAmount": "1", "privateKey": "not-a-key"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "InvalidCredential"
        assert "not-a-key" not in response.text

    def test_invalid_slippage(self, client):
        response = client.get(
            f"/v1/curves/{CURVE}/quote/buy",
            params={"ethAmount": "1", "slippageBps": 9000},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidSlippage"

    def test_malformed_amount(self, client):
        response = client.get(f"/v1/curves/{CURVE}/quote/buy", params={"ethAmount": "lots"})
        assert response.status_code == 400
        assert response.json()["error"] == "PrecisionError"

    def test_invalid_address(self, client):
        response = client.get("/v1/curves/0xnope")
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAddress"

    def test_phase_error(self, client, gateway):
        gateway.curve_state["currentPhase"] = 1
        response = client.post(
            f"/v1/curves/{CURVE}/buy",
            json={"ethAmount": "1", "privateKey": TEST_PRIVATE_KEY},
        )
        assert response.status_code == 409
        assert "Finalized" in response.json()["message"]

    def test_reverted_transaction_carries_hash(self, client, gateway):
        gateway.revert.add("buy")
        response = client.post(
            f"/v1/curves/{CURVE}/buy",
            json={"ethAmount": "1", "privateKey": TEST_PRIVATE_KEY},
        )
        assert response.status_code == 409
        assert response.json()["txHash"] in gateway.receipts

    def test_rpc_failure(self, client, gateway):
        async def unreachable(curve):
            raise RpcFailure("currentPhase failed: connection refused")

        gateway.get_curve_state_raw = unreachable
        response = client.get(f"/v1/curves/{CURVE}")
        assert response.status_code == 502
        assert response.json()["error"] == "RpcFailure"
