"""Shared fixtures: an in-memory chain gateway and log builders."""

from typing import Any, Optional

import pytest
from eth_abi import encode as abi_encode

from curve_engine.datasources import ChainGateway
from curve_engine.events import TOKENS_PURCHASED_TOPIC, TOKENS_SOLD_TOPIC
from curve_engine.services.quote_service import buy_tokens_out, sell_eth_out
from curve_engine.wallet import Credential

ETH = 10 ** 18

CURVE = "0x" + "11" * 20
TOKEN = "0x" + "22" * 20
ALICE = "0x" + "aa" * 20
BOB = "0x" + "bb" * 20

# Hardhat account #0
TEST_PRIVATE_KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_MNEMONIC = "test test test test test test test test test test test junk"
TEST_ADDRESS = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"


def _topic_for(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(address[2:])


def _tx_hash(n: int) -> bytes:
    return n.to_bytes(32, "big")


def make_purchase_log(
    user: str,
    eth_amount: int,
    tokens_out: int,
    block_number: int,
    tx_index: int,
    log_index: int = 0,
    address: str = CURVE,
) -> dict[str, Any]:
    """Raw TokensPurchased log as a JSON-RPC node would return it."""
    return {
        "address": address,
        "topics": [bytes.fromhex(TOKENS_PURCHASED_TOPIC[2:]), _topic_for(user)],
        "data": abi_encode(["uint256", "uint256"], [eth_amount, tokens_out]),
        "blockNumber": block_number,
        "transactionHash": _tx_hash(tx_index),
        "logIndex": log_index,
    }


def make_sold_log(
    user: str,
    tokens_in: int,
    eth_out: int,
    fee: int,
    block_number: int,
    tx_index: int,
    log_index: int = 0,
    address: str = CURVE,
) -> dict[str, Any]:
    """Raw TokensSold log as a JSON-RPC node would return it."""
    return {
        "address": address,
        "topics": [bytes.fromhex(TOKENS_SOLD_TOPIC[2:]), _topic_for(user)],
        "data": abi_encode(["uint256", "uint256", "uint256"], [tokens_in, eth_out, fee]),
        "blockNumber": block_number,
        "transactionHash": _tx_hash(tx_index),
        "logIndex": log_index,
    }


class FakeChainGateway(ChainGateway):
    """
    In-memory gateway.

    Trades execute against `curve_state` using the contract formula and
    produce receipts carrying the matching event log. Every call is
    recorded in `calls` as (method, args).
    """

    def __init__(self):
        self.block_number = 50_000
        self.curve_state: dict[str, Any] = {
            "currentPhase": 0,
            "ethReserve": 10 * ETH,
            "tokenReserve": 1_000_000 * ETH,
            "totalETHCollected": 2 * ETH,
            "isFinalized": False,
            # virtualEth, bondingTarget, minContribution, poolFee, sellFee, ...
            "settings": (
                8 * ETH,
                20 * ETH,
                ETH // 1000,
                3000,
                100,
                "0x" + "00" * 20,
                "0x" + "00" * 20,
                "0x" + "00" * 20,
                "0x" + "00" * 20,
            ),
        }
        self.curve_token = TOKEN
        self.allowances: dict[tuple[str, str, str], int] = {}
        self.balances: dict[tuple[str, str], int] = {}
        self.token_metadata = {
            "name": "Test Token",
            "symbol": "TEST",
            "decimals": 18,
            "totalSupply": 1_000_000_000 * ETH,
        }
        self.logs: list[dict[str, Any]] = []
        self.block_timestamps: dict[int, int] = {}
        self.receipts: dict[str, dict[str, Any]] = {}
        self.revert: set[str] = set()
        self.emit_events = True
        self.calls: list[tuple[str, tuple]] = []
        self._tx_counter = 0
        self.closed = False

    def calls_to(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))

    def _new_receipt(self, kind: str, logs: list[dict[str, Any]]) -> str:
        self._tx_counter += 1
        tx_hash = "0x" + _tx_hash(1_000 + self._tx_counter).hex()
        self.block_number += 1
        status = 0 if kind in self.revert else 1
        self.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "blockNumber": self.block_number,
            "status": status,
            "logs": logs if status == 1 and self.emit_events else [],
        }
        return tx_hash

    async def get_block_number(self) -> int:
        self._record("get_block_number")
        return self.block_number

    async def get_block_timestamp(self, block_number: int) -> int:
        self._record("get_block_timestamp", block_number)
        return self.block_timestamps.get(block_number, 1_700_000_000 + block_number * 2)

    async def get_curve_state_raw(self, curve: str) -> dict[str, Any]:
        self._record("get_curve_state_raw", curve)
        return {"blockNumber": self.block_number, **self.curve_state}

    async def get_curve_token(self, curve: str) -> str:
        self._record("get_curve_token", curve)
        return self.curve_token

    async def get_token_balance(self, token: str, owner: str) -> int:
        self._record("get_token_balance", token, owner)
        return self.balances.get((token, owner), 0)

    async def get_token_allowance(self, token: str, owner: str, spender: str) -> int:
        self._record("get_token_allowance", token, owner, spender)
        return self.allowances.get((token, owner, spender), 0)

    async def get_token_metadata(self, token: str) -> dict[str, Any]:
        self._record("get_token_metadata", token)
        return dict(self.token_metadata)

    async def get_logs(
        self,
        address: str,
        topics: list[Optional[str]],
        from_block: int,
        to_block: int,
    ) -> list[dict[str, Any]]:
        self._record("get_logs", address, tuple(topics), from_block, to_block)
        matched = []
        for log in self.logs:
            if log["address"].lower() != address.lower():
                continue
            if not from_block <= log["blockNumber"] <= to_block:
                continue
            log_topics = ["0x" + t.hex() for t in log["topics"]]
            if any(
                wanted is not None and (i >= len(log_topics) or log_topics[i] != wanted)
                for i, wanted in enumerate(topics)
            ):
                continue
            matched.append(log)
        return matched

    async def submit_buy(
        self,
        curve: str,
        credential: Credential,
        eth_in: int,
        min_tokens: int,
    ) -> str:
        self._record("submit_buy", curve, credential.address, eth_in, min_tokens)
        tokens_out = buy_tokens_out(
            eth_in, self.curve_state["ethReserve"], self.curve_state["tokenReserve"]
        )
        log = make_purchase_log(credential.address, eth_in, tokens_out, self.block_number + 1, 7)
        return self._new_receipt("buy", [log])

    async def submit_sell(
        self,
        curve: str,
        credential: Credential,
        token_amount: int,
        min_eth: int,
    ) -> str:
        self._record("submit_sell", curve, credential.address, token_amount, min_eth)
        _, fee, net = sell_eth_out(
            token_amount,
            self.curve_state["ethReserve"],
            self.curve_state["tokenReserve"],
            self.curve_state["settings"][4],
        )
        log = make_sold_log(credential.address, token_amount, net, fee, self.block_number + 1, 8)
        return self._new_receipt("sell", [log])

    async def submit_approve(
        self,
        token: str,
        credential: Credential,
        spender: str,
        amount: int,
    ) -> str:
        self._record("submit_approve", token, credential.address, spender, amount)
        tx_hash = self._new_receipt("approve", [])
        if "approve" not in self.revert:
            self.allowances[(token, credential.address, spender)] = amount
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        self._record("wait_for_receipt", tx_hash)
        return self.receipts[tx_hash]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def gateway() -> FakeChainGateway:
    return FakeChainGateway()
