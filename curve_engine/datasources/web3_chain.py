"""web3.py implementation of the chain gateway."""

import logging
from typing import Any, Awaitable, Optional, TypeVar

from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted

from curve_engine.addresses import checksum
from curve_engine.errors import CurveEngineError, RpcFailure, TransactionReverted
from curve_engine.wallet import Credential
from .abis import BONDING_CURVE_ABI, TOKEN_ABI
from .base import ChainGateway

logger = logging.getLogger(__name__)

# API constants
DEFAULT_RPC_URL = "https://api.testnet.abs.xyz"
DEFAULT_RECEIPT_TIMEOUT = 120.0

T = TypeVar("T")


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value).lower()


class Web3ChainGateway(ChainGateway):
    """
    Chain gateway over a JSON-RPC endpoint using AsyncWeb3.

    Limitations:
    - No retry on any call; a hung endpoint hangs the caller
    - Receipt waits are bounded by `receipt_timeout` only
    - Nonces come from the pending transaction count, so concurrent
      submissions from the same account may collide
    """

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
    ):
        """
        Initialize the gateway.

        Args:
            rpc_url: JSON-RPC endpoint URL
            receipt_timeout: Seconds to wait for a transaction to be mined
        """
        self.rpc_url = rpc_url
        self.receipt_timeout = receipt_timeout
        self.web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))

    async def _rpc(self, label: str, awaitable: Awaitable[T]) -> T:
        """
        Await a provider call, translating failures into engine errors.

        Contract reverts become TransactionReverted; everything else that
        goes wrong on the wire becomes RpcFailure.
        """
        try:
            return await awaitable
        except CurveEngineError:
            raise
        except ContractLogicError as e:
            logger.error(f"{label} reverted: {e}")
            raise TransactionReverted(f"{label} reverted: {e}") from e
        except TimeExhausted as e:
            logger.error(f"{label} timed out after {self.receipt_timeout}s: {e}")
            raise RpcFailure(f"{label} timed out: {e}") from e
        except Exception as e:
            logger.error(f"RPC error during {label}: {e}")
            raise RpcFailure(f"{label} failed: {e}") from e

    def _curve(self, curve: str):
        return self.web3.eth.contract(address=checksum(curve), abi=BONDING_CURVE_ABI)

    def _token(self, token: str):
        return self.web3.eth.contract(address=checksum(token), abi=TOKEN_ABI)

    async def get_block_number(self) -> int:
        return await self._rpc("eth_blockNumber", self.web3.eth.block_number)

    async def get_block_timestamp(self, block_number: int) -> int:
        block = await self._rpc(
            f"eth_getBlockByNumber({block_number})",
            self.web3.eth.get_block(block_number),
        )
        return int(block["timestamp"])

    async def get_curve_state_raw(self, curve: str) -> dict[str, Any]:
        """
        Read all curve views at one block so the values are consistent.

        Reads are issued one after another, not concurrently.
        """
        contract = self._curve(curve)
        block = await self.get_block_number()

        async def view(name: str):
            call = getattr(contract.functions, name)().call(block_identifier=block)
            return await self._rpc(f"{name}()", call)

        return {
            "blockNumber": block,
            "currentPhase": await view("currentPhase"),
            "ethReserve": await view("ethReserve"),
            "tokenReserve": await view("tokenReserve"),
            "totalETHCollected": await view("totalETHCollected"),
            "isFinalized": await view("isFinalized"),
            "settings": await view("getBondingCurveSettings"),
        }

    async def get_curve_token(self, curve: str) -> str:
        address = await self._rpc("token()", self._curve(curve).functions.token().call())
        return address.lower()

    async def get_token_balance(self, token: str, owner: str) -> int:
        call = self._token(token).functions.balanceOf(checksum(owner)).call()
        return await self._rpc("balanceOf()", call)

    async def get_token_allowance(self, token: str, owner: str, spender: str) -> int:
        call = self._token(token).functions.allowance(checksum(owner), checksum(spender)).call()
        return await self._rpc("allowance()", call)

    async def get_token_metadata(self, token: str) -> dict[str, Any]:
        functions = self._token(token).functions
        return {
            "name": await self._rpc("name()", functions.name().call()),
            "symbol": await self._rpc("symbol()", functions.symbol().call()),
            "decimals": await self._rpc("decimals()", functions.decimals().call()),
            "totalSupply": await self._rpc("totalSupply()", functions.totalSupply().call()),
        }

    async def get_logs(
        self,
        address: str,
        topics: list[Optional[str]],
        from_block: int,
        to_block: int,
    ) -> list[dict[str, Any]]:
        params = {
            "address": checksum(address),
            "fromBlock": from_block,
            "toBlock": to_block,
            "topics": topics,
        }
        logs = await self._rpc(
            f"eth_getLogs({from_block}-{to_block})",
            self.web3.eth.get_logs(params),
        )
        return [dict(log) for log in logs]

    async def _send(self, credential: Credential, function, value: int = 0) -> str:
        """Build, sign and broadcast a contract call from `credential`."""
        sender = checksum(credential.address)
        nonce = await self.web3.eth.get_transaction_count(sender, "pending")
        chain_id = await self.web3.eth.chain_id

        # build_transaction estimates gas, which surfaces reverts before broadcast
        transaction = await function.build_transaction({
            "from": sender,
            "value": value,
            "nonce": nonce,
            "chainId": chain_id,
        })
        signed = credential.sign_transaction(transaction)
        tx_hash = await self.web3.eth.send_raw_transaction(signed.raw_transaction)
        return _hex(tx_hash)

    async def submit_buy(
        self,
        curve: str,
        credential: Credential,
        eth_in: int,
        min_tokens: int,
    ) -> str:
        function = self._curve(curve).functions.buyTokens(min_tokens)
        tx_hash = await self._rpc("buyTokens", self._send(credential, function, value=eth_in))
        logger.info(f"Buy tokens transaction: {tx_hash}")
        return tx_hash

    async def submit_sell(
        self,
        curve: str,
        credential: Credential,
        token_amount: int,
        min_eth: int,
    ) -> str:
        function = self._curve(curve).functions.sellTokens(token_amount, min_eth)
        tx_hash = await self._rpc("sellTokens", self._send(credential, function))
        logger.info(f"Sell tokens transaction: {tx_hash}")
        return tx_hash

    async def submit_approve(
        self,
        token: str,
        credential: Credential,
        spender: str,
        amount: int,
    ) -> str:
        function = self._token(token).functions.approve(checksum(spender), amount)
        tx_hash = await self._rpc("approve", self._send(credential, function))
        logger.info(f"Token approval transaction: {tx_hash}")
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        receipt = await self._rpc(
            f"receipt for {tx_hash}",
            self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout),
        )
        result = dict(receipt)
        result["logs"] = [dict(log) for log in receipt.get("logs", [])]
        return result

    async def close(self) -> None:
        """Close the RPC session."""
        await self.web3.provider.disconnect()
