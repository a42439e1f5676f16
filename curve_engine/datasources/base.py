"""Abstract base class for chain gateways."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from curve_engine.wallet import Credential


class ChainGateway(ABC):
    """
    Abstract interface to the bonding curve and token contracts.

    This is the only place the engine performs network I/O. Implementations
    return raw contract outputs and raw logs; they do not interpret them.
    There is no retry: provider faults surface as RpcFailure.
    """

    @abstractmethod
    async def get_block_number(self) -> int:
        """Latest block number."""
        pass

    @abstractmethod
    async def get_block_timestamp(self, block_number: int) -> int:
        """Timestamp of a block in seconds."""
        pass

    @abstractmethod
    async def get_curve_state_raw(self, curve: str) -> dict[str, Any]:
        """
        Read all curve views pinned to the latest block.

        Args:
            curve: Bonding curve address

        Returns:
            Dict with blockNumber, currentPhase, ethReserve, tokenReserve,
            totalETHCollected, isFinalized and settings (the raw
            getBondingCurveSettings() tuple)
        """
        pass

    @abstractmethod
    async def get_curve_token(self, curve: str) -> str:
        """Address of the token traded by a curve."""
        pass

    @abstractmethod
    async def get_token_balance(self, token: str, owner: str) -> int:
        pass

    @abstractmethod
    async def get_token_allowance(self, token: str, owner: str, spender: str) -> int:
        pass

    @abstractmethod
    async def get_token_metadata(self, token: str) -> dict[str, Any]:
        """
        Read ERC-20 metadata.

        Returns:
            Dict with name, symbol, decimals, totalSupply
        """
        pass

    @abstractmethod
    async def get_logs(
        self,
        address: str,
        topics: list[Optional[str]],
        from_block: int,
        to_block: int,
    ) -> list[dict[str, Any]]:
        """
        Query raw logs emitted by `address` within a block range (inclusive).

        Args:
            address: Emitting contract
            topics: Topic filter, positionally matched; None matches anything
            from_block: First block
            to_block: Last block

        Returns:
            Raw logs with address, topics, data, blockNumber,
            transactionHash and logIndex
        """
        pass

    @abstractmethod
    async def submit_buy(
        self,
        curve: str,
        credential: Credential,
        eth_in: int,
        min_tokens: int,
    ) -> str:
        """Sign and broadcast buyTokens(min_tokens) with `eth_in` wei attached."""
        pass

    @abstractmethod
    async def submit_sell(
        self,
        curve: str,
        credential: Credential,
        token_amount: int,
        min_eth: int,
    ) -> str:
        """Sign and broadcast sellTokens(token_amount, min_eth)."""
        pass

    @abstractmethod
    async def submit_approve(
        self,
        token: str,
        credential: Credential,
        spender: str,
        amount: int,
    ) -> str:
        """Sign and broadcast approve(spender, amount) on the token."""
        pass

    @abstractmethod
    async def wait_for_receipt(self, tx_hash: str) -> dict[str, Any]:
        """
        Wait until a transaction is mined.

        Returns:
            Raw receipt with status, blockNumber, transactionHash and logs
        """
        pass

    async def close(self) -> None:
        """
        Clean up resources (e.g., close the RPC session).

        Override this if the gateway holds resources that need cleanup.
        """
        pass
