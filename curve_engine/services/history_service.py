"""History service for rebuilding trade history from curve event logs."""

from typing import Optional
import logging

from curve_engine.addresses import address_topic, normalize_address
from curve_engine.datasources import ChainGateway
from curve_engine.events import (
    TOKENS_PURCHASED_TOPIC,
    TOKENS_SOLD_TOPIC,
    TokensPurchasedEvent,
    TokensSoldEvent,
    decode_log,
)
from curve_engine.models import PaginationWindow, TradeDirection, TradeHistory, TradeRecord
from curve_engine.units import from_fixed_point

logger = logging.getLogger(__name__)

HISTORY_WINDOW_BLOCKS = 10_000

_TOPICS = {
    TradeDirection.BUY: TOKENS_PURCHASED_TOPIC,
    TradeDirection.SELL: TOKENS_SOLD_TOPIC,
}


class HistoryService:
    """
    Service for rebuilding trade history on demand.

    Nothing is cached between calls. Every call scans the last
    `window_blocks` blocks and looks up one block timestamp per distinct
    block that holds a trade, so latency grows with trading activity in
    the window.
    """

    def __init__(self, gateway: ChainGateway, window_blocks: int = HISTORY_WINDOW_BLOCKS):
        self.gateway = gateway
        self.window_blocks = window_blocks

    async def get_history(
        self,
        curve: str,
        window: Optional[PaginationWindow] = None,
    ) -> TradeHistory:
        """
        Get trades on a curve, newest first.

        Args:
            curve: Bonding curve address
            window: limit/offset and optional direction filter

        Returns:
            TradeHistory with the requested page, total and hasMore
        """
        window = window or PaginationWindow()
        return await self._collect(curve, window)

    async def get_user_history(
        self,
        curve: str,
        trader: str,
        window: Optional[PaginationWindow] = None,
    ) -> TradeHistory:
        """
        Get one trader's trades on a curve, newest first.

        Filtering happens in the log query on the indexed `user` topic.
        """
        window = window or PaginationWindow()
        return await self._collect(curve, window, trader=normalize_address(trader))

    async def get_recent_trades(self, curve: str, count: int = 10) -> list[TradeRecord]:
        """Most recent `count` trades on a curve."""
        history = await self.get_history(curve, PaginationWindow(limit=count, offset=0))
        return history.trades

    async def _collect(
        self,
        curve: str,
        window: PaginationWindow,
        trader: Optional[str] = None,
    ) -> TradeHistory:
        curve = normalize_address(curve)
        current_block = await self.gateway.get_block_number()
        from_block = max(0, current_block - self.window_blocks)

        directions = [window.direction] if window.direction else list(TradeDirection)
        trader_topic = address_topic(trader) if trader else None

        timestamps: dict[int, int] = {}
        records: list[TradeRecord] = []

        for direction in directions:
            topics = [_TOPICS[direction]]
            if trader_topic:
                topics.append(trader_topic)

            logs = await self.gateway.get_logs(curve, topics, from_block, current_block)
            logger.info(
                f"Fetched {len(logs)} {direction.value} logs for {curve} "
                f"in blocks {from_block}-{current_block}"
            )

            for log in logs:
                event = decode_log(log)
                if not isinstance(event, (TokensPurchasedEvent, TokensSoldEvent)):
                    continue

                block_number = event.location.block_number
                if block_number not in timestamps:
                    timestamps[block_number] = await self.gateway.get_block_timestamp(block_number)

                records.append(self._to_record(event, timestamps[block_number]))

        # Sort by time descending
        records.sort(key=lambda r: (r.timestamp, r.blockNumber, r.logIndex), reverse=True)

        total = len(records)
        end = window.offset + window.limit

        return TradeHistory(
            trades=records[window.offset:end],
            total=total,
            hasMore=end < total,
            fromBlock=from_block,
            toBlock=current_block,
        )

    def _to_record(
        self,
        event: TokensPurchasedEvent | TokensSoldEvent,
        timestamp: int,
    ) -> TradeRecord:
        location = event.location
        common = {
            "id": f"{location.tx_hash}-{location.log_index}",
            "txHash": location.tx_hash,
            "blockNumber": location.block_number,
            "logIndex": location.log_index,
            "timestamp": timestamp,
            "trader": event.user,
        }

        if isinstance(event, TokensPurchasedEvent):
            return TradeRecord(
                **common,
                direction=TradeDirection.BUY,
                ethAmount=from_fixed_point(event.eth_amount),
                tokenAmount=from_fixed_point(event.tokens_out),
            )

        return TradeRecord(
            **common,
            direction=TradeDirection.SELL,
            ethAmount=from_fixed_point(event.eth_out),
            tokenAmount=from_fixed_point(event.tokens_in),
            feeAmount=from_fixed_point(event.fee),
        )
