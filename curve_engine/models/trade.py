"""Trade history models for API responses."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class TradeDirection(str, Enum):
    """Side of a bonding curve trade."""
    BUY = "buy"
    SELL = "sell"


class TradeRecord(BaseModel):
    """
    A single trade rebuilt from a TokensPurchased or TokensSold log.

    Immutable; rebuilt on every request.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(description="Transaction hash and log index, '<txHash>-<logIndex>'")
    txHash: str
    blockNumber: int
    logIndex: int
    timestamp: int = Field(description="Block timestamp in seconds")
    trader: str = Field(description="Trader address (lower-cased)")
    direction: TradeDirection
    ethAmount: str = Field(description="ETH spent (buy) or received net of fee (sell)")
    tokenAmount: str = Field(description="Tokens received (buy) or sold (sell)")
    feeAmount: str = Field(default="0.0", description="Sell fee in ETH, zero for buys")


class PaginationWindow(BaseModel):
    """Slice of a descending-by-time trade list."""
    model_config = ConfigDict(populate_by_name=True)

    limit: int = Field(default=50, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)
    direction: Optional[TradeDirection] = Field(default=None, description="Optional side filter")


class TradeHistory(BaseModel):
    """A page of trades."""
    model_config = ConfigDict(populate_by_name=True)

    trades: list[TradeRecord]
    total: int = Field(description="Number of trades in the block window before slicing")
    hasMore: bool
    fromBlock: int = Field(description="First block scanned")
    toBlock: int = Field(description="Last block scanned")
