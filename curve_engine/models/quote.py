"""Quote models for API responses."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class BuyQuote(BaseModel):
    """
    Advisory buy quote.

    Valid only as of `blockNumber`; the executed trade may differ.
    """
    model_config = ConfigDict(populate_by_name=True)

    curve: str
    blockNumber: int = Field(description="Block the reserves were read at")
    ethAmount: str = Field(description="ETH in")
    tokensOut: str = Field(description="Expected tokens out")
    pricePerToken: Optional[str] = Field(default=None, description="ETH per token, display only")
    slippageBps: int = Field(description="Slippage tolerance used for minTokens")
    minTokens: str = Field(description="Minimum tokens accepted at this slippage")


class SellQuote(BaseModel):
    """
    Advisory sell quote.

    `ethOut` is net of the sell fee; `ethOutGross` is before it.
    """
    model_config = ConfigDict(populate_by_name=True)

    curve: str
    blockNumber: int = Field(description="Block the reserves were read at")
    tokenAmount: str = Field(description="Tokens in")
    ethOutGross: str = Field(description="ETH out before fee")
    fee: str = Field(description="Sell fee in ETH")
    ethOut: str = Field(description="ETH out after fee")
    pricePerToken: Optional[str] = Field(default=None, description="Gross ETH per token, display only")
    slippageBps: int = Field(description="Slippage tolerance used for minEth")
    minEth: str = Field(description="Minimum ETH accepted at this slippage")
