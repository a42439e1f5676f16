"""Transaction result models for API responses."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class BuyResult(BaseModel):
    """Outcome of a confirmed buyTokens transaction."""
    model_config = ConfigDict(populate_by_name=True)

    txHash: str
    blockNumber: int
    buyer: str
    ethSpent: str
    tokensReceived: str = Field(description="From the TokensPurchased event")
    quotedTokens: str = Field(description="Pre-trade quote, for comparison")
    minTokens: str = Field(description="Slippage bound submitted with the trade")


class SellResult(BaseModel):
    """Outcome of a confirmed sellTokens transaction."""
    model_config = ConfigDict(populate_by_name=True)

    txHash: str
    blockNumber: int
    seller: str
    tokensSold: str
    ethReceived: str = Field(description="From the TokensSold event, net of fee")
    fee: str = Field(description="From the TokensSold event")
    quotedEth: str = Field(description="Pre-trade net quote, for comparison")
    minEth: str = Field(description="Slippage bound submitted with the trade")
    approvalTxHash: Optional[str] = Field(
        default=None,
        description="Approval sent before the sell when allowance was short",
    )


class ApproveResult(BaseModel):
    """Outcome of a confirmed ERC-20 approve transaction."""
    model_config = ConfigDict(populate_by_name=True)

    txHash: str
    blockNumber: int
    tokenAddress: str
    spenderAddress: str
    owner: str
    approvedAmount: str
