"""Request bodies for the transaction endpoints."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class BuyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ethAmount: str = Field(description="ETH to spend", examples=["0.01"])
    minTokens: Optional[str] = Field(default=None, description="Caller-supplied minimum tokens")
    slippageBps: Optional[int] = Field(default=None, description="Slippage tolerance, default 250")
    privateKey: str = Field(repr=False, description="Private key or seed phrase")


class SellRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tokenAmount: str = Field(description="Tokens to sell", examples=["1000"])
    minEth: Optional[str] = Field(default=None, description="Caller-supplied minimum ETH")
    slippageBps: Optional[int] = Field(default=None, description="Slippage tolerance, default 250")
    privateKey: str = Field(repr=False, description="Private key or seed phrase")


class ApproveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    spenderAddress: str
    amount: str = Field(description="Allowance to grant", examples=["1000"])
    privateKey: str = Field(repr=False, description="Private key or seed phrase")
