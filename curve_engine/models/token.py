"""ERC-20 token read models."""

from pydantic import BaseModel, ConfigDict


class TokenInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tokenAddress: str
    name: str
    symbol: str
    decimals: int
    totalSupply: str


class TokenBalance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tokenAddress: str
    userAddress: str
    balance: str


class TokenAllowance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tokenAddress: str
    userAddress: str
    spenderAddress: str
    allowance: str
