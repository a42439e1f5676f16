"""Token service for ERC-20 balance, allowance and metadata reads."""

from curve_engine.addresses import normalize_address
from curve_engine.datasources import ChainGateway
from curve_engine.models import TokenAllowance, TokenBalance, TokenInfo
from curve_engine.units import from_fixed_point


class TokenService:
    """Service for reading token state."""

    def __init__(self, gateway: ChainGateway):
        self.gateway = gateway

    async def get_balance(self, token: str, owner: str) -> TokenBalance:
        token = normalize_address(token)
        owner = normalize_address(owner)
        balance = await self.gateway.get_token_balance(token, owner)
        return TokenBalance(
            tokenAddress=token,
            userAddress=owner,
            balance=from_fixed_point(balance),
        )

    async def get_allowance(self, token: str, owner: str, spender: str) -> TokenAllowance:
        token = normalize_address(token)
        owner = normalize_address(owner)
        spender = normalize_address(spender)
        allowance = await self.gateway.get_token_allowance(token, owner, spender)
        return TokenAllowance(
            tokenAddress=token,
            userAddress=owner,
            spenderAddress=spender,
            allowance=from_fixed_point(allowance),
        )

    async def get_token_info(self, token: str) -> TokenInfo:
        """Name, symbol, decimals and total supply of a token."""
        token = normalize_address(token)
        metadata = await self.gateway.get_token_metadata(token)
        decimals = int(metadata["decimals"])
        return TokenInfo(
            tokenAddress=token,
            name=metadata["name"],
            symbol=metadata["symbol"],
            decimals=decimals,
            totalSupply=from_fixed_point(metadata["totalSupply"], decimals),
        )
