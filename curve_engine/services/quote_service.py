"""Quote service replicating the bonding curve's constant-product pricing."""

from typing import Optional
import logging

from curve_engine.datasources import ChainGateway
from curve_engine.errors import InsufficientInput, InvalidSlippage
from curve_engine.models import BuyQuote, CurveState, SellQuote
from curve_engine.units import format_ratio, from_fixed_point, to_fixed_point
from .curve_service import CurveService

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10_000
DEFAULT_SLIPPAGE_BPS = 250
MAX_SLIPPAGE_BPS = 5_000


def validate_slippage(slippage_bps: Optional[int]) -> int:
    """
    Resolve a slippage tolerance, applying the default when absent.

    Raises:
        InvalidSlippage: If outside 0-5000 bps
    """
    if slippage_bps is None:
        return DEFAULT_SLIPPAGE_BPS
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise InvalidSlippage(f"Slippage must be an integer number of bps, got {slippage_bps!r}")
    if not 0 <= slippage_bps <= MAX_SLIPPAGE_BPS:
        raise InvalidSlippage(
            f"Slippage must be between 0 and {MAX_SLIPPAGE_BPS} bps, got {slippage_bps}"
        )
    return slippage_bps


def buy_tokens_out(eth_in: int, eth_reserve: int, token_reserve: int) -> int:
    """
    Tokens out for `eth_in`, exactly as the contract computes it.

    tokensOut = ethIn * tokenReserve / (ethReserve + ethIn), truncated.
    """
    if eth_in <= 0:
        raise InsufficientInput("ETH amount must be greater than 0")
    return eth_in * token_reserve // (eth_reserve + eth_in)


def sell_eth_out(
    token_in: int,
    eth_reserve: int,
    token_reserve: int,
    sell_fee_bps: int,
) -> tuple[int, int, int]:
    """
    ETH out for `token_in`, exactly as the contract computes it.

    Returns:
        (gross, fee, net) where fee = gross * sellFeeBps / 10000, truncated
    """
    if token_in <= 0:
        raise InsufficientInput("Token amount must be greater than 0")
    gross = token_in * eth_reserve // (token_reserve + token_in)
    fee = gross * sell_fee_bps // BPS_DENOMINATOR
    return gross, fee, gross - fee


def min_output(
    quote_output: int,
    slippage_bps: int,
    supplied_minimum: int = 0,
) -> int:
    """
    Slippage-bounded minimum output.

    max(supplied_minimum, quote_output * (1 - slippage_bps / 10000)). Integer
    division keeps the bound truncated at the 18th decimal.
    """
    bounded = quote_output * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR
    return max(supplied_minimum, bounded)


class QuoteService:
    """Service for pricing trades against a curve."""

    def __init__(self, gateway: ChainGateway):
        self.gateway = gateway
        self.curve_service = CurveService(gateway)

    def buy_quote(
        self,
        state: CurveState,
        eth_in: int,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> BuyQuote:
        """Buy quote for an already-read state."""
        tokens_out = buy_tokens_out(eth_in, state.ethReserve, state.tokenReserve)
        return BuyQuote(
            curve=state.address,
            blockNumber=state.blockNumber,
            ethAmount=from_fixed_point(eth_in),
            tokensOut=from_fixed_point(tokens_out),
            pricePerToken=format_ratio(eth_in, tokens_out),
            slippageBps=slippage_bps,
            minTokens=from_fixed_point(min_output(tokens_out, slippage_bps)),
        )

    def sell_quote(
        self,
        state: CurveState,
        token_in: int,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> SellQuote:
        """Sell quote for an already-read state."""
        gross, fee, net = sell_eth_out(
            token_in, state.ethReserve, state.tokenReserve, state.sellFeeBps
        )
        return SellQuote(
            curve=state.address,
            blockNumber=state.blockNumber,
            tokenAmount=from_fixed_point(token_in),
            ethOutGross=from_fixed_point(gross),
            fee=from_fixed_point(fee),
            ethOut=from_fixed_point(net),
            pricePerToken=format_ratio(gross, token_in),
            slippageBps=slippage_bps,
            minEth=from_fixed_point(min_output(net, slippage_bps)),
        )

    async def get_buy_quote(
        self,
        curve: str,
        eth_amount: str,
        slippage_bps: Optional[int] = None,
    ) -> BuyQuote:
        """
        Quote a buy against the current reserves.

        Args:
            curve: Bonding curve address
            eth_amount: ETH to spend, as a decimal string
            slippage_bps: Tolerance for the reported minTokens, default 250

        Returns:
            BuyQuote; advisory only, valid as of its block
        """
        slippage = validate_slippage(slippage_bps)
        eth_in = to_fixed_point(eth_amount)
        state = await self.curve_service.get_state(curve)
        logger.info(f"Buy quote on {curve}: {from_fixed_point(eth_in)} ETH at block {state.blockNumber}")
        return self.buy_quote(state, eth_in, slippage)

    async def get_sell_quote(
        self,
        curve: str,
        token_amount: str,
        slippage_bps: Optional[int] = None,
    ) -> SellQuote:
        """
        Quote a sell against the current reserves, net of the sell fee.

        Args:
            curve: Bonding curve address
            token_amount: Tokens to sell, as a decimal string
            slippage_bps: Tolerance for the reported minEth, default 250

        Returns:
            SellQuote; advisory only, valid as of its block
        """
        slippage = validate_slippage(slippage_bps)
        token_in = to_fixed_point(token_amount)
        state = await self.curve_service.get_state(curve)
        logger.info(f"Sell quote on {curve}: {from_fixed_point(token_in)} tokens at block {state.blockNumber}")
        return self.sell_quote(state, token_in, slippage)
