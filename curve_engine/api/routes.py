"""API routes for the bonding curve trading service."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from curve_engine.config import Config
from curve_engine.datasources import ChainGateway
from curve_engine.models import (
    ApproveRequest,
    ApproveResult,
    BuyQuote,
    BuyRequest,
    BuyResult,
    CurveInfo,
    PaginationWindow,
    SellQuote,
    SellRequest,
    SellResult,
    TokenAllowance,
    TokenBalance,
    TokenInfo,
    TradeDirection,
    TradeHistory,
    TradeRecord,
)
from curve_engine.services import (
    CurveService,
    HistoryService,
    QuoteService,
    TokenService,
    TradeService,
)
from .dependencies import get_config, get_gateway

router = APIRouter(prefix="/v1")


@router.get("/curves/{curve}", response_model=CurveInfo)
async def get_curve_info(
    curve: str,
    gateway: ChainGateway = Depends(get_gateway),
) -> CurveInfo:
    """
    Get curve state and progress towards the bonding target.

    Returns both progress baselines: total collected and live net reserve.
    """
    service = CurveService(gateway)
    return await service.get_info(curve)


@router.get("/curves/{curve}/quote/buy", response_model=BuyQuote)
async def get_buy_quote(
    curve: str,
    ethAmount: str = Query(
        ...,
        description="ETH to spend",
        examples=["0.01"]
    ),
    slippageBps: Optional[int] = Query(
        None,
        description="Slippage tolerance in basis points (0-5000), default 250"
    ),
    gateway: ChainGateway = Depends(get_gateway),
) -> BuyQuote:
    """
    Quote a buy against current reserves.

    Returns: tokensOut, pricePerToken, minTokens at the requested slippage
    """
    service = QuoteService(gateway)
    return await service.get_buy_quote(curve, ethAmount, slippage_bps=slippageBps)


@router.get("/curves/{curve}/quote/sell", response_model=SellQuote)
async def get_sell_quote(
    curve: str,
    tokenAmount: str = Query(
        ...,
        description="Tokens to sell",
        examples=["1000"]
    ),
    slippageBps: Optional[int] = Query(
        None,
        description="Slippage tolerance in basis points (0-5000), default 250"
    ),
    gateway: ChainGateway = Depends(get_gateway),
) -> SellQuote:
    """
    Quote a sell against current reserves.

    Returns: ethOut (net of fee), ethOutGross, fee, minEth
    """
    service = QuoteService(gateway)
    return await service.get_sell_quote(curve, tokenAmount, slippage_bps=slippageBps)


@router.post("/curves/{curve}/buy", response_model=BuyResult)
async def buy(
    curve: str,
    request: BuyRequest,
    gateway: ChainGateway = Depends(get_gateway),
) -> BuyResult:
    """
    Buy tokens during the bonding phase.

    Waits for confirmation; tokensReceived comes from the TokensPurchased event.
    """
    service = TradeService(gateway)
    return await service.buy(
        curve=curve,
        eth_amount=request.ethAmount,
        secret=request.privateKey,
        min_tokens=request.minTokens,
        slippage_bps=request.slippageBps,
    )


@router.post("/curves/{curve}/sell", response_model=SellResult)
async def sell(
    curve: str,
    request: SellRequest,
    gateway: ChainGateway = Depends(get_gateway),
) -> SellResult:
    """
    Sell tokens during the bonding phase.

    Approves the curve first when the allowance is short.
    """
    service = TradeService(gateway)
    return await service.sell(
        curve=curve,
        token_amount=request.tokenAmount,
        secret=request.privateKey,
        min_eth=request.minEth,
        slippage_bps=request.slippageBps,
    )


@router.get("/curves/{curve}/history", response_model=TradeHistory)
async def get_history(
    curve: str,
    limit: int = Query(50, ge=1, le=1000, description="Page size"),
    offset: int = Query(0, ge=0, description="Trades to skip"),
    direction: Optional[TradeDirection] = Query(
        None,
        description="Filter to 'buy' or 'sell'"
    ),
    gateway: ChainGateway = Depends(get_gateway),
    config: Config = Depends(get_config),
) -> TradeHistory:
    """
    Get trade history for a curve, newest first.

    Rebuilt from event logs in the recent block window on every call;
    latency grows with the number of trades in the window.
    """
    service = HistoryService(gateway, window_blocks=config.history_window_blocks)
    return await service.get_history(
        curve,
        PaginationWindow(limit=limit, offset=offset, direction=direction),
    )


@router.get("/curves/{curve}/history/{trader}", response_model=TradeHistory)
async def get_user_history(
    curve: str,
    trader: str,
    limit: int = Query(50, ge=1, le=1000, description="Page size"),
    offset: int = Query(0, ge=0, description="Trades to skip"),
    gateway: ChainGateway = Depends(get_gateway),
    config: Config = Depends(get_config),
) -> TradeHistory:
    """Get one trader's history for a curve, newest first."""
    service = HistoryService(gateway, window_blocks=config.history_window_blocks)
    return await service.get_user_history(
        curve,
        trader,
        PaginationWindow(limit=limit, offset=offset),
    )


@router.get("/curves/{curve}/recent", response_model=list[TradeRecord])
async def get_recent_trades(
    curve: str,
    count: int = Query(10, ge=1, le=1000, description="Number of trades"),
    gateway: ChainGateway = Depends(get_gateway),
    config: Config = Depends(get_config),
) -> list[TradeRecord]:
    """Get the most recent trades for a curve."""
    service = HistoryService(gateway, window_blocks=config.history_window_blocks)
    return await service.get_recent_trades(curve, count=count)


@router.get("/tokens/{token}", response_model=TokenInfo)
async def get_token_info(
    token: str,
    gateway: ChainGateway = Depends(get_gateway),
) -> TokenInfo:
    """Get token name, symbol, decimals and total supply."""
    service = TokenService(gateway)
    return await service.get_token_info(token)


@router.get("/tokens/{token}/balance/{owner}", response_model=TokenBalance)
async def get_balance(
    token: str,
    owner: str,
    gateway: ChainGateway = Depends(get_gateway),
) -> TokenBalance:
    """Get a user's token balance."""
    service = TokenService(gateway)
    return await service.get_balance(token, owner)


@router.get("/tokens/{token}/allowance/{owner}/{spender}", response_model=TokenAllowance)
async def get_allowance(
    token: str,
    owner: str,
    spender: str,
    gateway: ChainGateway = Depends(get_gateway),
) -> TokenAllowance:
    """Get the allowance `owner` has granted `spender`."""
    service = TokenService(gateway)
    return await service.get_allowance(token, owner, spender)


@router.post("/tokens/{token}/approve", response_model=ApproveResult)
async def approve(
    token: str,
    request: ApproveRequest,
    gateway: ChainGateway = Depends(get_gateway),
) -> ApproveResult:
    """Approve a spender for a token amount."""
    service = TradeService(gateway)
    return await service.approve(
        token=token,
        spender=request.spenderAddress,
        amount=request.amount,
        secret=request.privateKey,
    )
