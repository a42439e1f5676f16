from .curve import CurvePhase, CurveState, CurveSettings, CurveInfo
from .quote import BuyQuote, SellQuote
from .trade import TradeDirection, TradeRecord, PaginationWindow, TradeHistory
from .transaction import BuyResult, SellResult, ApproveResult
from .token import TokenInfo, TokenBalance, TokenAllowance
from .requests import BuyRequest, SellRequest, ApproveRequest

__all__ = [
    "CurvePhase",
    "CurveState",
    "CurveSettings",
    "CurveInfo",
    "BuyQuote",
    "SellQuote",
    "TradeDirection",
    "TradeRecord",
    "PaginationWindow",
    "TradeHistory",
    "BuyResult",
    "SellResult",
    "ApproveResult",
    "TokenInfo",
    "TokenBalance",
    "TokenAllowance",
    "BuyRequest",
    "SellRequest",
    "ApproveRequest",
]
