from .curve_service import CurveService
from .quote_service import QuoteService
from .trade_service import TradeService
from .history_service import HistoryService
from .token_service import TokenService

__all__ = [
    "CurveService",
    "QuoteService",
    "TradeService",
    "HistoryService",
    "TokenService",
]
