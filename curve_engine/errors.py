"""Error taxonomy for the bonding-curve trading engine."""

from typing import Optional


class CurveEngineError(Exception):
    """Base class for all errors raised by the trading engine."""


class InvalidCredential(CurveEngineError):
    """Secret material is neither a raw private key nor a valid seed phrase."""


class PhaseError(CurveEngineError):
    """A trade was attempted on a curve that is no longer in the bonding phase."""


class InvalidSlippage(CurveEngineError):
    """Slippage tolerance outside the accepted 0-5000 bps range."""


class PrecisionError(CurveEngineError):
    """A decimal amount is malformed, non-finite or negative."""


class InsufficientInput(CurveEngineError):
    """Trade input is zero or below the curve's minimum contribution."""


class InvalidAddress(CurveEngineError):
    """A string is not a valid 20-byte hex address."""


class RpcFailure(CurveEngineError):
    """Network or provider fault while talking to the JSON-RPC endpoint."""


class TransactionReverted(CurveEngineError):
    """
    On-chain execution failure.

    Raised both for receipts with a failed status and for reverts detected
    while the transaction was being built (e.g. slippage bound exceeded).
    """

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash
