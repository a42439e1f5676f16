"""Trade service for executing buys, sells and approvals on a bonding curve."""

from typing import Any, Optional
import logging

from curve_engine.addresses import normalize_address
from curve_engine.datasources import ChainGateway
from curve_engine.errors import InsufficientInput, TransactionReverted
from curve_engine.events import TokensPurchasedEvent, TokensSoldEvent, decode_logs
from curve_engine.models import ApproveResult, BuyResult, SellResult
from curve_engine.units import from_fixed_point, to_fixed_point
from curve_engine.wallet import Credential, credential_scope
from .curve_service import CurveService, ensure_tradable
from .quote_service import buy_tokens_out, min_output, sell_eth_out, validate_slippage

logger = logging.getLogger(__name__)


def _require_positive(amount: int, label: str) -> int:
    if amount <= 0:
        raise InsufficientInput(f"{label} must be greater than 0")
    return amount


def _check_receipt(receipt: dict[str, Any], tx_hash: str, label: str) -> None:
    """Elevate a failed receipt status into TransactionReverted."""
    if receipt.get("status") != 1:
        logger.error(f"{label} transaction {tx_hash} reverted in block {receipt.get('blockNumber')}")
        raise TransactionReverted(f"{label} transaction reverted", tx_hash=tx_hash)


class TradeService:
    """
    Service for executing trades against a bonding curve.

    Each operation is a sequential chain: phase check, quote, allowance
    check (sells), submit, confirm, decode receipt. Anything that can be
    rejected locally is rejected before a transaction is submitted.
    """

    def __init__(self, gateway: ChainGateway):
        self.gateway = gateway
        self.curve_service = CurveService(gateway)

    async def buy(
        self,
        curve: str,
        eth_amount: str,
        secret: str,
        min_tokens: Optional[str] = None,
        slippage_bps: Optional[int] = None,
    ) -> BuyResult:
        """
        Buy tokens from the curve.

        Args:
            curve: Bonding curve address
            eth_amount: ETH to spend, as a decimal string
            secret: Private key or seed phrase of the buyer
            min_tokens: Caller-supplied minimum tokens; the larger of this
                and the slippage bound is submitted
            slippage_bps: Slippage tolerance, default 250

        Returns:
            BuyResult with tokens received taken from the TokensPurchased event

        Raises:
            InvalidSlippage, InvalidCredential, PrecisionError,
            InsufficientInput, PhaseError: Before anything is submitted
            TransactionReverted: If the contract rejects the trade
            RpcFailure: On network errors
        """
        slippage = validate_slippage(slippage_bps)
        curve = normalize_address(curve)

        with credential_scope(secret) as credential:
            eth_in = _require_positive(to_fixed_point(eth_amount), "ETH amount")
            supplied_min = to_fixed_point(min_tokens) if min_tokens is not None else 0

            state = await self.curve_service.get_state(curve)
            ensure_tradable(state)

            if eth_in < state.minContribution:
                raise InsufficientInput(
                    f"ETH amount {from_fixed_point(eth_in)} is below the minimum "
                    f"contribution of {from_fixed_point(state.minContribution)}"
                )

            quoted_tokens = buy_tokens_out(eth_in, state.ethReserve, state.tokenReserve)
            final_min_tokens = min_output(quoted_tokens, slippage, supplied_min)

            logger.info(
                f"Buying on {curve}: {from_fixed_point(eth_in)} ETH, quoted "
                f"{from_fixed_point(quoted_tokens)} tokens, min {from_fixed_point(final_min_tokens)}"
            )

            tx_hash = await self.gateway.submit_buy(curve, credential, eth_in, final_min_tokens)
            receipt = await self.gateway.wait_for_receipt(tx_hash)
            _check_receipt(receipt, tx_hash, "Buy")

            tokens_received = 0
            for event in decode_logs(receipt.get("logs", []), address=curve):
                if isinstance(event, TokensPurchasedEvent):
                    tokens_received = event.tokens_out
                    break
            else:
                logger.warning(f"No TokensPurchased event in receipt for {tx_hash}")

            return BuyResult(
                txHash=tx_hash,
                blockNumber=receipt["blockNumber"],
                buyer=credential.address,
                ethSpent=from_fixed_point(eth_in),
                tokensReceived=from_fixed_point(tokens_received),
                quotedTokens=from_fixed_point(quoted_tokens),
                minTokens=from_fixed_point(final_min_tokens),
            )

    async def sell(
        self,
        curve: str,
        token_amount: str,
        secret: str,
        min_eth: Optional[str] = None,
        slippage_bps: Optional[int] = None,
    ) -> SellResult:
        """
        Sell tokens back to the curve.

        If the seller's allowance for the curve is below `token_amount`, an
        approval for exactly `token_amount` is submitted and confirmed first.

        Args:
            curve: Bonding curve address
            token_amount: Tokens to sell, as a decimal string
            secret: Private key or seed phrase of the seller
            min_eth: Caller-supplied minimum ETH; the larger of this and the
                slippage bound is submitted
            slippage_bps: Slippage tolerance, default 250

        Returns:
            SellResult with ETH received and fee taken from the TokensSold event
        """
        slippage = validate_slippage(slippage_bps)
        curve = normalize_address(curve)

        with credential_scope(secret) as credential:
            token_in = _require_positive(to_fixed_point(token_amount), "Token amount")
            supplied_min = to_fixed_point(min_eth) if min_eth is not None else 0

            state = await self.curve_service.get_state(curve)
            ensure_tradable(state)

            _, _, quoted_eth = sell_eth_out(
                token_in, state.ethReserve, state.tokenReserve, state.sellFeeBps
            )
            final_min_eth = min_output(quoted_eth, slippage, supplied_min)

            token = await self.gateway.get_curve_token(curve)
            approval_tx_hash = await self._ensure_allowance(token, curve, token_in, credential)

            logger.info(
                f"Selling on {curve}: {from_fixed_point(token_in)} tokens, quoted "
                f"{from_fixed_point(quoted_eth)} ETH, min {from_fixed_point(final_min_eth)}"
            )

            tx_hash = await self.gateway.submit_sell(curve, credential, token_in, final_min_eth)
            receipt = await self.gateway.wait_for_receipt(tx_hash)
            _check_receipt(receipt, tx_hash, "Sell")

            eth_received = 0
            fee = 0
            for event in decode_logs(receipt.get("logs", []), address=curve):
                if isinstance(event, TokensSoldEvent):
                    eth_received = event.eth_out
                    fee = event.fee
                    break
            else:
                logger.warning(f"No TokensSold event in receipt for {tx_hash}")

            return SellResult(
                txHash=tx_hash,
                blockNumber=receipt["blockNumber"],
                seller=credential.address,
                tokensSold=from_fixed_point(token_in),
                ethReceived=from_fixed_point(eth_received),
                fee=from_fixed_point(fee),
                quotedEth=from_fixed_point(quoted_eth),
                minEth=from_fixed_point(final_min_eth),
                approvalTxHash=approval_tx_hash,
            )

    async def _ensure_allowance(
        self,
        token: str,
        spender: str,
        amount: int,
        credential: Credential,
    ) -> Optional[str]:
        """
        Approve `amount` for `spender` if the current allowance is short.

        Returns:
            The approval tx hash, or None if no approval was needed
        """
        allowance = await self.gateway.get_token_allowance(token, credential.address, spender)
        if allowance >= amount:
            return None

        logger.info(
            f"Insufficient allowance ({from_fixed_point(allowance)} < "
            f"{from_fixed_point(amount)}). Approving tokens..."
        )
        tx_hash = await self.gateway.submit_approve(token, credential, spender, amount)
        receipt = await self.gateway.wait_for_receipt(tx_hash)
        _check_receipt(receipt, tx_hash, "Approval")
        logger.info(f"Token approval confirmed: {tx_hash}")
        return tx_hash

    async def approve(
        self,
        token: str,
        spender: str,
        amount: str,
        secret: str,
    ) -> ApproveResult:
        """
        Grant `spender` an allowance of `amount` tokens.

        Independent of the trade flow.
        """
        token = normalize_address(token)
        spender = normalize_address(spender)

        with credential_scope(secret) as credential:
            amount_units = to_fixed_point(amount)

            tx_hash = await self.gateway.submit_approve(token, credential, spender, amount_units)
            receipt = await self.gateway.wait_for_receipt(tx_hash)
            _check_receipt(receipt, tx_hash, "Approval")

            return ApproveResult(
                txHash=tx_hash,
                blockNumber=receipt["blockNumber"],
                tokenAddress=token,
                spenderAddress=spender,
                owner=credential.address,
                approvedAmount=from_fixed_point(amount_units),
            )
