"""Tests for quote math and the quote service."""

import asyncio

import pytest

from curve_engine.errors import InsufficientInput, InvalidSlippage, PrecisionError
from curve_engine.services.quote_service import (
    DEFAULT_SLIPPAGE_BPS,
    QuoteService,
    buy_tokens_out,
    min_output,
    sell_eth_out,
    validate_slippage,
)
from curve_engine.units import to_fixed_point

from conftest import CURVE, ETH


class TestBuyFormula:
    def test_concrete_scenario(self):
        # 10 ETH / 1,000,000 tokens, 1 ETH in
        tokens = buy_tokens_out(ETH, 10 * ETH, 1_000_000 * ETH)
        assert tokens == ETH * 1_000_000 * ETH // (11 * ETH)
        assert tokens // ETH == 90_909

    def test_integer_truncation(self):
        assert buy_tokens_out(1, 2, 3) == 1
        assert buy_tokens_out(2, 3, 10) == 4

    @pytest.mark.parametrize("eth_in,eth_reserve,token_reserve", [
        (1, 1, 1),
        (ETH, 10 * ETH, 1_000_000 * ETH),
        (10 ** 30, 1, 10 ** 27),
        (12345, 67890, 10 ** 24),
    ])
    def test_output_below_reserve(self, eth_in, eth_reserve, token_reserve):
        assert buy_tokens_out(eth_in, eth_reserve, token_reserve) < token_reserve

    def test_monotonic_in_input(self):
        eth_reserve, token_reserve = 10 * ETH, 1_000_000 * ETH
        previous = 0
        for eth_in in range(ETH // 100, 5 * ETH, ETH // 7):
            tokens = buy_tokens_out(eth_in, eth_reserve, token_reserve)
            assert tokens >= previous
            previous = tokens

    def test_tiny_increments_may_not_increase_output(self):
        # Truncation makes the curve flat at the smallest unit
        assert buy_tokens_out(1, 10 ** 30, 10) == buy_tokens_out(2, 10 ** 30, 10) == 0

    def test_zero_input_rejected(self):
        with pytest.raises(InsufficientInput):
            buy_tokens_out(0, ETH, ETH)


class TestSellFormula:
    def test_concrete_scenario(self):
        token_in = 100_000 * ETH
        gross, fee, net = sell_eth_out(token_in, 10 * ETH, 1_000_000 * ETH, 100)
        assert gross == token_in * 10 * ETH // (1_100_000 * ETH)
        assert str(gross).startswith("909090909090909090")
        assert fee == gross * 100 // 10_000
        assert net == gross - fee
        assert net <= gross

    def test_zero_fee(self):
        gross, fee, net = sell_eth_out(ETH, ETH, ETH, 0)
        assert fee == 0
        assert net == gross == ETH // 2

    def test_monotonic_in_input(self):
        previous = 0
        for token_in in range(ETH, 200_000 * ETH, 9_999 * ETH):
            _, _, net = sell_eth_out(token_in, 10 * ETH, 1_000_000 * ETH, 100)
            assert net >= previous
            previous = net

    def test_zero_input_rejected(self):
        with pytest.raises(InsufficientInput):
            sell_eth_out(0, ETH, ETH, 100)


class TestSlippage:
    def test_default(self):
        assert validate_slippage(None) == DEFAULT_SLIPPAGE_BPS == 250

    @pytest.mark.parametrize("bps", [0, 1, 250, 5000])
    def test_accepted_range(self, bps):
        assert validate_slippage(bps) == bps

    @pytest.mark.parametrize("bps", [-1, 5001, 10_000, 2.5, True, "250"])
    def test_rejected(self, bps):
        with pytest.raises(InvalidSlippage):
            validate_slippage(bps)

    def test_min_output_from_slippage(self):
        assert min_output(1_000_000, 250) == 975_000
        assert min_output(1_000_000, 0) == 1_000_000
        assert min_output(1_000_000, 5000) == 500_000

    def test_min_output_truncates(self):
        assert min_output(999, 250) == 974

    def test_supplied_minimum_wins_when_larger(self):
        assert min_output(1_000_000, 250, supplied_minimum=990_000) == 990_000
        assert min_output(1_000_000, 250, supplied_minimum=100) == 975_000


class TestQuoteService:
    def test_buy_quote(self, gateway):
        service = QuoteService(gateway)
        quote = asyncio.run(service.get_buy_quote(CURVE, "1"))

        tokens = buy_tokens_out(ETH, 10 * ETH, 1_000_000 * ETH)
        assert to_fixed_point(quote.tokensOut) == tokens
        assert quote.ethAmount == "1.0"
        assert quote.slippageBps == 250
        assert to_fixed_point(quote.minTokens) == tokens * 9750 // 10_000
        assert quote.blockNumber == gateway.block_number
        assert quote.curve == CURVE
        assert quote.pricePerToken.startswith("0.000011")

    def test_sell_quote_is_net_of_fee(self, gateway):
        service = QuoteService(gateway)
        quote = asyncio.run(service.get_sell_quote(CURVE, "100000", slippage_bps=100))

        gross, fee, net = sell_eth_out(100_000 * ETH, 10 * ETH, 1_000_000 * ETH, 100)
        assert to_fixed_point(quote.ethOutGross) == gross
        assert to_fixed_point(quote.fee) == fee
        assert to_fixed_point(quote.ethOut) == net
        assert to_fixed_point(quote.minEth) == net * 9900 // 10_000
        assert quote.slippageBps == 100

    def test_quote_reads_state_fresh_each_time(self, gateway):
        service = QuoteService(gateway)
        first = asyncio.run(service.get_buy_quote(CURVE, "1"))
        gateway.curve_state["ethReserve"] = 20 * ETH
        second = asyncio.run(service.get_buy_quote(CURVE, "1"))

        assert to_fixed_point(second.tokensOut) < to_fixed_point(first.tokensOut)
        assert len(gateway.calls_to("get_curve_state_raw")) == 2

    def test_invalid_slippage_rejected_before_any_read(self, gateway):
        service = QuoteService(gateway)
        with pytest.raises(InvalidSlippage):
            asyncio.run(service.get_buy_quote(CURVE, "1", slippage_bps=6000))
        assert gateway.calls == []

    def test_malformed_amount_rejected_before_any_read(self, gateway):
        service = QuoteService(gateway)
        with pytest.raises(PrecisionError):
            asyncio.run(service.get_sell_quote(CURVE, "-5"))
        assert gateway.calls == []
