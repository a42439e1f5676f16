"""Curve service for reading bonding curve state and progress."""

import logging

from curve_engine.addresses import normalize_address
from curve_engine.datasources import ChainGateway
from curve_engine.errors import PhaseError
from curve_engine.models import CurveInfo, CurvePhase, CurveSettings, CurveState
from curve_engine.units import from_fixed_point

logger = logging.getLogger(__name__)


def _progress(amount: int, target: int) -> float:
    if target == 0:
        return 0.0
    return min(amount * 100 / target, 100.0)


def ensure_tradable(state: CurveState) -> None:
    """
    Reject trades on a curve that has left the bonding phase.

    Raises:
        PhaseError: If the curve is finalized or reports an unknown phase
    """
    phase = state.phase
    if phase == CurvePhase.BONDING:
        return
    name = "Finalized" if phase == CurvePhase.FINALIZED else "Unknown"
    raise PhaseError(f"Token is not in bonding phase. Current phase: {name}")


class CurveService:
    """Service for reading curve state."""

    def __init__(self, gateway: ChainGateway):
        self.gateway = gateway

    async def get_state(self, curve: str) -> CurveState:
        """
        Read the current curve state.

        Args:
            curve: Bonding curve address

        Returns:
            CurveState with all values read at the same block
        """
        curve = normalize_address(curve)
        raw = await self.gateway.get_curve_state_raw(curve)
        settings = raw["settings"]
        logger.debug(f"Read state for {curve} at block {raw['blockNumber']}")

        return CurveState(
            address=curve,
            blockNumber=raw["blockNumber"],
            rawPhase=int(raw["currentPhase"]),
            isFinalized=bool(raw["isFinalized"]),
            ethReserve=raw["ethReserve"],
            tokenReserve=raw["tokenReserve"],
            totalEthCollected=raw["totalETHCollected"],
            virtualEth=settings[0],
            bondingTarget=settings[1],
            minContribution=settings[2],
            poolFeeBps=settings[3],
            sellFeeBps=settings[4],
            uniswapV3Factory=str(settings[5]).lower(),
            positionManager=str(settings[6]).lower(),
            weth=str(settings[7]).lower(),
            feeTo=str(settings[8]).lower(),
        )

    async def get_info(self, curve: str) -> CurveInfo:
        """
        Get curve state with progress towards the bonding target.

        Both baselines for "remaining to target" are reported: one from the
        contract's running total of ETH collected, one from the live reserve
        net of virtual ETH. They diverge once sells have happened.
        """
        state = await self.get_state(curve)

        target = state.bondingTarget
        collected = state.totalEthCollected
        net_reserve = max(state.ethReserve - state.virtualEth, 0)

        phase = state.phase
        phase_name = phase.name.capitalize() if phase is not None else "Unknown"

        return CurveInfo(
            address=state.address,
            blockNumber=state.blockNumber,
            currentPhase=phase_name,
            isFinalized=state.isFinalized,
            ethReserve=from_fixed_point(state.ethReserve),
            tokenReserve=from_fixed_point(state.tokenReserve),
            totalEthCollected=from_fixed_point(collected),
            progressPercentage=_progress(collected, target),
            remainingEthToTarget=from_fixed_point(max(target - collected, 0)),
            liveProgressPercentage=_progress(net_reserve, target),
            liveRemainingEthToTarget=from_fixed_point(max(target - net_reserve, 0)),
            settings=CurveSettings(
                virtualEth=from_fixed_point(state.virtualEth),
                bondingTarget=from_fixed_point(target),
                minContribution=from_fixed_point(state.minContribution),
                poolFee=state.poolFeeBps,
                sellFee=state.sellFeeBps,
                uniswapV3Factory=state.uniswapV3Factory,
                positionManager=state.positionManager,
                weth=state.weth,
                feeTo=state.feeTo,
            ),
        )
