"""Bonding curve state models."""

from enum import IntEnum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class CurvePhase(IntEnum):
    """Curve lifecycle phase as reported by `currentPhase()`."""
    BONDING = 0
    FINALIZED = 1


class CurveState(BaseModel):
    """
    Bonding curve state read at a single block.

    Amounts are integers in smallest units. Never cached: read fresh
    for every operation.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    address: str = Field(description="Bonding curve address (lower-cased)")
    blockNumber: int = Field(description="Block the state was read at")
    rawPhase: int = Field(description="Raw currentPhase() value")
    isFinalized: bool
    ethReserve: int = Field(ge=0)
    tokenReserve: int = Field(ge=0)
    totalEthCollected: int = Field(ge=0)
    virtualEth: int = Field(ge=0)
    bondingTarget: int = Field(ge=0)
    minContribution: int = Field(ge=0)
    poolFeeBps: int = Field(ge=0)
    sellFeeBps: int = Field(ge=0, le=10000)
    uniswapV3Factory: str = Field(description="Uniswap V3 factory used at finalization")
    positionManager: str = Field(description="Uniswap V3 position manager")
    weth: str = Field(description="Wrapped ETH address")
    feeTo: str = Field(description="Recipient of collected fees")

    @property
    def phase(self) -> Optional[CurvePhase]:
        """Effective phase; None if the contract reports an unknown value."""
        if self.isFinalized:
            return CurvePhase.FINALIZED
        try:
            return CurvePhase(self.rawPhase)
        except ValueError:
            return None

    @property
    def is_tradable(self) -> bool:
        return self.phase == CurvePhase.BONDING


class CurveSettings(BaseModel):
    """Curve settings rendered for display."""
    model_config = ConfigDict(populate_by_name=True)

    virtualEth: str
    bondingTarget: str
    minContribution: str
    poolFee: int = Field(description="Pool fee tier")
    sellFee: int = Field(description="Sell fee in basis points")
    uniswapV3Factory: str
    positionManager: str
    weth: str
    feeTo: str


class CurveInfo(BaseModel):
    """
    Curve state plus progress towards the bonding target.

    Two baselines are reported for progress: total ETH collected by the
    contract, and the live ETH reserve net of virtual ETH.
    """
    model_config = ConfigDict(populate_by_name=True)

    address: str
    blockNumber: int
    currentPhase: str = Field(description="'Bonding', 'Finalized' or 'Unknown'")
    isFinalized: bool
    ethReserve: str
    tokenReserve: str
    totalEthCollected: str
    progressPercentage: float = Field(description="Collected / target, capped at 100")
    remainingEthToTarget: str = Field(description="Target minus total collected")
    liveProgressPercentage: float = Field(description="Net reserve / target, capped at 100")
    liveRemainingEthToTarget: str = Field(description="Target minus net reserve")
    settings: CurveSettings
