"""Data contracts for investing, return previews and earnings accrual."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from yieldfarm.core.projection import CompoundType
from yieldfarm.models import Investment


class InvestRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    userId: str = ""
    amount: float
    lockPeriod: int
    compoundType: CompoundType = "monthly"
    transactionHash: str = ""


class InvestResponse(BaseModel):
    success: bool = True
    investment: Investment
    newBalance: float


class CalculateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: float
    lockPeriod: int
    # the calculator only compounds when asked to
    compoundType: CompoundType = "simple"


class CalculateResponse(BaseModel):
    success: bool = True
    apy: float = Field(..., description="Annual yield as a percentage (30.0 for 30%).")
    finalAmount: float
    interest: float
    lockPeriod: int


class AccrueRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: Literal["daily", "weekly"] = "daily"


class AccrueResponse(BaseModel):
    success: bool = True
    message: str = "Earnings updated for all users"
    accounts: int
    investments: int
    totalEarned: float


class WalletResponse(BaseModel):
    address: str
