from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from yieldfarm.core.projection import CompoundType

DEFAULT_WALLET_ADDRESS = "0x71C7656EC7ab88b098defB751B7401B5f6d897AB"


class EarningRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    periodIndex: int = Field(ge=0)
    earned: float = Field(ge=0)
    timestamp: datetime


class Transaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["deposit"] = "deposit"
    amount: float = Field(ge=0)
    timestamp: datetime
    hash: str


class Investment(BaseModel):
    id: str
    userId: str
    amount: float = Field(ge=500, le=1_000_000)
    lockPeriod: int = Field(ge=3, le=24)
    compoundType: CompoundType = "monthly"
    # fixed at creation, never recomputed
    apy: float
    transactionHash: str
    startDate: datetime
    endDate: datetime
    status: Literal["active", "closed"] = "active"
    totalEarned: float = Field(default=0.0, ge=0)
    earningsHistory: List[EarningRecord] = Field(default_factory=list)


class PublicAccount(BaseModel):
    """Account as returned to callers: everything except the credential."""

    id: str
    email: str
    createdAt: datetime
    lastLogin: Optional[datetime] = None
    balance: float = Field(default=0.0, ge=0)
    totalEarnings: float = Field(default=0.0, ge=0)
    investments: List[Investment] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    isActive: bool = True


class Account(PublicAccount):
    password: str

    def public(self) -> PublicAccount:
        return PublicAccount.model_validate(self.model_dump(exclude={"password"}))


class StoreSettings(BaseModel):
    wallet_address: str = DEFAULT_WALLET_ADDRESS


class Store(BaseModel):
    """The whole persisted document."""

    accounts: List[Account] = Field(default_factory=list)
    settings: StoreSettings = Field(default_factory=StoreSettings)

    def find_by_id(self, account_id: str) -> Optional[Account]:
        return next((account for account in self.accounts if account.id == account_id), None)

    def find_by_email(self, email: str) -> Optional[Account]:
        return next((account for account in self.accounts if account.email == email), None)
