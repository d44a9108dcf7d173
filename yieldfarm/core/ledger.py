"""
Account ledger.

Every mutating operation is a load -> mutate -> save cycle over the injected
store, serialized by one ledger-wide lock so balance updates are never lost.
When any step raises, the loaded document is dropped and nothing is saved.
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, List, Optional, Tuple

from pydantic import BaseModel
from werkzeug.security import check_password_hash, generate_password_hash

from yieldfarm.core import accrual
from yieldfarm.core.apy import MAX_TERM_MONTHS, MIN_TERM_MONTHS, apy
from yieldfarm.core.errors import (
    AccountDisabled,
    AccountNotFound,
    CapacityExceeded,
    DuplicateEmail,
    InvalidCredential,
    InvalidTerm,
    MissingField,
    MissingReference,
)
from yieldfarm.core.projection import CompoundType, validate_amount, validate_mode, validate_term
from yieldfarm.core.store import StoreBackend
from yieldfarm.models import Account, Investment, PublicAccount, Store, Transaction

logger = logging.getLogger(__name__)

# a "month" of lock time when computing the end date
DAYS_PER_MONTH = 30


class AccrualSummary(BaseModel):
    accounts: int
    investments: int
    total_earned: float


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ledger:
    def __init__(
        self,
        store: StoreBackend,
        max_accounts: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self.max_accounts = max_accounts
        self._clock = clock or _utcnow
        self._lock = threading.RLock()

    @contextmanager
    def _mutation(self) -> Iterator[Store]:
        with self._lock:
            store = self._store.load()
            yield store
            self._store.save(store)

    def _snapshot(self) -> Store:
        with self._lock:
            return self._store.load()

    @staticmethod
    def _require(store: Store, account_id: str) -> Account:
        account = store.find_by_id(account_id)
        if account is None:
            raise AccountNotFound()
        return account

    def register(self, email: str, password: str) -> PublicAccount:
        if not email or not password:
            raise MissingField("Email and password are required")

        with self._mutation() as store:
            if store.find_by_email(email) is not None:
                logger.warning("Registration rejected, email already in use", extra={"action": "register"})
                raise DuplicateEmail()
            if self.max_accounts is not None and len(store.accounts) >= self.max_accounts:
                raise CapacityExceeded(f"Maximum user limit reached ({self.max_accounts} users)")

            now = self._clock()
            account = Account(
                id=_new_id("user"),
                email=email,
                password=generate_password_hash(password),
                createdAt=now,
                lastLogin=now,
            )
            store.accounts.append(account)

        logger.info("New user registered", extra={"user_id": account.id, "action": "register"})
        return account.public()

    def authenticate(self, email: str, password: str) -> PublicAccount:
        if not email or not password:
            raise MissingField("Email and password are required")

        with self._mutation() as store:
            account = store.find_by_email(email)
            if account is None:
                raise AccountNotFound()
            if not account.isActive:
                raise AccountDisabled()
            if not check_password_hash(account.password, password):
                logger.warning("Login rejected, bad password", extra={"user_id": account.id, "action": "login"})
                raise InvalidCredential()
            account.lastLogin = self._clock()

        logger.info("User logged in", extra={"user_id": account.id, "action": "login"})
        return account.public()

    def create_investment(
        self,
        account_id: str,
        principal: float,
        term_months: int,
        mode: CompoundType = "monthly",
        tx_reference: str = "",
    ) -> Tuple[Investment, float]:
        """Returns the stored investment and the balance right after the deposit."""
        principal = validate_amount(principal)
        term_months = validate_term(term_months)
        if not MIN_TERM_MONTHS <= term_months <= MAX_TERM_MONTHS:
            raise InvalidTerm()
        mode = validate_mode(mode)
        if not tx_reference or not tx_reference.strip():
            raise MissingReference()

        with self._mutation() as store:
            account = self._require(store, account_id)
            now = self._clock()
            investment = Investment(
                id=_new_id("inv"),
                userId=account.id,
                amount=principal,
                lockPeriod=term_months,
                compoundType=mode,
                apy=apy(term_months),
                transactionHash=tx_reference,
                startDate=now,
                endDate=now + timedelta(days=term_months * DAYS_PER_MONTH),
            )
            account.investments.append(investment)
            account.transactions.append(
                Transaction(id=_new_id("tx"), amount=principal, timestamp=now, hash=tx_reference)
            )
            # deposit model: balance tracks deposits plus earnings
            account.balance += principal
            new_balance = account.balance

        logger.info(
            "New investment of %.2f USDT for %d months",
            principal,
            term_months,
            extra={"user_id": account_id, "action": "invest"},
        )
        return investment, new_balance

    def get_account(self, account_id: str) -> PublicAccount:
        return self._require(self._snapshot(), account_id).public()

    def list_accounts(self) -> List[PublicAccount]:
        return [account.public() for account in self._snapshot().accounts]

    def wallet_address(self) -> str:
        return self._snapshot().settings.wallet_address

    def accrue_all(self, period_fraction_of_year: float = accrual.DAILY) -> AccrualSummary:
        """One accrual tick over every active investment, saved as a single write."""
        accrual.validate_period(period_fraction_of_year)
        with self._mutation() as store:
            now = self._clock()
            total = 0.0
            investments = 0
            for account in store.accounts:
                total += accrual.accrue_account(account, period_fraction_of_year, now)
                investments += sum(1 for investment in account.investments if investment.status == "active")

        logger.info(
            "Earnings updated for %d investments, %.6f credited",
            investments,
            total,
            extra={"action": "accrue"},
        )
        return AccrualSummary(accounts=len(store.accounts), investments=investments, total_earned=total)
