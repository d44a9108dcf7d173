"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

import pydantic
from flask import Blueprint, current_app, jsonify, request

from yieldfarm.core.accrual import PERIODS, weekly_gains
from yieldfarm.core.errors import LedgerError
from yieldfarm.core.health import get_health
from yieldfarm.core.ledger import Ledger
from yieldfarm.core.projection import quote
from yieldfarm.schemas.accounts import (
    Credentials,
    LoggedInUser,
    LoginResponse,
    RegisteredUser,
    RegisterResponse,
    UserResponse,
    UsersResponse,
)
from yieldfarm.schemas.health import HealthResponse
from yieldfarm.schemas.investments import (
    AccrueRequest,
    AccrueResponse,
    CalculateRequest,
    CalculateResponse,
    InvestRequest,
    InvestResponse,
    WalletResponse,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _ledger() -> Ledger:
    return current_app.extensions["ledger"]


def _payload() -> Dict[str, Any]:
    return request.get_json(force=True, silent=True) or {}


@api_bp.errorhandler(pydantic.ValidationError)
def _handle_validation_error(exc: pydantic.ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"error": "Invalid request", "detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.BAD_REQUEST,
    )


@api_bp.errorhandler(LedgerError)
def _handle_ledger_error(exc: LedgerError):
    if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("Request failed: %s", exc, exc_info=exc)
    return jsonify({"error": str(exc)}), exc.status


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    response = HealthResponse.model_validate(get_health(current_app.config["ENVIRONMENT"]))
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/register")
def register() -> Any:
    credentials = Credentials.model_validate(_payload())
    account = _ledger().register(credentials.email, credentials.password)
    response = RegisterResponse(user=RegisteredUser.model_validate(account.model_dump()))
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/login")
def login() -> Any:
    credentials = Credentials.model_validate(_payload())
    account = _ledger().authenticate(credentials.email, credentials.password)
    response = LoginResponse(user=LoggedInUser.model_validate(account.model_dump()))
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/invest")
def invest() -> Any:
    payload = InvestRequest.model_validate(_payload())
    investment, new_balance = _ledger().create_investment(
        payload.userId,
        payload.amount,
        payload.lockPeriod,
        payload.compoundType,
        payload.transactionHash,
    )
    response = InvestResponse(investment=investment, newBalance=new_balance)
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/calculate")
def calculate() -> Any:
    """Projected returns for the calculator widget; nothing is stored."""
    payload = CalculateRequest.model_validate(_payload())
    result = quote(payload.amount, payload.lockPeriod, payload.compoundType)
    response = CalculateResponse(
        apy=result.apy * 100,
        finalAmount=result.final_amount,
        interest=result.interest,
        lockPeriod=result.term_months,
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/user/<user_id>")
def get_user(user_id: str) -> Any:
    account = _ledger().get_account(user_id)
    response = UserResponse(user=account, weeklyGains=weekly_gains(account))
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/users")
def list_users() -> Any:
    response = UsersResponse(users=_ledger().list_accounts())
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/wallet-address")
def wallet_address() -> Any:
    response = WalletResponse(address=_ledger().wallet_address())
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/update-earnings")
def update_earnings() -> Any:
    """Manual accrual trigger; callers must not fire it twice in one period."""
    payload = AccrueRequest.model_validate(_payload())
    summary = _ledger().accrue_all(PERIODS[payload.period])
    response = AccrueResponse(
        accounts=summary.accounts,
        investments=summary.investments,
        totalEarned=summary.total_earned,
    )
    return jsonify(response.model_dump(mode="json"))
