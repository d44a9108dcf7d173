from __future__ import annotations

from math import isclose

from flask.testing import FlaskClient

from yieldfarm.config import AppSettings
from yieldfarm.core.apy import apy
from yieldfarm.core.errors import PersistenceError
from yieldfarm.core.ledger import Ledger
from yieldfarm.core.store import MemoryStore
from yieldfarm.app import create_app


def credentials() -> dict:
    return {"email": "saver@example.com", "password": "hunter2"}


def investment_payload(user_id: str, **overrides) -> dict:
    payload = {
        "userId": user_id,
        "amount": 1000,
        "lockPeriod": 12,
        "compoundType": "monthly",
        "transactionHash": "0xfeed",
    }
    payload.update(overrides)
    return payload


def register(client: FlaskClient) -> str:
    resp = client.post("/api/register", json=credentials())
    assert resp.status_code == 200
    return resp.get_json()["user"]["id"]


def test_register_returns_public_user(client: FlaskClient):
    resp = client.post("/api/register", json=credentials())

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert set(body["user"]) == {"id", "email", "balance"}
    assert body["user"]["email"] == "saver@example.com"
    assert body["user"]["balance"] == 0


def test_register_twice_returns_400(client: FlaskClient):
    register(client)
    resp = client.post("/api/register", json=credentials())

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "User already exists"}


def test_register_without_password_returns_400(client: FlaskClient):
    resp = client.post("/api/register", json={"email": "saver@example.com"})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Email and password are required"


def test_login_returns_investments(client: FlaskClient):
    user_id = register(client)
    client.post("/api/invest", json=investment_payload(user_id))

    resp = client.post("/api/login", json=credentials())

    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert set(user) == {"id", "email", "balance", "totalEarnings", "investments"}
    assert user["id"] == user_id
    assert len(user["investments"]) == 1


def test_login_failures(client: FlaskClient):
    register(client)

    wrong = client.post("/api/login", json={"email": "saver@example.com", "password": "nope"})
    missing = client.post("/api/login", json={"email": "nobody@example.com", "password": "nope"})

    assert wrong.status_code == 401
    assert wrong.get_json() == {"error": "Invalid password"}
    assert missing.status_code == 404
    assert missing.get_json() == {"error": "User not found"}


def test_invest_stamps_apy_and_updates_balance(client: FlaskClient):
    user_id = register(client)

    resp = client.post("/api/invest", json=investment_payload(user_id, amount="2500", lockPeriod=24))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["newBalance"] == 2500
    investment = body["investment"]
    assert isclose(investment["apy"], apy(24))
    assert investment["status"] == "active"
    assert investment["lockPeriod"] == 24
    assert investment["totalEarned"] == 0


def test_invest_defaults_to_monthly(client: FlaskClient):
    user_id = register(client)
    payload = investment_payload(user_id)
    del payload["compoundType"]

    resp = client.post("/api/invest", json=payload)

    assert resp.status_code == 200
    assert resp.get_json()["investment"]["compoundType"] == "monthly"


def test_invest_validation(client: FlaskClient):
    user_id = register(client)

    too_small = client.post("/api/invest", json=investment_payload(user_id, amount=499))
    no_hash = client.post("/api/invest", json=investment_payload(user_id, transactionHash=""))
    bad_term = client.post("/api/invest", json=investment_payload(user_id, lockPeriod=36))
    unknown = client.post("/api/invest", json=investment_payload("user_missing"))
    malformed = client.post("/api/invest", json=investment_payload(user_id, amount="lots"))

    assert too_small.status_code == 400
    assert "between 500 and 1,000,000" in too_small.get_json()["error"]
    assert no_hash.status_code == 400
    assert bad_term.status_code == 400
    assert unknown.status_code == 404
    assert malformed.status_code == 400
    assert "detail" in malformed.get_json()

    balance = client.get(f"/api/user/{user_id}").get_json()["user"]["balance"]
    assert balance == 0


def test_calculate_monthly(client: FlaskClient):
    resp = client.post("/api/calculate", json={"amount": 1000, "lockPeriod": 3, "compoundType": "monthly"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert isclose(body["apy"], 30.0)
    assert isclose(body["finalAmount"], 1000 * 1.30**3)
    assert isclose(body["interest"], 1000 * 1.30**3 - 1000)
    assert body["lockPeriod"] == 3


def test_calculate_simple(client: FlaskClient):
    resp = client.post("/api/calculate", json={"amount": 1000, "lockPeriod": 24, "compoundType": "simple"})

    body = resp.get_json()
    assert isclose(body["apy"], 200.0)
    assert isclose(body["finalAmount"], 5000.0)


def test_calculate_rejects_bad_amount(client: FlaskClient):
    resp = client.post("/api/calculate", json={"amount": 100, "lockPeriod": 12})

    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_user_view_hides_password_and_reports_weekly_gains(client: FlaskClient):
    user_id = register(client)
    client.post("/api/invest", json=investment_payload(user_id, amount=5200, lockPeriod=3))

    resp = client.get(f"/api/user/{user_id}")

    assert resp.status_code == 200
    body = resp.get_json()
    assert "password" not in body["user"]
    assert len(body["user"]["transactions"]) == 1
    assert isclose(body["weeklyGains"], 5200 * 0.30 / 52)


def test_unknown_user_returns_404(client: FlaskClient):
    resp = client.get("/api/user/user_missing")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "User not found"}


def test_update_earnings_credits_balance(client: FlaskClient):
    user_id = register(client)
    client.post("/api/invest", json=investment_payload(user_id, amount=36_500, lockPeriod=3))

    resp = client.post("/api/update-earnings")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["investments"] == 1
    assert isclose(body["totalEarned"], 30.0)

    user = client.get(f"/api/user/{user_id}").get_json()["user"]
    assert isclose(user["balance"], 36_530.0)
    assert isclose(user["totalEarnings"], 30.0)
    assert len(user["investments"][0]["earningsHistory"]) == 1


def test_update_earnings_weekly_period(client: FlaskClient):
    user_id = register(client)
    client.post("/api/invest", json=investment_payload(user_id, amount=5200, lockPeriod=3))

    resp = client.post("/api/update-earnings", json={"period": "weekly"})

    assert isclose(resp.get_json()["totalEarned"], 30.0)


def test_users_listing_is_sanitized(client: FlaskClient):
    register(client)

    users = client.get("/api/users").get_json()["users"]

    assert len(users) == 1
    assert "password" not in users[0]


def test_wallet_address(client: FlaskClient):
    resp = client.get("/api/wallet-address")

    assert resp.status_code == 200
    assert resp.get_json() == {"address": "0x71C7656EC7ab88b098defB751B7401B5f6d897AB"}


def test_capacity_limit_from_settings():
    app = create_app(AppSettings(STORE="memory", MAX_ACCOUNTS=1))
    with app.test_client() as client:
        first = client.post("/api/register", json=credentials())
        second = client.post("/api/register", json={"email": "other@example.com", "password": "pw"})

    assert first.status_code == 200
    assert second.status_code == 400
    assert "Maximum user limit" in second.get_json()["error"]


def test_persistence_failure_returns_500():
    class BrokenStore(MemoryStore):
        def save(self, store):
            raise PersistenceError()

    app = create_app(AppSettings(STORE="memory"), ledger=Ledger(BrokenStore()))
    with app.test_client() as client:
        resp = client.post("/api/register", json=credentials())

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to save data"}


def test_calculate_defaults_to_simple(client: FlaskClient):
    resp = client.post("/api/calculate", json={"amount": 1000, "lockPeriod": 12})

    assert resp.status_code == 200
    body = resp.get_json()
    assert isclose(body["finalAmount"], 1000 * (1 + apy(12)))
    assert isclose(body["finalAmount"], 2028.57, abs_tol=0.01)


def test_calculate_overflowing_term_returns_400(client: FlaskClient):
    resp = client.post("/api/calculate", json={"amount": 1000, "lockPeriod": 700, "compoundType": "monthly"})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Projection exceeds representable range"}


def test_new_balance_includes_prior_earnings(client: FlaskClient):
    user_id = register(client)
    client.post("/api/invest", json=investment_payload(user_id, amount=36_500, lockPeriod=3))
    client.post("/api/update-earnings")

    resp = client.post("/api/invest", json=investment_payload(user_id, amount=1000))

    assert isclose(resp.get_json()["newBalance"], 36_500 + 30.0 + 1000)
    assert isclose(resp.get_json()["newBalance"], client.get(f"/api/user/{user_id}").get_json()["user"]["balance"])
