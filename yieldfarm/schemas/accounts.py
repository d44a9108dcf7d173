"""Data contracts for registration, login and account lookups."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from yieldfarm.models import Investment, PublicAccount


class Credentials(BaseModel):
    """Body of /register and /login; emptiness is checked by the ledger."""

    model_config = ConfigDict(extra="forbid")

    email: str = ""
    password: str = ""


class RegisteredUser(BaseModel):
    id: str
    email: str
    balance: float


class RegisterResponse(BaseModel):
    success: bool = True
    message: str = "Registration successful"
    user: RegisteredUser


class LoggedInUser(BaseModel):
    id: str
    email: str
    balance: float
    totalEarnings: float
    investments: List[Investment] = Field(default_factory=list)


class LoginResponse(BaseModel):
    success: bool = True
    user: LoggedInUser


class UserResponse(BaseModel):
    user: PublicAccount
    weeklyGains: float


class UsersResponse(BaseModel):
    users: List[PublicAccount]
