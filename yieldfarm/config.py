from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from yieldfarm.models import DEFAULT_WALLET_ADDRESS


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="YIELDFARM_", env_file=".env", extra="ignore")

    STORE: Literal["json", "memory"] = "json"
    # NOTE: /tmp so the serverless deployment can write to it
    DB_PATH: Path = Path("/tmp/data/users.json")
    WALLET_ADDRESS: str = DEFAULT_WALLET_ADDRESS
    # None means unlimited; the public demo ran with 10
    MAX_ACCOUNTS: Optional[int] = None
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
