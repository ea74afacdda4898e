from __future__ import annotations
import os
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5"
    max_tokens: int = 8192
    currency: str = "EUR"
    market_region: str = "Croatia"
    expert_trades: list[str] = [
        "Architect / interior designer: concept design, layout, aesthetics",
        "Structural engineer: removal of load-bearing walls or structural changes",
        "Plumber: all water supply and drainage work",
        "Electrician: wiring, sockets, lighting",
        "Tiler: laying ceramic tiles",
        "Floor layer: parquet, laminate and other floor coverings",
        "Mason / painter / drywaller: masonry, skim coating, painting, drywall",
        "Carpenter: fitted kitchens, wardrobes, custom furniture",
        "General contractor / project manager: turnkey coordination of the whole project",
        "Window and door joiner: replacing windows and doors",
    ]
    system_prompt: str = (
        "You are an experienced apartment renovation project manager and quantity surveyor. "
        "You give realistic quantities and current market prices, you are direct and practical, "
        "and when asked for JSON you return ONLY the JSON with no prose and no code fences."
    )

    @field_validator("anthropic_api_key", mode="after")
    @classmethod
    def require_api_key(cls, v: str) -> str:
        env_val = os.environ.get("ANTHROPIC_API_KEY", v)
        if not env_val:
            raise ValueError("ANTHROPIC_API_KEY environment variable is required")
        return env_val
