# chaircare/core/settings.py
from decimal import Decimal
from functools import lru_cache
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_RULES_PATH = Path(__file__).resolve().parents[1] / "pricing" / "rules" / "rule_tables.yaml"


class Settings(BaseSettings):
    # === Algemeen ===
    app_env: str = "local"  # local | development | production
    app_name: str = "chaircare-pricing"

    # === Logging ===
    log_level: str = "INFO"

    # === Rule tables ===
    rules_path: str = Field(
        str(DEFAULT_RULES_PATH),
        description="YAML file with bulk rules, tiers, seasonal windows and the price catalogue",
    )
    rule_fetch_timeout_seconds: float = 2.0

    # === Pricing policy ===
    hourly_labor_rate: Decimal = Decimal("350")
    overhead_rate: Decimal = Decimal("0.15")
    free_travel_radius_km: Decimal = Decimal("20")
    travel_block_km: Decimal = Decimal("10")
    travel_fee_per_block: Decimal = Decimal("50")
    urgent_surcharge_percent: Decimal = Decimal("25")
    emergency_surcharge_percent: Decimal = Decimal("50")
    bulk_discount_policy: str = "cumulative"  # cumulative | best_only
    quote_validity_days: int = 7
    target_margin_percent: Decimal = Decimal("35")
    margin_tolerance_percent: Decimal = Decimal("2")

    # === Metrics ===
    metrics_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance met simpele env-overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"
    elif env == "development":
        s.log_level = "DEBUG"

    return s


settings = get_settings()
