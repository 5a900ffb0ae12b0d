"""Configuration management for payslip engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

from payslip_engine.calculators.types import ReliefPolicy, StatutoryRates


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str

    employee_pension_rate: Decimal = Decimal("0.08")
    employer_pension_rate: Decimal = Decimal("0.10")
    health_insurance_rate: Decimal = Decimal("0.05")
    relief_floor: Decimal = Decimal("200000")
    relief_gross_fraction: Decimal = Decimal("0.01")
    relief_additional_fraction: Decimal = Decimal("0.20")

    def statutory_rates(self) -> StatutoryRates:
        return StatutoryRates(
            employee_pension_rate=self.employee_pension_rate,
            employer_pension_rate=self.employer_pension_rate,
            health_insurance_rate=self.health_insurance_rate,
        )

    def relief_policy(self) -> ReliefPolicy:
        return ReliefPolicy(
            floor=self.relief_floor,
            gross_fraction=self.relief_gross_fraction,
            additional_fraction=self.relief_additional_fraction,
        )

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./payslip.db",
            ),
            engine_version=os.getenv("ENGINE_VERSION", "0.1.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("PAYSLIP_LOG_LEVEL", "INFO").upper(),
            employee_pension_rate=Decimal(os.getenv("EMPLOYEE_PENSION_RATE", "0.08")),
            employer_pension_rate=Decimal(os.getenv("EMPLOYER_PENSION_RATE", "0.10")),
            health_insurance_rate=Decimal(os.getenv("HEALTH_INSURANCE_RATE", "0.05")),
            relief_floor=Decimal(os.getenv("RELIEF_FLOOR", "200000")),
            relief_gross_fraction=Decimal(os.getenv("RELIEF_GROSS_FRACTION", "0.01")),
            relief_additional_fraction=Decimal(os.getenv("RELIEF_ADDITIONAL_FRACTION", "0.20")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
