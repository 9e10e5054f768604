from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, TypeVar

from dotenv import load_dotenv

from engine.goals import GoalPaceConfig
from engine.income import IncomeEstimationConfig
from engine.payday import PaydayDetectionConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

T = TypeVar("T")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    ledger_id: str = "ldg_main"
    timezone: str = "UTC"
    base_currency: str = "USD"
    payday_tolerance_days: int = 3
    payday_min_confidence: float = 0.5
    goal_pace_ratio: float = 0.9

    def payday_config(self) -> PaydayDetectionConfig:
        return PaydayDetectionConfig(
            tolerance_days=self.payday_tolerance_days,
            min_confidence=self.payday_min_confidence,
        )

    def income_config(self) -> IncomeEstimationConfig:
        return IncomeEstimationConfig(cadence=self.payday_config())

    def goal_pace_config(self) -> GoalPaceConfig:
        return GoalPaceConfig(pace_ratio=self.goal_pace_ratio)


def _env(key: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {key}: {raw!r}") from exc


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        ledger_id=os.getenv("MYBUDGET_LEDGER_ID", "ldg_main"),
        timezone=os.getenv("MYBUDGET_TIMEZONE", "UTC"),
        base_currency=os.getenv("MYBUDGET_BASE_CURRENCY", "USD").upper(),
        payday_tolerance_days=_env("MYBUDGET_PAYDAY_TOLERANCE_DAYS", 3, int),
        payday_min_confidence=_env("MYBUDGET_PAYDAY_MIN_CONFIDENCE", 0.5, float),
        goal_pace_ratio=_env("MYBUDGET_GOAL_PACE_RATIO", 0.9, float),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def configure_logging(settings: Settings | None = None) -> None:
    level_name = (settings.log_level if settings else os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
