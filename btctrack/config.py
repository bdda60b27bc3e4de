"""Configuration models and loaders for btctrack."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class MetaParams(BaseModel):
    name: str = "portfolio"
    description: str | None = None


class CurrencyParams(BaseModel):
    """Quote currency codes as understood by the market data provider."""

    primary: str = Field("usd", min_length=3, description="Primary quote currency code")
    secondary: str = Field("brl", min_length=3, description="Secondary quote currency code")

    @field_validator("primary", "secondary")
    @classmethod
    def lower_code(cls, value: str) -> str:
        return value.strip().lower()


class WindowParams(BaseModel):
    """Lookback windows and history padding."""

    daily_lookback: int = Field(1, ge=1, description="Days back for the daily window")
    weekly_lookback: int = Field(7, ge=1, description="Days back for the weekly window")
    history_padding_days: int = Field(15, ge=0, description="Days of history requested before the first purchase")


class MarketDataParams(BaseModel):
    """CoinGecko request settings."""

    asset: str = "bitcoin"
    base_url: str = "https://api.coingecko.com/api/v3"
    timeout_seconds: float = Field(10.0, gt=0)


class RefreshParams(BaseModel):
    """Periodic quote refresh used by ``btctrack watch``."""

    interval_seconds: float = Field(60.0, gt=0)


class LedgerParams(BaseModel):
    path: Optional[str] = Field(None, description="YAML or CSV ledger file")


class Config(BaseModel):
    """Top-level configuration model."""

    meta: MetaParams = Field(default_factory=MetaParams)
    currencies: CurrencyParams = Field(default_factory=CurrencyParams)
    windows: WindowParams = Field(default_factory=WindowParams)
    market_data: MarketDataParams = Field(default_factory=MarketDataParams)
    refresh: RefreshParams = Field(default_factory=RefreshParams)
    ledger: LedgerParams = Field(default_factory=LedgerParams)


def _deep_update(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_update(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_config_dict() -> Dict[str, Any]:
    """Return the default configuration as a dictionary."""

    return Config().model_dump()


def load_config(path: str | Path | None = None, overrides: Optional[Dict[str, Any]] = None) -> Config:
    """Load configuration from YAML and merge with defaults."""

    base_dict = default_config_dict()
    if path is not None:
        with Path(path).open("r", encoding="utf-8") as handle:
            user_data = yaml.safe_load(handle) or {}
        if not isinstance(user_data, dict):
            raise ValueError(f"Config YAML {path} must map to an object")
        base_dict = _deep_update(base_dict, user_data)
    if overrides:
        base_dict = _deep_update(base_dict, overrides)
    return Config.model_validate(base_dict)


__all__ = [
    "Config",
    "MetaParams",
    "CurrencyParams",
    "WindowParams",
    "MarketDataParams",
    "RefreshParams",
    "LedgerParams",
    "load_config",
]
