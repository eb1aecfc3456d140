"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``MARKET_SIGNALS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The engine and CLI commands receive an ``AppConfig`` instance, never raw
dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class IndicatorConfig(BaseModel):
    """Lookback lengths for the indicator calculator.

    ``ma_window`` changes the moving average the rules compare against, but
    the moving-average reason strings always read "7-day Moving Average";
    they are fixed output constants (see ``SignalReason``).
    """

    model_config = ConfigDict(frozen=True)

    rsi_period: int = 14
    ma_window: int = 7

    @field_validator("rsi_period", "ma_window")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Indicator lookback must be >= 1, got {v}.")
        return v


class ForecastConfig(BaseModel):
    """Forecast window and confidence clamp."""

    model_config = ConfigDict(frozen=True)

    window: int = 7
    confidence_floor: float = 10.0
    confidence_ceiling: float = 98.0

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"window must be >= 1, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_confidence_bounds(self) -> "ForecastConfig":
        if not 0.0 <= self.confidence_floor < self.confidence_ceiling <= 100.0:
            raise ValueError(
                "confidence bounds must satisfy 0 <= floor < ceiling <= 100, got "
                f"floor={self.confidence_floor}, ceiling={self.confidence_ceiling}."
            )
        return self


class SignalConfig(BaseModel):
    """RSI thresholds used by the signal rules."""

    model_config = ConfigDict(frozen=True)

    oversold: float = 30.0
    overbought: float = 70.0

    @model_validator(mode="after")
    def validate_thresholds(self) -> "SignalConfig":
        if not 0.0 <= self.oversold < self.overbought <= 100.0:
            raise ValueError(
                "RSI thresholds must satisfy 0 <= oversold < overbought <= 100, got "
                f"oversold={self.oversold}, overbought={self.overbought}."
            )
        return self


class MarketConfig(BaseModel):
    """Tracked assets.  Labels only; the engine never fetches prices."""

    model_config = ConfigDict(frozen=True)

    assets: list[str] = ["bitcoin", "ethereum", "solana", "cardano"]
    default_asset: str = "bitcoin"

    @model_validator(mode="after")
    def validate_default_asset(self) -> "MarketConfig":
        if self.default_asset not in self.assets:
            raise ValueError(
                f"default_asset '{self.default_asset}' is not in assets {self.assets}."
            )
        return self


class EngineConfig(BaseModel):
    """Memoisation settings for ``SignalEngine``."""

    model_config = ConfigDict(frozen=True)

    cache_size: int = 128

    @field_validator("cache_size")
    @classmethod
    def validate_cache_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"cache_size must be >= 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth."""

    model_config = ConfigDict(frozen=True)

    indicators: IndicatorConfig = IndicatorConfig()
    forecast: ForecastConfig = ForecastConfig()
    signals: SignalConfig = SignalConfig()
    market: MarketConfig = MarketConfig()
    engine: EngineConfig = EngineConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply MARKET_SIGNALS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply MARKET_SIGNALS_* env vars to the raw config dict.

    Supported overrides:
      MARKET_SIGNALS_LOG_LEVEL      → raw["logging"]["level"]
      MARKET_SIGNALS_DEFAULT_ASSET  → raw["market"]["default_asset"]
      MARKET_SIGNALS_DEBUG          → raw["debug"]
    """
    if log_level := os.environ.get("MARKET_SIGNALS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if asset := os.environ.get("MARKET_SIGNALS_DEFAULT_ASSET"):
        raw.setdefault("market", {})["default_asset"] = asset

    if debug := os.environ.get("MARKET_SIGNALS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        indicators=IndicatorConfig(**raw.get("indicators", {})),
        forecast=ForecastConfig(**raw.get("forecast", {})),
        signals=SignalConfig(**raw.get("signals", {})),
        market=MarketConfig(**raw.get("market", {})),
        engine=EngineConfig(**raw.get("engine", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
