# file: osintsim/config.py
"""
Configuration loader.

Design goals:
- Support `.env` for local development.
- Support YAML for tuning the scan pacing and the background animation.
- Validate configuration with pydantic.

Precedence (highest to lowest):
1. OS environment variables
2. `.env` values
3. YAML config file values
4. Code defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, field_validator
from pydantic import ConfigDict as PydanticConfigDict

from osintsim.animation.rain import DEFAULT_GLYPHS, RainConfig
from osintsim.core.scan import ScanConfig
from osintsim.core.target import DEFAULT_MIN_TARGET_LENGTH


class OsintsimSettings(BaseModel):
    model_config = PydanticConfigDict(extra="ignore")

    # General
    log_level: str = "INFO"
    json_logging: bool = False

    # Scan flow
    min_target_length: int = Field(default=DEFAULT_MIN_TARGET_LENGTH, ge=1)
    scan_tick_seconds: float = Field(default=0.15, ge=0)
    scan_completion_delay_seconds: float = Field(default=0.5, ge=0)
    scan_log_probability: float = Field(default=0.3, ge=0, le=1)

    # Background animation
    rain_enabled: bool = True
    rain_cell_size: int = Field(default=14, gt=0)
    rain_fps: float = Field(default=60.0, gt=0)
    rain_glyphs: str = DEFAULT_GLYPHS
    rain_accent_color: str = "#00ff00"
    rain_highlight_color: str = "#ffffff"
    rain_highlight_probability: float = Field(default=0.05, ge=0, le=1)
    rain_reset_probability: float = Field(default=0.025, ge=0, le=1)

    # Export
    export_scale: int = Field(default=2, ge=1, le=8)

    @field_validator("rain_glyphs")
    @classmethod
    def _glyphs_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("rain_glyphs must not be empty")
        return value

    def scan_config(self) -> ScanConfig:
        return ScanConfig(
            tick_seconds=self.scan_tick_seconds,
            completion_delay_seconds=self.scan_completion_delay_seconds,
            log_probability=self.scan_log_probability,
            min_target_length=self.min_target_length,
        )

    def rain_config(self) -> RainConfig:
        return RainConfig(
            cell_size=self.rain_cell_size,
            glyphs=self.rain_glyphs,
            accent_color=self.rain_accent_color,
            highlight_color=self.rain_highlight_color,
            highlight_probability=self.rain_highlight_probability,
            reset_probability=self.rain_reset_probability,
            fps=self.rain_fps,
        )


_ENV_MAP: dict[str, str] = {
    "OSINTSIM_LOG_LEVEL": "log_level",
    "OSINTSIM_JSON_LOGGING": "json_logging",
    "OSINTSIM_MIN_TARGET_LENGTH": "min_target_length",
    "OSINTSIM_SCAN_TICK_SECONDS": "scan_tick_seconds",
    "OSINTSIM_SCAN_COMPLETION_DELAY_SECONDS": "scan_completion_delay_seconds",
    "OSINTSIM_SCAN_LOG_PROBABILITY": "scan_log_probability",
    "OSINTSIM_RAIN_ENABLED": "rain_enabled",
    "OSINTSIM_RAIN_CELL_SIZE": "rain_cell_size",
    "OSINTSIM_RAIN_FPS": "rain_fps",
    "OSINTSIM_RAIN_GLYPHS": "rain_glyphs",
    "OSINTSIM_RAIN_ACCENT_COLOR": "rain_accent_color",
    "OSINTSIM_RAIN_HIGHLIGHT_COLOR": "rain_highlight_color",
    "OSINTSIM_RAIN_HIGHLIGHT_PROBABILITY": "rain_highlight_probability",
    "OSINTSIM_RAIN_RESET_PROBABILITY": "rain_reset_probability",
    "OSINTSIM_EXPORT_SCALE": "export_scale",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return raw if isinstance(raw, dict) else {}


def _read_dotenv(path: Path) -> dict[str, str]:
    # dotenv_values only parses; os.environ is left alone.
    return {k: v for k, v in dotenv_values(path).items() if isinstance(v, str)}


def _overlay_env(target: dict[str, Any], env: dict[str, str]) -> None:
    for env_key, field_name in _ENV_MAP.items():
        if env_key in env:
            target[field_name] = env[env_key]


def load_settings(
    *, yaml_path: Path | None = None, env_path: Path | None = None
) -> OsintsimSettings:
    """
    Load settings from YAML and .env, with OS env overrides.

    Args:
        yaml_path: Optional YAML config path. Falls back to `OSINTSIM_CONFIG`
            (OS env first, then .env).
        env_path: Optional .env path (default: `.env` if present).

    Raises:
        pydantic.ValidationError: if a value fails validation.
    """

    data: dict[str, Any] = {}

    if env_path is None:
        maybe = Path(".env")
        env_path = maybe if maybe.exists() else None

    dotenv = _read_dotenv(env_path) if env_path is not None and env_path.exists() else {}

    if yaml_path is None:
        cfg = os.environ.get("OSINTSIM_CONFIG") or dotenv.get("OSINTSIM_CONFIG")
        if cfg:
            yaml_path = Path(cfg)

    if yaml_path is not None and yaml_path.exists():
        data.update(_read_yaml(yaml_path))

    if dotenv:
        _overlay_env(data, dotenv)

    os_env: dict[str, str] = {k: v for k, v in os.environ.items() if k in _ENV_MAP}
    _overlay_env(data, os_env)

    return OsintsimSettings.model_validate(data)
