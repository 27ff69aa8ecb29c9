from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from osintsim.config import load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "OSINTSIM_CONFIG",
        "OSINTSIM_LOG_LEVEL",
        "OSINTSIM_MIN_TARGET_LENGTH",
        "OSINTSIM_RAIN_CELL_SIZE",
        "OSINTSIM_SCAN_TICK_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults(tmp_path: Path) -> None:
    settings = load_settings(env_path=tmp_path / "missing.env")
    assert settings.min_target_length == 5
    assert settings.rain_cell_size == 14
    assert settings.scan_tick_seconds == 0.15


def test_yaml_values_are_loaded(tmp_path: Path) -> None:
    cfg = tmp_path / "osintsim.yaml"
    cfg.write_text("min_target_length: 8\nrain_cell_size: 20\n", encoding="utf-8")

    settings = load_settings(yaml_path=cfg, env_path=tmp_path / "missing.env")

    assert settings.min_target_length == 8
    assert settings.rain_config().cell_size == 20
    assert settings.scan_config().min_target_length == 8


def test_dotenv_overrides_yaml_and_os_env_overrides_dotenv(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    cfg = tmp_path / "osintsim.yaml"
    cfg.write_text("min_target_length: 8\nlog_level: DEBUG\n", encoding="utf-8")
    env = tmp_path / ".env"
    env.write_text(
        f"OSINTSIM_CONFIG={cfg}\nOSINTSIM_MIN_TARGET_LENGTH=6\nOSINTSIM_LOG_LEVEL=WARNING\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("OSINTSIM_LOG_LEVEL", "ERROR")

    settings = load_settings(env_path=env)

    assert settings.min_target_length == 6
    assert settings.log_level == "ERROR"


def test_invalid_value_raises_validation_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OSINTSIM_RAIN_CELL_SIZE", "0")
    with pytest.raises(ValidationError):
        load_settings(env_path=tmp_path / "missing.env")


def test_scan_config_carries_pacing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OSINTSIM_SCAN_TICK_SECONDS", "0")
    scan = load_settings(env_path=tmp_path / "missing.env").scan_config()
    assert scan.tick_seconds == 0.0
    assert scan.completion_delay_seconds == 0.5
