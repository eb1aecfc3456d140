"""
Tests for market_signals.cli via typer's CliRunner.

Most tests write their own quiet config (log level WARNING).  One test runs at
INFO and checks ``result.stdout`` separately from stderr, which needs
click >= 8.2 (CliRunner always keeps the two streams apart there).
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from market_signals.cli import app

runner = CliRunner()

_QUIET_TOML = """
[logging]
level = "WARNING"
"""


@pytest.fixture
def quiet_config(tmp_path: Path) -> str:
    path = tmp_path / "default.toml"
    path.write_text(_QUIET_TOML, encoding="utf-8")
    return str(path)


@pytest.fixture
def price_csv(tmp_path: Path, oversold_bounce) -> str:
    path = tmp_path / "prices.csv"
    path.write_text("price\n" + "\n".join(str(p) for p in oversold_bounce) + "\n", encoding="utf-8")
    return str(path)


# ── analyze ───────────────────────────────────────────────────────────────────

class TestAnalyze:
    def test_text_report(self, quiet_config, price_csv):
        result = runner.invoke(app, ["analyze", "--file", price_csv, "--config", quiet_config])
        assert result.exit_code == 0, result.output
        assert "RECOMMENDATION: STRONG BUY" in result.output
        assert "== bitcoin (15 points) ==" in result.output

    def test_asset_label(self, quiet_config, price_csv):
        result = runner.invoke(
            app, ["analyze", "-f", price_csv, "--asset", "ethereum", "--config", quiet_config]
        )
        assert result.exit_code == 0, result.output
        assert "== ethereum" in result.output

    def test_json_report(self, quiet_config, price_csv):
        result = runner.invoke(
            app, ["analyze", "--file", price_csv, "--json", "--config", quiet_config]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["recommendation"]["action"] == "STRONG_BUY"
        assert payload["n_points"] == 15
        assert payload["forecast"]["trend_direction"] == "DOWN"
        assert "predicted_change_pct" in payload["forecast"]
        assert "price_vs_ma_pct" in payload
        assert payload["rsi_zone"] == "OVERSOLD"
        assert payload["recommendation"]["reasons"][0] == "RSI is Oversold (Buy Signal)"

    def test_json_report_parseable_at_info_level(self, tmp_path, price_csv):
        """INFO log lines go to stderr, so stdout is still one JSON document."""
        cfg = tmp_path / "info.toml"
        cfg.write_text('[logging]\nlevel = "INFO"\njson_format = true\n', encoding="utf-8")
        result = runner.invoke(
            app, ["analyze", "--file", price_csv, "--json", "--config", str(cfg)]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["recommendation"]["action"] == "STRONG_BUY"
        assert "Analyzed" not in result.stdout

    def test_missing_file_exits_1(self, quiet_config, tmp_path):
        result = runner.invoke(
            app, ["analyze", "--file", str(tmp_path / "nope.csv"), "--config", quiet_config]
        )
        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_invalid_prices_exit_1(self, quiet_config, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[100, -5]", encoding="utf-8")
        result = runner.invoke(app, ["analyze", "--file", str(path), "--config", quiet_config])
        assert result.exit_code == 1
        assert "Could not load prices" in result.output

    def test_unknown_asset_warns_but_succeeds(self, quiet_config, price_csv):
        result = runner.invoke(
            app, ["analyze", "-f", price_csv, "--asset", "dogecoin", "--config", quiet_config]
        )
        assert result.exit_code == 0
        assert "[WARN]" in result.output


# ── validate-config / list-assets ─────────────────────────────────────────────

class TestConfigCommands:
    def test_validate_config_ok(self, quiet_config):
        result = runner.invoke(app, ["validate-config", "--config", quiet_config])
        assert result.exit_code == 0
        assert "[OK] Config valid." in result.output
        assert "RSI period:       14" in result.output

    def test_validate_config_full_json(self, quiet_config):
        result = runner.invoke(app, ["validate-config", "--config", quiet_config, "--full"])
        assert result.exit_code == 0
        assert '"rsi_period": 14' in result.output

    def test_validate_config_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "x.toml")])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_validate_config_invalid_values(self, tmp_path):
        path = tmp_path / "default.toml"
        path.write_text("[signals]\noversold = 90.0\n", encoding="utf-8")
        result = runner.invoke(app, ["validate-config", "--config", str(path)])
        assert result.exit_code == 1
        assert "Config validation failed" in result.output

    def test_list_assets(self, quiet_config):
        result = runner.invoke(app, ["list-assets", "--config", quiet_config])
        assert result.exit_code == 0
        assert "* bitcoin" in result.output
        assert "cardano" in result.output
