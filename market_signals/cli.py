"""
Market Signal Engine — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (analyse a series, print config, list assets).
  5. Report result to stdout.

Install and run::

    pip install -e .
    market-signals --help
    market-signals validate-config
    market-signals list-assets
    market-signals analyze --file data/bitcoin_daily.csv --asset bitcoin
    market-signals analyze --file data/bitcoin_chart.json --json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="market-signals",
    help="Crypto market signal engine: RSI, OLS forecast and buy/sell/hold rules.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from market_signals.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from market_signals.utils.logging import configure_logging
    configure_logging(config.logging)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("analyze")
def analyze(
    file: str = typer.Option(
        ...,
        "--file",
        "-f",
        help="Path to a price series file (.csv or .json), oldest first.",
    ),
    asset: Optional[str] = typer.Option(
        None,
        "--asset",
        help="Asset label for the report. Defaults to config market.default_asset.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full report as JSON instead of the text summary.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Compute indicators, forecast and a recommendation for a price file.

    \b
    Accepted formats:
      .csv  — header row with a 'price' (or 'close') column and an optional
              'date' / 'timestamp' column used for ordering.
      .json — bare array of prices, array of {date, price} objects, or a
              market-chart export {"prices": [[epoch_ms, price], ...]}.
    """
    from market_signals.engine import analyze_series
    from market_signals.errors import InvalidInputError
    from market_signals.ingestion.series_loader import load_price_series
    from market_signals.reporting.formatters import format_signal_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_asset = asset or config.market.default_asset
    if target_asset not in config.market.assets:
        typer.echo(
            f"[WARN] Asset '{target_asset}' is not in configured assets "
            f"({', '.join(config.market.assets)}).",
            err=True,
        )

    path = Path(file)
    try:
        prices = load_price_series(path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Could not load prices:\n{exc}", err=True)
        raise typer.Exit(code=1)

    try:
        report = analyze_series(prices, config=config, asset=target_asset)
    except InvalidInputError as exc:
        typer.echo(f"[ERROR] Analysis failed: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        payload = report.model_dump(mode="json")
        payload["price_vs_ma_pct"] = report.price_vs_ma_pct
        payload["forecast"]["predicted_change_pct"] = report.forecast.predicted_change_pct
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(format_signal_report(report, ma_window=config.indicators.ma_window))


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  RSI period:       {config.indicators.rsi_period}")
    typer.echo(f"  MA window:        {config.indicators.ma_window}")
    typer.echo(f"  Forecast window:  {config.forecast.window}")
    typer.echo(
        f"  Confidence clamp: [{config.forecast.confidence_floor}, "
        f"{config.forecast.confidence_ceiling}]"
    )
    typer.echo(
        f"  RSI thresholds:   oversold<{config.signals.oversold} "
        f"overbought>{config.signals.overbought}"
    )
    typer.echo(f"  Default asset:    {config.market.default_asset}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-assets")
def list_assets(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List configured asset labels (default marked with '*')."""
    from market_signals.reporting.formatters import format_asset_list

    config = _load_config_or_exit(config_path)
    typer.echo(format_asset_list(config.market.assets, config.market.default_asset))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
