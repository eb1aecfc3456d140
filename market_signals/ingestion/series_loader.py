"""
File loaders for closing-price series.

The engine never fetches prices itself; these loaders turn an exported file
into a validated, chronologically ordered ``list[float]``.

CSV format — comma delimited, with a header row.
Required column (first match wins):
  price | close

Optional column:
  date | timestamp   → ISO 8601 date/datetime, or epoch milliseconds.
                       When present, rows are sorted by it (oldest first).
                       When absent, file order is taken as chronological.

JSON formats (detected by shape):
  [67000.5, 67210.0, ...]                        — bare list of prices
  [{"date": "...", "price": 67000.5}, ...]       — list of row objects
  {"prices": [[1718841600000, 67000.5], ...]}    — market-chart export
                                                   ([epoch_ms, price] pairs)
  {"prices": [67000.5, ...]}                     — wrapped bare list

Every parsed series is passed through ``validate_series()`` so empty,
non-finite and non-positive prices are rejected before analysis.
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from market_signals.errors import InvalidInputError
from market_signals.validation import validate_series

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ("price", "close")
TIME_COLUMNS = ("date", "timestamp")

_MAX_SHOWN = 10


def load_price_series(path: Path) -> list[float]:
    """Load a price series from a ``.csv`` or ``.json`` file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On unsupported extension, malformed content, or invalid
            prices (``InvalidInputError`` is a ``ValueError``).
    """
    fmt = path.suffix.lower()
    if fmt == ".csv":
        return parse_price_csv(path)
    if fmt == ".json":
        return parse_price_json(path)
    raise ValueError(f"Unsupported file format '{fmt}'. Use .csv or .json.")


def parse_price_csv(path: Path) -> list[float]:
    """Parse a CSV price export into a validated, oldest-first series.

    All rows are parsed before any are returned.  If **any** row fails, a
    single ``ValueError`` is raised listing the first 10 failures.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the price column is missing, any row fails to parse,
            or the resulting series is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Price CSV file not found: {path}")

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        columns = {c.strip().lower(): c for c in reader.fieldnames}
        price_col = _first_present(columns, PRICE_COLUMNS)
        if price_col is None:
            raise ValueError(
                f"CSV missing a price column (one of {list(PRICE_COLUMNS)}).\n"
                f"Found columns: {sorted(columns)}"
            )
        time_col = _first_present(columns, TIME_COLUMNS)
        rows = list(reader)

    points: list[tuple[Optional[float], float]] = []
    errors: list[tuple[int, str]] = []

    for i, row in enumerate(rows):
        line_no = i + 2  # 1-based, skip header row
        try:
            price = _parse_price(row.get(price_col, ""))
            ts = _parse_time(row.get(time_col, "")) if time_col else None
            points.append((ts, price))
        except ValueError as exc:
            errors.append((line_no, str(exc)))

    if errors:
        detail = "\n".join(f"  Row {ln}: {msg}" for ln, msg in errors[:_MAX_SHOWN])
        suffix = f"\n  … and {len(errors) - _MAX_SHOWN} more" if len(errors) > _MAX_SHOWN else ""
        raise ValueError(
            f"{len(errors)} row(s) failed to parse in {path.name}:\n{detail}{suffix}"
        )

    prices = _order_points(points)
    series = validate_series(prices)
    logger.info("Parsed %d prices from %s", len(series), path.name)
    return series


def parse_price_json(path: Path) -> list[float]:
    """Parse a JSON price export (see module docstring for accepted shapes).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the JSON is malformed, has an unrecognised shape, or
            yields an invalid series.
    """
    if not path.exists():
        raise FileNotFoundError(f"Price JSON file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"JSON parse error in {path.name}: {exc}") from exc

    if isinstance(raw, dict):
        if "prices" not in raw:
            raise ValueError(f"JSON object in {path.name} must have a 'prices' key.")
        raw = raw["prices"]

    if not isinstance(raw, list):
        raise ValueError(f"JSON prices in {path.name} must be an array.")

    points: list[tuple[Optional[float], float]] = []
    errors: list[tuple[int, str]] = []
    for i, entry in enumerate(raw):
        try:
            points.append(_parse_json_entry(entry))
        except ValueError as exc:
            errors.append((i, str(exc)))

    if errors:
        detail = "\n".join(f"  Entry #{idx}: {msg}" for idx, msg in errors[:_MAX_SHOWN])
        suffix = f"\n  … and {len(errors) - _MAX_SHOWN} more" if len(errors) > _MAX_SHOWN else ""
        raise ValueError(
            f"{len(errors)} entr(ies) failed to parse in {path.name}:\n{detail}{suffix}"
        )

    prices = _order_points(points)
    series = validate_series(prices)
    logger.info("Parsed %d prices from %s", len(series), path.name)
    return series


# ── Private helpers ────────────────────────────────────────────────────────────

def _first_present(columns: dict[str, str], candidates: tuple[str, ...]) -> Optional[str]:
    """Return the original header name of the first candidate present."""
    for name in candidates:
        if name in columns:
            return columns[name]
    return None


def _parse_price(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"Invalid price {value!r}.")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        raise ValueError("Price is empty.")
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"Invalid price '{text}'. Expected a number.")


def _parse_time(value: Any) -> Optional[float]:
    """Parse an ISO 8601 string or epoch milliseconds to a POSIX timestamp."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) / 1000.0
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text) / 1000.0
    except ValueError:
        pass
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(
            f"Invalid timestamp '{text}'. Expected ISO 8601 or epoch milliseconds."
        )
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _parse_json_entry(entry: Any) -> tuple[Optional[float], float]:
    if isinstance(entry, list):
        if len(entry) != 2:
            raise ValueError(f"Expected [epoch_ms, price] pair, got {entry!r}.")
        return _parse_time(entry[0]), _parse_price(entry[1])
    if isinstance(entry, dict):
        price_key = next((k for k in PRICE_COLUMNS if k in entry), None)
        if price_key is None:
            raise ValueError(f"Object has no price key (one of {list(PRICE_COLUMNS)}).")
        time_key = next((k for k in TIME_COLUMNS if k in entry), None)
        ts = _parse_time(entry[time_key]) if time_key else None
        return ts, _parse_price(entry[price_key])
    return None, _parse_price(entry)


def _order_points(points: list[tuple[Optional[float], float]]) -> list[float]:
    """Sort by timestamp when every point has one; otherwise keep file order."""
    if not points:
        raise InvalidInputError("load_price_series", "price series is empty")
    if all(ts is not None for ts, _ in points):
        points = sorted(points, key=lambda p: p[0])
    elif any(ts is not None for ts, _ in points):
        raise ValueError("Timestamps must be given for every point or for none.")
    return [price for _, price in points]
