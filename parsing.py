"""Snapshot CSV loading and serialization helpers."""

from __future__ import annotations

import io
import logging
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv",)

DATE_COLUMN = "sample_date"

# Cumulative or point-in-time counters, in file order.
COUNT_COLUMNS = [
    "total_users",
    "new_users",
    "never_set_location",
    "total_requests",
    "accepted_requests",
    "rejected_requests",
    "open_requests",
    "active_1",
    "active_7",
    "active_30",
    "active_90",
    "active_avg",
    "deleted_active",
    "deleted_inactive",
]

SNAPSHOT_COLUMNS = [DATE_COLUMN, *COUNT_COLUMNS]

_EPOCH = pd.Timestamp(0, tz="UTC")


class ParseError(ValueError):
    """The snapshot text is not a well-formed stats CSV."""


def empty_snapshot(timezone: str = "UTC") -> pd.DataFrame:
    """Return a zero-row frame with the canonical columns and dtypes."""
    out = pd.DataFrame({col: pd.Series(dtype="int64") for col in COUNT_COLUMNS})
    out.insert(0, DATE_COLUMN, pd.Series(dtype=f"datetime64[ns, {timezone}]"))
    return out


def _read_payload(payload: Any) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    if hasattr(payload, "read"):
        data = payload.read()
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)
    raise TypeError(f"Unsupported payload type: {type(payload).__name__}")


def _check_header(columns: list[str]) -> None:
    missing = [col for col in SNAPSHOT_COLUMNS if col not in columns]
    unexpected = [col for col in columns if col not in SNAPSHOT_COLUMNS]
    if missing or unexpected:
        raise ParseError(
            f"Header mismatch (missing: {', '.join(missing) or '-'}; "
            f"unexpected: {', '.join(unexpected) or '-'})"
        )
    if len(set(columns)) != len(columns):
        raise ParseError("Header contains duplicate column names")


def _to_counts(raw: pd.Series, column: str) -> pd.Series:
    text = raw.fillna("").astype(str).str.strip()
    # Plain digits only: "12.0" or "1e3" would not serialize back unchanged.
    bad = ~text.str.fullmatch(r"\d+").astype(bool)
    if bad.any():
        row = int(bad[bad].index[0])
        raise ParseError(
            f"Row {row + 1}: column {column!r} is not a non-negative integer ({text.iloc[row]!r})"
        )
    return pd.to_numeric(text).astype("int64")


def parse_snapshot(payload: Any, timezone: str = "UTC") -> pd.DataFrame:
    """
    Parse stats CSV text into one typed row per sample, sorted by date.

    ``sample_date`` is converted from epoch seconds to a timezone-aware
    timestamp in ``timezone``. Any malformed row rejects the whole payload.
    """
    data = _read_payload(payload)
    if not data.strip():
        raise ParseError("Snapshot is empty")

    try:
        raw = pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise ParseError(f"Could not read snapshot CSV: {exc}") from exc

    if len(raw) and not isinstance(raw.index, pd.RangeIndex):
        # pandas turns a surplus leading field into an implicit index.
        raise ParseError("Data rows have more fields than the header")
    raw.columns = [str(col).strip() for col in raw.columns]
    _check_header(list(raw.columns))

    if raw.empty:
        return empty_snapshot(timezone)

    out = pd.DataFrame({col: _to_counts(raw[col], col) for col in COUNT_COLUMNS})
    seconds = _to_counts(raw[DATE_COLUMN], DATE_COLUMN)
    out.insert(
        0,
        DATE_COLUMN,
        pd.to_datetime(seconds, unit="s", utc=True).dt.tz_convert(timezone),
    )

    out = out.sort_values(DATE_COLUMN, kind="mergesort").reset_index(drop=True)
    logger.debug("Parsed %d snapshot rows", len(out))
    return out


def load_snapshot(uploaded_file: Any, timezone: str = "UTC") -> pd.DataFrame:
    """Load a snapshot from an uploaded or opened ``.csv`` file object."""
    name = str(getattr(uploaded_file, "name", "")).lower()
    if name and not name.endswith(SUPPORTED_EXTENSIONS):
        raise ValueError(f"Unsupported file type: {name}. Supported: csv.")
    return parse_snapshot(uploaded_file, timezone=timezone)


def epoch_seconds(dates: pd.Series) -> pd.Series:
    """Convert timezone-aware timestamps back to integer epoch seconds."""
    return ((dates.dt.tz_convert("UTC") - _EPOCH) // pd.Timedelta(seconds=1)).astype("int64")


def serialize_snapshot(samples: pd.DataFrame) -> str:
    """Write samples back out in the canonical snapshot column order."""
    if samples.empty:
        return ",".join(SNAPSHOT_COLUMNS) + "\n"
    out = samples[SNAPSHOT_COLUMNS].copy()
    out[DATE_COLUMN] = epoch_seconds(out[DATE_COLUMN])
    return out.to_csv(index=False, lineterminator="\n")
