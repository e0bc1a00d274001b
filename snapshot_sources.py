"""Remote and local snapshot sources."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import requests

from config import StatsConfig
from parsing import ParseError, empty_snapshot, parse_snapshot

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """The snapshot could not be retrieved from its source."""


class LocalSnapshotUpload(io.BytesIO):
    """In-memory file wrapper compatible with parsing.load_snapshot."""

    def __init__(self, path: Path, payload: bytes) -> None:
        super().__init__(payload)
        self.name = str(path)


def _is_remote(source: str) -> bool:
    return str(source).lower().startswith(("http://", "https://"))


def fetch_snapshot_csv(url: str, timeout: float = 8.0) -> bytes:
    """Download the stats CSV, bypassing intermediate caches."""
    logger.info("Fetching snapshot from %s", url)
    try:
        response = requests.get(
            url,
            headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Could not fetch {url}: {exc}") from exc

    payload = response.content or b""
    if not payload.strip():
        raise FetchError(f"Empty response from {url}")
    logger.info("Fetched %d bytes from %s", len(payload), url)
    return payload


def read_local_snapshot(path: str) -> LocalSnapshotUpload:
    """Read a snapshot file from disk into an in-memory upload wrapper."""
    target = Path(path).expanduser()
    if not target.is_file():
        raise FetchError(f"Snapshot file does not exist: {target}")
    try:
        return LocalSnapshotUpload(path=target, payload=target.read_bytes())
    except OSError as exc:
        raise FetchError(f"Could not read {target}: {exc}") from exc


def load_snapshot_from_source(
    source: Optional[str] = None,
    config: Optional[StatsConfig] = None,
) -> pd.DataFrame:
    """
    Fetch and parse one snapshot, never raising fetch or parse failures.

    Either failure yields an empty frame with the canonical columns, so a
    failed refresh leaves the caller with no data rather than partial data.
    """
    cfg = config or StatsConfig()
    target = source or cfg.source
    try:
        if _is_remote(target):
            payload = fetch_snapshot_csv(target, timeout=cfg.timeout)
        else:
            payload = read_local_snapshot(target).getvalue()
        return parse_snapshot(payload, timezone=cfg.timezone)
    except FetchError as exc:
        logger.warning("Snapshot fetch failed: %s", exc)
    except ParseError as exc:
        logger.warning("Snapshot parse failed for %s: %s", target, exc)
    return empty_snapshot(cfg.timezone)
