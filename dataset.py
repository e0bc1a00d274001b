"""The currently loaded snapshot and its derived views."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

import pandas as pd

from config import StatsConfig
from parsing import empty_snapshot
from samples import enrich_samples
from series import Series, build_all_series
from snapshot_sources import load_snapshot_from_source
from summary import calculate_summary

logger = logging.getLogger(__name__)


class DatasetState(Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"


class Dataset:
    """
    Holds at most one snapshot at a time.

    ``reload`` replaces the snapshot wholesale and ``clear`` drops it. A load
    that finishes after a newer ``reload`` or a ``clear`` is discarded, so the
    most recently requested state always wins.
    """

    def __init__(
        self,
        config: Optional[StatsConfig] = None,
        loader: Optional[Callable[[], pd.DataFrame]] = None,
    ) -> None:
        self.config = config or StatsConfig()
        self._loader = loader or (lambda: load_snapshot_from_source(config=self.config))
        self._lock = threading.Lock()
        self._generation = 0
        self._state = DatasetState.EMPTY
        self._samples = enrich_samples(empty_snapshot(self.config.timezone))
        self._series: Optional[dict[str, Series]] = None
        self._summary: Optional[dict[str, Any]] = None

    @property
    def state(self) -> DatasetState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is DatasetState.LOADED

    @property
    def samples(self) -> pd.DataFrame:
        return self._samples

    def _cached(self, attr: str, build: Callable[[pd.DataFrame], Any]) -> Any:
        with self._lock:
            value = getattr(self, attr)
            samples = self._samples
        if value is not None:
            return value
        value = build(samples)
        with self._lock:
            # A load installed while building replaced the samples; keep its cache empty.
            if self._samples is samples and getattr(self, attr) is None:
                setattr(self, attr, value)
        return value

    @property
    def series(self) -> dict[str, Series]:
        """Chart views, built on first access after each load."""
        return self._cached("_series", lambda samples: build_all_series(samples))

    @property
    def summary(self) -> dict[str, Any]:
        return self._cached(
            "_summary",
            lambda samples: calculate_summary(samples, noon_hour=self.config.noon_hour),
        )

    def _begin_load(self) -> int:
        with self._lock:
            self._generation += 1
            self._state = DatasetState.LOADING
            logger.info("Dataset loading (generation %d)", self._generation)
            return self._generation

    def _install(self, generation: int, samples: pd.DataFrame) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.info("Discarding stale load (generation %d)", generation)
                return False
            self._samples = samples
            self._series = None
            self._summary = None
            self._state = DatasetState.LOADED if len(samples) else DatasetState.EMPTY
            logger.info("Dataset %s with %d samples", self._state.value, len(samples))
            return True

    def _load(self, generation: int) -> bool:
        try:
            raw = self._loader()
        except Exception:
            self._install(generation, enrich_samples(empty_snapshot(self.config.timezone)))
            raise
        return self._install(generation, enrich_samples(raw))

    def _load_in_worker(self, generation: int) -> None:
        try:
            self._load(generation)
        except Exception:
            logger.exception("Background load failed (generation %d)", generation)

    def reload(self) -> DatasetState:
        """Fetch and process a fresh snapshot on the calling thread."""
        self._load(self._begin_load())
        return self._state

    def reload_in_background(self) -> threading.Thread:
        """
        Start a reload on a worker thread and return the (started) thread.

        A loader failure is logged and leaves the dataset empty; callers that
        join the thread check ``state``.
        """
        generation = self._begin_load()
        worker = threading.Thread(target=self._load_in_worker, args=(generation,), daemon=True)
        worker.start()
        return worker

    def clear(self) -> None:
        """Drop the snapshot and invalidate any load still in flight."""
        with self._lock:
            self._generation += 1
            self._samples = enrich_samples(empty_snapshot(self.config.timezone))
            self._series = None
            self._summary = None
            self._state = DatasetState.EMPTY
            logger.info("Dataset cleared")
