"""
Storage port for persisted metric rows and KPI summary fields.

The normalisation core never performs I/O. Writers implement MetricStore
and are driven by updates.apply_metric_update, which holds the KPI's lock
from KpiLockRegistry for the duration of each write so that two updates
to the same KPI cannot interleave.

To swap the in-memory store for a database:
    Implement MetricStore against the metrics table with a unique index on
    (kpi_id, date). upsert_metrics maps onto INSERT ... ON DUPLICATE KEY
    UPDATE; replace_metrics onto DELETE + INSERT in one transaction.
"""

import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Protocol

import pandas as pd

logger = logging.getLogger(__name__)

METRIC_COLUMNS = ["kpi_id", "date", "value", "color"]


class MetricStore(Protocol):
    def upsert_metrics(self, kpi_id: str, rows: list[dict]) -> None: ...

    def replace_metrics(self, kpi_id: str, rows: list[dict]) -> None: ...

    def fetch_metrics(self, kpi_id: str) -> pd.DataFrame: ...

    def update_kpi_summary(self, kpi_id: str, **fields) -> None: ...

    def get_kpi_summary(self, kpi_id: str) -> dict: ...


class KpiLockRegistry:
    """One lock per KPI id, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)

    @contextmanager
    def lock_for(self, kpi_id: str):
        with self._guard:
            lock = self._locks[kpi_id]
        with lock:
            yield


class InMemoryMetricStore:
    """Reference MetricStore backed by a fact_metric DataFrame.

    fact_metric has one row per (kpi_id, date); writing an existing pair
    replaces it.
    """

    def __init__(self) -> None:
        self.fact_metric = pd.DataFrame(columns=METRIC_COLUMNS)
        self.kpis: dict[str, dict] = {}

    def _frame(self, rows: list[dict]) -> pd.DataFrame:
        # object dtype keeps list / labeled values intact per cell
        return pd.DataFrame(
            {col: pd.Series([row.get(col) for row in rows], dtype=object) for col in METRIC_COLUMNS}
        )

    def upsert_metrics(self, kpi_id: str, rows: list[dict]) -> None:
        if not rows:
            return
        incoming = self._frame(rows)
        if self.fact_metric.empty:
            combined = incoming
        else:
            combined = pd.concat([self.fact_metric, incoming], ignore_index=True)
        self.fact_metric = combined.drop_duplicates(
            subset=["kpi_id", "date"], keep="last"
        ).reset_index(drop=True)
        logger.info("Upserted %d metric rows for KPI %s", len(rows), kpi_id)

    def replace_metrics(self, kpi_id: str, rows: list[dict]) -> None:
        kept = self.fact_metric[self.fact_metric["kpi_id"] != kpi_id]
        self.fact_metric = kept.reset_index(drop=True)
        self.upsert_metrics(kpi_id, rows)
        if not rows:
            logger.info("Cleared metric history for KPI %s", kpi_id)

    def fetch_metrics(self, kpi_id: str) -> pd.DataFrame:
        subset = self.fact_metric[self.fact_metric["kpi_id"] == kpi_id]
        return subset.sort_values("date").reset_index(drop=True)

    def update_kpi_summary(self, kpi_id: str, **fields) -> None:
        self.kpis.setdefault(kpi_id, {"id": kpi_id}).update(fields)

    def get_kpi_summary(self, kpi_id: str) -> dict:
        return dict(self.kpis.get(kpi_id, {"id": kpi_id}))
