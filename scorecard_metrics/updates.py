"""
Update orchestration: feed an update body through the persistence pipeline
and hand the result to a MetricStore under the KPI's lock.
"""

import logging
from collections.abc import Mapping

from .persistence import build_persisted_metrics
from .storage import KpiLockRegistry, MetricStore

logger = logging.getLogger(__name__)

_DEFAULT_LOCKS = KpiLockRegistry()


def extract_incoming_metrics(body: Mapping | None) -> list | None:
    """Return the metric batch carried by an update body.

    `metrics` wins over the legacy `dataPoints` key. None means the body did
    not ask for history to change; an empty list is a real (empty) batch.
    """
    if not isinstance(body, Mapping):
        return None
    if isinstance(body.get("metrics"), list):
        return body["metrics"]
    if isinstance(body.get("dataPoints"), list):
        return body["dataPoints"]
    return None


def apply_metric_update(
    store: MetricStore,
    kpi_id: str,
    chart_type: str | None,
    incoming: list | None,
    locks: KpiLockRegistry | None = None,
    replace_history: bool = False,
) -> dict:
    """Persist one update batch for a KPI.

    Parameters
    ----------
    store : MetricStore that receives the rows and summary fields.
    kpi_id : KPI being updated.
    chart_type : The KPI's chart-type tag.
    incoming : Batch from extract_incoming_metrics(); None leaves the store
               untouched.
    locks : Per-KPI lock registry shared by every writer of `store`.
    replace_history : Drop the KPI's existing rows before writing instead
                      of upserting by date.

    Returns
    -------
    The dict returned by build_persisted_metrics().
    """
    result = build_persisted_metrics(kpi_id, chart_type, incoming)
    if incoming is None:
        logger.debug("No metric batch for KPI %s, history untouched", kpi_id)
        return result

    locks = locks or _DEFAULT_LOCKS
    points = result["points"]

    with locks.lock_for(kpi_id):
        if replace_history:
            store.replace_metrics(kpi_id, points)
        elif points:
            store.upsert_metrics(kpi_id, points)

        if points:
            store.update_kpi_summary(
                kpi_id,
                latest_value=result["latest_value"],
                value_json=result["value_json"],
                latest_date=result["latest_date"],
            )
        elif replace_history:
            store.update_kpi_summary(kpi_id, latest_value=None)
        else:
            logger.info("Empty metric batch for KPI %s, history untouched", kpi_id)

    return result
