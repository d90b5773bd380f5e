"""
Scorecard Metrics — End-to-end pipeline smoke test.

Runs simulated KPI updates through normalisation, persistence and the
dashboard read side, and prints summaries at each stage.

Usage:
    python main.py
"""

import logging

from scorecard_metrics.dashboard import get_kpi_view, get_metric_history
from scorecard_metrics.dates import normalize_date_only
from scorecard_metrics.simulator import generate_category_batch, generate_update_payload
from scorecard_metrics.storage import InMemoryMetricStore, KpiLockRegistry
from scorecard_metrics.updates import apply_metric_update, extract_incoming_metrics
from scorecard_metrics.values import normalize_value_for_chart_type

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

_KPIS = [
    {"id": "revenue", "chart_type": "line", "show_legend": 0},
    {"id": "regional_sales", "chart_type": "pie", "chart_settings": '{"showGridlines": false}'},
    {"id": "cost_vs_volume", "chart_type": "multiAxisLine", "chart_settings": {"primaryLabel": "Cost"}},
    {"id": "headcount", "chart_type": None, "reverse_trend": True},
]


def main() -> None:
    """Run the full pipeline and print smoke-test outputs."""

    print("=" * 70)
    print("  SCORECARD METRICS — Value Normalisation Pipeline")
    print("  Smoke Test")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Value normalisation
    # ------------------------------------------------------------------
    print("[ 1 ] VALUE NORMALISATION")
    print("-" * 40)

    samples = [
        ("line", [7, 9]),
        ("line", "oops"),
        ("multiAxisLine", 5),
        ("multiAxisLine", {"primary": 3}),
        ("pie", "North:10, South:20"),
        ("bar", {"a": "1", "b": "x", "c": 3}),
    ]
    for chart_type, raw in samples:
        normalized = normalize_value_for_chart_type(chart_type, raw)
        print(f"  {chart_type:14s} {raw!r:28} -> {normalized!r}")

    print(f"\n  normalize_date_only('2024-03-05T22:30:00-05:00') -> "
          f"{normalize_date_only('2024-03-05T22:30:00-05:00')}")

    # ------------------------------------------------------------------
    # 2. Persistence
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] PERSISTING UPDATES")
    print("-" * 40)

    store = InMemoryMetricStore()
    locks = KpiLockRegistry()
    results = {}

    for kpi in _KPIS:
        body = generate_update_payload(kpi["chart_type"], legacy_key=kpi["id"] == "headcount")
        incoming = extract_incoming_metrics(body)
        result = apply_metric_update(store, kpi["id"], kpi["chart_type"], incoming, locks=locks)
        results[kpi["id"]] = result
        print(f"\n{kpi['id']}: {len(result['points'])} rows, "
              f"latest_value={result.get('latest_value')!r}")

    # Re-submitting the unlabeled legacy shape for the pie KPI
    legacy_result = apply_metric_update(
        store, "regional_sales", "pie", generate_category_batch(labeled=False), locks=locks,
    )
    print(f"\nregional_sales (legacy resubmit): value_json={legacy_result.get('value_json')}")

    # A None batch must not touch history
    untouched = apply_metric_update(store, "revenue", "line", None, locks=locks)
    print(f"revenue (no batch): {untouched}")

    print(f"\nfact_metric: {len(store.fact_metric)} rows")
    print(store.fact_metric.head(10).to_string(index=False))

    # ------------------------------------------------------------------
    # 3. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] DASHBOARD OUTPUTS")
    print("-" * 40)

    views = {}
    for kpi in _KPIS:
        view = get_kpi_view(store, kpi)
        views[kpi["id"]] = view
        print(f"\n  {kpi['id']:16s} | {view['chart_class']:13s} | display={view['display_value']!r:12} "
              f"| trend={view['trend_value']} ({view['trend_rag']})")
        print(f"  {'':16s} | settings: legend={view['chart_settings']['show_legend']}, "
              f"gridlines={view['chart_settings']['show_gridlines']}, "
              f"primary_label={view['chart_settings']['primary_label']!r}")

    history = get_metric_history(store, "cost_vs_volume", "multiAxisLine")
    print("\ncost_vs_volume history:")
    print(history.head().to_string(index=False))

    # ------------------------------------------------------------------
    # 4. Acceptance criteria verification
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] ACCEPTANCE CRITERIA CHECKS")
    print("-" * 40)

    # Check 1: one row per (kpi_id, date)
    dupes = store.fact_metric.duplicated(subset=["kpi_id", "date"]).sum()
    check1 = dupes == 0
    print(f"\n  [{'PASS' if check1 else 'FAIL'}] No duplicate (kpi_id, date) rows ({dupes} found)")

    # Check 2: multi-value batch collapsed to a single row
    check2 = len(results["regional_sales"]["points"]) == 1
    print(f"  [{'PASS' if check2 else 'FAIL'}] Pie batch collapsed to "
          f"{len(results['regional_sales']['points'])} row")

    # Check 3: multiAxisLine rows are [primary, secondary]
    axis_values = store.fetch_metrics("cost_vs_volume")["value"].tolist()
    check3 = all(isinstance(v, list) and len(v) == 2 for v in axis_values)
    print(f"  [{'PASS' if check3 else 'FAIL'}] multiAxisLine rows all have two values")

    # Check 4: None batch left history alone
    check4 = untouched == {"points": []} and len(store.fetch_metrics("revenue")) == 14
    print(f"  [{'PASS' if check4 else 'FAIL'}] None batch left revenue history untouched")

    # Check 5: legacy gridlines key honoured
    check5 = views["regional_sales"]["chart_settings"]["show_gridlines"] is False
    print(f"  [{'PASS' if check5 else 'FAIL'}] Legacy showGridlines blob key resolved")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
