import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scorecard_metrics.storage import InMemoryMetricStore, KpiLockRegistry  # noqa: E402


@pytest.fixture()
def store() -> InMemoryMetricStore:
    return InMemoryMetricStore()


@pytest.fixture()
def locks() -> KpiLockRegistry:
    return KpiLockRegistry()


@pytest.fixture()
def pie_batch() -> list[dict]:
    return [
        {
            "date": "2024-01-01",
            "labeledValues": [{"label": "A", "value": 1}, {"label": "B", "value": 2}],
        },
        {"date": "2024-01-02", "value": 99},
    ]
