import pytest

from divecoach.enclose.engine import EncloseEngine
from divecoach.models.performance_model import DivePerformanceData


@pytest.fixture
def engine() -> EncloseEngine:
    return EncloseEngine()


@pytest.fixture
def make_dive():
    """Build a CWT dive with sane basics, overridden by keyword."""

    def _make(**overrides) -> DivePerformanceData:
        fields = {
            "target_depth_m": 60,
            "reached_depth_m": 60,
            "dive_time_seconds": 150,
            "discipline": "CWT",
        }
        fields.update(overrides)
        return DivePerformanceData(**fields)

    return _make
