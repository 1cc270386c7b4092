# divecoach/pipeline/dive_log_adapter.py
"""
Dive log -> ENCLOSE input.

Merges a stored journal row (depths, time, discipline, safety checkboxes)
with the diver's reported symptoms into a DivePerformanceData record.

Rules:
- Reported symptoms win over anything inferred from the row
- issue_depth only becomes an EQ failure depth when an EQ failure type
  was reported
- blackout / lmc checkboxes become O2 symptom tags
- the squeeze checkbox alone never sets a squeeze type
"""

from typing import Any, Dict, List, Optional

from divecoach.exceptions import DiveLogAdapterError
from divecoach.models.dive_log_model import DiveLogRecord
from divecoach.models.performance_model import DivePerformanceData, SymptomReport
from divecoach.utils.logger import debug, warn

DISCIPLINE_ALIASES = {
    "CWT": "CWT",
    "CWTB": "CWT",
    "CNF": "CNF",
    "FIM": "FIM",
    "STA": "Static",
    "STATIC": "Static",
    "DYN": "Dynamic",
    "DYNB": "Dynamic",
    "DNF": "Dynamic",
    "DYNAMIC": "Dynamic",
}


def normalize_discipline(raw: Optional[str]) -> str:
    key = (raw or "").strip().upper()
    if key not in DISCIPLINE_ALIASES:
        raise DiveLogAdapterError(f"Unsupported discipline: {raw!r}")
    return DISCIPLINE_ALIASES[key]


def _append_unique(tags: List[str], tag: str) -> None:
    if tag not in tags:
        tags.append(tag)


def build_performance_data(
    record: DiveLogRecord,
    symptoms: Optional[SymptomReport] = None,
) -> DivePerformanceData:
    reported: Dict[str, Any] = (
        symptoms.model_dump(exclude_none=True) if symptoms is not None else {}
    )

    fields: Dict[str, Any] = {
        "target_depth_m": record.target_depth or 0.0,
        "reached_depth_m": record.reached_depth or 0.0,
        "dive_time_seconds": record.total_dive_time or 0.0,
        "discipline": normalize_discipline(record.discipline),
    }

    # -------------------------------------------------
    # Row-derived observations
    # -------------------------------------------------
    if record.mouthfill_depth and "mouthfill_depth" not in reported:
        fields["mouthfill_depth"] = record.mouthfill_depth

    if (
        record.issue_depth
        and "eq_failure_type" in reported
        and "eq_failure_depth" not in reported
    ):
        fields["eq_failure_depth"] = record.issue_depth
        debug(f"[ADAPTER] issue_depth={record.issue_depth} used as EQ failure depth")

    o2 = list(reported.pop("o2_symptoms", []))
    if record.blackout:
        _append_unique(o2, "blackout")
    if record.lmc:
        _append_unique(o2, "LMC")
    if o2:
        fields["o2_symptoms"] = o2

    if record.squeeze and "squeeze_type" not in reported:
        warn("[ADAPTER] squeeze checked without a reported squeeze type; S check skipped")

    if not record.total_dive_time:
        debug("[ADAPTER] no total_dive_time on record; C check cannot run")

    fields.update(reported)
    return DivePerformanceData(**fields)
