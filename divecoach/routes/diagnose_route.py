from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional

from divecoach.enclose.engine import diagnose_with_enclose
from divecoach.enclose.formatter import build_report
from divecoach.enclose.triage import triage_issue
from divecoach.exceptions import DiveLogAdapterError
from divecoach.models.dive_log_model import DiveLogRecord
from divecoach.models.performance_model import DivePerformanceData, SymptomReport
from divecoach.models.report_model import DiagnosticReport
from divecoach.models.triage_model import TriageReport
from divecoach.pipeline.dive_log_adapter import build_performance_data
from divecoach.utils.logger import log

router = APIRouter()


class DiveLogDiagnoseRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    dive_log: DiveLogRecord
    symptoms: Optional[SymptomReport] = None


class TriageRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: str = Field(min_length=1)
    dive_log: Optional[DiveLogRecord] = None


def _run(data: DivePerformanceData) -> DiagnosticReport:
    report = build_report(diagnose_with_enclose(data))
    log(
        f"[DIAGNOSE] discipline={data.discipline} "
        f"overall={report.overall_priority} "
        f"count={report.assessment_count}"
    )
    return report


@router.post("/diagnose", response_model=DiagnosticReport)
def diagnose(data: DivePerformanceData):
    return _run(data)


@router.post("/diagnose/dive-log", response_model=DiagnosticReport)
def diagnose_dive_log(request: DiveLogDiagnoseRequest):
    try:
        data = build_performance_data(request.dive_log, request.symptoms)
    except DiveLogAdapterError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return _run(data)


@router.post("/triage", response_model=TriageReport)
def triage(request: TriageRequest):
    report = triage_issue(request.description, request.dive_log)
    log(
        f"[TRIAGE] primary={report.primary_category} "
        f"matches={len(report.all_matches)} "
        f"clear_dive={report.clear_dive_score}"
    )
    return report
