from pydantic import BaseModel, Field
from typing import List, Literal

from divecoach.models.assessment_model import EncloseAssessment

REPORT_SCHEMA_ID = "divecoach.enclose.v1"
REPORT_VERSION = "1.0.0"

OverallPriority = Literal["critical", "high", "medium", "low", "none"]


class DiagnosticReport(BaseModel):
    schema_id: str = REPORT_SCHEMA_ID
    version: str = REPORT_VERSION

    overall_priority: OverallPriority = "none"
    assessment_count: int = 0
    assessments: List[EncloseAssessment] = Field(default_factory=list)

    safety_flags: List[str] = Field(default_factory=list)
    summary_lines: List[str] = Field(default_factory=list)
    disclaimer: str = ""
