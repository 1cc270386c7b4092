# divecoach/enclose/formatter.py

from typing import List

from divecoach.enclose.aggregator import aggregate_priority
from divecoach.models.assessment_model import EncloseAssessment
from divecoach.models.report_model import DiagnosticReport

SAFETY_DISCLAIMER = (
    "This is coaching advice only. Always dive with proper supervision and "
    "consult medical professionals for health concerns. Never dive alone."
)


def summary_line(assessment: EncloseAssessment) -> str:
    return f"[{assessment.priority}] {assessment.category} - {assessment.diagnosis}"


def collect_safety_flags(assessments: List[EncloseAssessment]) -> List[str]:
    """
    Union of safety flags across findings, first-seen order, no repeats.
    """
    seen = set()
    flags: List[str] = []

    for a in assessments:
        for flag in a.safety_flags:
            if flag in seen:
                continue
            seen.add(flag)
            flags.append(flag)

    return flags


def build_report(assessments: List[EncloseAssessment]) -> DiagnosticReport:
    """
    Wrap an ENCLOSE result for API consumers.

    Assessments are passed through untouched and in the order given; an empty
    list yields a valid report with overall_priority "none".
    """
    return DiagnosticReport(
        overall_priority=aggregate_priority(assessments),
        assessment_count=len(assessments),
        assessments=list(assessments),
        safety_flags=collect_safety_flags(assessments),
        summary_lines=[summary_line(a) for a in assessments],
        disclaimer=SAFETY_DISCLAIMER,
    )
