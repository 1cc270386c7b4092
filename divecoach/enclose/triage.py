# divecoach/enclose/triage.py
"""
ENCLOSE issue triage.

Routes a diver's free-text issue description to ENCLOSE categories by
trigger-phrase matching, and scores the dive against the CLEAR DIVE
checklist when a dive log is available.

Rules:
- Matching is a case-insensitive substring test per trigger phrase
- confidence = matched triggers / triggers in the category
- Matches are ordered by confidence, highest first; ties keep table order
- CLEAR DIVE score = 5 - number of flagged categories (may go negative);
  the dive log's squeeze checkbox flags S on its own
"""

from typing import List, Optional

from divecoach.enclose.rules import TriageTable, load_triage_table
from divecoach.models.dive_log_model import DiveLogRecord
from divecoach.models.triage_model import TriageMatch, TriageReport
from divecoach.utils.logger import debug

CLEAR_DIVE_BASE = 5
STEP_BACK_BELOW = 3

CLEAR_DIVE_CATEGORIES = ("S", "E", "C", "L", "O", "N", "E2")


def analyze_issue(
    description: str,
    table: Optional[TriageTable] = None,
) -> List[TriageMatch]:
    table = table if table is not None else load_triage_table()
    text = description.lower()
    matches: List[TriageMatch] = []

    for letter, category in table.categories.items():
        hits = [t for t in category.triggers if t.lower() in text]
        if not hits:
            continue

        matches.append(TriageMatch(
            category=letter,
            name=category.name,
            confidence=len(hits) / len(category.triggers),
            questions=list(category.questions),
            recommendations=list(category.recommendations),
        ))
        debug(f"[TRIAGE] {letter} hits={hits}")

    return sorted(matches, key=lambda m: -m.confidence)


def clear_dive_score(matches: List[TriageMatch], squeeze: bool = False) -> int:
    flagged = {m.category for m in matches}
    if squeeze:
        flagged.add("S")

    issues = sum(1 for letter in CLEAR_DIVE_CATEGORIES if letter in flagged)
    return CLEAR_DIVE_BASE - issues


def triage_issue(
    description: str,
    dive_log: Optional[DiveLogRecord] = None,
    table: Optional[TriageTable] = None,
) -> TriageReport:
    table = table if table is not None else load_triage_table()
    matches = analyze_issue(description, table)

    score = None
    if dive_log is not None:
        score = clear_dive_score(matches, squeeze=dive_log.squeeze)

    if not matches:
        return TriageReport(
            all_matches=[],
            clear_dive_score=score,
            next_steps=["Complete diagnostic questions above"],
            diagnostic_questions=list(table.fallback_questions),
            recommendations=list(table.fallback_recommendations),
        )

    primary = matches[0]
    step_back = score is not None and score < STEP_BACK_BELOW

    return TriageReport(
        primary_category=primary.category,
        primary_issue=primary.name,
        confidence=primary.confidence,
        all_matches=matches,
        clear_dive_score=score,
        next_steps=[
            f"Focus on {primary.name} protocols",
            "Address root cause before progression",
            "Track improvement in next dive log",
            "Consider stepping back depth progression" if step_back
            else "Monitor for pattern repetition",
        ],
        diagnostic_questions=list(primary.questions),
        recommendations=list(primary.recommendations),
    )
