from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

from divecoach.models.assessment_model import Category


class TriageMatch(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: Category
    name: str
    confidence: float  # matched triggers / total triggers
    questions: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class TriageReport(BaseModel):
    """
    Issue triage for one free-text description.

    primary_category is "Unknown" and confidence 0 when nothing matched.
    clear_dive_score is only set when a dive log was supplied.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    primary_category: str = "Unknown"
    primary_issue: str = "Needs further analysis"
    confidence: float = 0.0
    all_matches: List[TriageMatch] = Field(default_factory=list)
    clear_dive_score: Optional[int] = None
    next_steps: List[str] = Field(default_factory=list)
    diagnostic_questions: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
