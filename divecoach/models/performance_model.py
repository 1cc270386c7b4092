from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional

Discipline = Literal["CWT", "CNF", "FIM", "Static", "Dynamic"]
EqFailureType = Literal["cant_equalize", "painful", "air_ran_out", "swallowed_mouthfill"]
SqueezeType = Literal["ear", "sinus", "lung", "throat"]
MouthfillSize = Literal["quarter", "half", "three_quarter", "full"]
NeckPosition = Literal["extended", "neutral", "tucked"]
DescentStyle = Literal["tense", "relaxed", "rushed"]


class SymptomReport(BaseModel):
    """
    Reported problems and technique observations for one dive.

    Every field is optional: absence means "not observed / not reported",
    never "false".
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # -------------------------
    # Performance issues
    # -------------------------
    eq_failure_depth: Optional[float] = None
    eq_failure_type: Optional[EqFailureType] = None
    contractions_start_time: Optional[float] = None  # seconds into dive
    leg_burn_depth: Optional[float] = None
    narcosis_depth: Optional[float] = None
    narcosis_symptoms: Optional[List[str]] = None
    o2_symptoms: Optional[List[str]] = None
    squeeze_type: Optional[SqueezeType] = None
    equipment_issues: Optional[List[str]] = None

    # -------------------------
    # Technique observations
    # -------------------------
    mouthfill_depth: Optional[float] = None
    mouthfill_size: Optional[MouthfillSize] = None
    mouthfill_lost: Optional[bool] = None
    neck_position: Optional[NeckPosition] = None
    descent_style: Optional[DescentStyle] = None


class DivePerformanceData(SymptomReport):
    """
    One completed freediving attempt: the basics plus any reported symptoms.
    No range checks are made here; callers own input sanitization.
    """

    target_depth_m: float
    reached_depth_m: float
    dive_time_seconds: float
    discipline: Discipline
