from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Literal

Category = Literal["E", "N", "C", "L", "O", "S", "E2"]  # E2 = Equipment
Priority = Literal["critical", "high", "medium", "low"]


class EncloseAssessment(BaseModel):
    """
    One ENCLOSE finding. Independent of any other finding in the same run.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    category: Category
    priority: Priority
    diagnosis: str
    root_causes: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    training_drills: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
    safety_flags: List[str] = Field(default_factory=list)
