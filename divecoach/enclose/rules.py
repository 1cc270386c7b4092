# divecoach/enclose/rules.py
"""
ENCLOSE rule tables.

Loads rules.yaml (thresholds, serious O2 markers, EQ plateau bands) and
validates it into an EncloseRules model, and triage_categories.yaml
(per-letter trigger phrases, questions, recommendations) into a TriageTable.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from divecoach.config import rules_path, triage_path
from divecoach.models.assessment_model import Category
from divecoach.exceptions import RulesConfigError
from divecoach.utils.logger import debug

PRIORITIES = {"critical", "high", "medium", "low"}


class PlateauBand(BaseModel):
    min_depth: float
    max_depth: float
    diagnosis: str
    root_causes: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    training_drills: List[str] = Field(default_factory=list)
    safety_flags: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_range(self):
        if self.min_depth > self.max_depth:
            raise ValueError(
                f"plateau band min_depth {self.min_depth} > max_depth {self.max_depth}"
            )
        return self

    def contains(self, depth: float) -> bool:
        return self.min_depth <= depth <= self.max_depth


class Thresholds(BaseModel):
    contraction_trigger: float = 0.33
    contraction_high: float = 0.2
    contraction_safety: float = 0.15
    leg_burn_fraction: float = 0.5
    narcosis_safety_depth: float = 40


class EncloseRules(BaseModel):
    priority_rank: Dict[str, int] = Field(
        default_factory=lambda: {"critical": 0, "high": 1, "medium": 2, "low": 3}
    )
    thresholds: Thresholds = Field(default_factory=Thresholds)
    serious_o2_markers: List[str] = Field(default_factory=list)
    eq_plateaus: List[PlateauBand] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_ranks(self):
        missing = PRIORITIES - set(self.priority_rank)
        if missing:
            raise ValueError(f"priority_rank missing {sorted(missing)}")
        return self

    def plateaus_for(self, depth: float) -> List[PlateauBand]:
        """Every band containing `depth`, in table order."""
        return [band for band in self.eq_plateaus if band.contains(depth)]

    def is_serious_o2(self, symptom: str) -> bool:
        return any(marker in symptom for marker in self.serious_o2_markers)


class TriageCategory(BaseModel):
    name: str
    triggers: List[str] = Field(min_length=1)
    questions: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class TriageTable(BaseModel):
    # Mapping order is ENCLOSE order; ties in confidence keep it
    categories: Dict[Category, TriageCategory]
    fallback_questions: List[str] = Field(default_factory=list)
    fallback_recommendations: List[str] = Field(default_factory=list)


def load_rules(path: Optional[Union[str, Path]] = None) -> EncloseRules:
    """
    Load and validate a rules file.

    With no path, the configured rules file is used and the result cached.
    """
    if path is None:
        return _load_default_rules()
    return _read_model(Path(path), EncloseRules)


def load_triage_table(path: Optional[Union[str, Path]] = None) -> TriageTable:
    """
    Load and validate the issue-triage category table.

    Same caching and error behaviour as load_rules.
    """
    if path is None:
        return _load_default_triage_table()
    return _read_model(Path(path), TriageTable)


@lru_cache(maxsize=1)
def _load_default_rules() -> EncloseRules:
    return _read_model(rules_path(), EncloseRules)


@lru_cache(maxsize=1)
def _load_default_triage_table() -> TriageTable:
    return _read_model(triage_path(), TriageTable)


def _read_model(path: Path, model):
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise RulesConfigError(f"Rules file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise RulesConfigError(f"Rules file is not valid YAML: {path}") from exc

    if not isinstance(raw, dict):
        raise RulesConfigError(f"Rules file must contain a mapping: {path}")

    try:
        loaded = model.model_validate(raw)
    except ValidationError as exc:
        raise RulesConfigError(f"Invalid rules in {path}: {exc}") from exc

    debug(f"[RULES] loaded {model.__name__} from {path}")
    return loaded
