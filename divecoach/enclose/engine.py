# divecoach/enclose/engine.py
"""
ENCLOSE Diagnostic Engine

Routes observed freediving performance issues to root causes, drills and
safety flags:

    E  - Equalization
    N  - Nitrogen narcosis
    C  - CO2 tolerance (early contractions)
    L  - Leg fatigue
    O  - O2 tolerance / recovery
    S  - Squeeze
    E2 - Equipment

Pure and deterministic: no I/O, no shared mutable state. Each category
contributes at most one assessment; the result is ordered by priority with
ties kept in evaluation order.
"""

import math
from typing import List, Optional

from divecoach.enclose.rules import EncloseRules, load_rules
from divecoach.models.assessment_model import EncloseAssessment
from divecoach.models.performance_model import DivePerformanceData
from divecoach.utils.logger import debug


def format_depth(depth: float) -> str:
    """Depth as reported: whole metres without a decimal point, otherwise full precision."""
    if float(depth).is_integer():
        return str(int(depth))
    return repr(float(depth))


class EncloseEngine:

    def __init__(self, rules: Optional[EncloseRules] = None):
        self.rules = rules if rules is not None else load_rules()

    # -------------------------------------------------
    # Public entry
    # -------------------------------------------------
    def diagnose(self, data: DivePerformanceData) -> List[EncloseAssessment]:
        t = self.rules.thresholds
        assessments: List[EncloseAssessment] = []

        # E - Equalization
        if data.eq_failure_depth or data.eq_failure_type:
            assessments.append(self._diagnose_equalization(data))

        # N - Nitrogen narcosis
        if data.narcosis_depth or data.narcosis_symptoms:
            assessments.append(self._diagnose_narcosis(data))

        # C - CO2 tolerance
        if data.contractions_start_time and data.dive_time_seconds:
            ratio = data.contractions_start_time / data.dive_time_seconds
            if ratio < t.contraction_trigger:
                assessments.append(self._diagnose_co2(data, ratio))

        # L - Leg fatigue
        if (
            data.leg_burn_depth
            and data.leg_burn_depth < data.reached_depth_m * t.leg_burn_fraction
        ):
            assessments.append(self._diagnose_leg_burn(data))

        # O - O2 tolerance
        if data.o2_symptoms:
            assessments.append(self._diagnose_o2(data))

        # S - Squeeze
        if data.squeeze_type:
            assessments.append(self._diagnose_squeeze(data))

        # E2 - Equipment
        if data.equipment_issues:
            assessments.append(self._diagnose_equipment(data))

        # sorted() is stable: equal priorities keep evaluation order
        rank = self.rules.priority_rank
        ordered = sorted(assessments, key=lambda a: rank[a.priority])

        debug(
            f"[ENCLOSE] discipline={data.discipline} "
            f"reached={data.reached_depth_m} "
            f"findings={[(a.category, a.priority) for a in ordered]}"
        )
        return ordered

    # -------------------------------------------------
    # E - Equalization
    # -------------------------------------------------
    def _diagnose_equalization(self, data: DivePerformanceData) -> EncloseAssessment:
        root_causes: List[str] = []
        recommendations: List[str] = []
        training_drills: List[str] = []
        safety_flags: List[str] = []

        diagnosis = "Equalization failure"
        priority = "high"

        if data.eq_failure_type == "cant_equalize":
            diagnosis = "Unable to equalize - technique or anatomy issue"
            root_causes += ["Poor Frenzel technique", "Soft palate or glottis tension"]
            recommendations += ["Review basic Frenzel mechanics", "Practice soft palate control"]
            training_drills += [
                "100+ daily dry EQ reps (shirtless, in mirror)",
                "Tongue-out EQ test",
            ]

        elif data.eq_failure_type == "swallowed_mouthfill":
            diagnosis = "Mouthfill management failure"
            priority = "critical"
            root_causes += ["Poor glottis control", "Inadequate mouthfill technique"]
            recommendations.append("Master glottis lock before mouthfill progression")
            training_drills += ["Glottis isolation drills", "NPD progression"]
            safety_flags.append("Do not attempt mouthfill until technique is solid")

        elif data.eq_failure_type == "air_ran_out":
            diagnosis = "Insufficient air volume for equalization"
            root_causes += [
                "Mouthfill too small or taken too shallow",
                "Inefficient EQ technique",
            ]
            recommendations += [
                "Increase mouthfill volume or take deeper",
                "Improve EQ efficiency",
            ]

        # Plateau bands replace the diagnosis and add to everything else
        if data.eq_failure_depth:
            for band in self.rules.plateaus_for(data.eq_failure_depth):
                diagnosis = band.diagnosis
                root_causes += band.root_causes
                recommendations += band.recommendations
                training_drills += band.training_drills
                safety_flags += band.safety_flags
                debug(f"[ENCLOSE][E] depth={data.eq_failure_depth} band={band.diagnosis!r}")

        if data.neck_position == "extended":
            root_causes.append("Neck extension kinking Eustachian tubes")
            recommendations.append("Practice neutral or slightly tucked neck position")

        return EncloseAssessment(
            category="E",
            priority=priority,
            diagnosis=diagnosis,
            root_causes=root_causes,
            recommendations=recommendations,
            training_drills=training_drills,
            next_steps=[
                "Fix technique issues before depth progression",
                "Test in controlled environment",
            ],
            safety_flags=safety_flags,
        )

    # -------------------------------------------------
    # N - Narcosis
    # -------------------------------------------------
    def _diagnose_narcosis(self, data: DivePerformanceData) -> EncloseAssessment:
        depth = data.narcosis_depth
        where = f"{format_depth(depth)}m" if depth else "unknown depth"

        flags = []
        if depth and depth > self.rules.thresholds.narcosis_safety_depth:
            flags.append("Significant narcosis - medical evaluation recommended")

        return EncloseAssessment(
            category="N",
            priority="medium",
            diagnosis=f"Nitrogen narcosis at {where}",
            root_causes=["Depth beyond current adaptation", "Fatigue or elevated CO2"],
            recommendations=[
                "Progress slowly in 2-3m increments at this depth band",
                "Dive rested and relaxed",
                "Increase surface intervals",
            ],
            training_drills=["Mental rehearsal at target depth", "Visualization exercises"],
            next_steps=[
                "Stop progression until symptoms disappear",
                "Set conservative turn depth",
            ],
            safety_flags=flags,
        )

    # -------------------------------------------------
    # C - CO2 tolerance
    # -------------------------------------------------
    def _diagnose_co2(self, data: DivePerformanceData, ratio: float) -> EncloseAssessment:
        t = self.rules.thresholds

        return EncloseAssessment(
            category="C",
            priority="high" if ratio < t.contraction_high else "medium",
            diagnosis=f"Early contractions at {math.floor(ratio * 100 + 0.5)}% of dive",
            root_causes=[
                "Poor CO2 tolerance",
                "Inadequate warm-up",
                "Mental tension or anxiety",
                "Inefficient technique increasing O2 consumption",
            ],
            recommendations=[
                "Improve pre-dive relaxation",
                "Extend warm-up protocol",
                "Practice mental preparation techniques",
            ],
            training_drills=[
                "Dry CO2 tables (1-2x/week max)",
                "Urge-to-breathe static hangs",
                "Visualization exercises",
            ],
            next_steps=[
                "Reduce target depth until tolerance improves",
                "Focus on relaxation training",
            ],
            safety_flags=(
                ["Very early contractions - check for medical issues"]
                if ratio < t.contraction_safety else []
            ),
        )

    # -------------------------------------------------
    # L - Leg fatigue
    # -------------------------------------------------
    def _diagnose_leg_burn(self, data: DivePerformanceData) -> EncloseAssessment:
        return EncloseAssessment(
            category="L",
            priority="medium",
            diagnosis=f"Leg fatigue at {format_depth(data.leg_burn_depth)}m (early in dive)",
            root_causes=[
                "Poor finning technique",
                "Inadequate leg conditioning",
                "Inappropriate fins for skill level",
                "Rushed descent pace",
            ],
            recommendations=[
                "Improve finning efficiency",
                "Slow descent rate",
                "Consider softer training fins",
            ],
            training_drills=[
                "Dynamic apnea sprints",
                "Anterior tibialis strengthening",
                "Finning technique practice",
            ],
            next_steps=[
                "Focus on technique before depth progression",
                "Improve anaerobic capacity",
            ],
        )

    # -------------------------------------------------
    # O - O2 tolerance / recovery
    # -------------------------------------------------
    def _diagnose_o2(self, data: DivePerformanceData) -> EncloseAssessment:
        symptoms = data.o2_symptoms or []
        serious = any(self.rules.is_serious_o2(s) for s in symptoms)

        return EncloseAssessment(
            category="O",
            priority="critical" if serious else "high",
            diagnosis=f"O2 symptoms: {', '.join(symptoms)}",
            root_causes=[
                "Dive beyond current O2 tolerance",
                "Inefficient technique increasing consumption",
                "Inadequate surface intervals",
            ],
            recommendations=[
                "Reduce target depth by 5-10m",
                "Increase surface intervals",
                "Focus on efficiency training",
            ],
            training_drills=[
                "Dry O2 tables (1-2x/week max)",
                "Never combine with CO2 tables",
                "Complete hook breathing practice",
            ],
            next_steps=["Conservative progression until tolerance rebuilds"],
            safety_flags=(
                ["Serious O2 symptoms - immediate depth reduction required"]
                if serious else ["Monitor for progression of symptoms"]
            ),
        )

    # -------------------------------------------------
    # S - Squeeze
    # -------------------------------------------------
    def _diagnose_squeeze(self, data: DivePerformanceData) -> EncloseAssessment:
        # Unreachable through diagnose(); kept for direct callers
        squeeze_type = data.squeeze_type or "unknown"

        first = (
            "Rest 1-2 weeks, restart at half depth"
            if squeeze_type == "lung" else "Stop diving immediately"
        )

        return EncloseAssessment(
            category="S",
            priority="critical",
            diagnosis=f"{squeeze_type} squeeze detected",
            root_causes=[
                "Forced equalization under pressure",
                "Tense descent technique",
                "Dive beyond flexibility limits",
            ],
            recommendations=[
                first,
                "Review technique with instructor",
                "Medical evaluation if blood present",
            ],
            training_drills=[
                "Flexibility improvement (NPDs, MDR warm-ups)",
                "Relaxation training",
                "Technique refinement on land",
            ],
            next_steps=["Do not dive until cleared", "Progressive return at reduced depths"],
            safety_flags=["STOP DIVING - squeeze indicates injury risk"],
        )

    # -------------------------------------------------
    # E2 - Equipment
    # -------------------------------------------------
    def _diagnose_equipment(self, data: DivePerformanceData) -> EncloseAssessment:
        return EncloseAssessment(
            category="E2",
            priority="medium",
            diagnosis=f"Equipment issues: {', '.join(data.equipment_issues or [])}",
            root_causes=["Equipment malfunction or poor fit"],
            recommendations=["Address equipment issues before next dive"],
            next_steps=["Test/replace equipment", "Practice with backup gear"],
        )


def diagnose_with_enclose(data: DivePerformanceData) -> List[EncloseAssessment]:
    """Run the ENCLOSE check with the configured rules."""
    return EncloseEngine().diagnose(data)
