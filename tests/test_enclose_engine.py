"""Tests for the ENCLOSE diagnostic engine.

Covers category triggers, per-category priorities and flags, EQ plateau
bands and the priority ordering of the result.
"""

import pytest

from divecoach.enclose.engine import EncloseEngine, diagnose_with_enclose, format_depth
from divecoach.enclose.rules import EncloseRules

PRIORITY_RANK = {"critical": 0, "high": 1, "medium": 2, "low": 3}
EVALUATION_ORDER = ["E", "N", "C", "L", "O", "S", "E2"]


def _by_category(assessments):
    return {a.category: a for a in assessments}


# ---------------------------------------------------------
# Result shape
# ---------------------------------------------------------
def test_no_findings_returns_empty_list(engine, make_dive):
    assert engine.diagnose(make_dive()) == []


def test_every_category_triggers_once_and_is_sorted(engine, make_dive):
    dive = make_dive(
        eq_failure_type="painful",
        narcosis_depth=30,
        contractions_start_time=30,
        leg_burn_depth=10,
        o2_symptoms=["tingling"],
        squeeze_type="sinus",
        equipment_issues=["mask leak"],
    )

    result = engine.diagnose(dive)
    categories = [a.category for a in result]

    assert len(result) == 7
    assert len(set(categories)) == 7
    assert categories == ["S", "E", "O", "N", "C", "L", "E2"]


def test_result_is_ordered_by_priority_then_evaluation_order(engine, make_dive):
    dive = make_dive(
        eq_failure_type="painful",
        narcosis_symptoms=["tunnel vision"],
        o2_symptoms=["tingling"],
        equipment_issues=["fin strap"],
    )

    result = engine.diagnose(dive)
    keys = [
        (PRIORITY_RANK[a.priority], EVALUATION_ORDER.index(a.category))
        for a in result
    ]

    assert keys == sorted(keys)
    assert [a.category for a in result] == ["E", "O", "N", "E2"]


def test_module_level_helper_matches_engine(engine, make_dive):
    dive = make_dive(squeeze_type="ear", o2_symptoms=["LMC on surface"])
    assert diagnose_with_enclose(dive) == engine.diagnose(dive)


# ---------------------------------------------------------
# E - Equalization
# ---------------------------------------------------------
def test_eq_depth_alone_gives_base_diagnosis(engine, make_dive):
    e = _by_category(engine.diagnose(make_dive(eq_failure_depth=40)))["E"]

    assert e.priority == "high"
    assert e.diagnosis == "Equalization failure"
    assert e.root_causes == []
    assert e.next_steps == [
        "Fix technique issues before depth progression",
        "Test in controlled environment",
    ]


def test_cant_equalize(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_type="cant_equalize"))[0]

    assert e.diagnosis == "Unable to equalize - technique or anatomy issue"
    assert e.root_causes == ["Poor Frenzel technique", "Soft palate or glottis tension"]
    assert "Tongue-out EQ test" in e.training_drills
    assert e.safety_flags == []


def test_swallowed_mouthfill_escalates_to_critical(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_type="swallowed_mouthfill"))[0]

    assert e.category == "E"
    assert e.priority == "critical"
    assert e.diagnosis == "Mouthfill management failure"
    assert e.safety_flags == ["Do not attempt mouthfill until technique is solid"]


def test_air_ran_out(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_type="air_ran_out"))[0]

    assert e.diagnosis == "Insufficient air volume for equalization"
    assert "Mouthfill too small or taken too shallow" in e.root_causes
    assert e.training_drills == []


@pytest.mark.parametrize(
    "depth,diagnosis",
    [
        (55, "58m plateau - classic mouthfill timing issue"),
        (62, "58m plateau - classic mouthfill timing issue"),
        (75, "70-82m plateau - pocket management failure"),
        (95, "88-98m plateau - technique breakdown under pressure"),
    ],
)
def test_plateau_band_replaces_diagnosis(engine, make_dive, depth, diagnosis):
    e = engine.diagnose(make_dive(eq_failure_depth=depth))[0]
    assert e.diagnosis == diagnosis


def test_plateau_band_appends_after_failure_type(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_depth=58, eq_failure_type="air_ran_out"))[0]

    assert e.diagnosis == "58m plateau - classic mouthfill timing issue"
    assert e.priority == "high"
    assert e.root_causes == [
        "Mouthfill too small or taken too shallow",
        "Inefficient EQ technique",
        "Late/too-small mouthfill",
        "Soft palate misrouting",
    ]
    assert e.recommendations[-1] == "Practice soft palate control"


def test_plateau_band_keeps_critical_priority(engine, make_dive):
    e = engine.diagnose(
        make_dive(eq_failure_depth=75, eq_failure_type="swallowed_mouthfill")
    )[0]

    assert e.priority == "critical"
    assert e.diagnosis == "70-82m plateau - pocket management failure"
    assert e.training_drills[-2:] == ["Glottis lock holds", "Cheek resistance training"]


def test_deep_plateau_adds_safety_flag(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_depth=92))[0]
    assert e.safety_flags == ["Check for tongue-soft-palate lock compensation"]


def test_depth_on_band_boundary_applies_both_bands(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_depth=85))[0]

    assert e.diagnosis == "88-98m plateau - technique breakdown under pressure"
    assert "Glottis micro-leaks" in e.root_causes
    assert "EQ stride collapse" in e.root_causes
    assert "Glottis lock holds" in e.training_drills


def test_depth_between_bands_keeps_base_diagnosis(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_depth=65))[0]
    assert e.diagnosis == "Equalization failure"


def test_extended_neck_adds_cause(engine, make_dive):
    e = engine.diagnose(make_dive(eq_failure_type="painful", neck_position="extended"))[0]

    assert e.root_causes == ["Neck extension kinking Eustachian tubes"]
    assert e.recommendations == ["Practice neutral or slightly tucked neck position"]


def test_neck_position_alone_does_not_trigger(engine, make_dive):
    assert engine.diagnose(make_dive(neck_position="extended")) == []


# ---------------------------------------------------------
# N - Narcosis
# ---------------------------------------------------------
def test_deep_narcosis_gets_medical_flag(engine, make_dive):
    n = engine.diagnose(make_dive(narcosis_depth=45))[0]

    assert n.category == "N"
    assert n.priority == "medium"
    assert n.diagnosis == "Nitrogen narcosis at 45m"
    assert n.safety_flags == ["Significant narcosis - medical evaluation recommended"]


def test_shallow_narcosis_has_no_flag(engine, make_dive):
    n = engine.diagnose(make_dive(narcosis_depth=40))[0]
    assert n.safety_flags == []


def test_narcosis_symptoms_without_depth(engine, make_dive):
    n = engine.diagnose(make_dive(narcosis_symptoms=["slow thinking"]))[0]

    assert n.diagnosis == "Nitrogen narcosis at unknown depth"
    assert n.safety_flags == []


def test_empty_narcosis_symptoms_do_not_trigger(engine, make_dive):
    assert engine.diagnose(make_dive(narcosis_symptoms=[])) == []


def test_narcosis_depth_keeps_reported_precision(engine, make_dive):
    n = engine.diagnose(make_dive(narcosis_depth=1234567))[0]
    assert n.diagnosis == "Nitrogen narcosis at 1234567m"

    n = engine.diagnose(make_dive(narcosis_depth=42.35))[0]
    assert n.diagnosis == "Nitrogen narcosis at 42.35m"


# ---------------------------------------------------------
# C - CO2 tolerance
# ---------------------------------------------------------
def test_very_early_contractions(engine, make_dive):
    c = engine.diagnose(make_dive(dive_time_seconds=200, contractions_start_time=20))[0]

    assert c.category == "C"
    assert c.priority == "high"
    assert c.diagnosis == "Early contractions at 10% of dive"
    assert c.safety_flags == ["Very early contractions - check for medical issues"]


def test_early_contractions_between_thresholds(engine, make_dive):
    c = engine.diagnose(make_dive(dive_time_seconds=100, contractions_start_time=17))[0]

    assert c.priority == "high"
    assert c.safety_flags == []


def test_moderately_early_contractions_are_medium(engine, make_dive):
    c = engine.diagnose(make_dive(dive_time_seconds=100, contractions_start_time=25))[0]

    assert c.priority == "medium"
    assert c.diagnosis == "Early contractions at 25% of dive"
    assert c.next_steps[0] == "Reduce target depth until tolerance improves"


def test_late_contractions_do_not_trigger(engine, make_dive):
    dive = make_dive(dive_time_seconds=100, contractions_start_time=40)
    assert engine.diagnose(dive) == []


def test_zero_dive_time_does_not_trigger(engine, make_dive):
    dive = make_dive(dive_time_seconds=0, contractions_start_time=10)
    assert engine.diagnose(dive) == []


def test_zero_contraction_time_counts_as_not_observed(engine, make_dive):
    assert engine.diagnose(make_dive(contractions_start_time=0)) == []


# ---------------------------------------------------------
# L - Leg fatigue
# ---------------------------------------------------------
def test_early_leg_burn(engine, make_dive):
    l = engine.diagnose(make_dive(reached_depth_m=60, leg_burn_depth=20))[0]

    assert l.category == "L"
    assert l.priority == "medium"
    assert l.diagnosis == "Leg fatigue at 20m (early in dive)"
    assert l.safety_flags == []


def test_leg_burn_depth_keeps_reported_precision(engine, make_dive):
    l = engine.diagnose(make_dive(reached_depth_m=60, leg_burn_depth=12.3456789))[0]
    assert l.diagnosis == "Leg fatigue at 12.3456789m (early in dive)"

    l = engine.diagnose(make_dive(reached_depth_m=60, leg_burn_depth=12.35))[0]
    assert l.diagnosis == "Leg fatigue at 12.35m (early in dive)"


def test_format_depth():
    assert format_depth(20.0) == "20"
    assert format_depth(1234567) == "1234567"
    assert format_depth(0.5) == "0.5"


def test_late_leg_burn_does_not_trigger(engine, make_dive):
    assert engine.diagnose(make_dive(reached_depth_m=60, leg_burn_depth=36)) == []


def test_leg_burn_at_exact_half_does_not_trigger(engine, make_dive):
    assert engine.diagnose(make_dive(reached_depth_m=60, leg_burn_depth=30)) == []


# ---------------------------------------------------------
# O - O2 tolerance
# ---------------------------------------------------------
def test_mild_o2_symptoms_are_high(engine, make_dive):
    o = engine.diagnose(make_dive(o2_symptoms=["mild fatigue"]))[0]

    assert o.category == "O"
    assert o.priority == "high"
    assert o.safety_flags == ["Monitor for progression of symptoms"]


def test_blackout_is_critical(engine, make_dive):
    o = engine.diagnose(make_dive(o2_symptoms=["blackout"]))[0]

    assert o.priority == "critical"
    assert o.safety_flags == ["Serious O2 symptoms - immediate depth reduction required"]


def test_serious_marker_matches_substring(engine, make_dive):
    o = engine.diagnose(make_dive(o2_symptoms=["tingling", "visual disturbance"]))[0]

    assert o.priority == "critical"
    assert o.diagnosis == "O2 symptoms: tingling, visual disturbance"


def test_serious_marker_match_is_case_sensitive(engine, make_dive):
    o = engine.diagnose(make_dive(o2_symptoms=["lmc"]))[0]
    assert o.priority == "high"


def test_custom_serious_markers(make_dive):
    engine = EncloseEngine(rules=EncloseRules(serious_o2_markers=["tunnel"]))

    o = engine.diagnose(make_dive(o2_symptoms=["tunnel vision"]))[0]
    assert o.priority == "critical"

    o = engine.diagnose(make_dive(o2_symptoms=["blackout"]))[0]
    assert o.priority == "high"


# ---------------------------------------------------------
# S - Squeeze
# ---------------------------------------------------------
@pytest.mark.parametrize("squeeze_type", ["ear", "sinus", "throat"])
def test_squeeze_stops_diving(engine, make_dive, squeeze_type):
    result = engine.diagnose(make_dive(squeeze_type=squeeze_type))
    s = [a for a in result if a.category == "S"]

    assert len(s) == 1
    assert s[0].priority == "critical"
    assert s[0].diagnosis == f"{squeeze_type} squeeze detected"
    assert s[0].recommendations[0] == "Stop diving immediately"
    assert "STOP DIVING - squeeze indicates injury risk" in s[0].safety_flags


def test_lung_squeeze_rest_recommendation(engine, make_dive):
    s = engine.diagnose(make_dive(squeeze_type="lung"))[0]

    assert s.recommendations == [
        "Rest 1-2 weeks, restart at half depth",
        "Review technique with instructor",
        "Medical evaluation if blood present",
    ]


def test_squeeze_without_type_falls_back_to_unknown(engine, make_dive):
    # diagnose() only runs the S check when squeeze_type is set, so the
    # "unknown" fallback is reachable only by calling the check directly.
    s = engine._diagnose_squeeze(make_dive())

    assert s.diagnosis == "unknown squeeze detected"
    assert s.recommendations[0] == "Stop diving immediately"


# ---------------------------------------------------------
# E2 - Equipment
# ---------------------------------------------------------
def test_equipment_issues(engine, make_dive):
    e2 = engine.diagnose(make_dive(equipment_issues=["mask leak", "loose weight belt"]))[0]

    assert e2.category == "E2"
    assert e2.priority == "medium"
    assert e2.diagnosis == "Equipment issues: mask leak, loose weight belt"
    assert e2.root_causes == ["Equipment malfunction or poor fit"]
    assert e2.training_drills == []
    assert e2.safety_flags == []


# ---------------------------------------------------------
# End to end
# ---------------------------------------------------------
def test_plateau_failure_with_ear_squeeze(engine, make_dive):
    dive = make_dive(
        target_depth_m=80,
        reached_depth_m=75,
        dive_time_seconds=150,
        discipline="CWT",
        eq_failure_depth=58,
        eq_failure_type="cant_equalize",
        squeeze_type="ear",
    )

    result = engine.diagnose(dive)

    assert [a.category for a in result] == ["S", "E"]
    assert result[0].priority == "critical"
    assert result[0].safety_flags == ["STOP DIVING - squeeze indicates injury risk"]
    assert result[1].priority == "high"
    assert result[1].diagnosis == "58m plateau - classic mouthfill timing issue"
    assert result[1].root_causes[:2] == [
        "Poor Frenzel technique",
        "Soft palate or glottis tension",
    ]


def test_engine_does_not_mutate_input(engine, make_dive):
    dive = make_dive(o2_symptoms=["blackout"], equipment_issues=["mask"])
    before = dive.model_dump()

    engine.diagnose(dive)
    engine.diagnose(dive)

    assert dive.model_dump() == before
