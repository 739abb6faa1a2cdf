# quickplace/tests/test_flags_evidence.py
from __future__ import annotations

from quickplace.engine.bands import Band, CoarseLevel
from quickplace.engine.evidence import build_evidence
from quickplace.engine.flags import (
    CONFLICT_OBJ_SCENE,
    INSUFFICIENT_DATA,
    SELF_GAP_GT1BAND,
    UNKNOWN_ANCHOR_TAGS,
    derive_flags,
)
from quickplace.engine.fusion import fuse_and_select
from quickplace.engine.mapping import map_objective_score, map_self_level
from quickplace.engine.placement_config import ANCHOR_TIERS, build_placement_config
from quickplace.engine.scene import score_scene

CFG = build_placement_config()

TIER1 = [t for t, tier in ANCHOR_TIERS.items() if tier == 1]
TIER2 = [t for t, tier in ANCHOR_TIERS.items() if tier == 2]
TIER3 = [t for t, tier in ANCHOR_TIERS.items() if tier == 3]


def _flags_for(tags, score=None, level=None):
    scene = score_scene(tags, CFG)
    p_obj = map_objective_score(score, CFG) if score is not None else None
    fusion = fuse_and_select(scene.distribution, p_obj, map_self_level(level, CFG), CFG)
    return derive_flags(scene, score, CoarseLevel(level) if level else None, fusion, CFG), fusion


# -------------------------
# FLAG RULES
# -------------------------
def test_insufficient_data_single_anchor():
    flags, fusion = _flags_for(["basic_greeting"], score=1, level="A2")
    assert INSUFFICIENT_DATA in flags


def test_insufficient_data_clears_at_threshold():
    flags, _ = _flags_for(TIER1[:3], score=1, level="A2")
    assert INSUFFICIENT_DATA not in flags


def test_conflict_obj_scene_when_floor_score_meets_full_ladder():
    flags, _ = _flags_for(TIER1[:3] + TIER2[:4] + TIER3[:4], score=0)
    assert CONFLICT_OBJ_SCENE in flags


def test_no_conflict_when_signals_are_adjacent():
    # scene mode A2, objective=2 mode A2+: one step apart
    flags, _ = _flags_for(TIER1[:3], score=2)
    assert CONFLICT_OBJ_SCENE not in flags


def test_no_conflict_without_objective_score():
    flags, _ = _flags_for(TIER1[:3] + TIER2[:4] + TIER3[:4])
    assert CONFLICT_OBJ_SCENE not in flags


def test_self_gap_when_b1_rating_lands_on_a2_plus():
    flags, fusion = _flags_for(TIER1[:3] + TIER2[:4], score=2, level="B1")
    assert fusion.mapped_band == Band.A2_PLUS
    assert SELF_GAP_GT1BAND in flags


def test_self_gap_not_raised_for_matching_rating():
    flags, fusion = _flags_for(TIER1[:3] + ["shopping_direction"], score=2, level="A2")
    assert fusion.mapped_band == Band.A2
    assert flags == []


def test_unknown_tag_flag():
    flags, _ = _flags_for(TIER1[:3] + ["not_a_scene"], score=1)
    assert UNKNOWN_ANCHOR_TAGS in flags


def test_flags_can_coexist():
    flags, _ = _flags_for(["basic_greeting"], score=0, level="B2")
    assert INSUFFICIENT_DATA in flags
    assert SELF_GAP_GT1BAND in flags


def test_flags_do_not_touch_fused_output():
    scene = score_scene(["basic_greeting"], CFG)
    fusion = fuse_and_select(scene.distribution, map_objective_score(0, CFG), map_self_level("B2", CFG), CFG)
    before = dict(fusion.distribution)
    derive_flags(scene, 0, CoarseLevel.B2, fusion, CFG)
    assert fusion.distribution == before
    assert fusion.mapped_band == Band.A2_MINUS


# -------------------------
# EVIDENCE
# -------------------------
def test_evidence_priority_order():
    tags = ["formal_greeting", "travel_booking", "work_email", "shopping_direction", "daily_time"]
    phrases = CFG.anchor_phrases["en"]
    assert build_evidence(tags, CFG) == [
        phrases["work_email"],
        phrases["travel_booking"],
        phrases["shopping_direction"],
        phrases["formal_greeting"],
        phrases["daily_time"],
    ]


def test_evidence_zh_phrases():
    tags = ["formal_greeting", "travel_booking", "work_email", "shopping_direction", "daily_time"]
    evidence = build_evidence(tags, CFG, locale="zh")
    for phrase in ("正式问候", "旅行预订", "工作邮件", "购物问路"):
        assert phrase in evidence


def test_evidence_cap_with_ten_tags():
    tags = TIER1[:4] + TIER2[:3] + TIER3[:3]
    assert len(set(tags)) == 10
    assert len(build_evidence(tags, CFG)) <= CFG.max_evidence


def test_evidence_cap_keeps_top_ranked():
    evidence = build_evidence(list(ANCHOR_TIERS), CFG)
    phrases = CFG.anchor_phrases["en"]
    assert evidence == [phrases[t] for t in CFG.anchor_priority[:6]]


def test_evidence_empty_input():
    assert build_evidence([], CFG) == []


def test_evidence_skips_unknown_and_duplicates():
    evidence = build_evidence(["work_email", "work_email", "mystery"], CFG)
    assert evidence == [CFG.anchor_phrases["en"]["work_email"]]
