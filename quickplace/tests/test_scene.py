# quickplace/tests/test_scene.py
from __future__ import annotations

import itertools
import math

import pytest

from quickplace.engine.bands import BANDS, Band, as_row, compare, index_of, coarse_level_of, CoarseLevel
from quickplace.engine.errors import UnknownAnchorTag
from quickplace.engine.fusion import select_band
from quickplace.engine.placement_config import ANCHOR_TIERS, build_placement_config
from quickplace.engine.scene import score_scene

CFG = build_placement_config()

TIER1 = [t for t, tier in ANCHOR_TIERS.items() if tier == 1]
TIER2 = [t for t, tier in ANCHOR_TIERS.items() if tier == 2]
TIER3 = [t for t, tier in ANCHOR_TIERS.items() if tier == 3]


def _assert_valid(dist):
    assert set(dist) == {b.value for b in BANDS}
    assert all(0.0 <= p <= 1.0 for p in dist.values())
    assert math.isclose(sum(dist.values()), 1.0, abs_tol=1e-9)


# -------------------------
# BAND SCALE
# -------------------------
def test_band_order_is_fixed():
    assert [b.value for b in BANDS] == ["A2-", "A2", "A2+", "B1-", "B1"]
    assert [index_of(b) for b in BANDS] == [0, 1, 2, 3, 4]


def test_index_of_accepts_labels():
    assert index_of("A2+") == index_of(Band.A2_PLUS) == 2


def test_compare_follows_index_order():
    assert compare("A2-", "B1") == -1
    assert compare(Band.B1_MINUS, Band.A2) == 1
    assert compare("A2", Band.A2) == 0


def test_unknown_band_label_is_a_contract_violation():
    with pytest.raises(ValueError):
        index_of("C1")


def test_coarse_collapse():
    assert {coarse_level_of(b) for b in ("A2-", "A2", "A2+")} == {CoarseLevel.A2}
    assert {coarse_level_of(b) for b in ("B1-", "B1")} == {CoarseLevel.B1}


# -------------------------
# LADDER RULE
# -------------------------
def test_empty_tags_base_distribution():
    res = score_scene([], CFG)
    assert res.ladder.as_dict() == {"tier1": False, "tier2": False, "tier3": False}
    assert res.evidence == []
    assert select_band(res.distribution) == Band.A2_MINUS
    assert as_row(res.distribution) == CFG.scene_table[0]


def test_single_anchor_stays_low():
    res = score_scene(["basic_greeting"], CFG)
    assert res.ladder.tier1_passed is False
    assert res.distribution["A2-"] > 0.5


def test_tier1_pass_moves_mode_to_a2():
    res = score_scene(TIER1[:3], CFG)
    assert res.ladder.tier1_passed is True
    assert res.ladder.tier2_passed is False
    assert select_band(res.distribution) == Band.A2
    # no B1 mass until tier 2 passes
    assert res.distribution["B1-"] == 0.0
    assert res.distribution["B1"] == 0.0


def test_tier2_pass_concentrates_upper_a2_and_opens_b1():
    res = score_scene(TIER1[:3] + TIER2[:4], CFG)
    assert res.ladder.tier2_passed is True
    assert res.ladder.tier3_passed is False
    assert select_band(res.distribution) == Band.A2_PLUS
    assert res.distribution["B1-"] + res.distribution["B1"] > 0.0


def test_tier3_pass_moves_mode_into_b1_group():
    res = score_scene(TIER1[:3] + TIER2[:4] + TIER3[:4], CFG)
    assert res.ladder.as_dict() == {"tier1": True, "tier2": True, "tier3": True}
    assert select_band(res.distribution) == Band.B1_MINUS
    assert res.distribution["B1-"] > 0.4


def test_tier2_not_credited_without_tier1():
    res = score_scene(TIER1[:2] + TIER2, CFG)
    assert res.tier_counts[2] == 6
    assert res.ladder.tier1_passed is False
    assert res.ladder.tier2_passed is False
    assert as_row(res.distribution) == CFG.scene_table[0]


def test_tier3_not_credited_without_tier2():
    res = score_scene(TIER1[:3] + TIER2[:3] + TIER3, CFG)
    assert res.ladder.tier1_passed is True
    assert res.ladder.tier2_passed is False
    assert res.ladder.tier3_passed is False


def test_ladder_monotonic_for_every_count_combination():
    for n1, n2, n3 in itertools.product(range(7), repeat=3):
        res = score_scene(TIER1[:n1] + TIER2[:n2] + TIER3[:n3], CFG)
        lad = res.ladder
        assert (not lad.tier2_passed) or lad.tier1_passed, (n1, n2, n3)
        assert (not lad.tier3_passed) or lad.tier2_passed, (n1, n2, n3)
        _assert_valid(res.distribution)


def test_duplicate_tags_are_idempotent():
    res = score_scene(["basic_greeting"] * 5 + ["daily_time", "daily_time"], CFG)
    assert res.tier_counts[1] == 2
    assert res.evidence == ["basic_greeting", "daily_time"]
    assert res.ladder.tier1_passed is False


def test_custom_thresholds():
    cfg = build_placement_config(ladder_thresholds={1: 1, 2: 1, 3: 1})
    res = score_scene(["basic_greeting", "restaurant_order", "work_email"], cfg)
    assert res.ladder.tier3_passed is True


# -------------------------
# UNKNOWN TAGS
# -------------------------
def test_unknown_tags_ignored_by_default():
    res = score_scene(["basic_greeting", "made_up_scene", "another_one"], CFG)
    assert res.ignored_tags == ["another_one", "made_up_scene"]
    assert res.evidence == ["basic_greeting"]
    assert res.anchor_count == 1


def test_unknown_tags_rejected_under_reject_policy():
    cfg = build_placement_config(unknown_tag_policy="reject")
    with pytest.raises(UnknownAnchorTag) as exc:
        score_scene(["basic_greeting", "made_up_scene"], cfg)
    assert exc.value.tags == ["made_up_scene"]
    assert exc.value.code == "UNKNOWN_ANCHOR_TAG"
