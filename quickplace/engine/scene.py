# quickplace/engine/scene.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .bands import as_distribution
from .errors import UnknownAnchorTag
from .placement_config import PlacementConfig

logger = logging.getLogger("quickplace")


@dataclass(frozen=True)
class LadderStatus:
    tier1_passed: bool = False
    tier2_passed: bool = False
    tier3_passed: bool = False

    @property
    def highest_tier(self) -> int:
        if self.tier3_passed:
            return 3
        if self.tier2_passed:
            return 2
        if self.tier1_passed:
            return 1
        return 0

    def as_dict(self) -> Dict[str, bool]:
        return {"tier1": self.tier1_passed, "tier2": self.tier2_passed, "tier3": self.tier3_passed}


@dataclass
class SceneResult:
    """
    Output of the scene scorer:

    - distribution: P_scene over every band, sums to 1.
    - ladder: prerequisite-chained tier passes.
    - evidence: recognised distinct tags, alphabetical.
    - tier_counts: distinct recognised tags per tier.
    - ignored_tags: tags not in the catalogue (only under the "ignore" policy).
    """
    distribution: Dict[str, float]
    ladder: LadderStatus
    evidence: List[str] = field(default_factory=list)
    tier_counts: Dict[int, int] = field(default_factory=dict)
    ignored_tags: List[str] = field(default_factory=list)

    @property
    def anchor_count(self) -> int:
        return len(self.evidence)


def partition_tags(tags: Iterable[str], cfg: PlacementConfig) -> Tuple[List[str], List[str]]:
    distinct = set(tags)
    known = sorted(t for t in distinct if t in cfg.anchor_tiers)
    unknown = sorted(t for t in distinct if t not in cfg.anchor_tiers)
    return known, unknown


def ladder_status(tier_counts: Dict[int, int], cfg: PlacementConfig) -> LadderStatus:
    th = cfg.ladder_thresholds
    # each tier needs the one below it: a monotonic prerequisite chain
    t1 = tier_counts.get(1, 0) >= th[1]
    t2 = t1 and tier_counts.get(2, 0) >= th[2]
    t3 = t2 and tier_counts.get(3, 0) >= th[3]
    return LadderStatus(t1, t2, t3)


def score_scene(tags: Iterable[str], cfg: PlacementConfig) -> SceneResult:
    known, unknown = partition_tags(tags, cfg)

    if unknown:
        if cfg.unknown_tag_policy == "reject":
            raise UnknownAnchorTag(unknown)
        logger.warning("Ignoring unknown scene anchor tags: %s", ", ".join(unknown))

    # ---------- bucket by tier ----------
    counts = {1: 0, 2: 0, 3: 0}
    for tag in known:
        counts[cfg.anchor_tiers[tag]] += 1

    # ---------- ladder + reallocation ----------
    ladder = ladder_status(counts, cfg)
    row = cfg.scene_table[ladder.highest_tier]

    return SceneResult(
        distribution=as_distribution(row),
        ladder=ladder,
        evidence=known,
        tier_counts=counts,
        ignored_tags=unknown,
    )
