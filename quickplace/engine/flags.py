# quickplace/engine/flags.py
from __future__ import annotations

from typing import List, Optional

from .bands import CoarseLevel, band_distance, band_of_coarse
from .fusion import FusionOut, select_band
from .mapping import map_objective_score
from .placement_config import PlacementConfig
from .scene import SceneResult

INSUFFICIENT_DATA = "insufficient_data"
CONFLICT_OBJ_SCENE = "conflict_obj_scene"
SELF_GAP_GT1BAND = "self_gap_gt1band"
UNKNOWN_ANCHOR_TAGS = "unknown_anchor_tags"

ALL_FLAGS = (INSUFFICIENT_DATA, CONFLICT_OBJ_SCENE, SELF_GAP_GT1BAND, UNKNOWN_ANCHOR_TAGS)


def derive_flags(
    scene: SceneResult,
    objective_score: Optional[int],
    self_level: Optional[CoarseLevel],
    fusion: FusionOut,
    cfg: PlacementConfig,
) -> List[str]:
    """
    Advisory diagnostics. Rules are independent; none of them feeds back into
    the fused distribution or the mapped band.
    """
    flags: List[str] = []

    # sparse evidence, whatever the other signals say
    if scene.anchor_count < cfg.min_anchors:
        flags.append(INSUFFICIENT_DATA)

    # quiz and scenes point more than one band apart
    if objective_score is not None:
        obj_band = select_band(map_objective_score(objective_score, cfg))
        scene_band = select_band(scene.distribution)
        if band_distance(obj_band, scene_band) > 1:
            flags.append(CONFLICT_OBJ_SCENE)

    if self_level is not None:
        if band_distance(band_of_coarse(self_level), fusion.mapped_band) > 1:
            flags.append(SELF_GAP_GT1BAND)

    if scene.ignored_tags:
        flags.append(UNKNOWN_ANCHOR_TAGS)

    return flags
