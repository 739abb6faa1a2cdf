# quickplace/engine/diagnostic.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .bands import CoarseLevel
from .placement_config import PlacementConfig
from .scene import SceneResult


@dataclass
class Diagnostic:
    stronger_skills: List[str] = field(default_factory=list)
    weaker_skills: List[str] = field(default_factory=list)
    recommended_focus: List[str] = field(default_factory=list)


def build_diagnostic(scene: SceneResult, objective_score: Optional[int], cfg: PlacementConfig) -> Diagnostic:
    d = Diagnostic()

    if objective_score is not None:
        if objective_score == cfg.objective_max_score:
            d.stronger_skills.append("objective quiz performance")
        elif objective_score == 0:
            d.weaker_skills.append("objective quiz performance")
            d.recommended_focus.append("core listening and reading")

    if scene.ladder.tier3_passed:
        d.stronger_skills.append("scenario application")
    elif not scene.ladder.tier1_passed:
        d.weaker_skills.append("basic everyday scenarios")
        d.recommended_focus.append("everyday expressions")

    return d


def build_rationale(
    scene: SceneResult,
    objective_score: Optional[int],
    self_level: Optional[CoarseLevel],
    cfg: PlacementConfig,
) -> str:
    n = scene.anchor_count
    anchors = f"{n} scene anchor" + ("" if n == 1 else "s")
    if objective_score is None:
        obj = "no objective quiz"
    else:
        obj = f"objective score {objective_score}/{cfg.objective_max_score}"
    self_text = f"self-assessment {self_level.value}" if self_level else "no self-assessment"
    return f"Based on {anchors}, {obj} and {self_text}."
