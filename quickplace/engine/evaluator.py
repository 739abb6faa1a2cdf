# quickplace/engine/evaluator.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .bands import Band, CoarseLevel, coarse_level_of
from .diagnostic import Diagnostic, build_diagnostic, build_rationale
from .errors import UnsupportedLocale
from .evidence import build_evidence
from .flags import derive_flags
from .fusion import fuse_and_select
from .mapping import map_objective_score, map_self_level, validate_objective_score, validate_self_level
from .placement_config import SUPPORTED_LOCALES, PlacementConfig, get_placement_config
from .scene import LadderStatus, score_scene
from ..settings import get_settings

ENGINE_VERSION = get_settings().ENGINE_VERSION


@dataclass(frozen=True)
class PlacementResult:
    mapped_band: Band
    mapped_coarse_level: CoarseLevel
    confidence: float
    distribution: Dict[str, float]
    ladder_status: LadderStatus
    flags: List[str] = field(default_factory=list)
    evidence_phrases: List[str] = field(default_factory=list)
    # non-decision metadata
    ignored_tags: List[str] = field(default_factory=list)
    rationale: str = ""
    diagnostic: Diagnostic = field(default_factory=Diagnostic)
    breakdown: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "mapped_band": self.mapped_band.value,
            "mapped_coarse_level": self.mapped_coarse_level.value,
            "confidence": self.confidence,
            "band_distribution": dict(self.distribution),
            "ladder_status": self.ladder_status.as_dict(),
            "flags": list(self.flags),
            "evidence_phrases": list(self.evidence_phrases),
            "ignored_tags": list(self.ignored_tags),
            "rationale": self.rationale,
            "diagnostic": {
                "stronger_skills": list(self.diagnostic.stronger_skills),
                "weaker_skills": list(self.diagnostic.weaker_skills),
                "recommended_focus": list(self.diagnostic.recommended_focus),
            },
            "breakdown": {
                **self.breakdown,
                "tier_counts": dict(self.breakdown.get("tier_counts", {})),
                "fusion_weights": dict(self.breakdown.get("fusion_weights", {})),
                "objective_score": (
                    dict(self.breakdown["objective_score"]) if self.breakdown.get("objective_score") else None
                ),
            },
        }


def evaluate_placement(
    scene_tags: Optional[Iterable[str]] = None,
    objective_score: Optional[int] = None,
    self_assessed_level: Optional[CoarseLevel | str] = None,
    locale: str = "en",
    cfg: Optional[PlacementConfig] = None,
) -> PlacementResult:
    """
    One synchronous placement evaluation.

    Pure: no I/O, no clock, no randomness. Either every input validates and a
    complete result comes back, or a PlacementError is raised.
    """
    cfg = cfg or get_placement_config()

    # ---------- boundary validation ----------
    score = validate_objective_score(objective_score, cfg)
    self_level = validate_self_level(self_assessed_level)
    if locale not in SUPPORTED_LOCALES:
        raise UnsupportedLocale(locale)
    tags = list(scene_tags or [])

    # ---------- per-signal distributions ----------
    scene = score_scene(tags, cfg)
    p_obj = map_objective_score(score, cfg) if score is not None else None
    p_self = map_self_level(self_level, cfg)

    # ---------- fusion ----------
    fusion = fuse_and_select(scene.distribution, p_obj, p_self, cfg)

    # ---------- advisory ----------
    flags = derive_flags(scene, score, self_level, fusion, cfg)
    evidence = build_evidence(scene.evidence, cfg, locale)

    breakdown: Dict[str, Any] = {
        "tier_counts": {f"tier{t}": n for t, n in sorted(scene.tier_counts.items())},
        "objective_score": None,
        "self_assessment": self_level.value if self_level else None,
        "fusion_weights": dict(fusion.weights),
        "anchor_count": scene.anchor_count,
        "engine_version": ENGINE_VERSION,
    }
    if score is not None:
        breakdown["objective_score"] = {
            "correct": score,
            "total": cfg.objective_max_score,
            "accuracy": round(score / cfg.objective_max_score, 3) if cfg.objective_max_score else 0.0,
        }

    return PlacementResult(
        mapped_band=fusion.mapped_band,
        mapped_coarse_level=coarse_level_of(fusion.mapped_band),
        confidence=fusion.confidence,
        distribution=fusion.distribution,
        ladder_status=scene.ladder,
        flags=flags,
        evidence_phrases=evidence,
        ignored_tags=scene.ignored_tags,
        rationale=build_rationale(scene, score, self_level, cfg),
        diagnostic=build_diagnostic(scene, score, cfg),
        breakdown=breakdown,
    )
