# quickplace/routes/placement.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..engine import BANDS, CoarseLevel, ENGINE_VERSION, evaluate_placement
from ..engine.placement_config import SUPPORTED_LOCALES, PlacementConfig, get_placement_config
from ..logging_config import log_event
from ..settings import get_settings

router = APIRouter(prefix="/placement", tags=["placement"])


def require_feature():
    if not get_settings().FEATURE_QUICK_PLACEMENT:
        raise HTTPException(503, "FEATURE_DISABLED")


@router.post("/evaluate", response_model=schemas.PlacementResponse, dependencies=[Depends(require_feature)])
def evaluate(
    payload: schemas.PlacementRequest,
    cfg: PlacementConfig = Depends(get_placement_config),
):
    result = evaluate_placement(
        scene_tags=payload.scene_tags,
        objective_score=payload.objective_score,
        self_assessed_level=payload.self_assessed_level,
        locale=payload.locale,
        cfg=cfg,
    )

    # log the decision, never the raw tags
    log_event(
        "PLACEMENT_EVALUATED",
        "placement evaluated",
        {
            "band": result.mapped_band.value,
            "confidence": round(result.confidence, 3),
            "flags": result.flags,
            "anchor_count": result.breakdown.get("anchor_count"),
            "has_objective": payload.objective_score is not None,
        },
    )
    return {"success": True, "data": result.as_dict()}


@router.get("/config", response_model=schemas.PlacementConfigOut)
def placement_config(cfg: PlacementConfig = Depends(get_placement_config)):
    return {
        "quick_placement_enabled": get_settings().FEATURE_QUICK_PLACEMENT,
        "engine_version": ENGINE_VERSION,
        "bands": [b.value for b in BANDS],
        "coarse_levels": [c.value for c in CoarseLevel],
        "supported_locales": list(SUPPORTED_LOCALES),
        "objective_max_score": cfg.objective_max_score,
        "ladder_thresholds": {f"tier{t}": n for t, n in sorted(cfg.ladder_thresholds.items())},
        "weights": {
            "with_objective": dict(cfg.weights_with_objective),
            "without_objective": dict(cfg.weights_without_objective),
        },
        "min_anchors": cfg.min_anchors,
        "max_evidence": cfg.max_evidence,
        "unknown_tag_policy": cfg.unknown_tag_policy,
    }
