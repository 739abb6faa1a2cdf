# quickplace/engine/fusion.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np

from .bands import BANDS, Band, as_distribution, as_row
from .placement_config import PlacementConfig


@dataclass(frozen=True)
class FusionOut:
    distribution: Dict[str, float]
    mapped_band: Band
    confidence: float
    weights: Dict[str, float]


def fusion_weights(has_objective: bool, cfg: PlacementConfig) -> Dict[str, float]:
    """Weights actually applied; objective is reported as 0 when the quiz was skipped."""
    if has_objective:
        return dict(cfg.weights_with_objective)
    w = cfg.weights_without_objective
    return {"scene": w["scene"], "objective": 0.0, "self": w["self"]}


def fuse(
    p_scene: Mapping[str, float],
    p_obj: Optional[Mapping[str, float]],
    p_self: Mapping[str, float],
    cfg: PlacementConfig,
) -> Dict[str, float]:
    """
    Weighted linear pool of the per-signal distributions.

    p_obj=None means no objective score: the objective term is left out of the
    sum entirely (not replaced by a uniform row), and the no-objective weight
    set is used instead.
    """
    scene = np.asarray(as_row(p_scene), dtype=float)
    self_ = np.asarray(as_row(p_self), dtype=float)

    if p_obj is not None:
        w = cfg.weights_with_objective
        obj = np.asarray(as_row(p_obj), dtype=float)
        fused = w["scene"] * scene + w["objective"] * obj + w["self"] * self_
    else:
        w = cfg.weights_without_objective
        fused = w["scene"] * scene + w["self"] * self_

    z = float(fused.sum())
    if z <= 0.0:
        fused = np.full(len(BANDS), 1.0 / len(BANDS))
    else:
        fused = fused / z

    return as_distribution(fused)


def select_band(distribution: Mapping[str, float]) -> Band:
    # np.argmax returns the first maximum, i.e. the lower band on a tie
    row = np.asarray(as_row(distribution), dtype=float)
    return BANDS[int(np.argmax(row))]


def fuse_and_select(
    p_scene: Mapping[str, float],
    p_obj: Optional[Mapping[str, float]],
    p_self: Mapping[str, float],
    cfg: PlacementConfig,
) -> FusionOut:
    fused = fuse(p_scene, p_obj, p_self, cfg)
    band = select_band(fused)
    return FusionOut(
        distribution=fused,
        mapped_band=band,
        confidence=fused[band.value],
        weights=fusion_weights(p_obj is not None, cfg),
    )
