# quickplace/engine/mapping.py
from __future__ import annotations

from typing import Any, Dict, Optional

from .bands import CoarseLevel, as_distribution
from .errors import InvalidScoreRange, UnknownSelfLevel
from .placement_config import PlacementConfig


def validate_objective_score(score: Any, cfg: PlacementConfig) -> Optional[int]:
    """None means the quiz was skipped. Out-of-range values are never clamped."""
    if score is None:
        return None
    # bool is an int subclass; True is not a quiz score
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidScoreRange(score, cfg.objective_max_score)
    if score < 0 or score > cfg.objective_max_score:
        raise InvalidScoreRange(score, cfg.objective_max_score)
    return score


def validate_self_level(level: Any) -> Optional[CoarseLevel]:
    if level is None:
        return None
    try:
        return CoarseLevel(level)
    except ValueError:
        raise UnknownSelfLevel(level) from None


def map_objective_score(score: int, cfg: PlacementConfig) -> Dict[str, float]:
    score = validate_objective_score(score, cfg)
    if score is None:
        raise InvalidScoreRange(score, cfg.objective_max_score)
    return as_distribution(cfg.objective_table[score])


def map_self_level(level: Optional[CoarseLevel | str], cfg: PlacementConfig) -> Dict[str, float]:
    coarse = validate_self_level(level)
    if coarse is None:
        return as_distribution(cfg.uniform_row)
    return as_distribution(cfg.self_table[coarse])
