# quickplace/engine/evidence.py
from __future__ import annotations

from typing import Iterable, List

from .placement_config import PlacementConfig


def build_evidence(tags: Iterable[str], cfg: PlacementConfig, locale: str = "en") -> List[str]:
    """
    Up to cfg.max_evidence phrases, highest-priority scenarios first.
    Unknown tags have no phrase and are skipped.
    """
    phrases = cfg.anchor_phrases[locale]
    known = {t for t in tags if t in cfg.anchor_tiers}
    ranked = sorted(known, key=cfg.priority_rank)
    return [phrases[t] for t in ranked[: cfg.max_evidence]]
