# quickplace/engine/bands.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping, Tuple


class Band(str, Enum):
    A2_MINUS = "A2-"
    A2 = "A2"
    A2_PLUS = "A2+"
    B1_MINUS = "B1-"
    B1 = "B1"


class CoarseLevel(str, Enum):
    PRE_A = "Pre-A"
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"


# lowest -> highest, never reordered
BANDS: Tuple[Band, ...] = tuple(Band)

_INDEX: Dict[Band, int] = {b: i for i, b in enumerate(BANDS)}

# many-to-one collapse used for mapped_coarse_level
_COARSE_OF_BAND: Dict[Band, CoarseLevel] = {
    Band.A2_MINUS: CoarseLevel.A2,
    Band.A2: CoarseLevel.A2,
    Band.A2_PLUS: CoarseLevel.A2,
    Band.B1_MINUS: CoarseLevel.B1,
    Band.B1: CoarseLevel.B1,
}

# where a self-rating sits on the micro-band scale (clamped at both ends)
_BAND_OF_COARSE: Dict[CoarseLevel, Band] = {
    CoarseLevel.PRE_A: Band.A2_MINUS,
    CoarseLevel.A1: Band.A2_MINUS,
    CoarseLevel.A2: Band.A2,
    CoarseLevel.B1: Band.B1,
    CoarseLevel.B2: Band.B1,
}


def index_of(band: Band | str) -> int:
    return _INDEX[Band(band)]


def compare(a: Band | str, b: Band | str) -> int:
    """-1 / 0 / 1 following scale order."""
    ia, ib = index_of(a), index_of(b)
    return (ia > ib) - (ia < ib)


def band_distance(a: Band | str, b: Band | str) -> int:
    return abs(index_of(a) - index_of(b))


def coarse_level_of(band: Band | str) -> CoarseLevel:
    return _COARSE_OF_BAND[Band(band)]


def band_of_coarse(level: CoarseLevel | str) -> Band:
    return _BAND_OF_COARSE[CoarseLevel(level)]


def as_distribution(values) -> Dict[str, float]:
    """Row of floats (scale order) -> {band label: prob}."""
    row = [float(v) for v in values]
    if len(row) != len(BANDS):
        raise ValueError(f"Expected {len(BANDS)} values, got {len(row)}")
    return {b.value: p for b, p in zip(BANDS, row)}


def as_row(distribution: Mapping[str, float]) -> Tuple[float, ...]:
    return tuple(float(distribution[b.value]) for b in BANDS)
