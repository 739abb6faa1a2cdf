# quickplace/schemas.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlacementRequest(BaseModel):
    # Range / enum checks are left to the engine so that callers get the
    # engine's own error codes (INVALID_SCORE_RANGE, UNKNOWN_SELF_LEVEL, ...).
    scene_tags: List[str] = Field(default_factory=list)
    # Any, so "2", 2.0 and true reach the engine and get INVALID_SCORE_RANGE
    # instead of being coerced to an int here.
    objective_score: Optional[Any] = Field(None, description="Correct answers; omit if the quiz was skipped")
    self_assessed_level: Optional[str] = Field(None, description="Pre-A, A1, A2, B1 or B2")
    locale: str = "en"

    model_config = ConfigDict(extra="ignore")

    @field_validator("scene_tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any):
        if v is None:
            return []
        return v


class LadderOut(BaseModel):
    tier1: bool
    tier2: bool
    tier3: bool


class DiagnosticOut(BaseModel):
    stronger_skills: List[str] = Field(default_factory=list)
    weaker_skills: List[str] = Field(default_factory=list)
    recommended_focus: List[str] = Field(default_factory=list)


class PlacementOut(BaseModel):
    mapped_band: str
    mapped_coarse_level: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    band_distribution: Dict[str, float]
    ladder_status: LadderOut
    flags: List[str] = Field(default_factory=list)
    evidence_phrases: List[str] = Field(default_factory=list)
    ignored_tags: List[str] = Field(default_factory=list)
    rationale: str = ""
    diagnostic: DiagnosticOut = Field(default_factory=DiagnosticOut)
    breakdown: Dict[str, Any] = Field(default_factory=dict)


class PlacementResponse(BaseModel):
    success: bool = True
    data: PlacementOut


class PlacementConfigOut(BaseModel):
    quick_placement_enabled: bool
    engine_version: str
    bands: List[str]
    coarse_levels: List[str]
    supported_locales: List[str]
    objective_max_score: int
    ladder_thresholds: Dict[str, int]
    weights: Dict[str, Dict[str, float]]
    min_anchors: int
    max_evidence: int
    unknown_tag_policy: str
