# quickplace/engine/errors.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List


class PlacementError(ValueError):
    """Base for everything the engine rejects. `code` is stable for API clients."""

    code = "PLACEMENT_ERROR"

    def to_context(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class InvalidScoreRange(PlacementError):
    code = "INVALID_SCORE_RANGE"

    def __init__(self, score: Any, max_score: int):
        self.score = score
        self.max_score = max_score
        super().__init__(f"Objective score must be an integer in [0, {max_score}], got {score!r}")


class UnknownAnchorTag(PlacementError):
    code = "UNKNOWN_ANCHOR_TAG"

    def __init__(self, tags: Iterable[str]):
        self.tags: List[str] = sorted(set(tags))
        super().__init__(f"Unknown scene anchor tag(s): {', '.join(self.tags)}")


class UnknownSelfLevel(PlacementError):
    code = "UNKNOWN_SELF_LEVEL"

    def __init__(self, level: Any):
        self.level = level
        super().__init__(f"Unknown self-assessed level: {level!r}")


class ConfigurationError(PlacementError):
    code = "CONFIGURATION_ERROR"


class UnsupportedLocale(PlacementError):
    code = "UNSUPPORTED_LOCALE"

    def __init__(self, locale: Any):
        self.locale = locale
        super().__init__(f"Unsupported locale: {locale!r}")
