# quickplace/engine/__init__.py
from .bands import BANDS, Band, CoarseLevel, coarse_level_of, compare, index_of
from .errors import (
    ConfigurationError,
    InvalidScoreRange,
    PlacementError,
    UnknownAnchorTag,
    UnknownSelfLevel,
    UnsupportedLocale,
)
from .evaluator import ENGINE_VERSION, PlacementResult, evaluate_placement
from .placement_config import PlacementConfig, build_placement_config, get_placement_config
