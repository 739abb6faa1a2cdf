# quickplace/engine/placement_config.py
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .bands import BANDS, CoarseLevel
from .errors import ConfigurationError

# Rows below are in scale order: A2-, A2, A2+, B1-, B1.

SUPPORTED_LOCALES: Tuple[str, ...] = ("en", "zh", "ar")

UNKNOWN_TAG_POLICIES: Tuple[str, ...] = ("ignore", "reject")

# tag -> ladder tier
ANCHOR_TIERS = {
    # tier 1 (A1-equivalent)
    "basic_greeting": 1,
    "formal_greeting": 1,
    "self_introduction": 1,
    "daily_time": 1,
    "daily_number": 1,
    "shopping_price": 1,
    # tier 2 (A2-equivalent)
    "shopping_direction": 2,
    "travel_navigation": 2,
    "restaurant_order": 2,
    "transport_ticket": 2,
    "doctor_appointment": 2,
    "small_talk_weather": 2,
    # tier 3 (B1-equivalent)
    "travel_booking": 3,
    "work_email": 3,
    "work_meeting": 3,
    "academic_reading": 3,
    "phone_complaint": 3,
    "opinion_discussion": 3,
}

# evidence ranking: first = most informative (rarer / higher-value scenario)
ANCHOR_PRIORITY = (
    "opinion_discussion",
    "phone_complaint",
    "work_meeting",
    "work_email",
    "academic_reading",
    "travel_booking",
    "doctor_appointment",
    "transport_ticket",
    "restaurant_order",
    "travel_navigation",
    "shopping_direction",
    "small_talk_weather",
    "formal_greeting",
    "self_introduction",
    "shopping_price",
    "daily_time",
    "daily_number",
    "basic_greeting",
)

ANCHOR_PHRASES = {
    "en": {
        "basic_greeting": "Can exchange basic greetings",
        "formal_greeting": "Can greet people politely in formal settings",
        "self_introduction": "Can introduce themselves",
        "daily_time": "Understands times and dates",
        "daily_number": "Understands everyday numbers",
        "shopping_price": "Can ask about and understand prices",
        "shopping_direction": "Can ask for directions while shopping",
        "travel_navigation": "Can find their way around when travelling",
        "restaurant_order": "Can order food in a restaurant",
        "transport_ticket": "Can buy transport tickets",
        "doctor_appointment": "Can book a doctor's appointment",
        "small_talk_weather": "Can make small talk about the weather",
        "travel_booking": "Can handle travel bookings",
        "work_email": "Can write simple work emails",
        "work_meeting": "Can follow and contribute in work meetings",
        "academic_reading": "Can read short academic texts",
        "phone_complaint": "Can make a complaint over the phone",
        "opinion_discussion": "Can give and defend an opinion in discussion",
    },
    "zh": {
        "basic_greeting": "基础问候",
        "formal_greeting": "正式问候",
        "self_introduction": "自我介绍",
        "daily_time": "时间日期",
        "daily_number": "日常数字",
        "shopping_price": "购物询价",
        "shopping_direction": "购物问路",
        "travel_navigation": "旅行导航",
        "restaurant_order": "餐厅点餐",
        "transport_ticket": "购买车票",
        "doctor_appointment": "预约看病",
        "small_talk_weather": "天气闲聊",
        "travel_booking": "旅行预订",
        "work_email": "工作邮件",
        "work_meeting": "工作会议",
        "academic_reading": "学术阅读",
        "phone_complaint": "电话投诉",
        "opinion_discussion": "观点讨论",
    },
    "ar": {
        "basic_greeting": "تحية أساسية",
        "formal_greeting": "تحية رسمية",
        "self_introduction": "التعريف بالنفس",
        "daily_time": "الوقت والتاريخ",
        "daily_number": "الأرقام اليومية",
        "shopping_price": "السؤال عن الأسعار",
        "shopping_direction": "السؤال عن الطريق أثناء التسوق",
        "travel_navigation": "التنقل أثناء السفر",
        "restaurant_order": "الطلب في المطعم",
        "transport_ticket": "شراء تذاكر المواصلات",
        "doctor_appointment": "حجز موعد عند الطبيب",
        "small_talk_weather": "الحديث عن الطقس",
        "travel_booking": "حجوزات السفر",
        "work_email": "رسائل البريد الإلكتروني للعمل",
        "work_meeting": "اجتماعات العمل",
        "academic_reading": "القراءة الأكاديمية",
        "phone_complaint": "تقديم شكوى عبر الهاتف",
        "opinion_discussion": "مناقشة الآراء",
    },
}

# keyed by highest ladder tier passed (0 = none)
SCENE_TABLE = {
    0: (0.75, 0.20, 0.05, 0.00, 0.00),
    1: (0.30, 0.50, 0.20, 0.00, 0.00),
    2: (0.05, 0.30, 0.45, 0.15, 0.05),
    3: (0.02, 0.08, 0.25, 0.50, 0.15),
}

LADDER_THRESHOLDS = {1: 3, 2: 4, 3: 4}

OBJECTIVE_MAX_SCORE = 3

OBJECTIVE_TABLE = {
    0: (0.55, 0.35, 0.10, 0.00, 0.00),
    1: (0.20, 0.40, 0.30, 0.10, 0.00),
    2: (0.05, 0.20, 0.40, 0.30, 0.05),
    3: (0.00, 0.05, 0.25, 0.45, 0.25),
}

SELF_TABLE = {
    CoarseLevel.PRE_A: (0.70, 0.25, 0.05, 0.00, 0.00),
    CoarseLevel.A1: (0.60, 0.30, 0.10, 0.00, 0.00),
    CoarseLevel.A2: (0.15, 0.35, 0.30, 0.15, 0.05),
    CoarseLevel.B1: (0.00, 0.05, 0.20, 0.45, 0.30),
    CoarseLevel.B2: (0.00, 0.00, 0.10, 0.40, 0.50),
}

WEIGHTS_WITH_OBJECTIVE = {"scene": 0.6, "objective": 0.3, "self": 0.1}
WEIGHTS_WITHOUT_OBJECTIVE = {"scene": 0.8, "self": 0.2}

MIN_ANCHORS = 3
MAX_EVIDENCE = 6

_TOL = 1e-9


@dataclass(frozen=True)
class PlacementConfig:
    anchor_tiers: Mapping[str, int]
    anchor_priority: Tuple[str, ...]
    anchor_phrases: Mapping[str, Mapping[str, str]]
    scene_table: Mapping[int, Tuple[float, ...]]
    ladder_thresholds: Mapping[int, int]
    objective_max_score: int
    objective_table: Mapping[int, Tuple[float, ...]]
    self_table: Mapping[CoarseLevel, Tuple[float, ...]]
    weights_with_objective: Mapping[str, float]
    weights_without_objective: Mapping[str, float]
    min_anchors: int = MIN_ANCHORS
    max_evidence: int = MAX_EVIDENCE
    unknown_tag_policy: str = "ignore"

    @property
    def uniform_row(self) -> Tuple[float, ...]:
        return tuple(1.0 / len(BANDS) for _ in BANDS)

    def priority_rank(self, tag: str) -> int:
        return self.anchor_priority.index(tag)


def _frozen(d: Mapping) -> Mapping:
    return MappingProxyType(dict(d))


def _check_row(name: str, row) -> None:
    if len(row) != len(BANDS):
        raise ConfigurationError(f"{name}: expected {len(BANDS)} entries, got {len(row)}")
    if any(p < 0.0 or p > 1.0 for p in row):
        raise ConfigurationError(f"{name}: probabilities must lie in [0, 1]")
    if not math.isclose(sum(row), 1.0, abs_tol=_TOL):
        raise ConfigurationError(f"{name}: row sums to {sum(row):.6f}, expected 1")


def _check_weights(name: str, weights: Mapping[str, float], required: Tuple[str, ...]) -> None:
    if set(weights) != set(required):
        raise ConfigurationError(f"{name}: expected keys {sorted(required)}, got {sorted(weights)}")
    if any(w < 0.0 for w in weights.values()):
        raise ConfigurationError(f"{name}: weights must be non-negative")
    if not math.isclose(sum(weights.values()), 1.0, abs_tol=_TOL):
        raise ConfigurationError(f"{name}: weights must sum to 1")


def validate_config(cfg: PlacementConfig) -> PlacementConfig:
    """
    Completeness check run whenever a config is built.

    Every tag must carry a tier, a priority and a phrase in each supported
    locale, so a half-registered anchor is caught here rather than silently
    miscounted at evaluation time.
    """
    tags = set(cfg.anchor_tiers)

    bad_tiers = {t for t, tier in cfg.anchor_tiers.items() if tier not in (1, 2, 3)}
    if bad_tiers:
        raise ConfigurationError(f"Tags with invalid tier: {sorted(bad_tiers)}")

    if len(cfg.anchor_priority) != len(set(cfg.anchor_priority)):
        raise ConfigurationError("anchor_priority contains duplicates")
    if set(cfg.anchor_priority) != tags:
        missing = sorted(tags - set(cfg.anchor_priority))
        extra = sorted(set(cfg.anchor_priority) - tags)
        raise ConfigurationError(f"anchor_priority mismatch (missing={missing}, extra={extra})")

    for locale in SUPPORTED_LOCALES:
        phrases = cfg.anchor_phrases.get(locale)
        if phrases is None:
            raise ConfigurationError(f"No evidence phrases for locale '{locale}'")
        missing = sorted(tags - set(phrases))
        if missing:
            raise ConfigurationError(f"Locale '{locale}' missing phrases for {missing}")

    if set(cfg.scene_table) != {0, 1, 2, 3}:
        raise ConfigurationError("scene_table must define ladder states 0..3")
    for state, row in cfg.scene_table.items():
        _check_row(f"scene_table[{state}]", row)

    if set(cfg.ladder_thresholds) != {1, 2, 3}:
        raise ConfigurationError("ladder_thresholds must define tiers 1..3")
    for tier, threshold in cfg.ladder_thresholds.items():
        available = sum(1 for t in cfg.anchor_tiers.values() if t == tier)
        if threshold < 1 or threshold > available:
            raise ConfigurationError(
                f"ladder_thresholds[{tier}]={threshold} not reachable with {available} anchors"
            )

    if cfg.objective_max_score < 0:
        raise ConfigurationError("objective_max_score must be >= 0")
    if set(cfg.objective_table) != set(range(cfg.objective_max_score + 1)):
        raise ConfigurationError(f"objective_table must cover scores 0..{cfg.objective_max_score}")
    for score, row in cfg.objective_table.items():
        _check_row(f"objective_table[{score}]", row)

    if set(cfg.self_table) != set(CoarseLevel):
        raise ConfigurationError("self_table must cover every coarse level")
    for level, row in cfg.self_table.items():
        _check_row(f"self_table[{level.value}]", row)

    _check_weights("weights_with_objective", cfg.weights_with_objective, ("scene", "objective", "self"))
    _check_weights("weights_without_objective", cfg.weights_without_objective, ("scene", "self"))

    if cfg.min_anchors < 0:
        raise ConfigurationError("min_anchors must be >= 0")
    if cfg.max_evidence < 0:
        raise ConfigurationError("max_evidence must be >= 0")
    if cfg.unknown_tag_policy not in UNKNOWN_TAG_POLICIES:
        raise ConfigurationError(
            f"unknown_tag_policy must be one of {UNKNOWN_TAG_POLICIES}, got '{cfg.unknown_tag_policy}'"
        )

    return cfg


def build_placement_config(
    *,
    ladder_thresholds: Optional[Mapping[int, int]] = None,
    weights_with_objective: Optional[Mapping[str, float]] = None,
    weights_without_objective: Optional[Mapping[str, float]] = None,
    min_anchors: int = MIN_ANCHORS,
    max_evidence: int = MAX_EVIDENCE,
    unknown_tag_policy: str = "ignore",
) -> PlacementConfig:
    cfg = PlacementConfig(
        anchor_tiers=_frozen(ANCHOR_TIERS),
        anchor_priority=tuple(ANCHOR_PRIORITY),
        anchor_phrases=_frozen({loc: _frozen(p) for loc, p in ANCHOR_PHRASES.items()}),
        scene_table=_frozen({k: tuple(v) for k, v in SCENE_TABLE.items()}),
        ladder_thresholds=_frozen(ladder_thresholds or LADDER_THRESHOLDS),
        objective_max_score=OBJECTIVE_MAX_SCORE,
        objective_table=_frozen({k: tuple(v) for k, v in OBJECTIVE_TABLE.items()}),
        self_table=_frozen({k: tuple(v) for k, v in SELF_TABLE.items()}),
        weights_with_objective=_frozen(weights_with_objective or WEIGHTS_WITH_OBJECTIVE),
        weights_without_objective=_frozen(weights_without_objective or WEIGHTS_WITHOUT_OBJECTIVE),
        min_anchors=min_anchors,
        max_evidence=max_evidence,
        unknown_tag_policy=unknown_tag_policy,
    )
    return validate_config(cfg)


@lru_cache(maxsize=1)
def get_placement_config() -> PlacementConfig:
    from ..settings import get_settings

    settings = get_settings()
    return build_placement_config(unknown_tag_policy=settings.UNKNOWN_TAG_POLICY)
