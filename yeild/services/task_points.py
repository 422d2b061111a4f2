"""
Task point calculation with bird level bonus.

final = floor(base * difficulty * category * quality * time)
        + floor(base * tier.earning_bonus)

The bird bonus is additive on top of the base points, so a higher
level never earns less than a lower one for the same work.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from yeild.services.tiers import TierDefinition, get_tiers

DIFFICULTY_MULTIPLIERS = {
    "easy": 0.8,
    "medium": 1.0,
    "hard": 1.2,
}

CATEGORY_BONUSES = {
    "survey": 1.0,
    "app_testing": 1.1,
    "content_creation": 1.2,
    "social_media": 1.0,
    "research": 1.1,
    "marketing": 1.1,
}

ESTIMATED_TASK_MINUTES = 30


@dataclass
class TaskPointFactors:
    base_points: int
    difficulty: str = "medium"
    category: str = "survey"
    time_spent_minutes: Optional[float] = None
    quality_score: Optional[float] = None


@dataclass
class TaskPointResult:
    final_points: int
    base_points: int
    bird_level: str
    bird_bonus_points: int
    bird_bonus_percent: float
    difficulty_multiplier: float
    category_bonus: float
    quality_bonus: float
    time_bonus: float
    total_multiplier: float
    explanation: list[str] = field(default_factory=list)


def quality_bonus(quality_score: Optional[float]) -> float:
    """Multiplier from the admin review score (0-100)."""
    if not quality_score:
        return 1.0
    if quality_score >= 90:
        return 1.3
    if quality_score >= 80:
        return 1.2
    if quality_score >= 70:
        return 1.1
    if quality_score >= 60:
        return 1.0
    if quality_score >= 50:
        return 0.9
    return 0.8


def time_bonus(time_spent: Optional[float], estimated: float = ESTIMATED_TASK_MINUTES) -> float:
    """Multiplier for finishing faster (or slower) than the estimate."""
    if not time_spent:
        return 1.0
    ratio = time_spent / estimated
    if ratio <= 0.7:
        return 1.15
    if ratio <= 1.0:
        return 1.05
    if ratio <= 1.5:
        return 1.0
    return 0.95


def calculate_task_points(factors: TaskPointFactors, tier: TierDefinition) -> TaskPointResult:
    base = max(int(factors.base_points), 0)
    difficulty = DIFFICULTY_MULTIPLIERS.get(factors.difficulty, 1.0)
    category = CATEGORY_BONUSES.get(factors.category, 1.0)
    quality = quality_bonus(factors.quality_score)
    timing = time_bonus(factors.time_spent_minutes)

    total_multiplier = difficulty * category * quality * timing
    multiplied = math.floor(base * total_multiplier)
    bird_bonus = math.floor(base * tier.earning_bonus)
    final_points = multiplied + bird_bonus

    explanation = [f"Base points: {base}"]
    if difficulty != 1.0:
        explanation.append(f"Difficulty ({factors.difficulty}): ×{difficulty}")
    if category != 1.0:
        explanation.append(f"Category ({factors.category}): ×{category:.2f}")
    if quality != 1.0:
        explanation.append(f"Quality bonus: ×{quality}")
    if timing != 1.0:
        explanation.append(f"Time bonus: ×{timing:.2f}")
    explanation.append(f"Subtotal: {base} × {total_multiplier:.2f} = {multiplied}")
    if bird_bonus > 0:
        explanation.append(
            f"{tier.name} level bonus (+{round(tier.earning_bonus * 100)}%): +{bird_bonus}"
        )
    explanation.append(f"Final points: {multiplied} + {bird_bonus} = {final_points}")

    return TaskPointResult(
        final_points=final_points,
        base_points=base,
        bird_level=tier.name,
        bird_bonus_points=bird_bonus,
        bird_bonus_percent=tier.earning_bonus * 100,
        difficulty_multiplier=difficulty,
        category_bonus=category,
        quality_bonus=quality,
        time_bonus=timing,
        total_multiplier=total_multiplier,
        explanation=explanation,
    )


def preview_points_for_tiers(
    factors: TaskPointFactors,
    tiers: Optional[Sequence[TierDefinition]] = None,
) -> dict[str, int]:
    """Final points the same task would pay at every bird level."""
    return {
        tier.name: calculate_task_points(factors, tier).final_points
        for tier in (tiers if tiers is not None else get_tiers())
    }
