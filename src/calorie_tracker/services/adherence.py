"""Adherence classification for calories and protein.

Every view that colours a day or an average (the daily totals widget, the
weekly chart and the admin grid) goes through these functions.
"""

import math

from calorie_tracker.domain.goals import EnergyBalance, GoalMode, Tier

ALIGNED_BANDS: tuple[tuple[float, Tier], ...] = (
    (10.0, Tier.ON_TRACK),
    (20.0, Tier.CLOSE),
    (30.0, Tier.NEEDS_WORK),
)
STRICT_TOLERANCE_PERCENT = 5.0


def goal_mode(target: float, maintenance: float) -> GoalMode:
    """Return whether the user is cutting, maintaining or bulking."""
    if target < maintenance:
        return GoalMode.CUTTING
    if target > maintenance:
        return GoalMode.BULKING
    return GoalMode.MAINTAINING


def classify_calories(
    measured: float | None, target: float, maintenance: float
) -> Tier:
    """Classify calories against the target, lenient on the goal's side.

    A deviation in the direction the user is steering toward (under target
    while cutting, over target while bulking) walks through the gradual
    bands. Any other deviation only stays on track within 5%.
    """
    if not measured or not target or not maintenance:
        return Tier.NO_DATA

    mode = goal_mode(target, maintenance)
    diff = measured - target
    percent_diff = abs(diff / target * 100)
    aligned = (mode is GoalMode.CUTTING and diff < 0) or (
        mode is GoalMode.BULKING and diff > 0
    )
    if aligned:
        return _gradual_tier(percent_diff)
    if percent_diff <= STRICT_TOLERANCE_PERCENT:
        return Tier.ON_TRACK
    return Tier.OFF_TRACK


def classify_protein(measured: float | None, target: float) -> Tier:
    """Classify protein by how far it falls short of the target."""
    if not measured or not target:
        return Tier.NO_DATA
    percent_below = (target - measured) / target * 100
    return _gradual_tier(percent_below)


def energy_balance(
    daily_deficit: float, target: float, maintenance: float
) -> EnergyBalance:
    """Describe an average daily deficit or surplus relative to the goal."""
    amount = abs(round_half_up(daily_deficit))
    mode = goal_mode(target, maintenance)
    if daily_deficit < 0:
        return EnergyBalance(
            kind="deficit", amount=amount, aligned=mode is not GoalMode.BULKING
        )
    if daily_deficit > 0:
        return EnergyBalance(
            kind="surplus", amount=amount, aligned=mode is GoalMode.BULKING
        )
    return EnergyBalance(kind="maintenance", amount=0, aligned=True)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def _gradual_tier(percent: float) -> Tier:
    for limit, tier in ALIGNED_BANDS:
        if percent <= limit:
            return tier
    return Tier.OFF_TRACK
