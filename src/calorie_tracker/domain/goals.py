"""Domain models for user goals and adherence tiers."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_TARGET_CALORIES = 2000
DEFAULT_MAINTENANCE_CALORIES = 2000
DEFAULT_TARGET_PROTEIN = 150
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class UserGoalSettings:
    """Calorie and protein goals for a user."""

    target_calories: int = DEFAULT_TARGET_CALORIES
    maintenance_calories: int = DEFAULT_MAINTENANCE_CALORIES
    target_protein: int = DEFAULT_TARGET_PROTEIN
    timezone: str = DEFAULT_TIMEZONE


class Tier(str, Enum):
    """Adherence classification shared by every view."""

    ON_TRACK = "on_track"
    CLOSE = "close"
    NEEDS_WORK = "needs_work"
    OFF_TRACK = "off_track"
    NO_DATA = "no_data"


class GoalMode(str, Enum):
    """Direction the user wants their intake to deviate from maintenance."""

    CUTTING = "cutting"
    MAINTAINING = "maintaining"
    BULKING = "bulking"


@dataclass(frozen=True)
class EnergyBalance:
    """Deficit or surplus read-out for the dashboard."""

    kind: str
    amount: int
    aligned: bool
