from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, IntEnum

from MEDBOX.server.utils.constants import (
    CONFIDENCE_HIGH_THRESHOLD,
    CONFIDENCE_MEDIUM_THRESHOLD,
)


###############################################################################
class PredictionConfidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    # -------------------------------------------------------------------------
    @classmethod
    def from_score(cls, score: float) -> PredictionConfidence:
        if score >= CONFIDENCE_HIGH_THRESHOLD:
            return cls.HIGH
        if score >= CONFIDENCE_MEDIUM_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW

    # -------------------------------------------------------------------------
    @property
    def description(self) -> str:
        return CONFIDENCE_DESCRIPTIONS[self]


CONFIDENCE_DESCRIPTIONS = {
    PredictionConfidence.HIGH: "High confidence based on consistent usage data",
    PredictionConfidence.MEDIUM: "Medium confidence with moderate usage data",
    PredictionConfidence.LOW: "Low confidence - consider manual tracking",
}


###############################################################################
class RefillAlertType(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"

    # -------------------------------------------------------------------------
    @property
    def label(self) -> str:
        return self.value.capitalize()


###############################################################################
class RefillUrgency(IntEnum):
    IMMEDIATE = 0
    SOON = 1
    PLANNED = 2

    # -------------------------------------------------------------------------
    @property
    def display_name(self) -> str:
        return self.name.capitalize()


###############################################################################
@dataclass(slots=True)
class MedicationRecord:
    """One day of dose history for a single prescription."""

    date: date
    taken_doses: int = 0
    scheduled_doses: int = 1
    prescription_id: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.date, datetime):
            self.date = self.date.date()
        self.taken_doses = max(0, int(self.taken_doses))
        self.scheduled_doses = max(1, int(self.scheduled_doses))

    # -------------------------------------------------------------------------
    @property
    def adherence_percentage(self) -> float:
        return self.taken_doses / self.scheduled_doses * 100.0


###############################################################################
@dataclass(slots=True)
class Prescription:
    id: str
    name: str
    daily_frequency: int = 1
    total_pills: int | None = None
    pills_remaining: int | None = None


###############################################################################
@dataclass(frozen=True, slots=True)
class UsagePattern:
    average_daily_usage: float
    adherence_rate: float
    consistency_score: float
    data_points: int
    period_days: int

    # -------------------------------------------------------------------------
    @classmethod
    def empty(cls, period_days: int) -> UsagePattern:
        return cls(
            average_daily_usage=0.0,
            adherence_rate=0.0,
            consistency_score=0.0,
            data_points=0,
            period_days=period_days,
        )


###############################################################################
@dataclass(frozen=True, slots=True)
class RefillPrediction:
    days_remaining: int
    predicted_refill_date: date
    average_daily_usage: float
    adherence_rate: float
    confidence: PredictionConfidence
    recommended_refill_date: date
    usage_pattern: UsagePattern
