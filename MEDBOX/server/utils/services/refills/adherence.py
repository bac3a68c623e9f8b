from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable

import pandas as pd

from MEDBOX.server.utils.constants import (
    ADHERENCE_STREAK_LOOKBACK_DAYS,
    ADHERENCE_STREAK_PERCENTAGE,
)
from MEDBOX.server.utils.services.refills.records import MedicationRecord

WEEK_DAYS = 7


###############################################################################
class AdherenceLevel(str, Enum):
    PERFECT = "perfect"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    MISSED = "missed"
    NONE = "none"

    # -------------------------------------------------------------------------
    @classmethod
    def classify(cls, total_scheduled: int, percentage: float) -> AdherenceLevel:
        if total_scheduled == 0:
            return cls.NONE
        if percentage >= 100:
            return cls.PERFECT
        if percentage >= 80:
            return cls.GOOD
        if percentage >= 50:
            return cls.FAIR
        if percentage > 0:
            return cls.POOR
        return cls.MISSED

    # -------------------------------------------------------------------------
    @property
    def description(self) -> str:
        return ADHERENCE_DESCRIPTIONS[self]


ADHERENCE_DESCRIPTIONS = {
    AdherenceLevel.PERFECT: "Perfect (100%)",
    AdherenceLevel.GOOD: "Good (80-99%)",
    AdherenceLevel.FAIR: "Fair (50-79%)",
    AdherenceLevel.POOR: "Poor (1-49%)",
    AdherenceLevel.MISSED: "Missed (0%)",
    AdherenceLevel.NONE: "No medications",
}


###############################################################################
@dataclass(frozen=True, slots=True)
class DayAdherence:
    date: date
    total_scheduled: int
    total_taken: int

    # -------------------------------------------------------------------------
    @property
    def adherence_percentage(self) -> float:
        if self.total_scheduled <= 0:
            return 0.0
        return self.total_taken / self.total_scheduled * 100.0

    # -------------------------------------------------------------------------
    @property
    def level(self) -> AdherenceLevel:
        return AdherenceLevel.classify(self.total_scheduled, self.adherence_percentage)


# -----------------------------------------------------------------------------
def summarize_days(records: Iterable[MedicationRecord]) -> dict[date, DayAdherence]:
    rows = [
        {
            "date": record.date,
            "scheduled": record.scheduled_doses,
            "taken": record.taken_doses,
        }
        for record in records
    ]
    if not rows:
        return {}
    totals = pd.DataFrame(rows).groupby("date")[["scheduled", "taken"]].sum()
    return {
        day: DayAdherence(
            date=day,
            total_scheduled=int(row["scheduled"]),
            total_taken=int(row["taken"]),
        )
        for day, row in totals.iterrows()
    }


# -----------------------------------------------------------------------------
def overall_adherence(records: Iterable[MedicationRecord]) -> float:
    days = summarize_days(records).values()
    scheduled = sum(day.total_scheduled for day in days)
    taken = sum(day.total_taken for day in days)
    return taken / scheduled * 100.0 if scheduled else 0.0


# -----------------------------------------------------------------------------
def adherence_streak(
    records: Iterable[MedicationRecord],
    reference_date: date | None = None,
    threshold: float = ADHERENCE_STREAK_PERCENTAGE,
    lookback_days: int = ADHERENCE_STREAK_LOOKBACK_DAYS,
) -> int:
    """
    Count consecutive days, walking back from the reference day, whose
    adherence reached ``threshold``. A day without records ends the streak.

    """
    days = summarize_days(records)
    today = reference_date or date.today()
    streak = 0
    for offset in range(lookback_days):
        day = days.get(today - timedelta(days=offset))
        if day is None or day.adherence_percentage < threshold:
            break
        streak += 1
    return streak


# -----------------------------------------------------------------------------
def weekly_progress(
    records: Iterable[MedicationRecord],
    reference_date: date | None = None,
    threshold: float = ADHERENCE_STREAK_PERCENTAGE,
) -> list[bool]:
    days = summarize_days(records)
    today = reference_date or date.today()
    progress = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = days.get(today - timedelta(days=offset))
        progress.append(day is not None and day.adherence_percentage >= threshold)
    return progress
