from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterable

import pandas as pd

from MEDBOX.server.utils.configurations import server_settings
from MEDBOX.server.utils.services.refills.records import MedicationRecord, UsagePattern


###############################################################################
class UsagePatternAnalyzer:
    """
    Aggregates a prescription's dose history over a trailing window.

    - adherence rate: doses taken over doses expected (``daily_frequency``
      times the window), clamped to ``[0, 1]``
    - average daily usage: doses taken per day on which any dose was taken
    - consistency: one minus the standard deviation of the per-day ratio
      ``min(taken / daily_frequency, 1)``

    """

    def __init__(self, window_days: int | None = None) -> None:
        window = server_settings.refills.window_days if window_days is None else window_days
        self.window_days = self.validate_window(window)

    # -------------------------------------------------------------------------
    @staticmethod
    def validate_window(window_days: int) -> int:
        window = int(window_days)
        if window <= 0:
            raise ValueError(f"Usage window must be positive, got {window_days}")
        return window

    # -------------------------------------------------------------------------
    def filter_recent(
        self, records: Iterable[MedicationRecord], window_days: int, reference_date: date
    ) -> list[MedicationRecord]:
        cutoff = reference_date - timedelta(days=window_days)
        return [record for record in records if record.date > cutoff]

    # -------------------------------------------------------------------------
    def analyze(
        self,
        records: Iterable[MedicationRecord],
        daily_frequency: int,
        window_days: int | None = None,
        reference_date: date | None = None,
    ) -> UsagePattern:
        window = self.window_days if window_days is None else self.validate_window(window_days)
        frequency = max(1, int(daily_frequency))
        today = reference_date or date.today()
        recent = self.filter_recent(records, window, today)
        if not recent:
            return UsagePattern.empty(window)

        frame = pd.DataFrame(
            {
                "date": [record.date for record in recent],
                "taken": [record.taken_doses for record in recent],
            }
        )
        taken_per_day = frame.groupby("date")["taken"].sum()
        total_taken = float(taken_per_day.sum())

        adherence_rate = min(max(total_taken / (frequency * window), 0.0), 1.0)
        taken_days = int((taken_per_day > 0).sum())
        average_daily_usage = total_taken / taken_days if taken_days else 0.0

        daily_ratios = (taken_per_day / frequency).clip(upper=1.0)
        variance = float(daily_ratios.var(ddof=0))
        consistency_score = max(0.0, 1.0 - math.sqrt(variance))

        return UsagePattern(
            average_daily_usage=average_daily_usage,
            adherence_rate=adherence_rate,
            consistency_score=consistency_score,
            data_points=len(recent),
            period_days=window,
        )
