from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterable

from MEDBOX.server.utils.configurations import server_settings
from MEDBOX.server.utils.constants import (
    CONFIDENCE_ADHERENCE_FLOOR,
    CONFIDENCE_DATA_POINTS_TARGET,
    CONFIDENCE_DEFAULT_ADHERENCE,
)
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.services.refills.records import (
    MedicationRecord,
    PredictionConfidence,
    RefillAlertType,
    RefillPrediction,
    UsagePattern,
)
from MEDBOX.server.utils.services.refills.usage import UsagePatternAnalyzer


# -----------------------------------------------------------------------------
def confidence_score(pattern: UsagePattern) -> float:
    data_factor = min(pattern.data_points / CONFIDENCE_DATA_POINTS_TARGET, 1.0)
    adherence_factor = (
        pattern.adherence_rate
        if pattern.adherence_rate > CONFIDENCE_ADHERENCE_FLOOR
        else CONFIDENCE_DEFAULT_ADHERENCE
    )
    return 0.3 * data_factor + 0.4 * pattern.consistency_score + 0.3 * adherence_factor


# -----------------------------------------------------------------------------
def classify_alert(
    days_remaining: int,
    critical_days: int | None = None,
    warning_days: int | None = None,
) -> RefillAlertType | None:
    settings = server_settings.refills
    critical = settings.critical_days if critical_days is None else critical_days
    warning = settings.warning_days if warning_days is None else warning_days
    if days_remaining <= critical:
        return RefillAlertType.CRITICAL
    if days_remaining <= warning:
        return RefillAlertType.WARNING
    return None


###############################################################################
class RefillPredictor:
    """
    Turns inventory counts and a usage pattern into a refill estimate.

    Days of supply are ``floor(pills_remaining / average_daily_usage)``, zero
    when no usage has been observed. The recommended refill date leads the
    predicted run-out date by ``refill_lead_days``.

    """

    def __init__(
        self,
        analyzer: UsagePatternAnalyzer | None = None,
        refill_lead_days: int | None = None,
    ) -> None:
        self.analyzer = analyzer or UsagePatternAnalyzer()
        self.refill_lead_days = (
            server_settings.refills.refill_lead_days
            if refill_lead_days is None
            else int(refill_lead_days)
        )

    # -------------------------------------------------------------------------
    def predict(
        self,
        total_pills: int | None,
        pills_remaining: int | None,
        pattern: UsagePattern,
        *,
        reference_date: date | None = None,
    ) -> RefillPrediction | None:
        if total_pills is None or pills_remaining is None:
            return None

        average = pattern.average_daily_usage
        days_remaining = 0
        if average > 0:
            days_remaining = max(0, math.floor(pills_remaining / average))

        today = reference_date or date.today()
        predicted_date = today + timedelta(days=days_remaining)
        return RefillPrediction(
            days_remaining=days_remaining,
            predicted_refill_date=predicted_date,
            average_daily_usage=average,
            adherence_rate=pattern.adherence_rate,
            confidence=PredictionConfidence.from_score(confidence_score(pattern)),
            recommended_refill_date=predicted_date - timedelta(days=self.refill_lead_days),
            usage_pattern=pattern,
        )

    # -------------------------------------------------------------------------
    def predict_refill(
        self,
        prescription_id: str,
        total_pills: int | None,
        pills_remaining: int | None,
        records: Iterable[MedicationRecord],
        daily_frequency: int = 1,
        window_days: int | None = None,
        *,
        reference_date: date | None = None,
    ) -> RefillPrediction | None:
        if total_pills is None or pills_remaining is None:
            logger.debug("Insufficient inventory data for prescription %s", prescription_id)
            return None
        pattern = self.analyzer.analyze(
            records,
            daily_frequency,
            window_days=window_days,
            reference_date=reference_date,
        )
        prediction = self.predict(
            total_pills, pills_remaining, pattern, reference_date=reference_date
        )
        if prediction is not None:
            logger.debug(
                "Prescription %s: %d days remaining (%s confidence)",
                prescription_id,
                prediction.days_remaining,
                prediction.confidence.value,
            )
        return prediction
