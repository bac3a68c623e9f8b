from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Protocol

from MEDBOX.server.utils.configurations import RefillSettings, server_settings
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.services.refills.prediction import RefillPredictor, classify_alert
from MEDBOX.server.utils.services.refills.records import (
    MedicationRecord,
    PredictionConfidence,
    Prescription,
    RefillAlertType,
    RefillPrediction,
    RefillUrgency,
    UsagePattern,
)


###############################################################################
class MedicationRecordSource(Protocol):
    def get_records(self, prescription_id: str) -> list[MedicationRecord]: ...


###############################################################################
class InMemoryRecordStore:
    """Dose history keyed by prescription id, one record per day."""

    def __init__(self) -> None:
        self.records: dict[str, dict[date, MedicationRecord]] = {}
        self.lock = threading.Lock()

    # -------------------------------------------------------------------------
    def add_record(self, prescription_id: str, record: MedicationRecord) -> None:
        with self.lock:
            self.records.setdefault(prescription_id, {})[record.date] = record

    # -------------------------------------------------------------------------
    def record_dose_taken(
        self, prescription: Prescription, taken_on: date | None = None
    ) -> MedicationRecord:
        day = taken_on or date.today()
        with self.lock:
            history = self.records.setdefault(prescription.id, {})
            existing = history.get(day)
            taken = existing.taken_doses + 1 if existing else 1
            record = MedicationRecord(
                date=day,
                taken_doses=min(taken, max(1, prescription.daily_frequency)),
                scheduled_doses=prescription.daily_frequency,
                prescription_id=prescription.id,
            )
            history[day] = record
        return record

    # -------------------------------------------------------------------------
    def get_records(self, prescription_id: str) -> list[MedicationRecord]:
        with self.lock:
            history = self.records.get(prescription_id, {})
            return [history[day] for day in sorted(history)]


###############################################################################
@dataclass(slots=True)
class RefillAlert:
    prescription: Prescription
    prediction: RefillPrediction | None
    alert_type: RefillAlertType
    timestamp: datetime = field(default_factory=datetime.now)


###############################################################################
@dataclass(slots=True)
class RefillRecommendation:
    prescription: Prescription
    urgency: RefillUrgency
    recommended_refill_date: date
    days_remaining: int
    confidence: PredictionConfidence
    reason: str


# -----------------------------------------------------------------------------
def recommendation_reason(alert: RefillAlert) -> str:
    prediction = alert.prediction
    if prediction is None:
        return "Refill needed based on current inventory."
    if alert.alert_type is RefillAlertType.CRITICAL:
        return (
            f"Critical: Only {prediction.days_remaining} days remaining. "
            "Refill immediately."
        )
    adherence = int(prediction.adherence_rate * 100)
    return (
        f"Based on your {adherence}% adherence rate, you'll need a refill in "
        f"{prediction.days_remaining} days."
    )


###############################################################################
class RefillAlertManager:
    """
    Keeps the pending refill alerts for a set of prescriptions.

    Alerts are regenerated from predictions on ``update_refill_predictions``
    and appended one at a time by ``record_pill_taken`` when inventory drops
    to the low-pills threshold. At most one alert is kept per prescription.

    """

    def __init__(
        self,
        records: MedicationRecordSource,
        predictor: RefillPredictor | None = None,
        settings: RefillSettings | None = None,
    ) -> None:
        self.records = records
        self.predictor = predictor or RefillPredictor()
        self.settings = settings or server_settings.refills
        self.refill_alerts: list[RefillAlert] = []
        self.low_inventory: list[Prescription] = []
        self.lock = threading.Lock()

    # -------------------------------------------------------------------------
    def calculate_refill_prediction(
        self, prescription: Prescription, reference_date: date | None = None
    ) -> RefillPrediction | None:
        return self.predictor.predict_refill(
            prescription.id,
            prescription.total_pills,
            prescription.pills_remaining,
            self.records.get_records(prescription.id),
            prescription.daily_frequency,
            window_days=self.settings.window_days,
            reference_date=reference_date,
        )

    # -------------------------------------------------------------------------
    def update_refill_predictions(
        self, prescriptions: Iterable[Prescription], reference_date: date | None = None
    ) -> list[RefillAlert]:
        alerts: list[RefillAlert] = []
        low_inventory: list[Prescription] = []
        for prescription in prescriptions:
            prediction = self.calculate_refill_prediction(prescription, reference_date)
            if prediction is None:
                continue
            alert_type = classify_alert(
                prediction.days_remaining,
                self.settings.critical_days,
                self.settings.warning_days,
            )
            if alert_type is None:
                continue
            alerts.append(RefillAlert(prescription, prediction, alert_type))
            low_inventory.append(prescription)

        with self.lock:
            self.refill_alerts = alerts
            self.low_inventory = low_inventory
        logger.info(
            "Refill predictions updated: %d alerts (%d critical)",
            len(alerts),
            sum(1 for alert in alerts if alert.alert_type is RefillAlertType.CRITICAL),
        )
        return list(alerts)

    # -------------------------------------------------------------------------
    def build_low_pills_alert(
        self, prescription: Prescription, reference_date: date | None = None
    ) -> RefillAlert:
        today = reference_date or date.today()
        frequency = float(prescription.daily_frequency)
        pattern = UsagePattern(
            average_daily_usage=frequency,
            adherence_rate=1.0,
            consistency_score=1.0,
            data_points=1,
            period_days=1,
        )
        prediction = RefillPrediction(
            days_remaining=prescription.pills_remaining or 0,
            predicted_refill_date=today,
            average_daily_usage=frequency,
            adherence_rate=1.0,
            confidence=PredictionConfidence.HIGH,
            recommended_refill_date=today,
            usage_pattern=pattern,
        )
        return RefillAlert(prescription, prediction, RefillAlertType.CRITICAL)

    # -------------------------------------------------------------------------
    def record_pill_taken(
        self, prescription: Prescription, reference_date: date | None = None
    ) -> RefillAlert | None:
        remaining = prescription.pills_remaining
        if remaining is None or remaining <= 0:
            return None
        prescription.pills_remaining = remaining - 1
        if prescription.pills_remaining > self.settings.low_pills_threshold:
            return None

        alert = self.build_low_pills_alert(prescription, reference_date)
        with self.lock:
            if any(
                pending.prescription.id == prescription.id
                for pending in self.refill_alerts
            ):
                return None
            self.refill_alerts.append(alert)
        logger.info(
            "Critical refill alert for '%s': %d pills remaining",
            prescription.name,
            prescription.pills_remaining,
        )
        return alert

    # -------------------------------------------------------------------------
    def pending_alerts(self) -> list[RefillAlert]:
        with self.lock:
            return list(self.refill_alerts)

    # -------------------------------------------------------------------------
    def get_refill_recommendations(self) -> list[RefillRecommendation]:
        recommendations = []
        for alert in self.pending_alerts():
            prediction = alert.prediction
            if prediction is None:
                continue
            urgency = (
                RefillUrgency.IMMEDIATE
                if alert.alert_type is RefillAlertType.CRITICAL
                else RefillUrgency.SOON
            )
            recommendations.append(
                RefillRecommendation(
                    prescription=alert.prescription,
                    urgency=urgency,
                    recommended_refill_date=prediction.recommended_refill_date,
                    days_remaining=prediction.days_remaining,
                    confidence=prediction.confidence,
                    reason=recommendation_reason(alert),
                )
            )
        recommendations.sort(key=lambda item: item.urgency)
        return recommendations
