from __future__ import annotations

import datetime as dt
from datetime import date

from pydantic import BaseModel, Field

from MEDBOX.server.utils.constants import ADHERENCE_STREAK_PERCENTAGE
from MEDBOX.server.utils.services.refills.adherence import AdherenceLevel, DayAdherence
from MEDBOX.server.utils.services.refills.alerts import RefillAlert, RefillRecommendation
from MEDBOX.server.utils.services.refills.records import (
    MedicationRecord,
    PredictionConfidence,
    Prescription,
    RefillAlertType,
    RefillPrediction,
    UsagePattern,
)


###############################################################################
class MedicationRecordPayload(BaseModel):
    date: dt.date = Field(..., description="Day the record refers to.")
    taken_doses: int = Field(0, ge=0, description="Doses taken that day.")
    scheduled_doses: int = Field(1, ge=1, description="Doses scheduled that day.")

    # -------------------------------------------------------------------------
    def to_record(self) -> MedicationRecord:
        return MedicationRecord(
            date=self.date,
            taken_doses=self.taken_doses,
            scheduled_doses=self.scheduled_doses,
        )


###############################################################################
class UsageRequest(BaseModel):
    """Dose history for a single prescription."""

    daily_frequency: int = Field(1, ge=1, description="Expected doses per day.")
    window_days: int | None = Field(
        None, ge=1, description="Trailing window in days (defaults to configuration)."
    )
    reference_date: date | None = Field(
        None, description="Day the window ends on (defaults to today)."
    )
    records: list[MedicationRecordPayload] = Field(default_factory=list)

    # -------------------------------------------------------------------------
    def to_records(self) -> list[MedicationRecord]:
        return [record.to_record() for record in self.records]


###############################################################################
class PredictionRequest(UsageRequest):
    prescription_id: str = Field(..., min_length=1, max_length=200)
    total_pills: int | None = Field(None, ge=0)
    pills_remaining: int | None = Field(None, ge=0)


###############################################################################
class UsagePatternResponse(BaseModel):
    average_daily_usage: float = Field(..., ge=0.0)
    adherence_rate: float = Field(..., ge=0.0, le=1.0)
    consistency_score: float = Field(..., ge=0.0, le=1.0)
    data_points: int = Field(..., ge=0)
    period_days: int = Field(..., ge=1)

    # -------------------------------------------------------------------------
    @classmethod
    def from_pattern(cls, pattern: UsagePattern) -> UsagePatternResponse:
        return cls(
            average_daily_usage=pattern.average_daily_usage,
            adherence_rate=pattern.adherence_rate,
            consistency_score=pattern.consistency_score,
            data_points=pattern.data_points,
            period_days=pattern.period_days,
        )


###############################################################################
class RefillPredictionPayload(BaseModel):
    days_remaining: int = Field(..., ge=0)
    predicted_refill_date: date
    recommended_refill_date: date
    average_daily_usage: float
    adherence_rate: float
    confidence: PredictionConfidence
    confidence_description: str
    usage_pattern: UsagePatternResponse

    # -------------------------------------------------------------------------
    @classmethod
    def from_prediction(cls, prediction: RefillPrediction) -> RefillPredictionPayload:
        return cls(
            days_remaining=prediction.days_remaining,
            predicted_refill_date=prediction.predicted_refill_date,
            recommended_refill_date=prediction.recommended_refill_date,
            average_daily_usage=prediction.average_daily_usage,
            adherence_rate=prediction.adherence_rate,
            confidence=prediction.confidence,
            confidence_description=prediction.confidence.description,
            usage_pattern=UsagePatternResponse.from_pattern(prediction.usage_pattern),
        )


###############################################################################
class PredictionResponse(BaseModel):
    prescription_id: str
    prediction: RefillPredictionPayload | None = None
    alert: RefillAlertType | None = Field(
        None, description="Refill alert severity, if any."
    )


###############################################################################
class PrescriptionPayload(BaseModel):
    id: str = Field(..., min_length=1, max_length=200)
    name: str = Field(..., min_length=1, max_length=200)
    daily_frequency: int = Field(1, ge=1, description="Expected doses per day.")
    total_pills: int | None = Field(None, ge=0)
    pills_remaining: int | None = Field(None, ge=0)

    # -------------------------------------------------------------------------
    def to_prescription(self) -> Prescription:
        return Prescription(
            id=self.id,
            name=self.name,
            daily_frequency=self.daily_frequency,
            total_pills=self.total_pills,
            pills_remaining=self.pills_remaining,
        )


###############################################################################
class PrescriptionHistoryPayload(PrescriptionPayload):
    records: list[MedicationRecordPayload] = Field(
        default_factory=list,
        description="Dose history to store before predicting.",
    )


###############################################################################
class RefillAlertsRequest(BaseModel):
    """
    Prescriptions to re-evaluate.
    - Each prescription may carry dose history, which is stored first.
    - The pending alert list is replaced by the result.
    """

    reference_date: date | None = Field(
        None, description="Day predictions are computed for (defaults to today)."
    )
    prescriptions: list[PrescriptionHistoryPayload] = Field(default_factory=list)


###############################################################################
class PillTakenRequest(BaseModel):
    prescription: PrescriptionPayload
    reference_date: date | None = Field(
        None, description="Day the dose was taken (defaults to today)."
    )


###############################################################################
class RefillAlertPayload(BaseModel):
    prescription_id: str
    prescription_name: str
    alert_type: RefillAlertType
    label: str
    pills_remaining: int | None = None
    prediction: RefillPredictionPayload | None = None
    timestamp: dt.datetime

    # -------------------------------------------------------------------------
    @classmethod
    def from_alert(cls, alert: RefillAlert) -> RefillAlertPayload:
        prediction = alert.prediction
        return cls(
            prescription_id=alert.prescription.id,
            prescription_name=alert.prescription.name,
            alert_type=alert.alert_type,
            label=alert.alert_type.label,
            pills_remaining=alert.prescription.pills_remaining,
            prediction=(
                RefillPredictionPayload.from_prediction(prediction)
                if prediction is not None
                else None
            ),
            timestamp=alert.timestamp,
        )


###############################################################################
class RefillAlertsResponse(BaseModel):
    count: int = Field(..., ge=0)
    alerts: list[RefillAlertPayload] = Field(default_factory=list)


###############################################################################
class PillTakenResponse(BaseModel):
    prescription_id: str
    pills_remaining: int | None = None
    alert: RefillAlertPayload | None = Field(
        None, description="Critical alert raised by this dose, if any."
    )


###############################################################################
class RefillRecommendationPayload(BaseModel):
    prescription_id: str
    prescription_name: str
    urgency: str = Field(..., description="Immediate, Soon or Planned.")
    recommended_refill_date: date
    days_remaining: int
    confidence: PredictionConfidence
    reason: str

    # -------------------------------------------------------------------------
    @classmethod
    def from_recommendation(
        cls, recommendation: RefillRecommendation
    ) -> RefillRecommendationPayload:
        return cls(
            prescription_id=recommendation.prescription.id,
            prescription_name=recommendation.prescription.name,
            urgency=recommendation.urgency.display_name,
            recommended_refill_date=recommendation.recommended_refill_date,
            days_remaining=recommendation.days_remaining,
            confidence=recommendation.confidence,
            reason=recommendation.reason,
        )


###############################################################################
class RecommendationsResponse(BaseModel):
    count: int = Field(..., ge=0)
    recommendations: list[RefillRecommendationPayload] = Field(default_factory=list)


###############################################################################
class AdherenceRequest(BaseModel):
    reference_date: date | None = Field(
        None, description="Last day of the streak and weekly view (defaults to today)."
    )
    threshold: float = Field(
        ADHERENCE_STREAK_PERCENTAGE,
        ge=0.0,
        le=100.0,
        description="Daily adherence percentage that counts towards a streak.",
    )
    records: list[MedicationRecordPayload] = Field(default_factory=list)

    # -------------------------------------------------------------------------
    def to_records(self) -> list[MedicationRecord]:
        return [record.to_record() for record in self.records]


###############################################################################
class DayAdherencePayload(BaseModel):
    date: dt.date
    total_scheduled: int = Field(..., ge=0)
    total_taken: int = Field(..., ge=0)
    adherence_percentage: float = Field(..., ge=0.0)
    level: AdherenceLevel
    description: str

    # -------------------------------------------------------------------------
    @classmethod
    def from_day(cls, day: DayAdherence) -> DayAdherencePayload:
        return cls(
            date=day.date,
            total_scheduled=day.total_scheduled,
            total_taken=day.total_taken,
            adherence_percentage=day.adherence_percentage,
            level=day.level,
            description=day.level.description,
        )


###############################################################################
class AdherenceResponse(BaseModel):
    overall_adherence: float = Field(
        ..., ge=0.0, description="Percentage of doses taken."
    )
    streak_days: int = Field(..., ge=0)
    weekly_progress: list[bool] = Field(
        ..., description="Last seven days, oldest first."
    )
    days: list[DayAdherencePayload] = Field(default_factory=list)
