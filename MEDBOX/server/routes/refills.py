from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from MEDBOX.server.schemas.refills import (
    AdherenceRequest,
    AdherenceResponse,
    DayAdherencePayload,
    PillTakenRequest,
    PillTakenResponse,
    PredictionRequest,
    PredictionResponse,
    RecommendationsResponse,
    RefillAlertPayload,
    RefillAlertsRequest,
    RefillAlertsResponse,
    RefillPredictionPayload,
    RefillRecommendationPayload,
    UsagePatternResponse,
    UsageRequest,
)
from MEDBOX.server.utils.constants import (
    REFILL_ADHERENCE_ENDPOINT,
    REFILL_ALERTS_ENDPOINT,
    REFILL_PILL_TAKEN_ENDPOINT,
    REFILL_PREDICTION_ENDPOINT,
    REFILL_RECOMMENDATIONS_ENDPOINT,
    REFILL_USAGE_ENDPOINT,
)
from MEDBOX.server.utils.logger import logger
from MEDBOX.server.utils.services.refills.adherence import (
    adherence_streak,
    overall_adherence,
    summarize_days,
    weekly_progress,
)
from MEDBOX.server.utils.services.refills.alerts import (
    InMemoryRecordStore,
    RefillAlertManager,
)
from MEDBOX.server.utils.services.refills.prediction import RefillPredictor, classify_alert
from MEDBOX.server.utils.services.refills.usage import UsagePatternAnalyzer

usage_analyzer = UsagePatternAnalyzer()
refill_predictor = RefillPredictor(analyzer=usage_analyzer)
record_store = InMemoryRecordStore()
refill_alert_manager = RefillAlertManager(record_store, predictor=refill_predictor)
router = APIRouter(tags=["refills"])


###############################################################################
class RefillEndpoint:
    def __init__(
        self,
        *,
        router: APIRouter,
        analyzer: UsagePatternAnalyzer,
        predictor: RefillPredictor,
        records: InMemoryRecordStore,
        alert_manager: RefillAlertManager,
    ) -> None:
        self.router = router
        self.analyzer = analyzer
        self.predictor = predictor
        self.records = records
        self.alert_manager = alert_manager

        self.router.add_api_route(
            REFILL_USAGE_ENDPOINT,
            self.analyze_usage,
            methods=["POST"],
            response_model=UsagePatternResponse,
        )
        self.router.add_api_route(
            REFILL_PREDICTION_ENDPOINT,
            self.predict_refill,
            methods=["POST"],
            response_model=PredictionResponse,
        )
        self.router.add_api_route(
            REFILL_ALERTS_ENDPOINT,
            self.update_alerts,
            methods=["POST"],
            response_model=RefillAlertsResponse,
        )
        self.router.add_api_route(
            REFILL_ALERTS_ENDPOINT,
            self.get_alerts,
            methods=["GET"],
            response_model=RefillAlertsResponse,
        )
        self.router.add_api_route(
            REFILL_PILL_TAKEN_ENDPOINT,
            self.record_pill_taken,
            methods=["POST"],
            response_model=PillTakenResponse,
        )
        self.router.add_api_route(
            REFILL_RECOMMENDATIONS_ENDPOINT,
            self.get_recommendations,
            methods=["GET"],
            response_model=RecommendationsResponse,
        )
        self.router.add_api_route(
            REFILL_ADHERENCE_ENDPOINT,
            self.summarize_adherence,
            methods=["POST"],
            response_model=AdherenceResponse,
        )

    # -------------------------------------------------------------------------
    def analyze_usage(self, payload: UsageRequest) -> UsagePatternResponse:
        try:
            pattern = self.analyzer.analyze(
                payload.to_records(),
                payload.daily_frequency,
                window_days=payload.window_days,
                reference_date=payload.reference_date,
            )
        except Exception as exc:
            logger.exception("Usage analysis failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Usage analysis failed",
            ) from exc
        return UsagePatternResponse.from_pattern(pattern)

    # -------------------------------------------------------------------------
    def predict_refill(self, payload: PredictionRequest) -> PredictionResponse:
        try:
            prediction = self.predictor.predict_refill(
                payload.prescription_id,
                payload.total_pills,
                payload.pills_remaining,
                payload.to_records(),
                payload.daily_frequency,
                window_days=payload.window_days,
                reference_date=payload.reference_date,
            )
        except Exception as exc:
            logger.exception(
                "Refill prediction failed for prescription %s: %s",
                payload.prescription_id,
                exc,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Refill prediction failed",
            ) from exc

        if prediction is None:
            return PredictionResponse(prescription_id=payload.prescription_id)
        return PredictionResponse(
            prescription_id=payload.prescription_id,
            prediction=RefillPredictionPayload.from_prediction(prediction),
            alert=classify_alert(prediction.days_remaining),
        )

    # -------------------------------------------------------------------------
    def update_alerts(self, payload: RefillAlertsRequest) -> RefillAlertsResponse:
        prescriptions = []
        for item in payload.prescriptions:
            for record in item.records:
                self.records.add_record(item.id, record.to_record())
            prescriptions.append(item.to_prescription())
        try:
            alerts = self.alert_manager.update_refill_predictions(
                prescriptions, reference_date=payload.reference_date
            )
        except Exception as exc:
            logger.exception("Refill alert update failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Refill alert update failed",
            ) from exc
        return RefillAlertsResponse(
            count=len(alerts),
            alerts=[RefillAlertPayload.from_alert(alert) for alert in alerts],
        )

    # -------------------------------------------------------------------------
    def get_alerts(self) -> RefillAlertsResponse:
        alerts = self.alert_manager.pending_alerts()
        return RefillAlertsResponse(
            count=len(alerts),
            alerts=[RefillAlertPayload.from_alert(alert) for alert in alerts],
        )

    # -------------------------------------------------------------------------
    def record_pill_taken(self, payload: PillTakenRequest) -> PillTakenResponse:
        prescription = payload.prescription.to_prescription()
        self.records.record_dose_taken(prescription, payload.reference_date)
        alert = self.alert_manager.record_pill_taken(
            prescription, reference_date=payload.reference_date
        )
        return PillTakenResponse(
            prescription_id=prescription.id,
            pills_remaining=prescription.pills_remaining,
            alert=RefillAlertPayload.from_alert(alert) if alert else None,
        )

    # -------------------------------------------------------------------------
    def get_recommendations(self) -> RecommendationsResponse:
        recommendations = self.alert_manager.get_refill_recommendations()
        return RecommendationsResponse(
            count=len(recommendations),
            recommendations=[
                RefillRecommendationPayload.from_recommendation(item)
                for item in recommendations
            ],
        )

    # -------------------------------------------------------------------------
    def summarize_adherence(self, payload: AdherenceRequest) -> AdherenceResponse:
        records = payload.to_records()
        days = summarize_days(records)
        return AdherenceResponse(
            overall_adherence=overall_adherence(records),
            streak_days=adherence_streak(
                records, payload.reference_date, threshold=payload.threshold
            ),
            weekly_progress=weekly_progress(
                records, payload.reference_date, threshold=payload.threshold
            ),
            days=[DayAdherencePayload.from_day(days[day]) for day in sorted(days)],
        )


endpoint = RefillEndpoint(
    router=router,
    analyzer=usage_analyzer,
    predictor=refill_predictor,
    records=record_store,
    alert_manager=refill_alert_manager,
)
