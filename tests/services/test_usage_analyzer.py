from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta

from MEDBOX.server.utils.services.refills.records import MedicationRecord
from MEDBOX.server.utils.services.refills.usage import UsagePatternAnalyzer

REFERENCE_DATE = date(2026, 3, 31)


# -----------------------------------------------------------------------------
def daily_records(taken: list[int], scheduled: int = 2) -> list[MedicationRecord]:
    return [
        MedicationRecord(
            date=REFERENCE_DATE - timedelta(days=offset),
            taken_doses=doses,
            scheduled_doses=scheduled,
        )
        for offset, doses in enumerate(taken)
    ]


class UsagePatternAnalyzerTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def setUp(self) -> None:
        self.analyzer = UsagePatternAnalyzer(window_days=30)

    # ------------------------------------------------------------------
    def test_full_adherence_over_window(self) -> None:
        pattern = self.analyzer.analyze(
            daily_records([2] * 30), daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertAlmostEqual(pattern.adherence_rate, 1.0)
        self.assertAlmostEqual(pattern.consistency_score, 1.0)
        self.assertAlmostEqual(pattern.average_daily_usage, 2.0)
        self.assertEqual(pattern.data_points, 30)
        self.assertEqual(pattern.period_days, 30)

    # ------------------------------------------------------------------
    def test_half_doses_every_day(self) -> None:
        pattern = self.analyzer.analyze(
            daily_records([1] * 30), daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertAlmostEqual(pattern.adherence_rate, 0.5)
        self.assertAlmostEqual(pattern.average_daily_usage, 1.0)
        self.assertAlmostEqual(pattern.consistency_score, 1.0)

    # ------------------------------------------------------------------
    def test_alternating_days_lower_consistency(self) -> None:
        pattern = self.analyzer.analyze(
            daily_records([2, 0] * 5), daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertAlmostEqual(pattern.consistency_score, 0.5)
        self.assertAlmostEqual(pattern.average_daily_usage, 2.0)
        self.assertAlmostEqual(pattern.adherence_rate, 10 / 60)
        self.assertEqual(pattern.data_points, 10)

    # ------------------------------------------------------------------
    def test_records_for_same_day_are_combined(self) -> None:
        records = [
            MedicationRecord(date=REFERENCE_DATE, taken_doses=1, scheduled_doses=2),
            MedicationRecord(date=REFERENCE_DATE, taken_doses=1, scheduled_doses=2),
        ]
        pattern = self.analyzer.analyze(
            records, daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertAlmostEqual(pattern.average_daily_usage, 2.0)
        self.assertAlmostEqual(pattern.consistency_score, 1.0)
        self.assertEqual(pattern.data_points, 2)

    # ------------------------------------------------------------------
    def test_records_outside_window_are_ignored(self) -> None:
        records = [
            MedicationRecord(
                date=REFERENCE_DATE - timedelta(days=45),
                taken_doses=2,
                scheduled_doses=2,
            )
        ]
        pattern = self.analyzer.analyze(
            records, daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertEqual(pattern.data_points, 0)
        self.assertEqual(pattern.average_daily_usage, 0.0)

    # ------------------------------------------------------------------
    def test_window_excludes_day_at_cutoff(self) -> None:
        pattern = self.analyzer.analyze(
            daily_records([1] * 31), daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertEqual(pattern.data_points, 30)
        self.assertAlmostEqual(pattern.adherence_rate, 0.5)

    # ------------------------------------------------------------------
    def test_empty_history(self) -> None:
        pattern = self.analyzer.analyze([], daily_frequency=1)
        self.assertEqual(pattern.average_daily_usage, 0.0)
        self.assertEqual(pattern.adherence_rate, 0.0)
        self.assertEqual(pattern.consistency_score, 0.0)
        self.assertEqual(pattern.data_points, 0)
        self.assertEqual(pattern.period_days, 30)

    # ------------------------------------------------------------------
    def test_adherence_rate_is_clamped(self) -> None:
        pattern = self.analyzer.analyze(
            daily_records([6] * 30), daily_frequency=2, reference_date=REFERENCE_DATE
        )
        self.assertEqual(pattern.adherence_rate, 1.0)
        self.assertAlmostEqual(pattern.average_daily_usage, 6.0)

    # ------------------------------------------------------------------
    def test_custom_window_and_frequency_floor(self) -> None:
        pattern = self.analyzer.analyze(
            daily_records([1] * 10, scheduled=1),
            daily_frequency=0,
            window_days=7,
            reference_date=REFERENCE_DATE,
        )
        self.assertEqual(pattern.period_days, 7)
        self.assertEqual(pattern.data_points, 7)
        self.assertAlmostEqual(pattern.adherence_rate, 1.0)

    # ------------------------------------------------------------------
    def test_invalid_window_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            UsagePatternAnalyzer(window_days=0)
        with self.assertRaises(ValueError):
            self.analyzer.analyze([], daily_frequency=1, window_days=-3)

    # ------------------------------------------------------------------
    def test_record_normalizes_inputs(self) -> None:
        record = MedicationRecord(
            date=datetime(2026, 3, 1, 14, 30), taken_doses=-2, scheduled_doses=0
        )
        self.assertEqual(record.date, date(2026, 3, 1))
        self.assertEqual(record.taken_doses, 0)
        self.assertEqual(record.scheduled_doses, 1)


if __name__ == "__main__":
    unittest.main()
