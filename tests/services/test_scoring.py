from __future__ import annotations

import unittest

from MEDBOX.server.utils.services.search.scoring import score_match


class ScoreMatchTests(unittest.TestCase):
    # ------------------------------------------------------------------
    def test_identical_strings_score_one(self) -> None:
        for value in ["amoxil", "vitamin d3", "a"]:
            self.assertEqual(score_match(value, value), 1.0)

    # ------------------------------------------------------------------
    def test_prefix_match_is_clamped(self) -> None:
        self.assertEqual(score_match("amox", "amoxicillin"), 1.0)

    # ------------------------------------------------------------------
    def test_word_prefixes_accumulate_credit(self) -> None:
        self.assertAlmostEqual(score_match("sod chlor", "sodium chloride"), 0.72)

    # ------------------------------------------------------------------
    def test_reordered_words_score_high(self) -> None:
        self.assertGreaterEqual(score_match("acid folic", "folic acid"), 0.8)

    # ------------------------------------------------------------------
    def test_unrelated_names_score_low(self) -> None:
        self.assertLess(score_match("amox", "lisinopril"), 0.25)

    # ------------------------------------------------------------------
    def test_scores_are_bounded(self) -> None:
        queries = ["amox", "met", "vitamin d", "zz", "a b c"]
        candidates = ["amoxicillin", "metformin", "vitamin d3", "zoloft", "a b c d"]
        for query in queries:
            for candidate in candidates:
                score = score_match(query, candidate)
                self.assertGreaterEqual(score, 0.0)
                self.assertLessEqual(score, 1.0)


if __name__ == "__main__":
    unittest.main()
