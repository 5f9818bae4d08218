import math
import unittest

from survey_insights.analysis.models import (
    TEXT_TOTAL_LABEL,
    CategoricalStats,
    EmptyStats,
    NumericStats,
    Question,
    TextStats,
)
from survey_insights.analysis.statistics import (
    analyze_question,
    calculate_statistics,
    calculate_survey_statistics,
    numeric_values,
)


class TestCategoricalStatistics(unittest.TestCase):

    def test_multiple_choice_counts(self):
        q = Question(question_id=1, question_text="q", question_type="multiple_choice", options=("a", "b"))
        qs = analyze_question(q, ["a", "a", "b", None, "b", "b"])

        self.assertEqual(qs.total_responses, 5)
        self.assertIsInstance(qs.statistics, CategoricalStats)
        self.assertEqual(qs.statistics.frequencies, {"a": 2, "b": 3})
        self.assertAlmostEqual(qs.statistics.percentages["a"], 40.0)
        self.assertAlmostEqual(qs.statistics.percentages["b"], 60.0)
        self.assertEqual(qs.statistics.mode, "b")

    def test_unselected_options_are_reported_with_zero(self):
        stats = calculate_statistics(["جيدة", "جيدة"], "likert_scale", ["ممتازة", "جيدة", "ضعيفة"])
        self.assertEqual(stats.frequencies, {"ممتازة": 0, "جيدة": 2, "ضعيفة": 0})
        self.assertEqual(stats.percentages["ممتازة"], 0.0)
        self.assertEqual(stats.percentages["جيدة"], 100.0)

    def test_answers_outside_options_get_their_own_key(self):
        stats = calculate_statistics(["a", "other"], "multiple_choice", ["a", "b"])
        self.assertEqual(stats.frequencies, {"a": 1, "b": 0, "other": 1})
        self.assertAlmostEqual(sum(stats.percentages.values()), 100.0)

    def test_no_responses_gives_zero_percentages_and_no_mode(self):
        stats = calculate_statistics([None, ""], "multiple_choice", ["a", "b"])
        self.assertEqual(stats.frequencies, {"a": 0, "b": 0})
        self.assertEqual(stats.percentages, {"a": 0.0, "b": 0.0})
        self.assertIsNone(stats.mode)
        self.assertNotIn("mode", stats.to_dict())

    def test_mode_tie_goes_to_first_label(self):
        stats = calculate_statistics(["b", "a"], "multiple_choice", ["a", "b"])
        self.assertEqual(stats.mode, "a")

    def test_yes_no_is_categorical(self):
        stats = calculate_statistics(["نعم", "لا", "نعم"], "yes_no")
        self.assertIsInstance(stats, CategoricalStats)
        self.assertEqual(stats.mode, "نعم")

    def test_numeric_labels_in_categorical_question(self):
        # declared type wins: no numeric statistics for a categorical question
        stats = calculate_statistics(["1", "2", 2.0], "multiple_choice")
        self.assertIsInstance(stats, CategoricalStats)
        self.assertEqual(stats.frequencies, {"1": 1, "2": 2})
        self.assertNotIn("average", stats.to_dict())

    def test_percentages_sum_to_hundred(self):
        answers = ["a", "b", "c", "a", "c", "c", "b"]
        stats = calculate_statistics(answers, "multiple_choice", ["a", "b", "c", "d"])
        self.assertTrue(math.isclose(sum(stats.percentages.values()), 100.0))


class TestNumericStatistics(unittest.TestCase):

    def test_rating_summary(self):
        stats = calculate_statistics([5, 4, 3, 4, 5], "rating")

        self.assertIsInstance(stats, NumericStats)
        self.assertEqual(stats.average, 4.2)
        self.assertEqual(stats.min, 3)
        self.assertEqual(stats.max, 5)
        self.assertEqual(stats.median, 4)
        self.assertEqual(stats.standard_deviation, 0.75)
        self.assertEqual(stats.frequencies, {"5": 2, "4": 2, "3": 1})
        self.assertAlmostEqual(stats.percentages["5"], 40.0)
        self.assertAlmostEqual(stats.percentages["3"], 20.0)

    def test_even_count_median_averages_middle_values(self):
        stats = calculate_statistics([1, 2, 4, 5], "rating")
        self.assertEqual(stats.median, 3.0)

    def test_all_missing_rating_has_no_statistics(self):
        q = Question(question_id="r", question_text="rate", question_type="rating")
        qs = analyze_question(q, [None, None, ""])
        self.assertEqual(qs.total_responses, 0)
        self.assertIsInstance(qs.statistics, EmptyStats)
        self.assertEqual(qs.to_dict()["statistics"], {})

    def test_empty_rating(self):
        self.assertIsInstance(calculate_statistics([], "rating"), EmptyStats)

    def test_non_numeric_answers_count_as_responses_only(self):
        q = Question(question_id="r", question_text="rate", question_type="rating")
        qs = analyze_question(q, [4, "ممتاز", "2", None])

        self.assertEqual(qs.total_responses, 3)
        self.assertEqual(qs.statistics.average, 3.0)
        self.assertEqual(sum(qs.statistics.frequencies.values()), 2)
        self.assertAlmostEqual(qs.statistics.percentages["4"], 50.0)

    def test_whitespace_answer_is_not_counted(self):
        q = Question(question_id="r", question_text="rate", question_type="rating")
        qs = analyze_question(q, [4, "  ", 2])
        self.assertEqual(qs.total_responses, 2)
        self.assertEqual(qs.statistics.min, 2)

    def test_only_text_in_rating_question(self):
        q = Question(question_id="r", question_text="rate", question_type="rating")
        qs = analyze_question(q, ["good", "bad"])
        self.assertEqual(qs.total_responses, 2)
        self.assertIsInstance(qs.statistics, EmptyStats)

    def test_identical_values_have_zero_spread(self):
        stats = calculate_statistics([3, 3, 3], "rating")
        self.assertEqual(stats.standard_deviation, 0.0)
        self.assertEqual(calculate_statistics([4], "rating").standard_deviation, 0.0)

    def test_different_values_have_positive_spread(self):
        self.assertGreater(calculate_statistics([1, 5], "rating").standard_deviation, 0)

    def test_population_standard_deviation(self):
        # population: sqrt(((1-2)^2 + (3-2)^2) / 2) = 1
        self.assertEqual(calculate_statistics([1, 3], "rating").standard_deviation, 1.0)

    def test_average_rounds_half_up(self):
        # mean 2.125 -> 2.13
        stats = calculate_statistics([2, 2, 2, 2.5], "rating")
        self.assertEqual(stats.average, 2.13)

    def test_ordering_properties(self):
        samples = [[1, 2, 9, 10], [3.5, 1, 4], [10, 10, 1], [2, 2, 5, 4, 1]]
        for values in samples:
            stats = calculate_statistics(values, "rating")
            self.assertLessEqual(stats.min, stats.median)
            self.assertLessEqual(stats.median, stats.max)
            self.assertLessEqual(stats.min, stats.average)
            self.assertLessEqual(stats.average, stats.max)
            self.assertGreaterEqual(stats.standard_deviation, 0)

    def test_numeric_values_skips_blanks_and_text(self):
        self.assertEqual(numeric_values([1, " 2 ", "x", None, "", 3.5, float("nan")]), [1, 2, 3.5])

    def test_to_dict_uses_camel_case(self):
        d = calculate_statistics([1, 2], "rating").to_dict()
        self.assertEqual(
            set(d),
            {"average", "standardDeviation", "median", "min", "max", "frequencies", "percentages", "mode"},
        )


class TestTextAndUnknown(unittest.TestCase):

    def test_text_reports_count_only(self):
        q = Question(question_id=3, question_text="comments", question_type="text")
        qs = analyze_question(q, ["great", "", None, "  ", "needs work"])

        self.assertEqual(qs.total_responses, 2)
        self.assertIsInstance(qs.statistics, TextStats)
        self.assertEqual(qs.statistics.frequencies, {TEXT_TOTAL_LABEL: 2})
        self.assertEqual(qs.statistics.to_dict(), {"frequencies": {TEXT_TOTAL_LABEL: 2}})

    def test_unknown_type_gives_empty_statistics(self):
        stats = calculate_statistics(["a"], "matrix")
        self.assertIsInstance(stats, EmptyStats)
        self.assertEqual(stats.to_dict(), {})

    def test_repeated_calls_are_identical(self):
        answers = [5, 4, "3", None, 4.5]
        self.assertEqual(calculate_statistics(answers, "rating"), calculate_statistics(answers, "rating"))
        self.assertEqual(
            calculate_statistics(["a", "b"], "multiple_choice", ["a", "b"]).to_dict(),
            calculate_statistics(["a", "b"], "multiple_choice", ["a", "b"]).to_dict(),
        )


class TestSurveyStatistics(unittest.TestCase):

    def test_questions_are_analyzed_in_display_order(self):
        questions = [
            Question(question_id=10, question_text="second", question_type="rating", order_index=1),
            Question(question_id=11, question_text="first", question_type="multiple_choice",
                     options=("x", "y"), order_index=0),
            Question(question_id=12, question_text="third", question_type="text", order_index=2),
        ]
        answers = {10: [5, 3], 11: ["x", "x", "y"]}

        result = calculate_survey_statistics(questions, answers)

        self.assertEqual([qs.question_id for qs in result], [11, 10, 12])
        self.assertEqual(result[0].total_responses, 3)
        self.assertEqual(result[1].statistics.average, 4.0)
        self.assertEqual(result[2].total_responses, 0)
        self.assertEqual(result[2].statistics.text_answers, 0)

    def test_wrapper_dict_shape(self):
        q = Question(question_id=1, question_text="q", question_type="multiple_choice", options=("a",))
        d = analyze_question(q, ["a"]).to_dict()
        self.assertEqual(d["questionId"], 1)
        self.assertEqual(d["questionType"], "multiple_choice")
        self.assertEqual(d["totalResponses"], 1)
        self.assertEqual(d["statistics"]["mode"], "a")


if __name__ == "__main__":
    unittest.main()
