import unittest
from fractions import Fraction

from gpacalc.core.gpa import aggregate_term, combine_cumulative
from gpacalc.core.models import CourseRecord, CourseStatus, GradeType


def letter_course(credits, letter, **kwargs):
    return CourseRecord(credits=Fraction(credits), grade_type=GradeType.LETTER, letter=letter, **kwargs)


def numeric_course(credits, score, **kwargs):
    return CourseRecord(credits=Fraction(credits), grade_type=GradeType.NUMERIC, score=score, **kwargs)


class AggregateTermTests(unittest.TestCase):
    def test_empty_term(self):
        term = aggregate_term([])
        self.assertEqual(term.total_credits, 0)
        self.assertEqual(term.total_quality_points, 0)
        self.assertEqual(term.gpa, 0)
        self.assertEqual(term.courses, ())

    def test_mixed_letters(self):
        term = aggregate_term([letter_course(3, "B+"), letter_course(4, "C+"), letter_course(2, "F")])
        self.assertEqual(term.total_credits, 9)
        self.assertEqual(term.total_quality_points, Fraction(58, 3))
        self.assertAlmostEqual(float(term.total_quality_points), 19.33, places=2)
        self.assertAlmostEqual(float(term.gpa), 2.15, places=2)

    def test_repeat_cap_applies_above_b_plus(self):
        plain = aggregate_term([numeric_course(3, 98)])
        self.assertEqual(plain.courses[0].resolved_grade_point, 4)
        self.assertEqual(plain.total_quality_points, 12)

        capped = aggregate_term([numeric_course(3, 98, repeated=True)])
        course = capped.courses[0]
        self.assertEqual(course.resolved_grade_point, Fraction(10, 3))
        self.assertEqual(course.resolved_letter, "B+")
        self.assertTrue(course.was_capped)
        self.assertIs(course.status, CourseStatus.CAPPED)
        self.assertEqual(course.quality_points, 10)
        self.assertEqual(capped.capped_count, 1)

    def test_repeat_cap_is_ceiling_only(self):
        for letter in ("B+", "B", "C"):
            with self.subTest(letter=letter):
                course = aggregate_term([letter_course(3, letter, repeated=True)]).courses[0]
                self.assertEqual(course.resolved_letter, letter)
                self.assertFalse(course.was_capped)
                self.assertIs(course.status, CourseStatus.INCLUDED)

    def test_excluded_course_contributes_nothing(self):
        term = aggregate_term(
            [
                letter_course(3, "A", excluded=True, repeated=True),
                letter_course(2, "B"),
            ]
        )
        self.assertEqual(term.total_credits, 2)
        self.assertEqual(term.total_quality_points, 6)
        self.assertEqual(term.gpa, 3)
        excluded = term.courses[0]
        self.assertIs(excluded.status, CourseStatus.EXCLUDED)
        self.assertEqual(excluded.quality_points, 0)
        self.assertFalse(excluded.was_capped)
        self.assertEqual(term.excluded_count, 1)

    def test_all_excluded_gives_zero_gpa(self):
        term = aggregate_term([letter_course(3, "A", excluded=True)])
        self.assertEqual(term.total_credits, 0)
        self.assertEqual(term.gpa, 0)
        self.assertEqual(len(term.courses), 1)

    def test_output_keeps_input_order(self):
        records = [letter_course(1, "C", name="one"), letter_course(2, "A", name="two"), letter_course(3, "B", name="three")]
        term = aggregate_term(records)
        self.assertEqual([c.name for c in term.courses], ["one", "two", "three"])
        reversed_term = aggregate_term(list(reversed(records)))
        self.assertEqual(term.gpa, reversed_term.gpa)

    def test_half_credit_stays_exact(self):
        term = aggregate_term([letter_course(Fraction(3, 2), "A-")])
        self.assertEqual(term.total_quality_points, Fraction(11, 2))

    def test_unknown_letter_counts_as_f(self):
        term = aggregate_term([letter_course(3, ""), letter_course(3, "A")])
        self.assertEqual(term.gpa, 2)


class CombineCumulativeTests(unittest.TestCase):
    def test_reconstructs_previous_quality_points(self):
        result = combine_cumulative(3.0, 30, Fraction(11), Fraction(3))
        self.assertEqual(result.previous_quality_points, 90)
        self.assertEqual(result.new_total_credits, 33)
        self.assertEqual(result.new_total_quality_points, 101)
        self.assertAlmostEqual(float(result.cgpa), 3.06, places=2)

    def test_explicit_previous_quality_points_win(self):
        result = combine_cumulative(3.0, 30, 11, 3, explicit_prev_quality_points=100)
        self.assertEqual(result.previous_quality_points, 100)
        self.assertEqual(result.new_total_quality_points, 111)

    def test_explicit_zero_is_used(self):
        result = combine_cumulative(3.0, 30, 11, 3, explicit_prev_quality_points=0)
        self.assertEqual(result.previous_quality_points, 0)

    def test_zero_credits(self):
        result = combine_cumulative(0, 0, 0, 0)
        self.assertEqual(result.cgpa, 0)

    def test_float_gpa_is_read_as_typed(self):
        result = combine_cumulative(3.3, 10, 0, 0)
        self.assertEqual(result.previous_quality_points, 33)


if __name__ == "__main__":
    unittest.main()
