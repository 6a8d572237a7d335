import unittest
from fractions import Fraction

from gpacalc.services.calculator_service import (
    ALL_EXCLUDED_MESSAGE,
    MODE_CGPA,
    MODE_TERM,
    CalculatorService,
    CalculatorServiceError,
    CourseInput,
    parse_course,
    parse_number,
)
from gpacalc.core.models import GradeType


class ParseTests(unittest.TestCase):
    def test_parse_number(self):
        self.assertEqual(parse_number(" 3.5 "), 3.5)
        self.assertEqual(parse_number(4), 4.0)
        self.assertIsNone(parse_number(""))
        self.assertIsNone(parse_number("abc"))
        self.assertIsNone(parse_number("nan"))
        self.assertIsNone(parse_number("inf"))
        self.assertIsNone(parse_number(None))
        self.assertIsNone(parse_number(True))

    def test_parse_course_defaults(self):
        record = parse_course(CourseInput(credits="x", grade_type="numeric", score=""), 4)
        self.assertEqual(record.name, "Course 4")
        self.assertEqual(record.credits, 0)
        self.assertIs(record.grade_type, GradeType.NUMERIC)
        self.assertIsNone(record.score)

    def test_parse_course_letter(self):
        record = parse_course(CourseInput(name=" Calc ", credits="1.5", letter=" A- ", score="99"), 1)
        self.assertEqual(record.name, "Calc")
        self.assertEqual(record.credits, Fraction(3, 2))
        self.assertIs(record.grade_type, GradeType.LETTER)
        self.assertEqual(record.letter, "A-")
        self.assertIsNone(record.score)

    def test_parse_course_uses_row_id_for_blank_name(self):
        record = parse_course(CourseInput(credits="3", letter="A", course_id=7), 1)
        self.assertEqual(record.name, "Course 7")

    def test_parse_number_huge_integer(self):
        self.assertIsNone(parse_number(10**400))


class CalculatorServiceTests(unittest.TestCase):
    def setUp(self):
        self.service = CalculatorService(max_credits=6)

    def test_term_mode(self):
        rows = [
            CourseInput(name="Calc", credits="3", letter="B+"),
            CourseInput(name="Phys", credits="4", letter="C+"),
            CourseInput(name="Art", credits="2", grade_type="numeric", score="40"),
        ]
        result = self.service.calculate(rows, mode=MODE_TERM)
        self.assertTrue(result.ok)
        self.assertIsNone(result.cumulative)
        self.assertEqual(result.term.total_credits, 9)
        self.assertEqual(result.term.total_quality_points, Fraction(58, 3))
        self.assertEqual(result.headline_gpa, result.term.gpa)

    def test_cumulative_mode(self):
        rows = [CourseInput(credits="3", letter="A-")]
        result = self.service.calculate(rows, mode=MODE_CGPA, prev_gpa="3.0", prev_credits="30")
        self.assertTrue(result.ok)
        self.assertEqual(result.term.courses[0].name, "Course 1")
        self.assertEqual(result.cumulative.previous_quality_points, 90)
        self.assertEqual(result.cumulative.new_total_credits, 33)
        self.assertEqual(result.cumulative.new_total_quality_points, 101)
        self.assertEqual(result.headline_gpa, Fraction(101, 33))

    def test_errors_are_collected(self):
        rows = [
            CourseInput(credits="0", grade_type="numeric", score="abc"),
            CourseInput(credits="7", letter=""),
        ]
        result = self.service.calculate(rows, mode=MODE_CGPA, prev_gpa="5", prev_credits="-1")
        self.assertFalse(result.ok)
        self.assertIsNone(result.term)
        self.assertEqual(
            result.errors,
            [
                "Course 1: Credit hours must be greater than 0.",
                "Course 1: Please enter a valid numeric score.",
                "Course 2: Credit hours cannot exceed 6.",
                "Course 2: Please select a letter grade.",
                "Previous CGPA must be between 0.00 and 4.00.",
                "Previous total credits must be 0 or greater.",
            ],
        )

    def test_previous_record_ignored_in_term_mode(self):
        result = self.service.calculate([CourseInput(credits="3", letter="A")], prev_gpa="9")
        self.assertTrue(result.ok)

    def test_empty_course_list(self):
        result = self.service.calculate([])
        self.assertEqual(result.errors, ["Please add at least one course."])

    def test_all_excluded(self):
        rows = [CourseInput(credits="3", letter="A", excluded=True)]
        result = self.service.calculate(rows)
        self.assertEqual(result.errors, [ALL_EXCLUDED_MESSAGE])
        self.assertEqual(result.headline_gpa, 0)

    def test_unknown_mode(self):
        with self.assertRaises(CalculatorServiceError):
            self.service.calculate([CourseInput(credits="3", letter="A")], mode="yearly")

    def test_invalid_ceiling(self):
        with self.assertRaises(CalculatorServiceError):
            CalculatorService(max_credits=0)

    def test_preview_skips_validation(self):
        term = self.service.preview_term([CourseInput(credits="9", letter="")])
        self.assertEqual(term.total_credits, 9)
        self.assertEqual(term.gpa, 0)
        cumulative = self.service.preview_cumulative(term, "", "")
        self.assertEqual(cumulative.new_total_credits, 9)


if __name__ == "__main__":
    unittest.main()
