"""
Unit tests for the record validation predicates.
"""

import unittest

from sdcsite.validate import (
    is_valid_directory_name,
    is_valid_semester,
    is_valid_user_name,
    is_valid_year,
)


class TestYear(unittest.TestCase):
    def test_four_digits(self) -> None:
        for value in ("2023", "0000", "1999"):
            self.assertTrue(is_valid_year(value), value)

    def test_rejects_everything_else(self) -> None:
        for value in ("", "202", "20231", "20a3", " 2023", "2023\n", "２０２３"):
            self.assertFalse(is_valid_year(value), repr(value))


class TestUserName(unittest.TestCase):
    def test_valid_names(self) -> None:
        for value in ("jdoe", "_svc", "a1", "j-doe_2", "_"):
            self.assertTrue(is_valid_user_name(value), value)

    def test_invalid_names(self) -> None:
        # digit or uppercase first, trailing $, spaces
        for value in ("", "1jdoe", "Jdoe", "jdoe$", "j doe", "jDoe"):
            self.assertFalse(is_valid_user_name(value), repr(value))


class TestSemester(unittest.TestCase):
    def test_enum_literals(self) -> None:
        for value in ("Spring", "SummerI", "SummerII", "Fall"):
            self.assertTrue(is_valid_semester(value))

    def test_case_sensitive(self) -> None:
        for value in ("fall", "Summer", "Winter", ""):
            self.assertFalse(is_valid_semester(value))


class TestDirectoryName(unittest.TestCase):
    def test_valid(self) -> None:
        self.assertTrue(is_valid_directory_name("Capstone_1"))

    def test_invalid(self) -> None:
        for value in ("", "cap-stone", "cap stone", "../etc", "a/b"):
            self.assertFalse(is_valid_directory_name(value), repr(value))


if __name__ == "__main__":
    unittest.main()
