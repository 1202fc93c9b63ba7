import unittest

from forthlang.pure.cell import Char, Integer
from forthlang.pure.literal import parse_literal


class LiteralTestCase(unittest.TestCase):

    def test_integers(self):
        cases = {"0": 0, "42": 42, "-12": -12, "-0": 0, "007": 7, "2147483647": 2147483647,
                 "2147483648": -2147483648, "4294967295": -1}
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), parse_literal(case), case)

    def test_chars(self):
        cases = {"'a'": "a", "'Z'": "Z", "'''": "'", "'1'": "1"}
        for case, expected in cases.items():
            self.assertEqual(Char(ord(expected)), parse_literal(case), case)

    def test_not_literals(self):
        should_fail = ["", "-", "--1", "+5", "1a", "0x10", "1.5", "dup", "'ab'", "''", "'a", "a'", "'Ā'",
                       "'é'", "١"]
        for case in should_fail:
            self.assertIsNone(parse_literal(case), case)


if __name__ == '__main__':
    unittest.main()
