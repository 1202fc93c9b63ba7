import unittest

from forthlang.pure.scanner import Scanner, Token


class ScannerTestCase(unittest.TestCase):

    def test_empty(self):
        should_be_empty = ["", "   ", " \t\t \n \n", "\n"]
        for case in should_be_empty:
            scanner = Scanner(case)
            self.assertIsNone(scanner.next_token(), repr(case))
            self.assertTrue(scanner.is_finished)

    def test_words(self):
        cases = {
            "dup": ["dup"],
            "  \t dup": ["dup"],
            "1 2 +": ["1", "2", "+"],
            "   \tTHESE\t\tWORDS      APPEAR      \t  ": ["THESE", "WORDS", "APPEAR"],
            ": sq dup * ;": [":", "sq", "dup", "*", ";"],
            "'a' .c\n'b' .c": ["'a'", ".c", "'b'", ".c"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, [token.text for token in Scanner(case)], case)

    def test_positions(self):
        tokens = list(Scanner("a  bc\n  d\n\nef"))

        self.assertEqual([Token("a", 1, 1), Token("bc", 1, 4), Token("d", 2, 3), Token("ef", 4, 1)], tokens)

    def test_forward_only(self):
        scanner = Scanner("one two")

        self.assertEqual("one", scanner.next_token().text)
        self.assertEqual("two", scanner.next_token().text)
        self.assertIsNone(scanner.next_token())
        self.assertIsNone(scanner.next_token())

    def test_mixed_iteration(self):
        """Words like ':' pull the next token themselves while the engine iterates."""
        scanner = Scanner(": sq dup ;")
        seen = []
        for token in scanner:
            seen.append(token.text)
            if token.text == ":":
                scanner.next_token()

        self.assertEqual([":", "dup", ";"], seen)

    def test_line_text(self):
        scanner = Scanner("1 2 +\n  foo  \nbar")

        self.assertEqual("1 2 +", scanner.line_text(1))
        self.assertEqual("  foo", scanner.line_text(2))
        self.assertEqual("bar", scanner.line_text(3))
        self.assertEqual("", scanner.line_text(4))


if __name__ == '__main__':
    unittest.main()
