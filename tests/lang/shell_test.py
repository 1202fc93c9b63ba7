import io
import re
import unittest
from contextlib import redirect_stdout
from unittest import mock

from forthlang.lang.error import ErrorHandler
from forthlang.lang.session import Session
from forthlang.lang.shell import Shell


def plain(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.shell = Shell(Session(ErrorHandler(), Session.SH_FILE, cmd_line=True))

    def onecmd(self, line):
        output = io.StringIO()
        with redirect_stdout(output):
            stop = self.shell.onecmd(line)
        return stop, plain(output.getvalue())

    def test_ok(self):
        self.assertEqual((None, "5\nok\n"), self.onecmd("2 3 + ."))
        self.assertEqual((None, "ok\n"), self.onecmd(": sq dup * ;"))
        self.assertEqual((None, "9\nok\n"), self.onecmd("3 sq ."))

    def test_error_is_not_ok(self):
        stop, output = self.onecmd("1 foo")

        self.assertFalse(stop)
        self.assertNotIn("ok", output.split())
        self.assertIn("error: undefined word 'foo'", output)

        self.assertEqual((None, "1\nok\n"), self.onecmd("."))  # stack survived the error

    def test_interrupt_is_not_ok(self):
        with mock.patch.object(self.shell.sess, "run", side_effect=KeyboardInterrupt):
            stop, output = self.onecmd("1 2 +")

        self.assertFalse(stop)
        self.assertFalse(self.shell.sess.panic)
        self.assertIn("error: keyboard interrupt", output)
        self.assertNotIn("ok", output.split())

        self.assertEqual((None, "ok\n"), self.onecmd("1"))

    def test_prompt_follows_definitions(self):
        self.onecmd(": sq dup")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.onecmd("* ;")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

    def test_line_numbers(self):
        self.onecmd("1")
        self.onecmd("2 bad")

        self.assertEqual(2, self.shell.line_num)

    def test_emptyline(self):
        self.assertEqual(("", ""), self.onecmd(""))

    def test_bye(self):
        self.assertTrue(self.onecmd("bye")[0])
        stop, output = self.onecmd("EOF")
        self.assertTrue(stop)
        self.assertEqual("\n", output)

    def test_help(self):
        __, output = self.onecmd("help")

        self.assertIn("forthlang", output)


if __name__ == '__main__':
    unittest.main()
