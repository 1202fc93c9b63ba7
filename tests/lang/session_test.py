import io
import os
import re
import tempfile
import unittest
from contextlib import redirect_stdout

from forthlang.lang.error import ErrorHandler, ForthError, UndefinedToken
from forthlang.lang.session import Session
from forthlang.pure.cell import Integer


def plain(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, source):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as file:
            file.write(source)
        return path

    def shell_session(self, **kwargs):
        return Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, out=io.StringIO(), **kwargs)

    def test_command_line_mode_is_not_fatal(self):
        sess = self.shell_session()

        self.assertFalse(sess.error_handler.fatal)
        self.assertEqual({Session.SH_FILE: (None, None)}, sess.error_handler.traceback)

    def test_reserved_filename(self):
        self.assertRaises(ForthError, Session, ErrorHandler(), Session.SH_FILE, cmd_line=False)

    def test_run_keeps_stack(self):
        sess = self.shell_session()
        sess.run("1 2", 1)
        sess.run("+", 2)

        self.assertEqual([Integer(3)], list(sess.processor.data_stack))
        self.assertFalse(sess.panic)

    def test_run_registers_failing_line(self):
        sess = self.shell_session()

        with self.assertRaises(UndefinedToken):
            sess.run("1\n  2 foo", 5)

        self.assertTrue(sess.panic)
        self.assertEqual(("  2 foo", 6), sess.error_handler.traceback[Session.SH_FILE])

    def test_compiling(self):
        sess = self.shell_session()
        sess.run(": sq dup", 1)
        self.assertTrue(sess.compiling)

        sess.run("* ;", 2)
        self.assertFalse(sess.compiling)

    def test_prelude(self):
        prelude = self.write("prelude.fs", ": sq dup * ;\nvariable total\n")
        sess = self.shell_session(prelude=prelude)
        sess.run("3 sq total ! total @ .", 1)

        self.assertEqual("9\n", sess.processor.out.getvalue())

    def test_prelude_error_is_reported(self):
        prelude = self.write("prelude.fs", ": ok 1 ;\nbogus\n: never 2 ;")

        output = io.StringIO()
        with redirect_stdout(output):
            sess = self.shell_session(prelude=prelude)

        self.assertIn(f"File '{prelude}', line 2:", plain(output.getvalue()))
        self.assertIn("error: undefined word 'bogus'", plain(output.getvalue()))
        self.assertIsNotNone(sess.processor.dictionary.find("ok"))
        self.assertIsNone(sess.processor.dictionary.find("never"))  # the file is a single chunk

    def test_file_mode(self):
        path = self.write("program.fs", ": square dup * ;\n4 square .\n")
        out = io.StringIO()
        Session(ErrorHandler(), path, cmd_line=False, out=out)

        self.assertEqual("16\n", out.getvalue())

    def test_file_mode_error_is_fatal(self):
        path = self.write("program.fs", "1 .\n;\n2 .")
        out = io.StringIO()

        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit):
                Session(ErrorHandler(), path, cmd_line=False, out=out)

        self.assertEqual("1\n", out.getvalue())

    def test_missing_file(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(SystemExit):
                Session(ErrorHandler(), os.path.join(self.tmp.name, "missing.fs"), cmd_line=False)

        self.assertIn("could not be opened", plain(output.getvalue()))

    def test_processor_options(self):
        sess = self.shell_session(fix_division=True, max_depth=8, strict_immediate=True)

        self.assertTrue(sess.processor.fix_division)
        self.assertTrue(sess.processor.strict_immediate)
        self.assertEqual(8, sess.processor.max_depth)

    def test_redefinition_warning(self):
        sess = self.shell_session()

        output = io.StringIO()
        with redirect_stdout(output):
            sess.run("\n: dup ;", 4)

        self.assertEqual("<in>:5: warning: redefining 'dup'\n", plain(output.getvalue()))


if __name__ == '__main__':
    unittest.main()
