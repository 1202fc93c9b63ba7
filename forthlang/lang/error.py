"""Error handling for forthlang. Only ForthErrors should be encountered while running source: if another type of error
is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every ForthError raised by the engine is also what sets the processor's sticky panic flag (see pure/engine.py), so
the classes below double as the catalog of recoverable error kinds. Allocation failure is the only fatal kind and is
handled here, not in the engine.
"""

import sys

from termcolor import colored


class ForthError(Exception):
    """Templates an error/warning message so that it can be used to throw a forthlang error. The message is a format
    string whose arguments (exprs) are bolded on display.
    """

    def __init__(self, msg, exprs=None, diagnosis=True, internal=False):
        """Parses args for ForthError or warning."""
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets

        self.expr = ""        # source line holding the offending token, filled in by locate
        self.line_num = None  # line of self.expr within the chunk that was running
        self.start = 0
        self.end = 0

        self.diagnosis = diagnosis
        self.internal = internal

    def locate(self, line, line_num, start, end):
        """Records the source line (and column span within it) the error originated from. Only the innermost location
        is kept.
        """
        if self.line_num is None:
            self.expr = line
            self.line_num = line_num
            self.start = start
            self.end = end


class StackUnderflow(ForthError):

    def __init__(self):
        super().__init__("stack underflow")


class UndefinedToken(ForthError):
    """Token is neither a word nor a literal. Malformed character literals end up here too."""

    def __init__(self, token):
        super().__init__("undefined word '{}'", token)


class CompileOnlyOutsideDefinition(ForthError):

    def __init__(self, name):
        super().__init__("'{}' is compile-only and cannot be used outside a definition", name)


class ImmediateOutsideDefinition(ForthError):

    def __init__(self, name):
        super().__init__("immediate word '{}' used outside a definition", name)


class TypeMismatch(ForthError):

    def __init__(self, expected, cell):
        super().__init__("expected {} but got {}", (expected, cell.kind()))


class InvalidAddress(ForthError):

    def __init__(self, offset):
        super().__init__("offset {} is out of bounds", offset)


class DivisionByZero(ForthError):

    def __init__(self):
        super().__init__("division by zero")


class MissingName(ForthError):

    def __init__(self, word):
        super().__init__("'{}' expects a name", word)


class RecursionDepthExceeded(ForthError):

    def __init__(self, depth):
        super().__init__("maximum call depth of {} exceeded", depth)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom forthlang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}
        self.thrown = False  # whether an error was reported since the last __enter__

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Called by Session when a chunk fails."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, location=None, **kwargs):
        """Generates and prints runtime warning message based on args. location is a 'file:line' prefix."""
        error = ForthError(*args, **kwargs)

        error_msg = colored(f"{location}: ", attrs=["bold"]) if location else ""
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a ForthError, and self.traceback must be a dict of
        file: (line, line_num) representing origination of error.
        """
        self.thrown = True
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line is not None:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        self.thrown = False
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(ForthError("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is MemoryError:
            self.fatal = True  # allocation failure is never recovered
            self.throw(ForthError("out of memory", internal=True))
        elif exc_type is RecursionError:
            self.throw(ForthError("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, ForthError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(ForthError("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            do_exit = True

        return not do_exit
