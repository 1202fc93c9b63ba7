"""Session control for forthlang. Feeds source chunks (whole files, or single lines in command-line mode) to one
Processor and routes its errors and warnings to an ErrorHandler.
"""

from forthlang.lang.error import ForthError
from forthlang.pure.engine import Processor


class Session:
    """Governs a forthlang session, with control over the processor's dictionary and stacks."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, prelude=None, cmd_line=False, out=None, **options):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.prelude = prelude    # startup definitions file, run before anything else
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self._source = path   # file of the chunk that is running, for warnings
        self._line_num = 1    # line of that file the chunk starts on

        # options are forwarded to Processor: max_depth, strict_immediate, fix_division
        self.processor = Processor(out=out, warn=self.warn, **options)

        if self.cmd_line:
            self.error_handler.fatal = False

        if prelude is not None:
            with self.error_handler:
                self.load(prelude)

        if path != Session.SH_FILE:
            with self.error_handler:
                self.load(path)

        elif not cmd_line:
            raise ForthError("'<in>' is a reserved filename")

    @property
    def panic(self):
        """Whether the last chunk stopped on an error."""
        return self.processor.panic

    @property
    def compiling(self):
        return self.processor.compiling

    def load(self, path):
        """Runs the file at path as a single chunk, so the first error abandons the rest of the file."""
        try:
            with open(path, "r") as file:
                source = file.read()
        except OSError:
            raise ForthError("'{}' could not be opened", path, diagnosis=False)

        self.error_handler.register_file(path)
        self.run(source, path=path)

    def run(self, source, line_num=1, path=None):
        """Runs one chunk of source starting on line line_num of path (defaults to this session's path). Errors are
        registered in the error handler's traceback and re-raised. The data stack carries over between chunks.
        """
        self._source = path if path is not None else self.path
        self._line_num = line_num

        try:
            self.processor.run(source)
        except ForthError as error:
            if error.line_num is not None:
                self.error_handler.register_line(self._source, error.expr, line_num + error.line_num - 1)
            raise

    def warn(self, msg, exprs, line_num=None):
        """Warning hook handed to the processor."""
        location = self._source
        if line_num is not None:
            location += f":{self._line_num + line_num - 1}"
        self.error_handler.warn(msg, exprs, location=location)
