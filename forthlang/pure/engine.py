"""The forthlang execution engine: the outer (text) interpreter and the inner (threaded code) interpreter.

The outer interpreter reads one token at a time and dispatches on the processor's mode:

```
mode          token                          action
-----------   ----------------------------   ------------------------------------------------
interpreting  word                           execute it (compile-only words are an error)
interpreting  literal                        push it on the data stack
compiling     immediate word                 execute it now
compiling     any other word                 append ExecRef(word) to the body being compiled
compiling     literal                        append ExecRef(push) followed by the literal cell
either        anything else                  undefined word
```

The processor is compiling exactly when current_word is set: `:` sets it, `;` clears it.

A compiled body is a flat sequence of cells: ExecRefs, interleaved with the inline data consumed by the hidden `push`
word (which steps the instruction cursor over the cell following it). Bodies are run by an explicit frame stack rather
than host recursion, so runaway recursion is reported as RecursionDepthExceeded.
"""

import sys

from forthlang.lang.error import (CompileOnlyOutsideDefinition, ForthError, ImmediateOutsideDefinition, MissingName,
                                  RecursionDepthExceeded, UndefinedToken)
from forthlang.pure import primitives
from forthlang.pure.cell import Cell, ExecRef, expect
from forthlang.pure.dictionary import Dictionary, Flag
from forthlang.pure.literal import parse_literal
from forthlang.pure.scanner import Scanner
from forthlang.pure.stack import Stack


class Frame:
    """A running compiled word. ip indexes the cell about to run; None means `exit` stopped the word."""

    def __init__(self, word):
        self.word = word
        self.ip = 0

    @property
    def running(self):
        return self.ip is not None and self.ip < len(self.word.body)


class Processor:
    """Owns every piece of interpreter state: the dictionary, the data stack, the (unused) return stack, the word
    being compiled, the call frames, the current scanner and the sticky panic flag.
    """

    def __init__(self, out=None, max_depth=1024, strict_immediate=False, fix_division=False, warn=None):
        self.out = out                            # defaults to sys.stdout at write time
        self.max_depth = max_depth                # maximum number of nested compiled words
        self.strict_immediate = strict_immediate  # immediate words may only run inside definitions
        self.fix_division = fix_division          # `/` divides instead of multiplying
        self.warn = warn                          # warn(msg, exprs, line_num), told about redefinitions

        self._boot()

    def _boot(self):
        self.dictionary = Dictionary()
        self.data_stack = Stack()
        self.return_stack = Stack()  # reserved for control structures, nothing writes to it yet
        self.frames = []

        self.current_word = None
        self.panic = False
        self.scanner = None
        self.token = None

        primitives.load(self)
        self.push_word = self.dictionary.find("push", hidden=True)
        self.exit_word = self.dictionary.find("exit")

    def free(self):
        """Releases every dictionary entry and both stacks."""
        self.dictionary.free_all()
        self.data_stack.clear()
        self.return_stack.clear()
        self.frames = []

    def reset(self):
        """Tears the session down and starts over with only the primitive words defined."""
        self.free()
        self._boot()

    @property
    def compiling(self):
        return self.current_word is not None

    @property
    def frame(self):
        """Innermost running frame, None while no compiled word is running."""
        return self.frames[-1] if self.frames else None

    def run(self, source):
        """Interprets one chunk of source. The first error marks the processor as panicked, stops the chunk and is
        re-raised (located at the offending token) for the caller to report. A definition left open stays open.
        """
        self.panic = False
        self.scanner = Scanner(source)
        self.token = None

        try:
            for token in self.scanner:
                self.token = token
                self.interpret_token(token)

        except ForthError as error:
            self.panic = True
            if self.token is not None:
                start = self.token.col - 1
                error.locate(self.scanner.line_text(self.token.line), self.token.line, start,
                             start + len(self.token.text))
            raise

    def interpret_token(self, token):
        """Dispatches one token according to the current mode."""
        word = self.dictionary.find(token.text)

        if word is None:
            cell = parse_literal(token.text)
            if cell is None:
                raise UndefinedToken(token.text)

            if self.compiling:
                self.compile_literal(cell)
            else:
                self.push(cell)

        elif self.compiling:
            if word.check(Flag.IMMEDIATE):
                self.execute(word)
            else:
                self.compile_cell(ExecRef(word))

        else:
            if word.check(Flag.COMPILE_ONLY):
                raise CompileOnlyOutsideDefinition(word.name)
            if self.strict_immediate and word.check(Flag.IMMEDIATE) and not word.check(Flag.INTERPRETED):
                raise ImmediateOutsideDefinition(word.name)
            self.execute(word)

    def execute(self, word):
        """Runs word to completion: natives are called directly, compiled bodies are stepped through cell by cell."""
        if word.is_native:
            word.native(self)
            return
        if not word.body:
            return

        base = len(self.frames)
        self.call(word)
        try:
            while len(self.frames) > base:
                frame = self.frames[-1]
                if not frame.running:
                    self.frames.pop()
                    continue

                target = expect(frame.word.body.get(frame.ip), ExecRef).word
                if target.is_native:
                    target.native(self)  # may move frame.ip (push) or stop the frame (exit)
                    if frame.ip is not None:
                        frame.ip += 1
                else:
                    frame.ip += 1
                    self.call(target)
        finally:
            del self.frames[base:]

    def call(self, word):
        """Enters compiled word by pushing a new frame."""
        if len(self.frames) >= self.max_depth:
            raise RecursionDepthExceeded(self.max_depth)
        self.frames.append(Frame(word))

    def define(self, name, flags=Flag(0)):
        """Adds a new (compiled) word to the dictionary, warning if it shadows a visible one."""
        if self.warn is not None and self.dictionary.find(name) is not None:
            self.warn("redefining '{}'", name, self.token.line if self.token is not None else None)
        return self.dictionary.define(name, flags)

    def compile_target(self, name):
        """Returns the word being compiled. name is the compile-only word asking, for the error message."""
        if not self.compiling:
            raise CompileOnlyOutsideDefinition(name)
        return self.current_word

    def compile_cell(self, cell):
        self.current_word.body.push(cell)

    def compile_literal(self, cell, word=None):
        """Appends push followed by cell to word's body (defaults to the word being compiled)."""
        body = (word if word is not None else self.current_word).body
        body.push(ExecRef(self.push_word))
        body.push(cell)

    def next_name(self, word):
        """Reads the token following the defining word word from the current source chunk."""
        token = self.scanner.next_token() if self.scanner is not None else None
        if token is None:
            raise MissingName(word)
        self.token = token
        return token.text

    def push(self, *cells):
        for cell in cells:
            self.data_stack.push(cell)

    def pop_many(self, *kinds):
        """Pops one cell per entry of kinds and returns them deepest first. Each entry is a Cell class (or tuple of
        them) the corresponding cell must be an instance of. Nothing is popped if the stack is too shallow or a tag
        is wrong.
        """
        cells = self.data_stack.peek_many(len(kinds))
        for cell, kind in zip(cells, kinds):
            expect(cell, *(kind if isinstance(kind, tuple) else (kind,)))
        self.data_stack.pop_many(len(kinds))
        return cells

    def pop(self, kind=Cell):
        return self.pop_many(kind)[0]

    def emit(self, text):
        (self.out if self.out is not None else sys.stdout).write(text)
