"""Forward-only scanner for forthlang source. There is no grammar to speak of: a token is any maximal run of
non-whitespace characters, and it is up to the engine to decide what a token means (the engine may even pull the next
token itself, as the defining words `:`, `constant`, `variable` and `'` do).
"""

from collections import namedtuple


Token = namedtuple("Token", ["text", "line", "col"])  # line and col are 1-based, col of the token's first character


class Scanner:
    """Splits one source chunk into whitespace-delimited tokens, keeping track of line and column for diagnostics.
    Each instance is consumed once; make a fresh Scanner for the next chunk.
    """

    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.line = 1
        self.col = 1

    @property
    def is_finished(self):
        return self.pos >= len(self.text)

    def _advance(self):
        if self.text[self.pos] == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        self.pos += 1

    def next_token(self):
        """Skips whitespace and returns the next Token, or None once the text is exhausted."""
        while not self.is_finished and self.text[self.pos].isspace():
            self._advance()

        if self.is_finished:
            return None

        start, line, col = self.pos, self.line, self.col
        while not self.is_finished and not self.text[self.pos].isspace():
            self._advance()

        return Token(self.text[start:self.pos], line, col)

    def line_text(self, line):
        """Returns line number line of the text, without its newline."""
        lines = self.text.split("\n")
        return lines[line - 1].rstrip() if 0 < line <= len(lines) else ""

    def __iter__(self):
        token = self.next_token()
        while token is not None:
            yield token
            token = self.next_token()
