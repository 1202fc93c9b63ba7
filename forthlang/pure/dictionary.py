"""The forthlang dictionary: a chain of Words, most recently defined first.

Lookup walks the chain from the front and returns the first visible Word with a matching name, so a new definition
shadows older ones. Shadowing never rebinds: compiled bodies hold ExecRefs to Word objects, not names, so a word
compiled against an older definition keeps calling that older definition.
"""

from enum import IntFlag

from forthlang.pure.stack import Stack


class Flag(IntFlag):
    NATIVE = 1
    IMMEDIATE = 2        # runs at compile time instead of being compiled
    HIDDEN = 4           # skipped by lookup (set while a definition is open)
    COMPILE_ONLY = 8     # may only run while a definition is open
    INTERPRETED = 16     # immediate word still allowed while interpreting in strict mode


class Word:
    """A dictionary entry. The body is either a native callable (taking the Processor) or a Stack of cells."""

    def __init__(self, name, flags=Flag(0), native=None):
        self.name = name
        self.flags = Flag(flags)
        self.prev = None

        if native is not None:
            self.flags |= Flag.NATIVE
            self.native = native
            self.body = Stack(initial_capacity=1)
        else:
            self.native = None
            self.body = Stack()

    def check(self, flag):
        return bool(self.flags & flag)

    def set(self, flag):
        self.flags |= flag

    def clear(self, flag):
        self.flags &= ~flag

    @property
    def is_native(self):
        return self.check(Flag.NATIVE)

    def matches(self, name):
        """Names are compared byte for byte, ignoring the case of ASCII letters only."""
        return self.name.encode().lower() == name.encode().lower()

    def __repr__(self):
        return f"Word('{self.name}', {self.flags!r})"


class Dictionary:
    """Singly linked list of Words. Entries are only ever added; the whole chain is released at once by free_all."""

    def __init__(self):
        self.latest = None

    def define(self, name, flags=Flag(0), native=None):
        """Creates a Word and makes it the most recent entry."""
        word = Word(name, flags, native)
        word.prev = self.latest
        self.latest = word
        return word

    def find(self, name, hidden=False):
        """Returns the most recent Word called name, or None. Hidden words are skipped unless hidden is set."""
        for word in self:
            if (hidden or not word.check(Flag.HIDDEN)) and word.matches(name):
                return word
        return None

    def names(self):
        """Names of all visible words, most recent first."""
        return [word.name for word in self if not word.check(Flag.HIDDEN)]

    def free_all(self):
        word = self.latest
        while word is not None:
            word.body.clear()
            word.prev, word = None, word.prev
        self.latest = None

    def __iter__(self):
        word = self.latest
        while word is not None:
            yield word
            word = word.prev
