"""Cells, the single value type of forthlang. A cell is used uniformly for data on the parameter stack, for literals,
and for the entries of a compiled word's body (the instruction stream).

Cells are a closed family of tagged variants:

```
<cell> ::= Integer(i32)            ; wraps around like a 32-bit machine word
         | Char(u8)                ; written in source as 'x'
         | ExecRef(word)           ; execution reference: identifies one specific Word
         | Address(stack, offset)  ; addressable storage: a slot inside some Stack
```

Consumers never reinterpret one variant as another: expect checks the tag and raises TypeMismatch instead.
"""

from abc import ABC
from dataclasses import dataclass

from forthlang.lang.error import TypeMismatch


def wrap(value):
    """Returns value wrapped to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


class Cell(ABC):
    """Superclass of every cell variant."""
    KIND = "cell"

    def kind(self):
        """Human readable name of this cell's tag, used in error messages."""
        return self.KIND


@dataclass(frozen=True)
class Integer(Cell):
    KIND = "integer"
    value: int

    def __post_init__(self):
        object.__setattr__(self, "value", wrap(self.value))

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Char(Cell):
    KIND = "char"
    value: int

    def __post_init__(self):
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"{self.value} does not fit in a char")

    def __str__(self):
        return f"'{chr(self.value)}'"


@dataclass(frozen=True)
class ExecRef(Cell):
    """Execution reference. Identity is the Word object itself, so redefining a name never rebinds an ExecRef."""
    KIND = "execution reference"
    word: object

    def __str__(self):
        return f"<xt {self.word.name}>"


@dataclass(frozen=True)
class Address(Cell):
    """Reference to the cell at offset inside stack. Stacks compare by identity, so two Addresses are equal exactly
    when they name the same slot of the same storage.
    """
    KIND = "address"
    stack: object
    offset: int

    def fetch(self):
        return self.stack.get(self.offset)

    def store(self, cell):
        self.stack.set(self.offset, cell)

    def __str__(self):
        return f"<addr +{self.offset}>"


def expect(cell, *kinds):
    """Returns cell if it is an instance of one of kinds, raises TypeMismatch otherwise."""
    if not isinstance(cell, kinds):
        raise TypeMismatch(" or ".join(kind.KIND for kind in kinds), cell)
    return cell


def flag(condition):
    """Forth booleans: true is all bits set (-1), false is 0, so bitwise and logical operators coincide."""
    return Integer(-1 if condition else 0)
