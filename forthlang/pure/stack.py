"""Growable, append-only sequence of cells. The same abstraction serves as the parameter stack, as the body of a
compiled word and as the backing storage of variables (a variable's value lives inside its own body).

Addresses refer to a Stack by identity plus an offset rather than to the memory behind it, so growing a Stack never
invalidates an Address taken into it.
"""

from forthlang.lang.error import InvalidAddress, StackUnderflow


class Stack:
    """Ordered cells, bottom (index 0) to top."""

    def __init__(self, initial_capacity=8):
        self.initial_capacity = initial_capacity
        self.capacity = 0
        self.cells = []

    def push(self, cell):
        if len(self.cells) + 1 > self.capacity:
            self.capacity = self.capacity * 2 if self.capacity else self.initial_capacity
        self.cells.append(cell)

    def pop(self):
        if not self.cells:
            raise StackUnderflow()
        return self.cells.pop()

    def peek_many(self, count):
        """Returns the top count cells in stack order (deepest first) without popping them."""
        if count > len(self.cells):
            raise StackUnderflow()
        return self.cells[len(self.cells) - count:]

    def pop_many(self, count):
        """Pops count cells and returns them in stack order (deepest first). Either all of them are popped or, on
        underflow, none are.
        """
        popped = self.peek_many(count)
        del self.cells[len(self.cells) - count:]
        return popped

    def top(self):
        if not self.cells:
            raise StackUnderflow()
        return self.cells[-1]

    def get(self, offset):
        if not 0 <= offset < len(self.cells):
            raise InvalidAddress(offset)
        return self.cells[offset]

    def set(self, offset, cell):
        if not 0 <= offset < len(self.cells):
            raise InvalidAddress(offset)
        self.cells[offset] = cell

    def clear(self):
        self.cells.clear()

    def __len__(self):
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)

    def __repr__(self):
        # cells are left out: a variable's body holds an Address back into itself
        return f"Stack(count={len(self.cells)}, capacity={self.capacity})"
