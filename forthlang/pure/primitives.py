"""Natively implemented words. Every primitive is a function of the Processor, registered with @primitive under its
forthlang name and loaded into each new dictionary by load. Stack effects are given as ( before -- after ).
"""

import operator

from forthlang.lang.error import CompileOnlyOutsideDefinition, DivisionByZero, UndefinedToken
from forthlang.pure.cell import Address, Cell, Char, ExecRef, Integer, flag
from forthlang.pure.dictionary import Flag


PRIMITIVES = []  # (name, flags, function), in definition order


def primitive(name, flags=Flag(0)):
    """Registers the decorated function as the native word name."""
    def decorator(func):
        PRIMITIVES.append((name, Flag(flags), func))
        return func
    return decorator


def load(processor):
    """Defines every primitive in processor's dictionary."""
    for name, flags, func in PRIMITIVES:
        processor.dictionary.define(name, flags, native=func)


# ---------------------------------------------------------------------------------------------------------------------
# defining words

@primitive(":")
def define(processor):
    """( -- ) Opens a definition named by the next token. The word stays hidden until `;`."""
    name = processor.next_name(":")
    processor.current_word = processor.define(name, Flag.HIDDEN)


@primitive(";", Flag.IMMEDIATE | Flag.COMPILE_ONLY)
def end(processor):
    """( -- ) Closes the open definition and makes it visible."""
    processor.compile_target(";").clear(Flag.HIDDEN)
    processor.current_word = None


@primitive(",", Flag.IMMEDIATE | Flag.COMPILE_ONLY)
def comma(processor):
    """( x -- ) Appends x, as is, to the body being compiled."""
    word = processor.compile_target(",")
    word.body.push(processor.pop())


@primitive("'", Flag.IMMEDIATE | Flag.INTERPRETED)
def tick(processor):
    """( -- xt ) Pushes the execution reference of the next token's word, without running it. Unlike ordinary lookup
    this also finds hidden words, including the one being compiled.
    """
    name = processor.next_name("'")
    word = processor.dictionary.find(name, hidden=True)
    if word is None:
        raise UndefinedToken(name)
    processor.push(ExecRef(word))


@primitive("immediate", Flag.IMMEDIATE | Flag.COMPILE_ONLY)
def immediate(processor):
    """( -- ) Marks the word being compiled as immediate."""
    processor.compile_target("immediate").set(Flag.IMMEDIATE)


@primitive("constant")
def constant(processor):
    """( x -- ) Defines the next token as a word that pushes x."""
    name = processor.next_name("constant")
    value = processor.pop()
    word = processor.define(name)
    processor.compile_literal(value, word)


@primitive("variable")
def variable(processor):
    """( -- ) Defines the next token as a word that pushes the address of its own storage cell.

    The body is [push, address, exit, storage]: `exit` stops the word before control reaches the storage cell, and
    address points at it, so every call yields the same address.
    """
    word = processor.define(processor.next_name("variable"))
    body = word.body
    processor.compile_literal(Address(body, 3), word)
    body.push(ExecRef(processor.exit_word))
    body.push(Integer(0))


@primitive("exit")
def exit_(processor):
    """( -- ) Stops the running compiled word."""
    frame = processor.frame
    if frame is not None:
        frame.ip = None


@primitive("push", Flag.HIDDEN)
def push(processor):
    """( -- x ) Pushes the cell following it in the running body and steps over that cell. Only ever compiled."""
    frame = processor.frame
    if frame is None:
        raise CompileOnlyOutsideDefinition("push")
    frame.ip += 1
    processor.push(frame.word.body.get(frame.ip))


# ---------------------------------------------------------------------------------------------------------------------
# memory

@primitive("@")
def fetch(processor):
    """( addr -- x )"""
    address = processor.pop(Address)
    processor.push(address.fetch())


@primitive("!")
def store(processor):
    """( x addr -- )"""
    value, address = processor.pop_many(Cell, Address)
    address.store(value)


# ---------------------------------------------------------------------------------------------------------------------
# stack shuffling

@primitive("dup")
def dup(processor):
    """( a -- a a )"""
    a = processor.pop()
    processor.push(a, a)


@primitive("swap")
def swap(processor):
    """( a b -- b a )"""
    a, b = processor.pop_many(Cell, Cell)
    processor.push(b, a)


@primitive("drop")
def drop(processor):
    """( a -- )"""
    processor.pop()


@primitive("over")
def over(processor):
    """( a b -- a b a )"""
    a, b = processor.pop_many(Cell, Cell)
    processor.push(a, b, a)


@primitive("rot")
def rot(processor):
    """( a b c -- b c a )"""
    a, b, c = processor.pop_many(Cell, Cell, Cell)
    processor.push(b, c, a)


# ---------------------------------------------------------------------------------------------------------------------
# arithmetic, logic and comparison

def binary(operation):
    """Native word ( n1 n2 -- n3 ) computing operation(n1, n2) on Integers."""
    def word(processor):
        a, b = processor.pop_many(Integer, Integer)
        processor.push(Integer(operation(a.value, b.value)))
    return word


def comparison(operation):
    """Native word ( n1 n2 -- flag ) comparing Integers."""
    def word(processor):
        a, b = processor.pop_many(Integer, Integer)
        processor.push(flag(operation(a.value, b.value)))
    return word


for name, operation in [("+", operator.add), ("-", operator.sub), ("*", operator.mul), ("and", operator.and_),
                        ("or", operator.or_), ("xor", operator.xor)]:
    primitive(name)(binary(operation))


@primitive("/")
def divide(processor):
    """( n1 n2 -- n3 ) n3 is n1 * n2, unless the processor was built with fix_division, in which case n3 is n1 / n2
    truncated toward zero.
    """
    a, b = processor.pop_many(Integer, Integer)
    if not processor.fix_division:
        processor.push(Integer(a.value * b.value))
        return

    if b.value == 0:
        processor.push(a, b)
        raise DivisionByZero()
    quotient = abs(a.value) // abs(b.value)
    processor.push(Integer(quotient if (a.value < 0) == (b.value < 0) else -quotient))


for name, operation in [("<", operator.lt), ("<=", operator.le), (">", operator.gt), (">=", operator.ge)]:
    primitive(name)(comparison(operation))


@primitive("=")
def equals(processor):
    """( x1 x2 -- flag ) True when both cells have the same tag and payload."""
    a, b = processor.pop_many(Cell, Cell)
    processor.push(flag(a == b))


@primitive("<>")
def not_equals(processor):
    """( x1 x2 -- flag )"""
    a, b = processor.pop_many(Cell, Cell)
    processor.push(flag(a != b))


# ---------------------------------------------------------------------------------------------------------------------
# output

@primitive(".")
def print_number(processor):
    """( n -- ) Prints n in decimal."""
    cell = processor.pop((Integer, Char))
    processor.emit(f"{cell.value}\n")


@primitive(".u")
def print_unsigned(processor):
    """( n -- ) Prints n as an unsigned 32-bit number in uppercase hexadecimal."""
    cell = processor.pop((Integer, Char))
    processor.emit(f"{cell.value & 0xFFFFFFFF:X}\n")


@primitive(".c")
def print_char(processor):
    """( c -- ) Prints c as a character."""
    cell = processor.pop((Char, Integer))
    processor.emit(chr(cell.value & 0xFF))


@primitive("cr")
def carriage_return(processor):
    """( -- )"""
    processor.emit("\n")


@primitive(".s")
def print_stack(processor):
    """( -- ) Prints the whole data stack, bottom first, without changing it."""
    if processor.data_stack:
        processor.emit(" ".join(str(cell) for cell in processor.data_stack) + "\n")


@primitive("words")
def words(processor):
    """( -- ) Lists the visible words, most recent first."""
    processor.emit(" ".join(processor.dictionary.names()) + "\n")
