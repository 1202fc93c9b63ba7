"""Literal parsing. A token that names no word may still be a literal:

```
<integer> ::= "-"? <digit>+        ; decimal, wraps to 32 bits
<char>    ::= "'" <byte> "'"       ; exactly three bytes of UTF-8
```

Anything else is not a literal. The caller reports that as an undefined word, so a malformed char literal such as
`'ab'` reads exactly like a misspelled word.
"""

import re

from forthlang.pure.cell import Char, Integer


INTEGER = re.compile(r"-?[0-9]+")


def parse_literal(text):
    """Returns the Cell text denotes, or None if text is not a literal."""
    if INTEGER.fullmatch(text):
        return Integer(int(text))

    raw = text.encode()
    if len(raw) == 3 and raw[0] == raw[2] == ord("'"):
        return Char(raw[1])

    return None
