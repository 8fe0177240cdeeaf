"""
General use parsers built from the combinators. They also serve as examples of composing them.
"""

from __future__ import annotations
from typing import Any, Callable

from combparse import *


def is_digit(c: str) -> bool:
    return c in const.DECIMAL

def is_hex_digit(c: str) -> bool:
    return c in const.HEXADECIMAL

def is_identifier_char(c: str) -> bool:
    return c.isalnum() or c in const.IDENTIFIER_EXTRA


# single characters

alphanumeric: Parser[str] = pred(any_char, str.isalnum)
"""Any single alphanumeric character."""


# literal pattern

def literal_pattern(input: StringView) -> Success[Parser[str]] | Failure:
    """
    Reads the run of alphanumeric characters at the start of the input.

    Produces a parser that matches that same run again, and produces it as a string.

    ```
    r = literal_pattern(StringView("abc1 def"))
    again = r.value
    again(StringView("abc1!"))      # Success(StringView('!'), 'abc1')
    ```
    """
    r = zero_or_more(alphanumeric)(input)
    assert r
    if not r.value:
        return Failure(input)
    run = "".join(r.value)
    return Success(r.rest, map_(match_literal(run), lambda _: run))


# identifiers

identifier: Parser[str] = map_(
    pair(pred(any_char, str.isalpha), zero_or_more(pred(any_char, is_identifier_char))),
    lambda values: values[0] + "".join(values[1]),
)
"""A letter followed by letters, digits, `_` or `-`."""


# numbers

def _digits_to_int(base: int) -> Callable[[list[str]], int]:
    return lambda digits: int("".join(digits), base=base)

_sign: Parser[int | None] = optional(or_(map_("-", lambda _: -1), map_("+", lambda _: 1)))
_hexadecimal: Parser[int] = right(anycase("0x"), map_(one_or_more(pred(any_char, is_hex_digit)), _digits_to_int(16)))
_decimal: Parser[int] = map_(one_or_more(pred(any_char, is_digit)), _digits_to_int(10))

integer_number: Parser[int] = map_(
    pair(_sign, or_(_hexadecimal, _decimal)),
    lambda values: (values[0] or 1) * values[1],
)
"""
An optionally signed integer.

`0x` (in any case) starts a hexadecimal number. Otherwise it's decimal.
"""


# quoted string

_unicode_escape: Parser[str] = right(
    "u",
    map_(pred(take(4), lambda code: all(is_hex_digit(c) for c in code)), lambda code: chr(int(code, base=16))),
)
_simple_escape: Parser[str] = map_(
    pred(any_char, lambda c: c in const.GENERAL_ESCAPES),
    lambda c: const.GENERAL_ESCAPES[c],
)
_escape: Parser[str] = right("\\", or_(_unicode_escape, _simple_escape))
_plain: Parser[str] = pred(any_char, lambda c: c not in ('"', "\\"))

quoted_string: Parser[str] = map_(
    right('"', left(zero_or_more(or_(_escape, _plain)), '"')),
    "".join,
)
"""
A double quoted string with backslash escapes. Produces the unescaped contents.

Supports `\\uXXXX` and the escapes in `const.GENERAL_ESCAPES`.
"""


# key/value lists

whitespace: Parser[str] = ws0

key_value: Parser[tuple[str, Any]] = map_(
    seq(identifier, whitespace, "=", whitespace, or_(quoted_string, integer_number)),
    lambda values: (values[0], values[4]),
)
"""`key = "value"` or `key = 123`. Produces a `(key, value)` tuple."""

key_values: Parser[dict[str, Any]] = map_(
    separated(key_value, seq(whitespace, ",", whitespace)),
    dict,
)
"""Comma separated `key_value`s. Produces a dict. Later keys win."""
