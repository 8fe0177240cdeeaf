"""
Primitive parsers and the combinators that build bigger parsers out of them.

Every function here either is a parser or returns one. None of them know anything about a particular grammar.
"""

from __future__ import annotations
from typing import overload, Any, TypeVar, Callable, Sequence

import re

import combparse.const as const
from combparse.main import (
    StringView,
    Success,
    Failure,
    Parser,
    Bound,
)


_T = TypeVar("_T")
_U = TypeVar("_U")
_T1 = TypeVar("_T1")
_T2 = TypeVar("_T2")


@overload
def convert_factory_parameter(parser: str) -> Parser[None]: ...
@overload
def convert_factory_parameter(parser: Parser[_T]) -> Parser[_T]: ...

def convert_factory_parameter(parser: Parser[Any] | str) -> Parser[Any]:
    """Strings are shorthand for `match_literal(...)`."""
    if isinstance(parser, str):
        return match_literal(parser)
    else:
        assert callable(parser)
        return parser

def convert_factory_parameters(parsers: Sequence[Parser[Any] | str]) -> tuple[Parser[Any], ...]:
    return tuple(convert_factory_parameter(parser) for parser in parsers)



# primitives

def match_literal(expected: str) -> Parser[None]:
    """
    Matches `expected` exactly. Produces `None`.

    An empty `expected` always matches and consumes nothing.
    """
    def inner(input: StringView) -> Success[None] | Failure:
        if input.startswith(expected):
            return Success(input.advance(len(expected)), None)
        return Failure(input)
    return inner

def any_char(input: StringView) -> Success[str] | Failure:
    """A pre-defined parser (not a factory). Matches and produces any single character."""
    c = input.first()
    if c is None:
        return Failure(input)
    return Success(input.advance(1), c)

def eof(input: StringView) -> Success[None] | Failure:
    """A pre-defined parser (not a factory). Only matches at the end of the input."""
    if input:
        return Failure(input)
    return Success(input, None)

def take(amount: int) -> Parser[str]:
    """Consumes and produces the next `amount` characters. Fails if there aren't enough."""
    if amount < 0:
        raise ValueError("Can't take a negative amount of characters.")
    def inner(input: StringView) -> Success[str] | Failure:
        text = input.peek(amount)
        if text is None:
            return Failure(input)
        return Success(input.advance(amount), text)
    return inner

def anycase(expected: str) -> Parser[str]:
    """Matches `expected` ignoring case. Produces the text as it appears in the input."""
    folded = expected.casefold()
    def inner(input: StringView) -> Success[str] | Failure:
        text = input.peek(len(expected))
        if text is None or text.casefold() != folded:
            return Failure(input)
        return Success(input.advance(len(expected)), text)
    return inner

def regex(pattern: str | re.Pattern[str], flags: int | re.RegexFlag = 0) -> Parser[re.Match[str]]:
    """Matches a regex at the start of the input. Produces the `re.Match`."""
    compiled = re.compile(pattern, flags)
    def inner(input: StringView) -> Success[re.Match[str]] | Failure:
        m = compiled.match(input.src, input.pos)
        if m is None:
            return Failure(input)
        return Success(input.advance(m.end() - input.pos), m)
    return inner

def ws0(input: StringView) -> Success[str]:
    """A pre-defined parser (not a factory). Matches zero or more whitespaces and produces them."""
    end = input.pos
    while end < len(input.src) and input.src[end] in const.WHITESPACES:
        end += 1
    rest = input.advance(end - input.pos)
    return Success(rest, rest.consumed_since(input))

def ws1(input: StringView) -> Success[str] | Failure:
    """A pre-defined parser (not a factory). Matches one or more whitespaces and produces them."""
    if input.first() not in const.WHITESPACES:
        return Failure(input)
    return ws0(input)



# combinators

def pair(p1: Parser[_T1] | str, p2: Parser[_T2] | str) -> Parser[tuple[_T1, _T2]]:
    """
    Matches `p1` and then `p2`. Produces both values as a tuple.

    Fails with whichever failure happened first. `p2` isn't tried if `p1` fails.
    """
    first = convert_factory_parameter(p1)
    second = convert_factory_parameter(p2)
    def inner(input: StringView) -> Success[tuple[_T1, _T2]] | Failure:
        if not (r1 := first(input)):
            return r1
        if not (r2 := second(r1.rest)):
            return r2
        return Success(r2.rest, (r1.value, r2.value))
    return inner

def left(p1: Parser[_T1] | str, p2: Parser[Any] | str) -> Parser[_T1]:
    """Like `pair()`, but only keeps the value of `p1`."""
    return map_(pair(p1, p2), lambda values: values[0])

def right(p1: Parser[Any] | str, p2: Parser[_T2] | str) -> Parser[_T2]:
    """Like `pair()`, but only keeps the value of `p2`."""
    return map_(pair(p1, p2), lambda values: values[1])

def seq(*parsers: Parser[Any] | str) -> Parser[tuple[Any, ...]]:
    """
    All the given parsers must match in sequence for the parser to succeed.

    Produces a tuple with a value per parser.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    new_parsers = convert_factory_parameters(parsers)
    def inner(input: StringView) -> Success[tuple[Any, ...]] | Failure:
        values: list[Any] = []
        rest = input
        for parser in new_parsers:
            if not (r := parser(rest)):
                return r
            rest = r.rest
            values.append(r.value)
        return Success(rest, tuple(values))
    return inner

def or_(p1: Parser[_T] | str, p2: Parser[_T] | str) -> Parser[_T]:
    """
    Tries `p1`, and if it fails, tries `p2` on the same input.

    The first one that matches wins. If both fail, returns the failure of `p2`.
    """
    first = convert_factory_parameter(p1)
    second = convert_factory_parameter(p2)
    def inner(input: StringView) -> Success[_T] | Failure:
        if r := first(input):
            return r
        return second(input)
    return inner

def oneof(*parsers: Parser[Any] | str) -> Parser[Any]:
    """
    Attempts to match any of the parsers, in sequence, until one matches. If none match, fails.
    """
    if len(parsers) < 2:
        raise ValueError("At least two parsers required.")
    new_parsers = convert_factory_parameters(parsers)
    def inner(input: StringView) -> Success[Any] | Failure:
        r: Success[Any] | Failure = Failure(input)
        for parser in new_parsers:
            if r := parser(input):
                return r
        return r
    return inner

def range_(parser: Parser[_T] | str, bound: Bound | range | int | tuple[int, int | None]) -> Parser[list[_T]]:
    """
    Repeatedly matches the given parser until it fails, collecting the values.

    Succeeds if the number of matches is within `bound`. (See `Bound.of()` for what's accepted.)
    Otherwise fails at the input it was given, not where the repetition stopped.

    A match that consumes nothing is collected once and ends the repetition.
    """
    new_parser = convert_factory_parameter(parser)
    new_bound = Bound.of(bound)
    def inner(input: StringView) -> Success[list[_T]] | Failure:
        values: list[_T] = []
        rest = input
        while r := new_parser(rest):
            values.append(r.value)
            if r.rest.pos == rest.pos:
                break
            rest = r.rest
        if len(values) in new_bound:
            return Success(rest, values)
        return Failure(input)
    return inner

def zero_or_more(parser: Parser[_T] | str) -> Parser[list[_T]]:
    """Never fails. Produces an empty list if nothing matched."""
    return range_(parser, Bound(0))

def one_or_more(parser: Parser[_T] | str) -> Parser[list[_T]]:
    return range_(parser, Bound(1))

def separated(
    parser: Parser[_T] | str,
    separator: Parser[Any] | str,
    bound: Bound | range | int | tuple[int, int | None] = Bound(0),
) -> Parser[list[_T]]:
    """
    Matches `parser` repeatedly, with `separator` between the matches. Produces the values of `parser`.

    A trailing separator is left unconsumed.
    """
    element = convert_factory_parameter(parser)
    following = right(separator, element)
    new_bound = Bound.of(bound)
    def inner(input: StringView) -> Success[list[_T]] | Failure:
        values: list[_T] = []
        rest = input
        if r := element(input):
            values.append(r.value)
            rest = r.rest
            while r := following(rest):
                values.append(r.value)
                if r.rest.pos == rest.pos:
                    break
                rest = r.rest
        if len(values) in new_bound:
            return Success(rest, values)
        return Failure(input)
    return inner

def optional(parser: Parser[_T] | str) -> Parser[_T | None]:
    """
    Never fails. Produces `None` and consumes nothing if the parser doesn't match.
    """
    new_parser = convert_factory_parameter(parser)
    def inner(input: StringView) -> Success[_T | None]:
        if r := new_parser(input):
            return r
        return Success(input, None)
    return inner

def pred(parser: Parser[_T] | str, predicate: Callable[[_T], bool]) -> Parser[_T]:
    """
    Matches only if the parser matches and its value satisfies `predicate`.

    A rejected value fails at the input the parser was given.
    """
    new_parser = convert_factory_parameter(parser)
    def inner(input: StringView) -> Success[_T] | Failure:
        if not (r := new_parser(input)):
            return r
        if not predicate(r.value):
            return Failure(input)
        return r
    return inner

def map_(parser: Parser[_T] | str, f: Callable[[_T], _U]) -> Parser[_U]:
    """Transforms the produced value with `f`. Failures pass through untouched."""
    new_parser = convert_factory_parameter(parser)
    def inner(input: StringView) -> Success[_U] | Failure:
        if not (r := new_parser(input)):
            return r
        return Success(r.rest, f(r.value))
    return inner

def lookahead(parser: Parser[_T] | str) -> Parser[_T]:
    """Matches without advancing."""
    new_parser = convert_factory_parameter(parser)
    def inner(input: StringView) -> Success[_T] | Failure:
        if not (r := new_parser(input)):
            return r
        return Success(input, r.value)
    return inner

def inverted(parser: Parser[Any] | str) -> Parser[None]:
    """Matches without advancing if the parser doesn't match, and the other way around. Produces `None`."""
    new_parser = convert_factory_parameter(parser)
    def inner(input: StringView) -> Success[None] | Failure:
        if new_parser(input):
            return Failure(input)
        return Success(input, None)
    return inner

def lazy(factory: Callable[[], Parser[_T]]) -> Parser[_T]:
    """
    Refers to a parser that isn't defined yet. Used for recursive grammars.

    `factory` is called the first time the parser runs.

    ```
    def expr() -> Parser[Any]:
        return or_(right("(", left(lazy(expr), ")")), "x")
    ```
    """
    resolved: list[Parser[_T]] = []
    def inner(input: StringView) -> Success[_T] | Failure:
        if not resolved:
            resolved.append(factory())
        return resolved[0](input)
    return inner
