"""
The parser abstraction: input views, parse outcomes and errors.
"""

from __future__ import annotations
from typing import overload, Any, Literal, TypeVar, Generic, SupportsIndex, Final, Protocol

from collections.abc import Iterator
import logging


log = logging.getLogger("combparse")


_T = TypeVar("_T")
_CT = TypeVar("_CT", covariant=True)



class StringView:
    """
    An immutable window over a string, starting at `pos` and running to the end.

    Advancing never copies the source. A new view sharing `src` is returned instead.

    ```
    view = StringView("Hola!")
    view.advance(4)         # StringView('!')
    view.advance(4) == "!"  # True
    ```
    """
    def __init__(self, src: str, pos: int = 0) -> None:
        if not 0 <= pos <= len(src):
            raise ValueError(f"Position {pos} is outside of the source (length {len(src)}).")
        self.src: Final[str] = src
        """The whole string that's being parsed."""
        self.pos: Final[int] = pos
        """Where the unconsumed input starts."""

    @classmethod
    def of(cls, text: str | StringView) -> StringView:
        """Wraps a string in a view. Views are returned as-is."""
        if isinstance(text, StringView):
            return text
        return cls(text)

    def __len__(self) -> int:
        """The number of characters left."""
        return len(self.src) - self.pos

    def __bool__(self) -> bool:
        """Whether there are any characters left."""
        return self.pos < len(self.src)

    @overload
    def __getitem__(self, key: SupportsIndex) -> str: ...
    @overload
    def __getitem__(self, key: slice) -> str: ...

    def __getitem__(self, key: SupportsIndex | slice) -> str:
        """Indexes relative to the start of the view."""
        return self.rest()[key]

    def rest(self) -> str:
        """The unconsumed text. This copies, so it's meant for display and comparisons."""
        return self.src[self.pos:]

    def has_chars(self, amount: int) -> bool:
        """Whether there are at least that many characters left."""
        return self.pos + amount <= len(self.src)

    def startswith(self, text: str) -> bool:
        return self.src.startswith(text, self.pos)

    def first(self) -> str | None:
        """The next character, or `None` at the end of the input."""
        if self.pos >= len(self.src):
            return None
        return self.src[self.pos]

    def peek(self, amount: int) -> str | None:
        """
        Retrieves the specified amount of characters without consuming.

        If there aren't enough characters, returns `None`.
        """
        if not self.has_chars(amount):
            return None
        return self.src[self.pos:self.pos+amount]

    def advance(self, amount: int) -> StringView:
        """A new view with `amount` more characters consumed."""
        if amount == 0:
            return self
        return StringView(self.src, self.pos + amount)

    def consumed_since(self, earlier: StringView) -> str:
        """The text between an earlier view over the same source and this one."""
        return self.src[earlier.pos:self.pos]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StringView):
            return self.pos == other.pos and self.src == other.src
        elif isinstance(other, str):
            return len(other) == len(self) and self.src.startswith(other, self.pos)
        else:
            return NotImplemented

    def __hash__(self) -> int:
        return hash((self.src, self.pos))

    def __str__(self) -> str:
        return self.rest()

    def __repr__(self) -> str:
        return f"StringView({self.rest()!r})"


class Success(Generic[_CT]):
    """
    Returned from a parser when it matched.

    ```
    r = parser(view)
    if r:
        r.rest, r.value     # `r` is a `Success`
    else:
        r.at                # `r` is a `Failure`
    ```
    """
    def __init__(self, rest: StringView, value: _CT) -> None:
        self.rest: Final[StringView] = rest
        """The input left after everything that was matched."""
        self.value: Final[_CT] = value
        """What the parser produced."""

    def __bool__(self) -> Literal[True]:
        return True

    def __iter__(self) -> Iterator[Any]:
        """Allows `rest, value = r`."""
        yield self.rest
        yield self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Success):
            return self.rest == other.rest and self.value == other.value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Success({self.rest!r}, {self.value!r})"

class Failure:
    """
    Returned from a parser when it didn't match. Can be converted into a `ParseError`.

    `at` is the input the failing parser was given, not how far it got.
    """
    def __init__(self, at: StringView) -> None:
        self.at: Final[StringView] = at

    def __bool__(self) -> Literal[False]:
        return False

    def error(self, msg: str | None = None) -> ParseError:
        """Converts this to a ParseError."""
        return ParseError(self.at.src, self.at.pos, msg)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Failure):
            return self.at == other.at
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.at)

    def __repr__(self) -> str:
        return f"Failure({self.at!r})"

ParseOutcome = Success[_T] | Failure


class ParseError(Exception):
    """
    Raised by `parse_all()` when the input doesn't match.

    Parsers never raise this themselves. A mismatch is always a `Failure`.
    """

    def __init__(self, src: str, pos: int, msg: str | None = None) -> None:
        """
        `src`: The string that was being parsed.
        `pos`: The position of the error.
        `msg`: The reason for the error.
        """
        if msg is None:
            super().__init__()
        else:
            super().__init__(msg)
        self.src: str = src
        self.pos: int = pos
        self.msg: str | None = msg
        self.add_note(self.describe_pos())

    def line_and_column(self) -> tuple[int, int]:
        """1-based line and column of the error position."""
        pos = min(self.pos, len(self.src))
        # should still work with CRLF
        line = self.src.count("\n", 0, pos) + 1
        column = pos - self.src.rfind("\n", 0, pos) # works even when rfind() returns -1
        return line, column

    def describe_pos(self) -> str:
        line, column = self.line_and_column()
        note = [f"At position {self.pos} (line {line}, column {column})"]
        lines = self.src.splitlines()
        if len(lines) > line-1:
            line_str = lines[line-1]
            if len(line_str) >= column:
                if column <= 20:
                    note.append(f"{line_str[:40]}\n{' '*(column-1)}^")
                else:
                    note.append(f"{line_str[(column-20):(column+20)]}\n{' '*20}^")
        return "\n".join(note)

class ExcessInput(ParseError):
    """Raised by `parse_all()` when the parser matched but did not consume the whole input."""


class Parser(Protocol[_CT]):
    """
    Anything that can be called with a `StringView` and returns a `Success` or a `Failure`.

    Plain functions qualify, as do the closures returned by the combinators.
    Parsers must not keep state between calls.
    """
    def __call__(self, input: StringView) -> Success[_CT] | Failure: ...


class Bound:
    """
    An allowed range of repetition counts.

    `max` is `None` for no upper limit. It is included unless `inclusive=False`.
    """
    def __init__(self, min: int = 0, max: int | None = None, *, inclusive: bool = True) -> None:
        if min < 0:
            raise ValueError("The lower bound can't be negative.")
        if max is not None and (max < min if inclusive else max <= min):
            raise ValueError("The upper bound doesn't allow any count.")
        self.min: Final[int] = min
        self.max: Final[int | None] = max
        self.inclusive: Final[bool] = inclusive

    @classmethod
    def of(cls, bound: Bound | range | int | tuple[int, int | None]) -> Bound:
        """
        Accepts:
        - a `Bound`, returned as-is
        - a `range` with a step of 1 (upper end excluded, like everywhere in Python)
        - an `int` for an exact count
        - a `(min, max)` tuple, both ends included, `max` may be `None`
        """
        if isinstance(bound, Bound):
            return bound
        elif isinstance(bound, range):
            if bound.step != 1:
                raise ValueError("Only ranges with a step of 1 can be used as a bound.")
            return cls(bound.start, bound.stop, inclusive=False)
        elif isinstance(bound, int):
            return cls(bound, bound)
        else:
            lo, hi = bound
            return cls(lo, hi)

    def __contains__(self, count: object) -> bool:
        if not isinstance(count, int) or count < self.min:
            return False
        if self.max is None:
            return True
        return count <= self.max if self.inclusive else count < self.max

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Bound):
            return (self.min, self.max, self.inclusive) == (other.min, other.max, other.inclusive)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.min, self.max, self.inclusive))

    def __repr__(self) -> str:
        if self.max is None:
            return f"Bound({self.min}..)"
        return f"Bound({self.min}..{'=' if self.inclusive else ''}{self.max})"



def named(parser: Parser[_T], name: str) -> Parser[_T]:
    """
    Gives a parser a name for the debug log.

    Nothing is logged unless the `combparse` logger is enabled for `DEBUG`:
    ```
    logging.getLogger("combparse").setLevel(logging.DEBUG)
    ```
    """
    def inner(input: StringView) -> Success[_T] | Failure:
        if not log.isEnabledFor(logging.DEBUG):
            return parser(input)
        log.debug("trying %s at %d", name, input.pos)
        r = parser(input)
        if r:
            log.debug("matched %s at %d..%d: %r", name, input.pos, r.rest.pos, r.value)
        else:
            log.debug("failed %s at %d", name, r.at.pos)
        return r
    inner.__name__ = name
    inner.__qualname__ = name
    return inner

def parse(parser: Parser[_T], text: str | StringView) -> Success[_T] | Failure:
    """Runs a parser on a string or a view."""
    return parser(StringView.of(text))

def parse_all(parser: Parser[_T], text: str | StringView) -> _T:
    """
    Runs a parser and returns the produced value.

    Raises `ParseError` if it fails, and `ExcessInput` if it doesn't consume everything.
    """
    r = parse(parser, text)
    if not r:
        raise r.error("Failed to parse.")
    if r.rest:
        raise ExcessInput(r.rest.src, r.rest.pos, "Unexpected input after the end.")
    return r.value
