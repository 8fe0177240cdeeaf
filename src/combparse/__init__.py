"""
Parser combinators over string views.

A parser is any callable that takes a `StringView` and returns either a `Success` (the remaining input and a value)
or a `Failure` (the input it gave up on). Combinators take parsers and return new ones.

See the `combparse.general` module for parsers built this way that you can use as examples.

Defining parsers:
```
greeting = pair(or_("hello", "hi"), right(ws1, identifier))

def foo(input: StringView) -> Success[int] | Failure:
    if input.startswith("abc"):
        return Success(input.advance(3), 10)    # success
    return Failure(input)                       # fail
```

Using parsers:
```
result = parse(greeting, "hello world")

if result:
    ... # `result` is a `Success`, see `result.value` and `result.rest`
else:
    ... # `result` is a `Failure`, see `result.at`

value = parse_all(greeting, "hello world")  # raises ParseError instead
```
"""

import combparse.const as const
import combparse.main
from combparse.main import (
    StringView,
    Success,
    Failure,
    ParseOutcome,
    ParseError,
    ExcessInput,
    Parser,
    Bound,
    named,
    parse,
    parse_all,
)
import combparse.combinators
from combparse.combinators import (
    match_literal,
    any_char,
    eof,
    take,
    anycase,
    regex,
    ws0,
    ws1,
    pair,
    left,
    right,
    seq,
    or_,
    oneof,
    range_,
    zero_or_more,
    one_or_more,
    separated,
    optional,
    pred,
    map_,
    lookahead,
    inverted,
    lazy,
)
import combparse.general as general
