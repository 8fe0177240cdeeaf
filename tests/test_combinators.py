"""Tests for the primitives and combinators in combparse.combinators."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from combparse import (
    Bound,
    StringView,
    any_char,
    anycase,
    eof,
    inverted,
    lazy,
    left,
    lookahead,
    map_,
    match_literal,
    one_or_more,
    oneof,
    optional,
    or_,
    pair,
    parse,
    pred,
    range_,
    regex,
    right,
    separated,
    seq,
    take,
    ws0,
    ws1,
    zero_or_more,
)


def test_match_literal() -> None:
    parser = match_literal("Hola")

    r = parse(parser, "Hola")
    assert r
    assert r.rest == ""
    assert r.value is None

    r = parse(parser, "Hola!")
    assert r
    assert r.rest == "!"

    r = parse(parser, "Hello")
    assert not r
    assert r.at == "Hello"
    assert r.at.pos == 0


def test_match_literal_short_input_fails() -> None:
    r = parse(match_literal("Hola"), "Ho")
    assert not r
    assert r.at == "Ho"


def test_match_literal_empty_consumes_nothing() -> None:
    r = parse(match_literal(""), "abc")
    assert r
    assert r.rest == "abc"
    assert r.rest.pos == 0


def test_any_char() -> None:
    assert parse(any_char, "a").value == "a"

    r = parse(any_char, "abc")
    assert r
    assert r.value == "a"
    assert r.rest == "bc"

    r = parse(any_char, "")
    assert not r
    assert r.at == ""


def test_any_char_multibyte() -> None:
    r = parse(any_char, "éa")
    assert r
    assert r.value == "é"
    assert r.rest == "a"

    r = parse(any_char, "😀!")
    assert r
    assert r.value == "😀"
    assert r.rest == "!"


def test_pair() -> None:
    parser = pair(match_literal("Hello "), match_literal("world!"))

    r = parse(parser, "Hello world!")
    assert r
    assert r.rest == ""
    assert r.value == (None, None)

    r = parse(parser, "Hello world! end")
    assert r
    assert r.rest == " end"

    r = parse(parser, "Hello world")
    assert not r
    assert r.at == "world"


def test_pair_short_circuits() -> None:
    calls: list[StringView] = []

    def spy(input: StringView):
        calls.append(input)
        return any_char(input)

    r = parse(pair("x", spy), "abc")
    assert not r
    assert r.at == "abc"
    assert calls == []


def test_pair_values_in_order() -> None:
    r = parse(pair(any_char, any_char), "ab")
    assert r
    assert r.value == ("a", "b")


def test_or() -> None:
    parser = or_(match_literal("hello"), match_literal("world"))

    assert parse(parser, "hello").rest == ""
    assert parse(parser, "world").rest == ""

    r = parse(parser, "world!")
    assert r
    assert r.rest == "!"

    r = parse(parser, "he")
    assert not r
    assert r.at == "he"


def test_or_retries_from_original_input() -> None:
    parser = or_(pair("ab", "x"), map_("abc", lambda _: "second"))
    r = parse(parser, "abcd")
    assert r
    assert r.value == "second"
    assert r.rest == "d"


def test_or_first_match_wins() -> None:
    parser = or_(map_("a", lambda _: 1), map_("ab", lambda _: 2))
    r = parse(parser, "ab")
    assert r
    assert r.value == 1
    assert r.rest == "b"


def test_zero_or_more() -> None:
    parser = zero_or_more(match_literal("a"))

    r = parse(parser, "aaaaa")
    assert r
    assert r.rest == ""
    assert r.value == [None] * 5

    r = parse(parser, "b")
    assert r
    assert r.value == []
    assert r.rest == "b"


def test_one_or_more() -> None:
    parser = one_or_more(match_literal("a"))

    r = parse(parser, "aaaaa")
    assert r
    assert r.value == [None] * 5

    r = parse(parser, "b")
    assert not r
    assert r.at == "b"


def test_range() -> None:
    parser = range_(match_literal("a"), Bound(2))
    r = parse(parser, "aaa")
    assert r
    assert r.value == [None] * 3
    assert not parse(parser, "baa")

    parser = range_(match_literal("a"), Bound(2, 3))
    r = parse(parser, "aaa")
    assert r
    assert r.rest == ""

    r = parse(parser, "aaaa")
    assert not r
    assert r.at == "aaaa"
    assert r.at.pos == 0

    parser = range_(match_literal("a"), range(2, 3))
    r = parse(parser, "aaa")
    assert not r
    assert r.at == "aaa"


def test_range_bound_forms() -> None:
    assert parse(range_("a", 2), "aab").value == [None, None]
    assert not parse(range_("a", 2), "aaa")
    assert parse(range_("a", (1, None)), "aaaa").rest == ""
    assert not parse(range_("a", (1, 2)), "aaa")


def test_range_stops_on_zero_width_match() -> None:
    r = parse(zero_or_more(match_literal("")), "abc")
    assert r
    assert r.value == [None]
    assert r.rest == "abc"

    r = parse(zero_or_more(optional("x")), "xxy")
    assert r
    assert r.value == [None, None, None]
    assert r.rest == "y"


def test_optional() -> None:
    parser = optional(map_("a", lambda _: "A"))

    r = parse(parser, "a")
    assert r
    assert r.value == "A"
    assert r.rest == ""

    r = parse(parser, "b")
    assert r
    assert r.value is None
    assert r.rest == "b"


def test_pred() -> None:
    parser = pred(any_char, lambda c: c == "a")

    r = parse(parser, "a")
    assert r
    assert r.value == "a"
    assert r.rest == ""

    r = parse(parser, "b")
    assert not r
    assert r.at == "b"


def test_pred_rejection_reports_original_input() -> None:
    parser = pred(take(2), lambda s: s == "ab")
    r = parse(parser, "xyz")
    assert not r
    assert r.at.pos == 0


def test_pred_propagates_underlying_failure() -> None:
    inner = pair("a", "b")
    parser = pred(inner, lambda _: True)
    view = StringView("ax")
    assert parser(view) == inner(view)


def test_map() -> None:
    parser = map_(match_literal("a"), lambda _: 1)

    r = parse(parser, "a")
    assert r
    assert r.value == 1
    assert r.rest == ""

    r = parse(parser, "b")
    assert not r
    assert r.at == "b"


def test_left_and_right() -> None:
    assert parse(left(any_char, ";"), "x;").value == "x"
    assert parse(right("(", any_char), "(x").value == "x"
    assert not parse(left(any_char, ";"), "x,")


def test_seq() -> None:
    r = parse(seq(any_char, "-", any_char), "a-b!")
    assert r
    assert r.value == ("a", None, "b")
    assert r.rest == "!"

    r = parse(seq(any_char, "-", any_char), "a+b")
    assert not r
    assert r.at == "+b"

    with pytest.raises(ValueError):
        seq(any_char)


def test_oneof() -> None:
    parser = oneof(map_("a", lambda _: 1), map_("b", lambda _: 2), map_("c", lambda _: 3))
    assert parse(parser, "c").value == 3
    r = parse(parser, "d")
    assert not r
    assert r.at == "d"

    with pytest.raises(ValueError):
        oneof("a")


def test_separated() -> None:
    parser = separated(any_char, ",")

    r = parse(parser, "a,b,c")
    assert r
    assert r.value == ["a", "b", "c"]
    assert r.rest == ""

    r = parse(parser, "a,b,")
    assert r
    assert r.value == ["a", "b"]
    assert r.rest == ","

    r = parse(parser, "")
    assert r
    assert r.value == []

    digit = pred(any_char, str.isdigit)
    r = parse(separated(optional(digit), ","), ",2")
    assert r
    assert r.value == [None, "2"]
    assert r.rest == ""

    r = parse(separated(optional(digit), ","), "1,,2")
    assert r
    assert r.value == ["1", None, "2"]

    r = parse(separated(any_char, ",", Bound(2)), "a;b")
    assert not r
    assert r.at == "a;b"


def test_lookahead_and_inverted() -> None:
    r = parse(lookahead(any_char), "ab")
    assert r
    assert r.value == "a"
    assert r.rest == "ab"

    r = parse(inverted("x"), "ab")
    assert r
    assert r.rest == "ab"
    assert not parse(inverted("a"), "ab")


def test_eof() -> None:
    assert parse(eof, "")
    r = parse(eof, "a")
    assert not r
    assert r.at == "a"


def test_take() -> None:
    r = parse(take(3), "abcd")
    assert r
    assert r.value == "abc"
    assert r.rest == "d"
    assert not parse(take(3), "ab")

    with pytest.raises(ValueError):
        take(-1)


def test_anycase() -> None:
    r = parse(anycase("select"), "SeLeCt *")
    assert r
    assert r.value == "SeLeCt"
    assert r.rest == " *"
    assert not parse(anycase("select"), "sel")


def test_regex() -> None:
    r = parse(right("x", regex(r"[0-9]+")), "x123y")
    assert r
    assert r.value.group() == "123"
    assert r.rest == "y"
    assert not parse(regex(r"[0-9]+"), "y")


def test_ws() -> None:
    r = parse(ws0, "  \tx")
    assert r
    assert r.value == "  \t"
    assert r.rest == "x"

    r = parse(ws0, "x")
    assert r
    assert r.value == ""

    assert not parse(ws1, "x")
    assert parse(ws1, "\nx").value == "\n"


def test_lazy_recursive_grammar() -> None:
    def nested():
        return or_(map_(right("(", left(lazy(nested), ")")), lambda depth: depth + 1), map_("x", lambda _: 0))

    parser = nested()
    r = parse(parser, "((x))")
    assert r
    assert r.value == 2
    assert r.rest == ""

    assert not parse(parser, "((x)")


def test_string_shorthand_matches_literal() -> None:
    r = parse(pair("ab", "cd"), "abcd")
    assert r
    assert r.value == (None, None)


def test_parsers_are_reusable() -> None:
    parser = one_or_more(pred(any_char, str.isdigit))
    first = parse(parser, "12a")
    second = parse(parser, "12a")
    assert first == second
    assert parse(parser, "345").value == ["3", "4", "5"]


def test_parser_shared_between_threads() -> None:
    number = map_(one_or_more(pred(any_char, str.isdigit)), lambda digits: int("".join(digits)))
    parser = separated(number, ",")
    inputs = [",".join(str(n) for n in range(i, i + 20)) + ";" for i in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda text: parse(parser, text), inputs))

    for i, r in enumerate(results):
        assert r
        assert r.value == list(range(i, i + 20))
        assert r.rest == ";"
