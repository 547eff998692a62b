"""Tests for the quadruple text codec."""

from quadopt.compiler.ir import Quadruple
from quadopt.compiler.quad_parser import (
    format_quadruple,
    format_quadruples,
    parse_quadruples,
    parse_source,
    read_block,
)

Q = Quadruple.of


def test_parse_line():
    assert parse_quadruples(["(*, A, B, T1)"]) == [Q("*", "A", "B", "T1")]


def test_parse_empty_field():
    assert parse_quadruples(["(=, T3, , X)"]) == [Q("=", "T3", "", "X")]


def test_whitespace_trimmed():
    assert parse_quadruples(["  (  +\t,A ,  B,T  )  "]) == [Q("+", "A", "B", "T")]


def test_missing_trailing_fields():
    assert parse_quadruples(["(=, A)"]) == [Q("=", "A", "", "")]
    assert parse_quadruples(["()"]) == [Q("", "", "", "")]


def test_extra_fields_ignored():
    assert parse_quadruples(["(+, A, B, T, junk)"]) == [Q("+", "A", "B", "T")]


def test_text_outside_parentheses_ignored():
    assert parse_quadruples(["3: (+, A, B, T) # note"]) == [Q("+", "A", "B", "T")]


def test_lines_without_parentheses_skipped():
    lines = ["", "# comment", "(+, A, B, T", "+, A, B, T)", ") (", "(-, A, B, U)"]
    assert parse_quadruples(lines) == [Q("-", "A", "B", "U")]


def test_parse_source():
    src = "(*, A, B, T1)\n\n(=, T1, , X)\n"
    assert parse_source(src) == [Q("*", "A", "B", "T1"), Q("=", "T1", "", "X")]


def test_format():
    assert format_quadruple(Q("=", "T3", "", "X")) == "(=, T3, , X)"
    assert format_quadruples([Q("*", "A", "B", "T1"), Q("=", "T1", "", "X")]) == (
        "(*, A, B, T1)\n(=, T1, , X)"
    )


def test_format_parses_back():
    quads = [Q("/", "6", "2", "T2"), Q("-", "A", "", "N")]
    assert parse_source(format_quadruples(quads)) == quads


def test_read_block(tmp_path):
    path = tmp_path / "block.txt"
    path.write_text("(*, A, B, T1)\r\n(=, T1, , X)\r\n", encoding="utf-8")
    assert read_block(path) == [Q("*", "A", "B", "T1"), Q("=", "T1", "", "X")]
