"""Tests for snippet expansion."""

from texcomplete.core.snippet import expand_snippet, parse_placeholders


def test_parse_placeholders():
    """Test tab stop discovery with defaults."""
    stops = parse_placeholders("frac{${1:a}}{${2}}${0}")

    assert [s.index for s in stops] == [1, 2, 0]
    assert stops[0].default == "a"
    assert stops[1].default == ""


def test_repeated_index_listed_once():
    """Test that mirrored tab stops appear once."""
    stops = parse_placeholders("begin{${1}}\n\t${0}\n\\end{${1}}")

    assert [s.index for s in stops] == [1, 0]


def test_inline_math_cursor_lands_on_final_marker():
    """Test accepting every placeholder leaves the cursor at ${0}."""
    expanded = expand_snippet("${1}\\)${0}", {1: "x^2"})

    assert expanded.text == "x^2\\)"
    assert expanded.cursor == len("x^2\\)")


def test_cursor_in_middle_of_environment():
    """Test final cursor inside a begin/end block."""
    expanded = expand_snippet("begin{${1}}\n\t${0}\n\\end{${1}}", {1: "align"})

    assert expanded.text == "begin{align}\n\t\n\\end{align}"
    assert expanded.text[: expanded.cursor] == "begin{align}\n\t"


def test_defaults_used_when_no_value():
    """Test that placeholder defaults fill unvisited stops."""
    expanded = expand_snippet("includegraphics[${1:width=\\linewidth}]{${2}}")

    assert expanded.text == "includegraphics[width=\\linewidth]{}"
    assert expanded.cursor == len(expanded.text)


def test_escaped_dollar_is_literal():
    """Test that \\$ does not start a tab stop."""
    expanded = expand_snippet("\\$${1}\\$", {1: "x"})

    assert expanded.text == "$x$"
    assert parse_placeholders("\\$${1}\\$")[0].index == 1


def test_short_form_tab_stops():
    """Test $1 and $0 without braces."""
    expanded = expand_snippet("textbf{$1}$0", {1: "bold"})

    assert expanded.text == "textbf{bold}"
    assert expanded.cursor == len("textbf{bold}")
