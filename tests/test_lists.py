"""Test list items, ranges and list bodies."""

import pytest

import mandutest


@pytest.mark.parametrize("text,expected", [
    ('`[1, "a", 2]`', "1a2"),
    ("`[2-5, 9]{$,}`", "2,3,4,9,"),
    ("`[[1, 2], [3]]`", "123"),
    ("`[[1, 2], 3]{n=$}`", "n=1n=2n=3"),
    ("`[[1, [2, 3]], 4]{($)}`", "(1)(2)(3)(4)"),
    ("`[0-2]{`[0-2]{$}`;}`", "01;01;"),
])
def test_literal_lists(text, expected):
    mandutest.assert_cooked(text, expected)


def test_list_variables():
    mandutest.assert_cooked("`[xs, 3]{[$]}`", "[1][2][3]", xs=[1, 2])
    mandutest.assert_cooked("`xs{<$>}`", "<12>", xs=[1, 2])
    mandutest.assert_cooked("`[1, x]`", "1b", x="b")


def test_nested_variable_lists():
    mandutest.assert_cooked("`[rows]{($)}`", "(1)(2)(3)", rows=[[1, 2], [3]])


def test_range_from_variables():
    mandutest.assert_cooked("`[lo-hi]`", "123", lo=1, hi=4)


def test_empty_list_element():
    mandutest.assert_cooked("`[1, e, 2]{<$>}`", "<1><2>", e=[])
    mandutest.assert_cooked("`[1, e]`", "1", e=[])


@pytest.mark.parametrize("text,message", [
    ("`[]`", "Empty list is not allowed"),
    ("`[1 2]`", "Unexpected number '2' in list, expecting ',' or ']'"),
    ("`[1,", "Expect a number, string or variable, found end of input"),
    ("`[1, 2", "Unexpected end of input in list"),
    ("`[[1]-3]`", "Unexpected dash '-' in list"),
    ("`[3-1]`", "Range start 3 must be less than range end 1"),
    ("`[2-2]`", "Range start 2 must be less than range end 2"),
    ('`["a"-3]`', "Range operands must both be numbers"),
    ('`[1-"z"]`', "Range operands must both be numbers"),
])
def test_list_errors(text, message):
    mandutest.assert_error(text, message)


def test_range_from_string_variable():
    mandutest.assert_error("`[lo-3]`", "Range operands must both be numbers", lo="1")
