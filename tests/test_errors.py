"""Test error classification and rendering."""

import pytest

import mandu
import mandutest


def test_error_format():
    soup = mandutest.assert_error("`missing`")
    assert soup.error == "[Error(1,2)]: Variable 'missing' is not defined in section <Global>"


def test_error_location_multiline():
    soup = mandutest.assert_error("line1\n  `[]`")
    assert soup.error == "[Error(2,5)]: Empty list is not allowed"


def test_output_discarded_on_error():
    soup = mandutest.assert_error("before `1` `missing` after")
    assert soup.output == ""


@pytest.mark.parametrize("text,error", [
    ("`missing`", mandu.SemanticError),
    ("`[3-1]`", mandu.SemanticError),
    ("`[]`", mandu.StructuralError),
    ("`$`", mandu.StructuralError),
    ('`<x> 1 >`', mandu.StructuralError),
    ('`"abc`', mandu.LexicalError),
    ("`1", mandu.LexicalError),
    ("`1{abc", mandu.LexicalError),
])
def test_error_classes(text, error):
    maker = mandu.SoupMaker()
    with pytest.raises(error) as info:
        maker.cook_or_raise(text)
    assert isinstance(info.value, mandu.TemplateError)
    assert info.value.line is not None

    soup = maker.cook(text)
    assert isinstance(soup.exception, error)
    assert soup.error == str(soup.exception)


def test_error_attributes():
    with pytest.raises(mandu.LexicalError) as info:
        mandu.SoupMaker().cook_or_raise('ab\n`"abc`')
    err = info.value
    assert err.message == 'String literal is not closed by "'
    assert err.position == 4
    assert (err.line, err.column) == (2, 2)


def test_error_without_location():
    assert str(mandu.TemplateError("boom")) == "[Error]: boom"
    assert str(mandu.SemanticError("boom", line=3, column=7)) == "[Error(3,7)]: boom"


def test_released_value_error_is_not_template_error():
    assert issubclass(mandu.ReleasedValueError, RuntimeError)
    assert not issubclass(mandu.ReleasedValueError, mandu.TemplateError)


def test_number_literal_too_large():
    soup = mandutest.assert_error("`" + "1" * 5000 + "`", "Number literal is too large")
    assert isinstance(soup.exception, mandu.LexicalError)
    assert soup.error.startswith("[Error(1,2)]:")

    soup = mandutest.assert_error("`[0-" + "9" * 5000 + "]`", "Number literal is too large")
    assert soup.error.startswith("[Error(1,5)]:")


def test_large_number_in_disabled_section():
    mandutest.assert_cooked('`<"off"> ' + "9" * 5000 + " >`", "")


@pytest.mark.parametrize("text", [
    "`" + "[" * 2000 + "1" + "]" * 2000 + "`",
    "`1{" * 2000 + "x" + "}`" * 2000,
    '`<"off"> x{' + "`1{" * 2000,
])
def test_nesting_too_deep(text):
    maker = mandu.SoupMaker()
    soup = mandutest.assert_error(text, "Code is nested deeper than 64 levels", maker)
    assert isinstance(soup.exception, mandu.StructuralError)
    assert maker.arena.live == 0


def test_nesting_within_limit():
    depth = 60
    mandutest.assert_cooked("`" + "[" * depth + "1" + "]" * depth + "`", "1")
    mandutest.assert_cooked("`1{" * depth + "x" + "}`" * depth, "x")
