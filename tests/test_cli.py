"""Test the mandu command line."""

import json
import logging
import subprocess
import sys

import pytest

from mandu import __main__ as cli
from mandu import _colorize


@pytest.mark.parametrize("text,expected", [
    ("title=Home", (None, "title", "Home")),
    ("admin:user=root", ("admin", "user", "root")),
    ("count=3", (None, "count", 3)),
    ("delta=-3", (None, "delta", -3)),
    ("version=1.5", (None, "version", "1.5")),
    ("empty=", (None, "empty", "")),
    ("eq=a=b", (None, "eq", "a=b")),
    (":x=1", (None, "x", 1)),
])
def test_parse_define(text, expected):
    assert cli.parse_define(text) == expected


@pytest.mark.parametrize("text", ["novalue", "=3", "s:=1"])
def test_parse_define_errors(text):
    with pytest.raises(ValueError):
        cli.parse_define(text)


def test_text_source(capsys):
    assert cli.main(["--text", "`[0-3]{<li>$</li>}`"]) == 0
    assert capsys.readouterr().out == "<li>0</li><li>1</li><li>2</li>"


def test_defines(capsys):
    code = cli.main(["--text", '`title` `<"admin"> user >`', "-D", "title=Home", "-D", "admin:user=root"])
    assert code == 0
    assert capsys.readouterr().out == "Home root"


def test_disable(capsys):
    code = cli.main(["--text", '`<"admin"> user >`', "-D", "admin:user=root", "--disable", "admin"])
    assert code == 0
    assert capsys.readouterr().out == ""


def test_template_file_and_output(tmp_path):
    template = tmp_path / "page.tmpl"
    template.write_text("Hello `name`!\n", encoding="utf-8")
    output = tmp_path / "page.txt"
    assert cli.main([str(template), "-D", "name=Ann", "-o", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == "Hello Ann!\n"


def test_vars_file(tmp_path, capsys):
    values = tmp_path / "values.json"
    values.write_text(json.dumps({
        "globals": {"items": [1, 2], "title": "T"},
        "sections": {"admin": {"user": "root"}, "beta": {"flag": "on"}},
        "disabled": ["admin"],
    }), encoding="utf-8")
    code = cli.main(["--text", '`title``items{$}``<"admin"> user >``<"beta"> flag >`',
                     "--vars", str(values)])
    assert code == 0
    assert capsys.readouterr().out == "T12on"


def test_enable_overrides_vars_file(tmp_path, capsys):
    values = tmp_path / "values.json"
    values.write_text('{"sections": {"admin": {"user": "root"}}, "disabled": ["admin"]}',
                      encoding="utf-8")
    code = cli.main(["--text", '`<"admin"> user >`', "--vars", str(values), "--enable", "admin"])
    assert code == 0
    assert capsys.readouterr().out == "root"


def test_unknown_section_warns(caplog, capsys):
    with caplog.at_level(logging.WARNING, logger="mandu"):
        assert cli.main(["--text", "plain", "--disable", "ghost"]) == 0
    assert "ghost" in caplog.text
    assert capsys.readouterr().out == "plain"


def test_template_error(capsys):
    assert cli.main(["--text", "`missing`"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[Error(1,2)]: Variable 'missing' is not defined" in captured.err


@pytest.mark.parametrize("argv", [
    ["--text", "x", "-D", "novalue"],
    ["no/such/file.tmpl"],
])
def test_usage_errors(argv):
    with pytest.raises(SystemExit) as info:
        cli.main(argv)
    assert info.value.code == 2


@pytest.mark.parametrize("document", [
    "[1, 2]",
    '{"globals": [1, 2]}',
    '{"sections": ["admin"]}',
    '{"sections": {"admin": 1}}',
    '{"disabled": "admin"}',
    '{"globals": {"ratio": 1.5}}',
    "{not json",
])
def test_bad_vars_file(tmp_path, document):
    values = tmp_path / "values.json"
    values.write_text(document, encoding="utf-8")
    with pytest.raises(SystemExit) as info:
        cli.main(["--text", "x", "--vars", str(values)])
    assert info.value.code == 2


def test_module_entry_point():
    result = subprocess.run(
        [sys.executable, "-m", "mandu", "-", "-D", "who=world"],
        input="hello `who`",
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, f"CLI failed: {result.stderr}"
    assert result.stdout == "hello world"


def test_module_entry_point_error():
    result = subprocess.run(
        [sys.executable, "-m", "mandu", "--text", "`[]`"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 1
    assert "[Error(1,3)]: Empty list is not allowed" in result.stderr


class _Terminal:
    def isatty(self):
        return True


def test_color_detection(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert _colorize.should_use_color(_Terminal())
    assert not _colorize.should_use_color(object())
    monkeypatch.setenv("NO_COLOR", "")
    assert not _colorize.should_use_color(_Terminal())


def test_paint():
    assert _colorize.paint("boom", "error") == "\033[1;31mboom\033[0m"
