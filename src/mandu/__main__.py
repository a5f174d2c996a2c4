#!/usr/bin/env python3
"""Mandu CLI - Cook templates from the command line.

Usage:
    mandu page.tmpl -D title=Home -D count=3      # Cook a template file
    mandu --text '`[0-3]{<li>$</li>}`'            # Cook template text
    mandu page.tmpl --vars values.json --disable admin
    cat page.tmpl | mandu - -D admin:user=root    # Section value from stdin

Values file layout:
    {"globals": {"title": "Home", "items": [1, 2, 3]},
     "sections": {"admin": {"user": "root"}},
     "disabled": ["admin"]}
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path

import mandu
from mandu import _colorize


logger = logging.getLogger("mandu")

_INTEGER = re.compile(r"-?[0-9]+")


def parse_define(text):
    """Split a -D argument into its parts.

    The name is either `key` or `section:key`. Integer text becomes a
    number, anything else is kept as a string.

    Args:
        text: (str) Argument like "title=Home" or "admin:user=root"

    Returns:
        (tuple) Section (or None), key, and data

    Raises:
        ValueError: The argument has no "=" or an empty key
    """
    name, sep, raw = text.partition("=")
    if not sep:
        raise ValueError(f"expected NAME=VALUE, got {text!r}")
    section, colon, key = name.partition(":")
    if not colon:
        section, key = None, name
    if not key:
        raise ValueError(f"missing value name in {text!r}")
    data = int(raw) if _INTEGER.fullmatch(raw) else raw
    return section or None, key, data


def load_values(maker, path):
    """Register the values described by a JSON file.

    Args:
        maker: (SoupMaker) Maker to register values with
        path: (Path) JSON document, see module documentation

    Returns:
        (list) Names of sections the document wants disabled
    """
    document = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise ValueError(f"{path}: values file must contain a JSON object")
    global_values = document.get("globals", {})
    if not isinstance(global_values, dict):
        raise ValueError(f"{path}: 'globals' must map names to values")
    sections = document.get("sections", {})
    if not isinstance(sections, dict):
        raise ValueError(f"{path}: 'sections' must map section names to objects")
    for key, data in global_values.items():
        maker.define(key, data)
    for section, values in sections.items():
        if not isinstance(values, dict):
            raise ValueError(f"{path}: section {section!r} must map names to values")
        for key, data in values.items():
            maker.define(key, data, section=section)
    disabled = document.get("disabled", [])
    if not isinstance(disabled, list):
        raise ValueError(f"{path}: 'disabled' must be a list of section names")
    return disabled


def set_section(maker, name, enabled):
    """Toggle a section, warning when it was never defined."""
    changed = maker.enable_section(name) if enabled else maker.disable_section(name)
    if not changed:
        action = "enable" if enabled else "disable"
        logger.warning("Section %r has no values, cannot %s it", name, action)
    return changed


def report_error(message, stream):
    """Write a template error, styled when the stream is a terminal."""
    if _colorize.should_use_color(stream):
        message = _colorize.paint(message, "error")
    print(message, file=stream)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="mandu",
        description="Mandu text template engine")
    parser.add_argument("source",
        help="Template file to cook, '-' for stdin")
    parser.add_argument("--text", action="store_true",
        help="Treat source as the template text itself")
    parser.add_argument("-D", "--define", action="append", default=[], metavar="[SECTION:]NAME=VALUE",
        help="Define a value, integers become numbers")
    parser.add_argument("--vars", metavar="FILE",
        help="JSON file with globals, sections and disabled sections")
    parser.add_argument("--enable", action="append", default=[], metavar="SECTION",
        help="Enable a section")
    parser.add_argument("--disable", action="append", default=[], metavar="SECTION",
        help="Disable a section")
    parser.add_argument("-o", "--output", metavar="FILE",
        help="Write the result to a file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="Show debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s")

    if args.text:
        source = args.source
    elif args.source == "-":
        source = sys.stdin.read()
    else:
        try:
            source = Path(args.source).read_text(encoding="utf-8")
        except OSError as err:
            parser.error(f"cannot read template: {err}")

    maker = mandu.SoupMaker()
    disabled = []
    if args.vars:
        try:
            disabled = load_values(maker, args.vars)
        except (OSError, ValueError, TypeError) as err:
            parser.error(f"cannot load values: {err}")

    for define in args.define:
        try:
            section, key, data = parse_define(define)
        except ValueError as err:
            parser.error(str(err))
        maker.define(key, data, section=section)

    for name in disabled:
        set_section(maker, name, False)
    for name in args.enable:
        set_section(maker, name, True)
    for name in args.disable:
        set_section(maker, name, False)

    soup = maker.cook(source)
    if not soup.ok:
        report_error(soup.error, sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(soup.output, encoding="utf-8")
    else:
        sys.stdout.write(soup.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
