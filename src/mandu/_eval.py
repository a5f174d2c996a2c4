"""Evaluate code segments embedded in template text.

There is no separate syntax tree. The executor pulls tokens from a lexer
and produces output while it parses, in a single recursive descent pass.

Literal text is copied as is. A backtick starts a code segment, which is
a sequence of statements. Each statement is an item, optionally followed
by a body block:

    `name`                  render a variable
    `[1, "a", [2, 3]]`      render each list element
    `[0-3]{<li>$</li>}`     render the body for 0, 1 and 2
    `<"admin"> secret >`    statements only run when the section is enabled

Body blocks are template text again, `$` is replaced by the current item
and a backtick inside a body starts a nested code segment. Every nested
segment gets its own lexer, so the cursor of the enclosing segment does
not need to be saved and restored around it.
"""

__all__ = ["Executor", "cook"]

import logging
import re

import mandu
from mandu import _lexer


logger = logging.getLogger(__name__)

# Characters that stop the verbatim copy of body text
_BODY_SPECIAL = re.compile(r"[\\$`}]")

_STATEMENT_START = _lexer.ATOMIC_TOKENS | {_lexer.LIST_OPEN, _lexer.SECTION_OPEN}


class Executor:
    """Interpreter for one template text.

    The executor reads variables from the store it was given and takes all
    temporary values from the arena. Temporaries are released as soon as
    the statement that created them finishes, whether it succeeded or not.

    Args:
        source: (str) Template text
        store: (VariableStore) Variable bindings to resolve names against
        arena: (Arena) Allocator for temporary values

    Attributes:
        source: (str) Template text
        store: (VariableStore) Variable bindings
        arena: (Arena) Allocator for temporary values
    """
    __slots__ = ("source", "store", "arena", "_scratch", "_depth")

    def __init__(self, source, store, arena):
        self.source = source
        self.store = store
        self.arena = arena
        self._scratch = []
        self._depth = 0

    def __repr__(self):
        return f"Executor<{len(self.source)} chars>"

    def cook(self):
        """Substitute every code segment in the source.

        Returns:
            (str) Complete output text

        Raises:
            TemplateError: Syntax or lookup problem, with line and column set
        """
        try:
            return self._cook_text()
        except mandu.TemplateError as err:
            if err.line is None and err.position is not None:
                err.line, err.column = _lexer.location(self.source, err.position)
            raise

    def _cook_text(self):
        source = self.source
        size = len(source)
        parts = []
        pos = 0
        while pos < size:
            tick = source.find("`", pos)
            if tick < 0:
                parts.append(source[pos:])
                break
            if tick > pos and source[tick - 1] == "\\":
                parts.append(source[pos:tick - 1])
                parts.append("`")
                pos = tick + 1
                continue
            parts.append(source[pos:tick])
            pos = self._cook_segment(tick, parts)
        return "".join(parts)

    def _cook_segment(self, tick, parts):
        """Evaluate the code segment opened by the backtick at tick.

        Returns:
            (int) Offset just past the closing backtick
        """
        self._enter(tick)
        try:
            lexer = _lexer.Lexer(self.source, tick + 1)
            parts.append(self._run_segment(lexer))
        finally:
            self._depth -= 1
        return lexer.position + 1

    def _run_segment(self, lexer):
        fragments = []
        while True:
            self._execute(lexer, fragments)
            kind = lexer.kind
            if kind == _lexer.END:
                return "".join(fragments)
            if kind == _lexer.EOF:
                raise mandu.LexicalError(
                    'Unexpected end of input, expecting "`" to end the code segment',
                    lexer.position)
            if kind not in _STATEMENT_START:
                raise mandu.StructuralError(f"Unexpected {_describe(lexer)} in code segment",
                                            lexer.position)

    def _execute(self, lexer, fragments):
        """Run one statement group, optionally guarded by a section."""
        section = ""
        if lexer.kind == _lexer.SECTION_OPEN:
            lexer.advance()
            if lexer.kind != _lexer.STRING:
                raise mandu.StructuralError(
                    f"Expect a quoted section key, found {_describe(lexer)}", lexer.position)
            section = self._parse_string(lexer)
            if lexer.kind == _lexer.SECTION_CLOSE:
                lexer.advance()
            if not self.store.is_section_enabled(section):
                lexer.seek(mandu.skip_section(self.source, lexer.position))
                return
            if lexer.kind == _lexer.END:
                raise mandu.StructuralError(f"Section {section!r} has an empty body",
                                            lexer.position)
            if lexer.kind == _lexer.SECTION_CLOSE:
                lexer.advance()
                return

        while True:
            kind = lexer.kind
            if kind in _lexer.ATOMIC_TOKENS:
                self._execute_atomic(lexer, section, fragments)
            elif kind == _lexer.LIST_OPEN:
                self._execute_list(lexer, section, fragments)
            else:
                return
            kind = lexer.kind
            if kind == _lexer.END:
                return
            if kind == _lexer.SECTION_CLOSE:
                lexer.advance()
                return

    def _execute_atomic(self, lexer, section, fragments):
        mark = len(self._scratch)
        try:
            value = self._acquire()
            self._parse_atomic(lexer, section, value)
            if lexer.kind == _lexer.BODY_OPEN:
                lexer.advance()
                text, end = self._execute_body(value, lexer.position)
                fragments.append(text)
                lexer.seek(end)
            else:
                fragments.append(value.to_string())
        finally:
            self._release_from(mark)

    def _execute_list(self, lexer, section, fragments):
        mark = len(self._scratch)
        try:
            items = self._parse_list(lexer, section)
            if lexer.kind == _lexer.BODY_OPEN:
                lexer.advance()
                end = self._execute_list_body(items, lexer.position, fragments)
                lexer.seek(end)
            else:
                fragments.extend(item.to_string() for item in items)
        finally:
            self._release_from(mark)

    def _execute_list_body(self, items, start, fragments):
        """Render the body at start once per item.

        A list item renders the body for each of its own elements and
        joins them into a single fragment.

        Returns:
            (int) Offset just past the body
        """
        end = None
        for item in items:
            if item.is_list and item.as_list():
                inner = []
                item_end = self._execute_list_body(item.as_list(), start, inner)
                fragments.append("".join(inner))
            else:
                text, item_end = self._execute_body(item, start)
                if item.is_list:
                    text = ""
                fragments.append(text)
            if end is None:
                end = item_end
            elif item_end != end:
                raise mandu.StructuralError(
                    "Body block consumed a different span for another list element", start)
        return end

    def _execute_body(self, dollar, start):
        """Render body text with `$` replaced by the value.

        Args:
            dollar: (Value) Value substituted for `$`
            start: (int) Offset of the first body character

        Returns:
            (tuple) Rendered text and the offset just past the closing brace
        """
        source = self.source
        size = len(source)
        rendered = None
        parts = []
        i = start
        while True:
            match = _BODY_SPECIAL.search(source, i)
            if match is None:
                break
            j = match.start()
            if j > i:
                parts.append(source[i:j])
            ch = source[j]
            if ch == "\\":
                if j + 1 < size and source[j + 1] in _lexer.BODY_ESCAPES:
                    parts.append(source[j + 1])
                    i = j + 2
                else:
                    parts.append(ch)
                    i = j + 1
            elif ch == "$":
                if rendered is None:
                    rendered = dollar.to_string()
                parts.append(rendered)
                i = j + 1
            elif ch == "`":
                i = self._cook_segment(j, parts)
            else:
                return "".join(parts), j + 1
        raise mandu.LexicalError('Unexpected end of input, expecting "}" to close the body block',
                                 start)

    def _parse_atomic(self, lexer, section, value):
        kind = lexer.kind
        if kind == _lexer.NUMBER:
            value.set_number(self._parse_number(lexer))
        elif kind == _lexer.STRING:
            value.set_string(self._parse_string(lexer))
        elif kind == _lexer.VARIABLE:
            self._parse_variable(lexer, section, value)
        else:
            raise mandu.StructuralError(
                f"Expect a number, string or variable, found {_describe(lexer)}", lexer.position)

    def _parse_number(self, lexer):
        start = lexer.position
        end = _lexer.scan_number(self.source, start)
        lexer.seek(end)
        try:
            return int(self.source[start:end])
        except ValueError as e:
            raise mandu.LexicalError("Number literal is too large", start) from e

    def _parse_string(self, lexer):
        text, end = _lexer.scan_string(self.source, lexer.position)
        lexer.seek(end)
        return text

    def _parse_variable(self, lexer, section, value):
        start = lexer.position
        end = _lexer.scan_name(self.source, start)
        name = self.source[start:end]
        found = self.store.lookup_with_fallback(section, name)
        if found is None:
            scope = repr(section) if section else mandu.GLOBAL_NAME
            raise mandu.SemanticError(f"Variable {name!r} is not defined in section {scope}",
                                      start)
        value.copy_from(found)
        lexer.seek(end)

    def _parse_list(self, lexer, section):
        """Parse a bracketed list into temporary values.

        Returns:
            (list) Element values, nested lists as list values
        """
        lexer.advance()
        if lexer.kind == _lexer.LIST_CLOSE:
            raise mandu.StructuralError("Empty list is not allowed", lexer.position)
        items = []
        while True:
            self._parse_list_element(lexer, section, items)
            kind = lexer.kind
            if kind == _lexer.COMMA:
                lexer.advance()
            elif kind == _lexer.LIST_CLOSE:
                lexer.advance()
                return items
            else:
                raise mandu.StructuralError(
                    f"Unexpected {_describe(lexer)} in list, expecting ',' or ']'",
                    lexer.position)

    def _parse_list_element(self, lexer, section, items):
        if lexer.kind == _lexer.LIST_OPEN:
            self._enter(lexer.position)
            try:
                nested = self._parse_list(lexer, section)
            finally:
                self._depth -= 1
            items.append(self._acquire(nested))
            return

        position = lexer.position
        first = self._acquire()
        self._parse_atomic(lexer, section, first)
        if lexer.kind != _lexer.DASH:
            items.append(first)
            return

        if not first.is_number:
            raise mandu.SemanticError("Range operands must both be numbers", position)
        lexer.advance()
        last = self._acquire()
        self._parse_atomic(lexer, section, last)
        if not last.is_number:
            raise mandu.SemanticError("Range operands must both be numbers", position)
        low = first.as_number()
        high = last.as_number()
        if low >= high:
            raise mandu.SemanticError(
                f"Range start {low} must be less than range end {high}", position)
        items.extend(self._acquire(number) for number in range(low, high))

    def _enter(self, position):
        """Count one more level of nested lists or code segments."""
        if self._depth >= _lexer.MAX_NESTING:
            raise mandu.StructuralError(
                f"Code is nested deeper than {_lexer.MAX_NESTING} levels", position)
        self._depth += 1

    def _acquire(self, data=None):
        value = self.arena.acquire(data)
        self._scratch.append(value)
        return value

    def _release_from(self, mark):
        scratch = self._scratch
        for value in reversed(scratch[mark:]):
            self.arena.release(value)
        del scratch[mark:]


def _describe(lexer):
    """Name the current token for error messages."""
    kind = lexer.kind
    if kind == _lexer.EOF:
        return "end of input"
    return f"{kind} {lexer.source[lexer.position]!r}"


def cook(text, store, arena):
    """Cook text against a store, see `Executor.cook`."""
    return Executor(text, store, arena).cook()
