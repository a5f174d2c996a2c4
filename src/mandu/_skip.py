"""Skip the statements of a disabled section without evaluating them.

Skipping still has to understand enough of the syntax to find the real end
of the section. A `>` inside a string literal or a body block must not end
the section, so literals and bodies are measured the same way the
evaluator measures them. Variables are never looked up.
"""

__all__ = ["SectionSkipper", "skip_section"]

import logging

import mandu
from mandu import _lexer


logger = logging.getLogger(__name__)


class SectionSkipper:
    """Scanner that walks over section statements.

    Args:
        source: (str) Complete template text
    """
    __slots__ = ("source", "_depth")

    def __init__(self, source):
        self.source = source
        self._depth = 0

    def skip(self, position):
        """Skip section statements starting at position.

        The section ends at its closing `>`, which is consumed, or at the
        backtick that ends the code segment, which is left for the caller.

        Args:
            position: (int) Offset just after the section header

        Returns:
            (int) Offset where evaluation resumes

        Raises:
            LexicalError: Input ends inside the section
            StructuralError: A character that is not part of the syntax, or
                code segments nested too deep
        """
        lexer = _lexer.Lexer(self.source, position)
        end = self._skip_code(lexer, in_section=True)
        logger.debug("Skipped section body at %d..%d", position, end)
        return end

    def _skip_code(self, lexer, in_section):
        source = self.source
        while True:
            kind = lexer.kind
            if kind == _lexer.STRING:
                _text, end = _lexer.scan_string(source, lexer.position)
                lexer.seek(end)
            elif kind == _lexer.VARIABLE:
                lexer.seek(_lexer.scan_name(source, lexer.position))
            elif kind == _lexer.NUMBER:
                lexer.seek(_lexer.scan_number(source, lexer.position))
            elif kind == _lexer.BODY_OPEN:
                lexer.seek(self._skip_body(lexer.position + 1))
            elif kind == _lexer.SECTION_CLOSE and in_section:
                lexer.advance()
                return lexer.position
            elif kind == _lexer.END:
                return lexer.position
            elif kind == _lexer.EOF:
                raise mandu.LexicalError("Unexpected end of input inside a disabled section",
                                         lexer.position)
            elif kind == _lexer.UNKNOWN:
                raise mandu.StructuralError(
                    f"Unexpected character {source[lexer.position]!r} inside a disabled section",
                    lexer.position)
            else:
                lexer.advance()

    def _skip_body(self, position):
        """Return the offset just past the body text starting at position."""
        source = self.source
        size = len(source)
        i = position
        while i < size:
            ch = source[i]
            if ch == "\\":
                if i + 1 < size and source[i + 1] in _lexer.BODY_ESCAPES:
                    i += 2
                else:
                    i += 1
            elif ch == "`":
                if self._depth >= _lexer.MAX_NESTING:
                    raise mandu.StructuralError(
                        f"Code is nested deeper than {_lexer.MAX_NESTING} levels", i)
                self._depth += 1
                lexer = _lexer.Lexer(source, i + 1)
                i = self._skip_code(lexer, in_section=False) + 1
                self._depth -= 1
            elif ch == "}":
                return i + 1
            else:
                i += 1
        raise mandu.LexicalError('Unexpected end of input, expecting "}"', position)


def skip_section(source, position):
    """Skip a disabled section, see `SectionSkipper.skip`."""
    return SectionSkipper(source).skip(position)
