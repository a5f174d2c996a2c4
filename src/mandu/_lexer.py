"""Token classification for code segments.

The lexer only classifies the token at the cursor. Numbers, strings and
names are recognized by their first character, the parser measures their
extent with the `scan_*` helpers in this module. Punctuation tokens are
always a single character long.
"""

__all__ = [
    "Lexer",
    "Token",
    "location",
    "scan_number",
    "scan_name",
    "scan_string",
]

import mandu


# Token kinds
SECTION_OPEN = "section-open"
SECTION_CLOSE = "section-close"
LIST_OPEN = "list-open"
LIST_CLOSE = "list-close"
BODY_OPEN = "body-open"
BODY_CLOSE = "body-close"
NUMBER = "number"
STRING = "string"
VARIABLE = "variable"
COMMA = "comma"
DASH = "dash"
END = "end"
EOF = "eof"
UNKNOWN = "unknown"

ATOMIC_TOKENS = frozenset((NUMBER, STRING, VARIABLE))

_PUNCTUATION = {
    "`": END,
    "<": SECTION_OPEN,
    ">": SECTION_CLOSE,
    "[": LIST_OPEN,
    "]": LIST_CLOSE,
    "{": BODY_OPEN,
    "}": BODY_CLOSE,
    ",": COMMA,
    "-": DASH,
}

_WHITESPACE = frozenset(" \t\v\f\r\n")
_DIGITS = frozenset("0123456789")
_NAME_START = frozenset("_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_NAME_REST = _NAME_START | _DIGITS

# Deepest nesting of lists and code segments inside bodies
MAX_NESTING = 64

# Escapes recognized inside string literals
STRING_ESCAPES = frozenset('\\"')
# Escapes recognized inside body blocks, the backslash is dropped
BODY_ESCAPES = frozenset("$t")


class Token:
    """A classified token at a source offset.

    Args:
        kind: (str) One of the token kind constants
        length: (int) Characters consumed by `advance`, zero for the
            kinds whose extent is measured by the parser

    """
    __slots__ = ("kind", "length")

    def __init__(self, kind, length):
        self.kind = kind
        self.length = length

    def __repr__(self):
        return f"Token({self.kind})"


_EOF_TOKEN = Token(EOF, 1)
_UNKNOWN_TOKEN = Token(UNKNOWN, 1)
_PUNCTUATION_TOKENS = {ch: Token(kind, 1) for ch, kind in _PUNCTUATION.items()}
_NUMBER_TOKEN = Token(NUMBER, 0)
_STRING_TOKEN = Token(STRING, 0)
_VARIABLE_TOKEN = Token(VARIABLE, 0)


class Lexer:
    """Cursor over a source string that classifies one token at a time.

    A lexer is bound to a single code segment. Evaluating a nested segment
    creates a new lexer, so the cursor of an outer segment is never
    touched by inner evaluation.

    Args:
        source: (str) Complete template text
        position: (int) Starting offset

    Attributes:
        source: (str) Complete template text
        position: (int) Offset of the current token, whitespace skipped
        token: (Token) Current token at `position`
    """
    __slots__ = ("source", "position", "token")

    def __init__(self, source, position=0):
        self.source = source
        self.position = position
        self.token = self.peek()

    def __repr__(self):
        return f"Lexer<{self.token.kind}@{self.position}>"

    @property
    def kind(self):
        """(str) Kind of the current token."""
        return self.token.kind

    def peek(self):
        """Classify the token at the cursor without consuming it.

        Whitespace in front of the token is skipped and the cursor moved
        past it.

        Returns:
            (Token) Classified token
        """
        source = self.source
        size = len(source)
        pos = self.position
        while pos < size and source[pos] in _WHITESPACE:
            pos += 1
        self.position = pos
        if pos >= size:
            return _EOF_TOKEN

        ch = source[pos]
        token = _PUNCTUATION_TOKENS.get(ch)
        if token is not None:
            return token
        if ch in _DIGITS:
            return _NUMBER_TOKEN
        if ch == '"':
            return _STRING_TOKEN
        if ch in _NAME_START:
            return _VARIABLE_TOKEN
        return _UNKNOWN_TOKEN

    def advance(self):
        """Commit the current token and classify the next one."""
        self.position += self.token.length
        self.token = self.peek()

    def seek(self, position):
        """Move the cursor to an absolute offset and classify the token there."""
        self.position = position
        self.token = self.peek()

    def location(self):
        """(tuple) 1-based (line, column) of the cursor."""
        return location(self.source, self.position)


def location(source, position):
    """Compute the 1-based line and column of an offset.

    This rescans the text from the start, which is fine as it is only
    used to report errors.

    Args:
        source: (str) Source text
        position: (int) Character offset, clamped to the text length

    Returns:
        (tuple) Line and column numbers
    """
    position = max(0, min(position, len(source)))
    line = source.count("\n", 0, position) + 1
    column = position - (source.rfind("\n", 0, position) + 1) + 1
    return line, column


def scan_number(source, position):
    """Return the offset just past the digits starting at position."""
    size = len(source)
    end = position
    while end < size and source[end] in _DIGITS:
        end += 1
    return end


def scan_name(source, position):
    """Return the offset just past the variable name starting at position."""
    size = len(source)
    end = position + 1
    while end < size and source[end] in _NAME_REST:
        end += 1
    return end


def scan_string(source, position):
    """Decode the double quoted string literal starting at position.

    Only backslash-backslash and backslash-quote are escapes, any other
    backslash is kept as is.

    Args:
        source: (str) Source text
        position: (int) Offset of the opening quote

    Returns:
        (tuple) Decoded text and the offset just past the closing quote

    Raises:
        LexicalError: The literal is not closed before the end of input
    """
    size = len(source)
    chars = []
    i = position + 1
    while i < size:
        ch = source[i]
        if ch == "\\":
            if i + 1 < size and source[i + 1] in STRING_ESCAPES:
                chars.append(source[i + 1])
                i += 2
                continue
        elif ch == '"':
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    raise mandu.LexicalError('String literal is not closed by "', position)
