"""Runtime values for templates."""

__all__ = ["Value", "NULL_MARKER"]

import mandu


# Rendering of a value that was never assigned
NULL_MARKER = "<:null:>"

NONE = "none"
NUMBER = "number"
STRING = "string"
LIST = "list"


class Value:
    """Mandu runtime value.

    A value holds exactly one of four representations at a time: none,
    number, string, or list. Lists contain references to other values.
    Those references are shared, never copied, when a list is assigned
    from another list.

    Values are normally created by an `Arena`, which assigns the slot
    that identifies them. Changing the content of a value never changes
    its slot. Once the arena releases a value any further use of it
    raises `ReleasedValueError`.

    Args:
        data: (int | str | list | None) Initial content, forwarded to the
            matching `set_*` method
    Attributes:
        kind: (str) Active representation, "none", "number", "string" or "list"
        slot: (int | None) Arena slot index, None for values outside an arena
        generation: (int) Arena slot generation the value was issued under
        released: (bool) Value was handed back to its arena
    """
    __slots__ = ("kind", "_data", "slot", "generation", "released")

    def __init__(self, data=None):
        if isinstance(data, Value):
            # Values are shared by reference or copied explicitly with
            # copy_from, never wrapped
            raise TypeError(f"Value init called with existing Value {data!r}")

        self.kind = NONE
        self._data = None
        self.slot = None
        self.generation = 0
        self.released = False

        if data is None:
            return
        if isinstance(data, bool):
            raise TypeError("Value does not hold booleans")
        if isinstance(data, int):
            self.set_number(data)
        elif isinstance(data, str):
            self.set_string(data)
        else:
            self.set_list(data)

    def __repr__(self):
        if self.released:
            return f"Value<released #{self.slot}>"
        if self.kind == LIST:
            return f"Value<list[{len(self._data)}] #{self.slot}>"
        if self.kind == NONE:
            return f"Value<none #{self.slot}>"
        return f"Value<{self.kind} {self._data!r} #{self.slot}>"

    @property
    def is_none(self):
        """(bool) Value holds no data."""
        return self.kind == NONE

    @property
    def is_number(self):
        """(bool) Value holds an integer."""
        return self.kind == NUMBER

    @property
    def is_string(self):
        """(bool) Value holds text."""
        return self.kind == STRING

    @property
    def is_list(self):
        """(bool) Value holds a list of value references."""
        return self.kind == LIST

    def set_none(self):
        """Drop the current content."""
        self._detach()

    def set_number(self, number):
        """Replace the content with an integer."""
        if isinstance(number, bool) or not isinstance(number, int):
            raise TypeError(f"Number value must be an int, not {type(number).__name__}")
        self._detach()
        self.kind = NUMBER
        self._data = number

    def set_string(self, text):
        """Replace the content with text."""
        if not isinstance(text, str):
            raise TypeError(f"String value must be a str, not {type(text).__name__}")
        self._detach()
        self.kind = STRING
        self._data = text

    def set_list(self, values):
        """Replace the content with references to other values.

        The list is copied, the values inside it are not.

        Args:
            values: (iterable) Value objects to reference
        """
        items = list(values)
        for item in items:
            if not isinstance(item, Value):
                raise TypeError(f"List value elements must be Values, not {type(item).__name__}")
        self._detach()
        self.kind = LIST
        self._data = items

    def copy_from(self, other):
        """Half shallow copy of another value.

        Numbers and strings are copied, lists share the element values
        with the source.
        """
        other._check()
        if other.kind == NONE:
            self.set_none()
        elif other.kind == LIST:
            self.set_list(other._data)
        elif other.kind == NUMBER:
            self.set_number(other._data)
        else:
            self.set_string(other._data)

    def as_number(self):
        """(int) The integer content, TypeError for other kinds."""
        self._check()
        if self.kind != NUMBER:
            raise TypeError(f"Value is a {self.kind}, not a number")
        return self._data

    def as_string(self):
        """(str) The text content, TypeError for other kinds."""
        self._check()
        if self.kind != STRING:
            raise TypeError(f"Value is a {self.kind}, not a string")
        return self._data

    def as_list(self):
        """(tuple) The referenced values, TypeError for other kinds."""
        self._check()
        if self.kind != LIST:
            raise TypeError(f"Value is a {self.kind}, not a list")
        return tuple(self._data)

    def to_string(self):
        """Render the value as template output.

        Lists render as the concatenation of their elements.

        Returns:
            (str) Rendered text
        """
        self._check()
        kind = self.kind
        if kind == STRING:
            return self._data
        if kind == NUMBER:
            return str(self._data)
        if kind == LIST:
            return "".join(item.to_string() for item in self._data)
        return NULL_MARKER

    def to_python(self):
        """Convert this value to a Python equivalent.

        Returns:
            (None | int | str | list) Converted python value
        """
        self._check()
        if self.kind == LIST:
            return [item.to_python() for item in self._data]
        return self._data

    def _detach(self):
        """Release the payload of the active representation."""
        self._check()
        if self.kind == LIST:
            self._data.clear()
        self.kind = NONE
        self._data = None

    def _check(self):
        if self.released:
            raise mandu.ReleasedValueError(f"Value in slot {self.slot} was released")
