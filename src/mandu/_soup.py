"""Host facing entry point for registering values and cooking templates."""

__all__ = ["SoupMaker", "Soup"]

import logging

import mandu


logger = logging.getLogger(__name__)


class Soup:
    """Result of cooking a template.

    Unpacks as `(output, ok)`, the error message is available as an
    attribute.

    Attributes:
        output: (str) Cooked text, empty when cooking failed
        ok: (bool) Cooking succeeded
        error: (str) Rendered error, empty on success
        exception: (TemplateError | None) Error that stopped cooking
    """
    __slots__ = ("output", "ok", "error", "exception")

    def __init__(self, output, exception=None):
        self.output = output
        self.ok = exception is None
        self.error = "" if exception is None else str(exception)
        self.exception = exception

    def __iter__(self):
        return iter((self.output, self.ok))

    def __repr__(self):
        if self.ok:
            return f"Soup<{len(self.output)} chars>"
        return f"Soup<{self.error}>"


class SoupMaker:
    """Owns the values and sections used by templates.

    Every value handed out comes from the maker's arena and stays valid
    until it is overwritten by another `new_value` for the same key, or
    until `clear` is called.

    Args:
        page_size: (int) Slots in the first arena page
        max_page_size: (int) Largest arena page

    Attributes:
        arena: (Arena) Allocator behind every value
        store: (VariableStore) Global and section bindings
        orphans: (list) Values not bound to any key
    """

    def __init__(self, page_size=64, max_page_size=512):
        self.arena = mandu.Arena(page_size, max_page_size)
        self.store = mandu.VariableStore()
        self.orphans = []

    def __repr__(self):
        return f"SoupMaker<{self.store!r} {self.arena!r}>"

    def new_value(self, name, key=None):
        """Register a fresh value.

        Called with one name the value is bound in the global scope, with
        two it is bound as `key` inside the section `name`. Any value
        previously bound to the same key is released.

        Args:
            name: (str) Global key, or section name when key is given
            key: (str | None) Key inside the section

        Returns:
            (Value) New value holding none, to be filled with set_*
        """
        if key is None:
            section, key = None, name
        else:
            section = name
        if not key:
            raise ValueError("Value key must not be empty")
        value = self.arena.acquire()
        previous = self.store.bind(section, key, value)
        if previous is not None:
            self.arena.release(previous)
        return value

    def new_orphan_value(self):
        """Allocate a value that is not bound to any key.

        Orphans are typically used as list elements. They are released
        by `clear`.
        """
        value = self.arena.acquire()
        self.orphans.append(value)
        return value

    def define(self, key, data, section=None):
        """Bind a value built from Python data.

        Lists and tuples become list values whose elements are orphans,
        nested sequences become nested lists.

        Args:
            key: (str) Variable name
            data: (None | int | str | list | tuple) Content
            section: (str | None) Section to bind into, global when None

        Returns:
            (Value) The bound value
        """
        value = self.new_value(key) if section is None else self.new_value(section, key)
        self._fill(value, data)
        return value

    def _fill(self, value, data):
        if isinstance(data, (list, tuple)):
            items = []
            for item in data:
                element = self.new_orphan_value()
                self._fill(element, item)
                items.append(element)
            value.set_list(items)
        elif data is None:
            value.set_none()
        elif isinstance(data, bool):
            raise TypeError("Booleans cannot be stored in template values")
        elif isinstance(data, int):
            value.set_number(data)
        elif isinstance(data, str):
            value.set_string(data)
        else:
            raise TypeError(f"Cannot store {type(data).__name__} in a template value")

    def enable_section(self, name):
        """Enable a section, False if it was never referenced."""
        return self.store.set_section_enabled(name, True)

    def disable_section(self, name):
        """Disable a section, False if it was never referenced."""
        return self.store.set_section_enabled(name, False)

    def is_section_enabled(self, name):
        """(bool) Section exists and is enabled."""
        return self.store.is_section_enabled(name)

    def clear(self):
        """Release every value and forget every binding and section.

        All values previously returned by this maker become invalid.
        """
        bound = 0
        for value in self.store.values():
            if self.arena.owns(value):
                self.arena.release(value)
                bound += 1
        for value in self.orphans:
            if self.arena.owns(value):
                self.arena.release(value)
        orphans = len(self.orphans)
        self.store.clear()
        self.orphans.clear()
        self.arena.reclaim()
        logger.debug("Cleared %d bound and %d orphan values", bound, orphans)

    def cook(self, text):
        """Substitute all code segments in the text.

        Args:
            text: (str) Template text

        Returns:
            (Soup) Output text or the error that stopped cooking
        """
        try:
            output = self.cook_or_raise(text)
        except mandu.TemplateError as err:
            logger.debug("Cooking failed: %s", err)
            return Soup("", err)
        logger.debug("Cooked %d chars of output", len(output))
        return Soup(output)

    def cook_or_raise(self, text):
        """Substitute all code segments in the text.

        Returns:
            (str) Output text

        Raises:
            TemplateError: The template has a syntax or lookup error
        """
        logger.debug("Cooking %d chars", len(text))
        return mandu.Executor(text, self.store, self.arena).cook()
