"""Variable bindings for the global scope and named sections."""

__all__ = ["VariableStore", "Section", "GLOBAL_NAME"]


# Name used for the global scope in messages
GLOBAL_NAME = "<Global>"


class Section:
    """Named scope that can be switched on and off.

    Args:
        name: (str) Section name
        enabled: (bool) Initial state

    Attributes:
        name: (str) Section name
        enabled: (bool) Statements guarded by this section are evaluated
        values: (dict) Key to Value bindings
    """
    __slots__ = ("name", "enabled", "values")

    def __init__(self, name, enabled=True):
        self.name = name
        self.enabled = enabled
        self.values = {}

    def __repr__(self):
        state = "on" if self.enabled else "off"
        return f"Section<{self.name} {state} {len(self.values)}>"


class VariableStore:
    """Two tier scope table.

    Values bind either in the global scope or in a named section. A scope
    argument of None or the empty string means the global scope. Sections
    come into existence, enabled, the first time something binds into them.

    The store only holds references, releasing displaced values is up to
    whoever owns the arena.

    Attributes:
        globals: (dict) Key to Value bindings of the global scope
        sections: (dict) Section name to Section
    """
    __slots__ = ("globals", "sections")

    def __init__(self):
        self.globals = {}
        self.sections = {}

    def __repr__(self):
        return f"VariableStore<{len(self.globals)} globals, {len(self.sections)} sections>"

    def is_section_enabled(self, name):
        """(bool) Section exists and is enabled."""
        section = self.sections.get(name)
        return section is not None and section.enabled

    def set_section_enabled(self, name, enabled):
        """Change the state of an existing section.

        Args:
            name: (str) Section name
            enabled: (bool) New state

        Returns:
            (bool) False when the section was never referenced
        """
        section = self.sections.get(name)
        if section is None:
            return False
        section.enabled = bool(enabled)
        return True

    def bind(self, scope, key, value):
        """Install a value under a key, replacing any previous binding.

        Args:
            scope: (str | None) Section name, or None for the global scope
            key: (str) Variable name
            value: (Value) Value to bind

        Returns:
            (Value | None) Previously bound value, if any
        """
        if scope:
            section = self.sections.get(scope)
            if section is None:
                section = self.sections[scope] = Section(scope)
            table = section.values
        else:
            table = self.globals
        previous = table.get(key)
        table[key] = value
        return previous

    def lookup(self, scope, key):
        """Find the value bound to a key in exactly one scope.

        A named scope must be enabled, the evaluator never looks inside a
        disabled section.

        Returns:
            (Value | None) Bound value, None when missing
        """
        if not scope:
            return self.globals.get(key)
        assert self.is_section_enabled(scope), f"Lookup in disabled section {scope}"
        return self.sections[scope].values.get(key)

    def lookup_with_fallback(self, scope, key):
        """Find a key in an enabled section, falling back to the global scope.

        Returns:
            (Value | None) Bound value, None when missing from both scopes
        """
        if scope and self.is_section_enabled(scope):
            value = self.sections[scope].values.get(key)
            if value is not None:
                return value
        return self.globals.get(key)

    def values(self):
        """Iterate over every bound value in all scopes."""
        yield from self.globals.values()
        for section in self.sections.values():
            yield from section.values.values()

    def clear(self):
        """Remove all bindings and forget all sections."""
        self.globals.clear()
        self.sections.clear()
