"""Paged slot allocator for values.

Every value the engine hands out lives in an arena slot. Slots are grouped
into pages that are only ever appended, so a slot index stays valid for
the whole life of the arena. Released slots go onto a free list and are
handed out again before a new page is added.

Each slot carries a generation counter that is bumped on every release.
A value remembers the generation it was issued under, which lets the
arena reject a stale handle instead of touching a recycled slot.
"""

__all__ = ["Arena"]

import bisect
import logging

import mandu


logger = logging.getLogger(__name__)


class _Page:
    """Fixed size run of slots.

    Attributes:
        start: (int) Slot index of the first slot in this page
        values: (list) Live Value per slot, None for free slots
        generations: (list) Release counter per slot
    """
    __slots__ = ("start", "values", "generations")

    def __init__(self, start, size):
        self.start = start
        self.values = [None] * size
        self.generations = [0] * size

    def __len__(self):
        return len(self.values)


class Arena:
    """Allocator for Value objects with a free list and growing pages.

    The first page holds `page_size` slots. When the free list runs dry
    a new page is added with twice the previous capacity, capped at
    `max_page_size`.

    Args:
        page_size: (int) Capacity of the first page
        max_page_size: (int) Largest capacity a page can grow to

    Attributes:
        pages: (list) Pages in allocation order
        max_page_size: (int) Largest capacity a page can grow to
    """
    __slots__ = ("pages", "max_page_size", "_starts", "_page_size", "_next_capacity", "_free", "_live")

    def __init__(self, page_size=64, max_page_size=512):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        if max_page_size < page_size:
            raise ValueError("max_page_size must not be smaller than page_size")
        self._page_size = page_size
        self.max_page_size = max_page_size
        self.pages = []
        self._starts = []
        self._next_capacity = page_size
        self._free = []
        self._live = 0

    def __repr__(self):
        return f"Arena<{self._live}/{self.capacity}>"

    @property
    def capacity(self):
        """(int) Total slots across all pages."""
        return sum(len(page) for page in self.pages)

    @property
    def live(self):
        """(int) Number of values currently handed out."""
        return self._live

    @property
    def free(self):
        """(int) Number of slots on the free list."""
        return len(self._free)

    def acquire(self, data=None):
        """Construct a value in a free slot.

        Args:
            data: (int | str | list | None) Forwarded to the Value constructor

        Returns:
            (Value) New value bound to a slot of this arena
        """
        value = mandu.Value(data)
        if not self._free:
            self._grow()
        index = self._free.pop()
        page, offset = self._locate(index)
        value.slot = index
        value.generation = page.generations[offset]
        page.values[offset] = value
        self._live += 1
        return value

    def release(self, value):
        """Destroy a value and put its slot back on the free list.

        The elements of a released list are not released, they may be
        shared with other lists.

        Raises:
            ReleasedValueError: The value is stale or belongs to another arena
        """
        if not self.owns(value):
            raise mandu.ReleasedValueError(f"{value!r} is not live in this arena")
        page, offset = self._locate(value.slot)
        value.set_none()
        value.released = True
        page.values[offset] = None
        page.generations[offset] += 1
        self._free.append(value.slot)
        self._live -= 1

    def owns(self, value):
        """(bool) Value is currently live in a slot of this arena."""
        if value.released or value.slot is None:
            return False
        try:
            page, offset = self._locate(value.slot)
        except IndexError:
            return False
        return page.values[offset] is value and page.generations[offset] == value.generation

    def values(self):
        """Iterate over all live values in slot order."""
        for page in self.pages:
            for value in page.values:
                if value is not None:
                    yield value

    def reclaim(self):
        """Release every live value and rebuild the free list.

        Pages are kept, so later allocations reuse them without growing.
        """
        released = 0
        for page in self.pages:
            for offset, value in enumerate(page.values):
                if value is not None:
                    value.set_none()
                    value.released = True
                    page.values[offset] = None
                    page.generations[offset] += 1
                    released += 1
        self._free = []
        for page in reversed(self.pages):
            self._free.extend(range(page.start + len(page) - 1, page.start - 1, -1))
        self._live = 0
        logger.debug("Reclaimed %d live values over %d pages", released, len(self.pages))

    def teardown(self):
        """Drop every page and start over from the initial page size."""
        for value in self.values():
            value.set_none()
            value.released = True
        self.pages = []
        self._starts = []
        self._free = []
        self._live = 0
        self._next_capacity = self._page_size
        logger.debug("Arena torn down")

    def _grow(self):
        size = self._next_capacity
        start = self.capacity
        self.pages.append(_Page(start, size))
        self._starts.append(start)
        # Lowest index on top of the stack so slots are handed out in order
        self._free.extend(range(start + size - 1, start - 1, -1))
        self._next_capacity = min(size * 2, self.max_page_size)
        logger.debug("Arena grew page %d with %d slots", len(self.pages), size)

    def _locate(self, index):
        pos = bisect.bisect_right(self._starts, index) - 1
        if pos < 0 or index >= self._starts[pos] + len(self.pages[pos]):
            raise IndexError(f"Slot {index} outside arena")
        page = self.pages[pos]
        return page, index - page.start
