"""Browse cursor over the catalog and the playlist page window."""


def move_selection(current: int, delta: int, total_items: int) -> int:
    """Move selection by delta, clamped to [0, total_items - 1].

    The playlist cursor never wraps around at either end.

    Args:
        current: Current selection index (0-based)
        delta: Amount to move (-1 for up, +1 for down)
        total_items: Total number of items in the list

    Returns:
        New selection index

    Examples:
        >>> move_selection(current=9, delta=1, total_items=10)
        9
        >>> move_selection(current=0, delta=-1, total_items=10)
        0
        >>> move_selection(current=5, delta=1, total_items=10)
        6
    """
    if total_items == 0:
        return 0
    return max(0, min(current + delta, total_items - 1))


def clamp_selection(selection: int, total_items: int) -> int:
    """Clamp selection to valid range [0, total_items - 1].

    Useful after the catalog is replaced by a rescan.

    Examples:
        >>> clamp_selection(selection=15, total_items=10)
        9
        >>> clamp_selection(selection=-5, total_items=10)
        0
        >>> clamp_selection(selection=5, total_items=0)
        0
    """
    if total_items == 0:
        return 0
    return max(0, min(selection, total_items - 1))


def page_window_start(selected: int, panel_height: int) -> int:
    """First visible row of a bordered list panel.

    The list scrolls a page at a time rather than line by line: the window
    starts at the largest multiple of the inner height (panel height minus
    the two border rows) that does not exceed the selection.

    Args:
        selected: Index of the selected item (0-based)
        panel_height: Total panel height including borders

    Returns:
        Index of the first item to draw

    Examples:
        >>> page_window_start(selected=3, panel_height=12)
        0
        >>> page_window_start(selected=10, panel_height=12)
        10
        >>> page_window_start(selected=25, panel_height=12)
        20
    """
    page = panel_height - 2
    if page < 1:
        return max(0, selected)
    return (max(0, selected) // page) * page


class SelectionCursor:
    """Browse pointer over the catalog, independent of what is playing."""

    def __init__(self, total_items: int, index: int = 0):
        self.total_items = total_items
        self.index = clamp_selection(index, total_items)

    def move_up(self) -> int:
        self.index = move_selection(self.index, -1, self.total_items)
        return self.index

    def move_down(self) -> int:
        self.index = move_selection(self.index, 1, self.total_items)
        return self.index

    def set(self, index: int) -> int:
        self.index = clamp_selection(index, self.total_items)
        return self.index

    def resize(self, total_items: int, index: int = 0) -> None:
        """Rebind to a catalog of a different length."""
        self.total_items = total_items
        self.index = clamp_selection(index, total_items)

    def window_start(self, panel_height: int) -> int:
        return page_window_start(self.index, panel_height)
