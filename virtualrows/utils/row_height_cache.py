"""Cumulative row height index for virtual scrolling.

Row heights live in a Fenwick tree (binary indexed tree) so the renderer can
ask for the offset of any row, and for the row under any scroll offset, in
O(log n) while single rows still change height cheaply.

Fenwick tree credits: http://petr-mitrichev.blogspot.com/2013/05/fenwick-tree-range-updates.html
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from virtualrows.utils.height_rules import (RowHeightCacheError,
                                            RowHeightCacheNotInitializedError,
                                            RowHeightConfigError,
                                            to_height_rule)
from virtualrows.utils.row_cache_details import RowHeightCacheDetails

__all__ = [
    'CacheState',
    'RowHeightCache',
    'RowHeightCacheData',
    'RowHeightCacheError',
    'RowHeightCacheNotInitializedError',
    'RowHeightConfigError',
]


@dataclass
class RowHeightCacheData:
    """One Fenwick node: a partial height sum and the spacer last written here."""
    row_height: float = 0
    row_spacer_height: float = 0


class CacheState(Enum):
    UNINITIALIZED = 'uninitialized'
    LIVE = 'live'
    # Live tree cleared, previous tree still answers reads.
    REBUILDING = 'rebuilding'


def fenwick_add(nodes: list[RowHeightCacheData], index: int, delta: float,
                spacer_height: float = -1):
    """Add `delta` at `index` and its ancestors, overwriting their spacer."""
    n = len(nodes)
    while index < n:
        node = nodes[index]
        node.row_height += delta
        if spacer_height >= 0:
            node.row_spacer_height = spacer_height
        index |= index + 1


def fenwick_prefix_sum(nodes: list[RowHeightCacheData], index: int) -> float:
    """Sum of heights and spacers over [0, index]; 0 for index -1."""
    total = 0
    while index >= 0:
        node = nodes[index]
        total += node.row_height + node.row_spacer_height
        index = (index & (index + 1)) - 1
    return total


def fenwick_search(nodes: list[RowHeightCacheData], total: float) -> int:
    """Binary lifting from the highest block size down; returns a row index."""
    n = len(nodes)
    if not n:
        return 0

    pos = -1
    block_size = 1 << (n.bit_length() - 1)
    while block_size:
        next_pos = pos + block_size
        if next_pos < n:
            node = nodes[next_pos]
            if total >= node.row_height + node.row_spacer_height:
                total -= node.row_height - node.row_spacer_height
                pos = next_pos
        block_size >>= 1
    return pos + 1


def is_group_row(row) -> bool:
    if row is None:
        return False
    if isinstance(row, Mapping):
        return bool(row.get('is_row_group'))
    return bool(getattr(row, 'is_row_group', False))


class RowHeightCache:
    """
    Cache of the rendered row heights of a virtual list.

    The cache is in exactly one state at a time (see `CacheState`). While
    rebuilding, the previous tree stays the source of truth for reads and
    updates until `init_cache` installs the new one.
    """

    def __init__(self):
        self._state = CacheState.UNINITIALIZED
        # Live tree when LIVE, retained snapshot when REBUILDING.
        self._nodes: list[RowHeightCacheData] = []

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def row_count(self) -> int:
        if self._state is CacheState.UNINITIALIZED:
            return 0
        return len(self._nodes)

    def clear_cache(self):
        """Demote the live tree to the snapshot ahead of a rebuild."""
        if self._state is CacheState.LIVE:
            self._state = CacheState.REBUILDING

    def init_cache(self, details: RowHeightCacheDetails):
        """
        Rebuild the tree from the rows and height configuration.

        Args:
            details: Rows, height rules, expansion and spacer options

        Raises:
            RowHeightConfigError: If `row_height` or `detail_row_height` is
                neither a finite number nor a callable. The cache is left as it
                was.
        """
        row_rule = to_height_rule(details.row_height, 'rowHeight')
        detail_rule = to_height_rule(details.detail_row_height, 'detailRowHeight')

        rows = details.rows
        n = details.size
        row_indexes = details.row_indexes
        # Expansion is tracked per row object, not per equal value.
        expanded_ids = {id(expanded) for expanded in details.row_expansions}
        group_padding = details.group_padding
        last_row_spacer_height = details.last_row_spacer_height
        nodes = [RowHeightCacheData() for _ in range(n)]

        for i in range(n):
            row = rows[i] if i < len(rows) else None
            current_row_height = row_rule.row_height(row)

            # Rows already expanded keep their detail height across a
            # filter or sort.
            if row is not None and id(row) in expanded_ids:
                index = row_indexes.get(row) if row_indexes is not None else i
                current_row_height += detail_rule.detail_height(row, index)

            group_row = is_group_row(row)
            if group_row and group_padding:
                current_row_height += group_padding

            next_row = rows[i + 1] if i + 1 < len(rows) else None
            if (last_row_spacer_height and not group_row
                    and (i == n - 1 or is_group_row(next_row))):
                fenwick_add(nodes, i, current_row_height, last_row_spacer_height)
            else:
                fenwick_add(nodes, i, current_row_height)

        self._nodes = nodes
        self._state = CacheState.LIVE

    def _source(self, action: str) -> list[RowHeightCacheData]:
        if self._state is CacheState.UNINITIALIZED:
            raise RowHeightCacheNotInitializedError(
                f"{action} failed: Row Height cache not initialized.")
        return self._nodes

    def get_row_index(self, scroll_y: float) -> int:
        """Index of the row shown at the top of the viewport for `scroll_y`."""
        if scroll_y == 0:
            return 0
        return self._calc_row_index(scroll_y)

    def update(self, at_row_index: int, by_row_height: float, spacer_height: float = -1):
        """
        Change the height of one row by a delta, e.g. when it is expanded.

        A non-negative `spacer_height` overwrites the spacer of every node the
        update passes through.
        """
        source = self._source(f"Update at index {at_row_index} with value {by_row_height}")
        at_row_index = int(at_row_index)
        if at_row_index < 0:
            raise IndexError(f"Row index out of range: {at_row_index}")
        fenwick_add(source, at_row_index, by_row_height, spacer_height)

    def set(self, at_row_index: int, value: float) -> bool:
        """Set the height of one row; returns whether anything changed."""
        current = self.query_between(at_row_index, at_row_index)
        if value != current:
            self.update(at_row_index, value - current)
            return True
        return False

    def query(self, at_index: int) -> float:
        """Range sum from row 0 up to and including `at_index`."""
        source = self._source(f"query at index {at_index}")
        at_index = int(at_index)
        if at_index >= len(source):
            raise IndexError(f"Row index out of range: {at_index}")
        return fenwick_prefix_sum(source, at_index)

    def query_between(self, at_index_a: int, at_index_b: int) -> float:
        """Total height of the rows between two indexes, inclusive."""
        return self.query(at_index_b) - self.query(at_index_a - 1)

    def total_height(self) -> float:
        source = self._source("total height")
        return fenwick_prefix_sum(source, len(source) - 1)

    def _calc_row_index(self, total: float) -> int:
        if self._state is CacheState.UNINITIALIZED:
            return 0
        return fenwick_search(self._nodes, total)
