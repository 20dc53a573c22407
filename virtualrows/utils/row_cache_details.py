from dataclasses import dataclass, field
from typing import Any, Collection, Mapping, Optional, Sequence

from virtualrows.utils.settings import get_float_setting


@dataclass
class RowHeightCacheDetails:
    """Inputs for a single `RowHeightCache.init_cache` rebuild."""

    rows: Sequence[Any] = field(default_factory=list)
    row_height: Any = 50
    detail_row_height: Any = 0
    external_virtual: bool = False
    row_count: int = 0
    row_indexes: Optional[Mapping[Any, int]] = None
    row_expansions: Collection[Any] = ()
    group_padding: float = 0
    last_row_spacer_height: float = 0

    @classmethod
    def from_settings(cls, rows: Sequence[Any], **overrides) -> 'RowHeightCacheDetails':
        """Build details with the numeric height options taken from settings."""
        values = {
            'row_height': get_float_setting('row_height'),
            'detail_row_height': get_float_setting('detail_row_height'),
            'group_padding': get_float_setting('group_padding'),
            'last_row_spacer_height': get_float_setting('last_row_spacer_height'),
        }
        values.update(overrides)
        return cls(rows=rows, **values)

    @property
    def size(self) -> int:
        return self.row_count if self.external_virtual else len(self.rows)
