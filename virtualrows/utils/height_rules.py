"""Row height rules: a fixed height or a per-row callback."""

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union


class RowHeightCacheError(Exception):
    """Base error for the row height cache."""


class RowHeightConfigError(RowHeightCacheError, ValueError):
    """A row height option is neither a finite number nor a callable."""


class RowHeightCacheNotInitializedError(RowHeightCacheError, RuntimeError):
    """The cache was read or updated before it was ever built."""


@dataclass(frozen=True)
class FixedHeight:
    """Same height for every row."""
    value: float

    def row_height(self, row: Any) -> float:
        return self.value

    def detail_height(self, row: Any, index: Optional[int]) -> float:
        return self.value


@dataclass(frozen=True)
class ComputedHeight:
    """Height computed per row by a callback."""
    fn: Callable[..., float]

    def row_height(self, row: Any) -> float:
        return self.fn(row)

    def detail_height(self, row: Any, index: Optional[int]) -> float:
        # Detail callbacks always get the index, even when it is unknown.
        return self.fn(row, index)


HeightRule = Union[FixedHeight, ComputedHeight]


def _is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def to_height_rule(value, name: str = 'rowHeight') -> HeightRule:
    """
    Coerce a height option into a rule.

    Args:
        value: A rule, a callable or a finite number
        name: Option name used in the error message

    Raises:
        RowHeightConfigError: If the value is none of the above
    """
    if isinstance(value, (FixedHeight, ComputedHeight)):
        return value
    if callable(value):
        return ComputedHeight(value)
    if _is_finite_number(value):
        return FixedHeight(value)
    raise RowHeightConfigError(
        f"Row Height cache initialization failed. Please ensure that '{name}' is a "
        f"valid number or function value: ({value!r}) when virtual scrolling is enabled.")


def attribute_row_height(attribute: str = 'height', default: float = 50) -> ComputedHeight:
    """Height read from each row, falling back to `default` for placeholders."""

    def _row_height(row):
        if row is None:
            return default
        if isinstance(row, dict):
            value = row.get(attribute)
        else:
            value = getattr(row, attribute, None)
        if value is None:
            return default
        return value

    return ComputedHeight(_row_height)
