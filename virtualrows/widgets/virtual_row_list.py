"""Headless virtual row list: the row height cache plus its services.

Exposes the small part of the `QAbstractScrollArea` interface the services
rely on (`verticalScrollBar()` and `viewport()`), so the same services also
run against a real Qt view.
"""

from PySide6.QtCore import QRect

from virtualrows.utils.flow_log import FlowLogger
from virtualrows.utils.row_cache_details import RowHeightCacheDetails
from virtualrows.utils.row_height_cache import RowHeightCache
from virtualrows.utils.settings import settings
from virtualrows.widgets.row_cache_lifecycle_service import RowCacheLifecycleService
from virtualrows.widgets.row_window_planner_service import RowWindowPlannerService

HEIGHT_SETTING_KEYS = (
    "row_height",
    "detail_row_height",
    "group_padding",
    "last_row_spacer_height",
)


class _ScrollPosition:
    def __init__(self, owner: 'VirtualRowList'):
        self._owner = owner
        self._value = 0

    def value(self) -> int:
        return self._value

    def maximum(self) -> int:
        cache = self._owner.row_height_cache
        if not cache.row_count:
            return 0
        return max(0, int(cache.total_height()) - self._owner.viewport().height())

    def setValue(self, value: int):
        self._value = max(0, min(int(value), self.maximum()))


class VirtualRowList:
    def __init__(self, viewport_width: int = 800, viewport_height: int = 600):
        self.row_height_cache = RowHeightCache()
        self._viewport = QRect(0, 0, viewport_width, viewport_height)
        self._scroll_bar = _ScrollPosition(self)
        self._log_flow = FlowLogger()
        self.lifecycle = RowCacheLifecycleService(self)
        self.planner = RowWindowPlannerService(self)
        self._rows = None
        self._overrides = {}
        settings.change.connect(self._on_setting_changed)

    def verticalScrollBar(self) -> _ScrollPosition:
        return self._scroll_bar

    def viewport(self) -> QRect:
        return self._viewport

    def resize_viewport(self, width: int, height: int):
        self._viewport = QRect(0, 0, width, height)
        # Re-clamp against the new maximum.
        self._scroll_bar.setValue(self._scroll_bar.value())

    def set_rows(self, rows, **overrides):
        """Rebuild from `rows`, with height options from settings unless overridden."""
        self._rows = rows
        self._overrides = dict(overrides)
        details = RowHeightCacheDetails.from_settings(rows, **overrides)
        self.lifecycle.rebuild(details)
        self._scroll_bar.setValue(self._scroll_bar.value())

    def scroll_to(self, scroll_y: int):
        self._scroll_bar.setValue(scroll_y)

    def scroll_to_row(self, index: int):
        self._scroll_bar.setValue(int(self.row_height_cache.query(index - 1)))

    def visible_window(self):
        return self.planner.plan_window()

    def close(self):
        settings.change.disconnect(self._on_setting_changed)

    def _on_setting_changed(self, key: str, value):
        # Overridden options keep their explicit value.
        if key not in HEIGHT_SETTING_KEYS or key in self._overrides:
            return
        if self._rows is None:
            return
        self._log_flow("ROW_CACHE", f"Setting {key} changed to {value}, rebuilding")
        self.set_rows(self._rows, **self._overrides)
