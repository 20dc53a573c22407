from virtualrows.utils.settings import DEFAULT_SETTINGS, settings


class RowWindowPlannerService:
    """Plans which rows to mount for the current scroll position, and where."""

    def __init__(self, view):
        self._view = view

    @property
    def _cache(self):
        return self._view.row_height_cache

    def resolve_first_row(self) -> int:
        row_count = self._cache.row_count
        if row_count <= 0:
            return 0
        scroll_val = self._view.verticalScrollBar().value()
        first_row = self._cache.get_row_index(scroll_val)
        return max(0, min(row_count - 1, first_row))

    def get_row_buffer(self) -> int:
        try:
            row_buffer = int(settings.value(
                "row_buffer", DEFAULT_SETTINGS["row_buffer"], type=int))
        except Exception:
            row_buffer = DEFAULT_SETTINGS["row_buffer"]
        return max(0, min(row_buffer, 50))

    def compute_window_bounds(self, *, first_row: int, viewport_height: int, row_buffer: int):
        row_count = self._cache.row_count
        if row_count <= 0:
            return {
                "first_row": 0,
                "last_row": 0,
                "start_idx": 0,
                "end_idx": 0,
            }

        first_row = max(0, min(row_count - 1, first_row))
        top = self._cache.query(first_row - 1)
        # Row containing the viewport's bottom edge; past the end means the
        # viewport is taller than the remaining rows.
        last_row = self._cache.get_row_index(top + max(0, viewport_height))
        last_row = max(first_row, min(row_count - 1, last_row))

        return {
            "first_row": first_row,
            "last_row": last_row,
            "start_idx": max(0, first_row - row_buffer),
            "end_idx": min(row_count, last_row + 1 + row_buffer),
        }

    def row_offsets(self, start_idx: int, end_idx: int) -> list[tuple[int, float, float]]:
        """(index, top, height) for every row in [start_idx, end_idx)."""
        offsets = []
        top = self._cache.query(start_idx - 1) if end_idx > start_idx else 0
        for index in range(start_idx, end_idx):
            bottom = self._cache.query(index)
            offsets.append((index, top, bottom - top))
            top = bottom
        return offsets

    def plan_window(self):
        viewport_height = self._view.viewport().height()
        bounds = self.compute_window_bounds(
            first_row=self.resolve_first_row(),
            viewport_height=viewport_height,
            row_buffer=self.get_row_buffer(),
        )
        bounds["offsets"] = self.row_offsets(bounds["start_idx"], bounds["end_idx"])
        bounds["total_height"] = self._cache.total_height() if self._cache.row_count else 0
        return bounds
