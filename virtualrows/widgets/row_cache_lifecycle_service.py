from virtualrows.utils.height_rules import RowHeightConfigError


class RowCacheLifecycleService:
    """Owns row height cache rebuilds and point updates for a list view."""

    def __init__(self, view):
        self._view = view

    def rebuild(self, details):
        """Clear then rebuild, keeping the old heights readable until done."""
        cache = self._view.row_height_cache
        cache.clear_cache()
        try:
            cache.init_cache(details)
        except RowHeightConfigError as e:
            self._view._log_flow("ROW_CACHE", f"Rebuild failed: {e}", level="ERROR")
            raise

        self._view._log_flow(
            "ROW_CACHE",
            f"Rebuilt rows={cache.row_count} total_height={cache.total_height()}",
            level="INFO",
        )

    def apply_row_height(self, index: int, height: float) -> bool:
        changed = self._view.row_height_cache.set(index, height)
        if changed:
            self._view._log_flow(
                "ROW_CACHE",
                f"Row {index} height -> {height}",
                throttle_key="row_cache_set",
                every_s=0.5,
            )
        return changed

    def apply_detail_toggle(self, index: int, detail_height: float, expanded: bool):
        """Grow or shrink one row by its detail height."""
        delta = detail_height if expanded else -detail_height
        self._view.row_height_cache.update(index, delta)
        self._view._log_flow(
            "ROW_CACHE",
            f"Row {index} detail {'expanded' if expanded else 'collapsed'} ({delta:+})",
        )
