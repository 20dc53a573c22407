import time

from virtualrows.utils.settings import settings

_PASS_LEVELS = {"INFO", "WARNING", "ERROR"}


class FlowLogger:
    """Timestamped, optionally throttled flow logging for row cache diagnostics."""

    def __init__(self):
        self._flow_log_last: dict[str, float] = {}

    def __call__(self, component: str, message: str, *, level: str = "DEBUG",
                 throttle_key: str | None = None, every_s: float | None = None):
        # Set `minimal_trace_logs` to False in settings to see DEBUG flow logs.
        try:
            minimal_trace = bool(settings.value("minimal_trace_logs", True, type=bool))
        except Exception:
            minimal_trace = True
        if minimal_trace and level not in _PASS_LEVELS:
            return

        now = time.time()
        if throttle_key and every_s is not None:
            last = self._flow_log_last.get(throttle_key)
            if last is not None and (now - last) < every_s:
                return
            self._flow_log_last[throttle_key] = now
        ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
        print(f"[{ts}][TRACE][{component}][{level}] {message}")


log_flow = FlowLogger()
