from virtualrows.utils import flow_log as flow_log_module
from virtualrows.utils.flow_log import FlowLogger


def _settings_value(minimal):
    def value(key, default=None, **kwargs):
        if key == "minimal_trace_logs":
            return minimal
        return default
    return value


def test_minimal_trace_drops_debug_lines(monkeypatch, capsys):
    monkeypatch.setattr(flow_log_module.settings, "value", _settings_value(True))
    log = FlowLogger()

    log("ROW_CACHE", "noisy detail")
    log("ROW_CACHE", "Rebuilt rows=3", level="INFO")

    out = capsys.readouterr().out
    assert "noisy detail" not in out
    assert "[TRACE][ROW_CACHE][INFO] Rebuilt rows=3" in out


def test_full_trace_prints_debug_lines(monkeypatch, capsys):
    monkeypatch.setattr(flow_log_module.settings, "value", _settings_value(False))
    log = FlowLogger()

    log("PLANNER", "window 0..5")

    assert "[TRACE][PLANNER][DEBUG] window 0..5" in capsys.readouterr().out


def test_throttle_key_suppresses_repeats(monkeypatch, capsys):
    monkeypatch.setattr(flow_log_module.settings, "value", _settings_value(False))
    now = [100.0]
    monkeypatch.setattr(flow_log_module.time, "time", lambda: now[0])
    log = FlowLogger()

    log("ROW_CACHE", "first", throttle_key="k", every_s=0.5)
    now[0] = 100.2
    log("ROW_CACHE", "second", throttle_key="k", every_s=0.5)
    now[0] = 100.8
    log("ROW_CACHE", "third", throttle_key="k", every_s=0.5)

    out = capsys.readouterr().out
    assert "first" in out
    assert "second" not in out
    assert "third" in out


def test_settings_failure_falls_back_to_minimal(monkeypatch, capsys):
    def broken(*args, **kwargs):
        raise RuntimeError("settings unavailable")

    monkeypatch.setattr(flow_log_module.settings, "value", broken)
    log = FlowLogger()

    log("ROW_CACHE", "debug line")
    log("ROW_CACHE", "error line", level="ERROR")

    out = capsys.readouterr().out
    assert "debug line" not in out
    assert "error line" in out
