from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'row_height': 50,
    'detail_row_height': 0,
    'group_padding': 0,
    'last_row_spacer_height': 0,
    'row_buffer': 5,  # Rows mounted above and below the viewport
    'minimal_trace_logs': True,  # Only INFO and above reach the flow log
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changed
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('virtualrows', 'virtualrows')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_float_setting(key: str) -> float:
    try:
        return float(settings.value(
            key, defaultValue=DEFAULT_SETTINGS[key], type=float))
    except (TypeError, ValueError):
        return float(DEFAULT_SETTINGS[key])
