from .settings import (
    DEFAULT_SETTINGS,
    SETTINGS_PATH,
    ToolConfig,
    load_settings,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_PATH",
    "ToolConfig",
    "load_settings",
]
