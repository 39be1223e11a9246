from .settings import (
    CacheSettings,
    DatabaseSettings,
    EvaluationSettings,
    LoggingSettings,
    Settings,
    last_yaml_path,
    load_settings,
    sanitize_dict,
)

__all__ = [
    "CacheSettings",
    "DatabaseSettings",
    "EvaluationSettings",
    "LoggingSettings",
    "Settings",
    "last_yaml_path",
    "load_settings",
    "sanitize_dict",
]
