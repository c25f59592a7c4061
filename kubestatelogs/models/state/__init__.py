"""Application state models: settings and collection counters."""

from kubestatelogs.models.state.app_settings import AppSettings, ConfigError, ConfigLoadError
from kubestatelogs.models.state.collection_stats import CollectionStats

__all__ = ["AppSettings", "CollectionStats", "ConfigError", "ConfigLoadError"]
