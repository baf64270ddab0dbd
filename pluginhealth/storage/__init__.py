"""Storage layer for plugin health data.

Provides:
- PluginStore / ScoreStore: persistence interfaces used by the engines
- FileManager: JSON file implementation of both
"""

from pluginhealth.storage.base import PluginStore, ScoreStore
from pluginhealth.storage.file_manager import FileManager

__all__ = [
    "FileManager",
    "PluginStore",
    "ScoreStore",
]
