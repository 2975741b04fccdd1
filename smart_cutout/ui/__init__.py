"""
使用者介面模組
"""

from .history import PathHistory, SettingsHistory
from .modern import ModernUI


__all__ = ["ModernUI", "PathHistory", "SettingsHistory"]
